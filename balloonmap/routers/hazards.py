# balloonmap/routers/hazards.py
from fastapi import APIRouter, Depends, HTTPException, Query

from ..core.config import settings
from ..schemas.hazards import HazardEntry, NavigationTarget, Selection
from ..services.feeds import fetch_alerts_for_point
from ..services.hazards import build_hazard_list
from ..services.navigation import focus_target
from ..services.refresh import DashboardState
from ..utils.time import iso_z
from .deps import get_state

router = APIRouter(prefix="/hazards", tags=["hazards"])


def _entry_or_404(state: DashboardState, advisory_id: str) -> HazardEntry:
    entry = state.find_hazard(advisory_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Unknown advisory {advisory_id}")
    return entry


@router.get("")
def list_hazards(limit: int | None = Query(None, ge=1), state: DashboardState = Depends(get_state)):
    hazards = state.hazards[:limit] if limit else state.hazards
    return {
        "count": len(hazards),
        "loading": state.loading_hazards,
        "updated_at": iso_z(state.hazards_updated_at) if state.hazards_updated_at else None,
        "hazards": [h.model_dump() for h in hazards],
    }


@router.get("/near", response_model=list[HazardEntry])
async def hazards_near(lat: float = Query(..., ge=-90, le=90), lon: float = Query(..., ge=-180, le=180)):
    # live lookup, not cached in the dashboard state
    features = await fetch_alerts_for_point(lat, lon)
    return build_hazard_list(features, limit=settings.max_alerts)


# declared before /{advisory_id}/... so "selection" is never taken as an id
@router.get("/selection", response_model=Selection | None)
def current_selection(state: DashboardState = Depends(get_state)):
    return state.selection.current()


@router.get("/{advisory_id:path}/focus", response_model=NavigationTarget)
def hazard_focus(advisory_id: str, state: DashboardState = Depends(get_state)):
    entry = _entry_or_404(state, advisory_id)
    target = focus_target(entry.advisory)
    if target is None:
        raise HTTPException(status_code=404, detail="Advisory geometry has no navigable target")
    return target


@router.post("/{advisory_id:path}/select", response_model=NavigationTarget)
def select_hazard(advisory_id: str, state: DashboardState = Depends(get_state)):
    entry = _entry_or_404(state, advisory_id)
    target = state.selection.select(entry.advisory)
    if target is None:
        raise HTTPException(status_code=404, detail="Advisory geometry has no navigable target")
    return target
