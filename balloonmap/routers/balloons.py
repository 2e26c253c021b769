# balloonmap/routers/balloons.py
from fastapi import APIRouter, Depends, Query

from ..schemas.common import HourReport
from ..services.balloons import balloon_extent
from ..services.refresh import DashboardState
from ..utils.time import iso_z
from .deps import get_state

router = APIRouter(prefix="/balloons", tags=["balloons"])


@router.get("")
def list_balloons(limit: int | None = Query(None, ge=1), state: DashboardState = Depends(get_state)):
    balloons = state.balloons[:limit] if limit else state.balloons
    center, bbox = balloon_extent(balloons)
    return {
        "count": len(balloons),
        "total": state.balloons_total,
        "loading": state.loading_balloons,
        "updated_at": iso_z(state.balloons_updated_at) if state.balloons_updated_at else None,
        "center": center.model_dump(),
        "bounds": bbox.as_latlng() if bbox else None,
        "balloons": [b.model_dump(exclude_none=True) for b in balloons],
    }


@router.get("/hours", response_model=list[HourReport])
def hour_reports(state: DashboardState = Depends(get_state)):
    return state.hour_reports
