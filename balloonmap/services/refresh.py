# balloonmap/services/refresh.py
"""
Periodic refresh of balloon positions and hazard advisories.

Each loop re-fetches and re-derives everything from scratch; nothing carries
over between cycles. A cycle still in flight when its loop is stopped is
dropped instead of being written to the shared state.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from ..core.config import Settings
from ..schemas.common import HourReport, MergeResult, Position
from ..schemas.hazards import HazardEntry
from ..utils.time import utc_now
from .balloons import merge_hours
from .feeds import fetch_active_alerts, fetch_last_hours
from .hazards import build_hazard_list
from .navigation import AdvisorySelection

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class DashboardState:
    balloons: list[Position] = field(default_factory=list)
    balloons_total: int = 0
    hour_reports: list[HourReport] = field(default_factory=list)
    balloons_updated_at: Optional[datetime] = None
    loading_balloons: bool = True

    hazards: list[HazardEntry] = field(default_factory=list)
    hazards_updated_at: Optional[datetime] = None
    loading_hazards: bool = True

    selection: AdvisorySelection = field(default_factory=AdvisorySelection)

    def apply_balloons(self, result: MergeResult) -> None:
        self.balloons = result.positions
        self.balloons_total = result.total
        self.hour_reports = result.reports
        self.balloons_updated_at = utc_now()
        self.loading_balloons = False

    def apply_hazards(self, entries: list[HazardEntry]) -> None:
        self.hazards = entries
        self.hazards_updated_at = utc_now()
        self.loading_hazards = False

    def find_hazard(self, advisory_id: str) -> Optional[HazardEntry]:
        for entry in self.hazards:
            if entry.advisory.id == advisory_id:
                return entry
        return None


class RefreshLoop(Generic[T]):
    """Run `load` every `interval` seconds and hand each result to `apply`."""

    def __init__(self, name: str, interval: float, load: Callable[[], Awaitable[T]],
                 apply: Callable[[T], None], run_immediately: bool = True):
        self.name = name
        self.interval = interval
        self._load = load
        self._apply = apply
        self._run_immediately = run_immediately
        self._task: Optional[asyncio.Task] = None
        self._stopped = False
        # one cycle at a time, shared by the timer and /refresh
        self._lock = asyncio.Lock()

    @property
    def stopped(self) -> bool:
        return self._stopped

    async def run_once(self) -> bool:
        """One load/apply cycle. Returns False when the result was discarded."""
        async with self._lock:
            if self._stopped:
                return False
            try:
                result = await self._load()
            except Exception:
                logger.exception("%s refresh failed", self.name)
                return False
            if self._stopped:
                logger.info("%s refresh finished after stop; result discarded", self.name)
                return False
            self._apply(result)
            return True

    async def _run(self) -> None:
        if not self._run_immediately:
            await asyncio.sleep(self.interval)
        while not self._stopped:
            await self.run_once()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self._task is None:
            self._stopped = False
            self._task = asyncio.create_task(self._run(), name=f"refresh-{self.name}")

    async def stop(self) -> None:
        self._stopped = True
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None


async def load_balloons(cfg: Settings) -> MergeResult:
    snapshots = await fetch_last_hours(cfg.hours_to_fetch)
    result = merge_hours(snapshots, max_results=cfg.max_balloons)
    faults = sum(1 for r in result.reports if r.status == "fault")
    logger.info("Balloons refreshed: %d merged, %d shown, %d/%d hours missing, %d faults",
                result.total, len(result.positions),
                sum(1 for s in snapshots if s is None), len(snapshots), faults)
    return result


async def load_hazards(cfg: Settings) -> list[HazardEntry]:
    features = await fetch_active_alerts()
    entries = build_hazard_list(features, limit=cfg.max_alerts)
    logger.info("Hazards refreshed: %d of %d advisories kept", len(entries), len(features))
    return entries


def build_loops(state: DashboardState, cfg: Settings) -> list[RefreshLoop]:
    return [
        RefreshLoop("balloons", cfg.balloon_refresh_seconds, lambda: load_balloons(cfg),
                    state.apply_balloons, run_immediately=cfg.refresh_on_startup),
        RefreshLoop("hazards", cfg.alert_refresh_seconds, lambda: load_hazards(cfg),
                    state.apply_hazards, run_immediately=cfg.refresh_on_startup),
    ]
