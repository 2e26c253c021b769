# balloonmap/services/navigation.py
import time
from typing import Callable, Optional

from ..schemas.common import Location
from ..schemas.hazards import Advisory, NavigationTarget, Selection
from ..utils.geo import ring_bbox, ring_mean
from ..utils.numbers import safe_number

POINT_ZOOM = 10
AREA_MAX_ZOOM = 12
AREA_PADDING_PX = 100
FLY_DURATION_S = 1.5


def _point_target(coords) -> Optional[NavigationTarget]:
    if not isinstance(coords, (list, tuple)) or len(coords) < 2:
        return None
    lon, lat = safe_number(coords[0]), safe_number(coords[1])
    if lat is None or lon is None:
        return None
    return NavigationTarget(center=Location(lat=lat, lon=lon), zoom=POINT_ZOOM, duration_s=FLY_DURATION_S)


def _ring_target(ring) -> NavigationTarget:
    lat, lon = ring_mean(ring)
    return NavigationTarget(
        center=Location(lat=lat, lon=lon),
        bounds=ring_bbox(ring).as_latlng(),
        padding_px=AREA_PADDING_PX,
        max_zoom=AREA_MAX_ZOOM,
        duration_s=FLY_DURATION_S,
    )


def focus_target(advisory: Advisory) -> Optional[NavigationTarget]:
    """
    Where the map should fly when an advisory is picked.

    Point: the point at a fixed zoom. Polygon: vertex mean of the outer ring
    plus its bounding box. MultiPolygon: same, first polygon only. Anything
    else, or coordinates that don't parse, gives None.
    """
    geom = advisory.geometry
    if geom is None:
        return None
    coords = geom.coordinates
    try:
        if geom.type == "Point":
            return _point_target(coords)
        if geom.type == "Polygon":
            return _ring_target(coords[0])
        if geom.type == "MultiPolygon":
            return _ring_target(coords[0][0])
    except (TypeError, ValueError, IndexError, KeyError):
        return None
    return None


class AdvisorySelection:
    """
    The advisory most recently picked for fly-to.

    A selection only lasts `window_s` seconds, then reads back as None
    whether or not anything else happens.
    """

    def __init__(self, window_s: float = 2.0, clock: Callable[[], float] = time.monotonic):
        self.window_s = window_s
        self._clock = clock
        self._advisory_id: Optional[str] = None
        self._target: Optional[NavigationTarget] = None
        self._selected_at = 0.0

    def select(self, advisory: Advisory) -> Optional[NavigationTarget]:
        target = focus_target(advisory)
        if target is None:
            self.clear()
            return None
        self._advisory_id = advisory.id
        self._target = target
        self._selected_at = self._clock()
        return target

    def clear(self) -> None:
        self._advisory_id = None
        self._target = None

    def current(self) -> Optional[Selection]:
        if self._advisory_id is None or self._target is None:
            return None
        remaining = self.window_s - (self._clock() - self._selected_at)
        if remaining <= 0:
            self.clear()
            return None
        return Selection(advisory_id=self._advisory_id, target=self._target, expires_in_s=round(remaining, 3))
