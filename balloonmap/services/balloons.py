# balloonmap/services/balloons.py
"""
Position extraction and cross-hour merging for the balloon feed.

The feed is undocumented and sometimes corrupted, so every hourly payload is
read defensively: one bad element is skipped, an unknown payload shape
contributes nothing, and an unexpected error returns the partial result with
status "fault" instead of raising.
"""
import logging
from typing import Any, Iterable, Mapping, Sequence

import numpy as np

from ..schemas.common import ExtractionResult, HourReport, Location, MergeResult, Position
from ..utils.geo import BBox
from ..utils.numbers import safe_number

logger = logging.getLogger(__name__)

LAT_KEYS = ("lat", "latitude", "y", 0, "0")
LON_KEYS = ("lon", "lng", "longitude", 1, "1")
ALT_KEYS = ("alt", "altitude", "z", 2, "2")

# map center when there is nothing to show (continental US)
DEFAULT_CENTER = Location(lat=39.8283, lon=-98.5795)


def _first_present(item: Mapping, keys: tuple) -> Any:
    for k in keys:
        value = item.get(k)
        if value is not None:
            return value
    return None


def _raw_elements(snapshot: Any) -> list | None:
    # bare list > {"balloons": [...]} > {"data": [...]}
    if isinstance(snapshot, list):
        return snapshot
    if isinstance(snapshot, dict):
        for key in ("balloons", "data"):
            if isinstance(snapshot.get(key), list):
                return snapshot[key]
    return None


def _read_element(item: Any) -> tuple[float | None, float | None, float | None] | None:
    if isinstance(item, (list, tuple)) and len(item) >= 2:
        alt = safe_number(item[2]) if len(item) >= 3 else None
        return safe_number(item[0]), safe_number(item[1]), alt
    if isinstance(item, dict):
        return (
            safe_number(_first_present(item, LAT_KEYS)),
            safe_number(_first_present(item, LON_KEYS)),
            safe_number(_first_present(item, ALT_KEYS)),
        )
    return None


def _in_range(lat: float | None, lon: float | None) -> bool:
    return lat is not None and lon is not None and -90 <= lat <= 90 and -180 <= lon <= 180


def extract(snapshot: Any, hour_index: int) -> ExtractionResult:
    """Extract validated positions from one hour's raw payload."""
    result = ExtractionResult(hour_index=hour_index)
    if snapshot is None:
        result.status = "empty"
        return result

    elements = _raw_elements(snapshot)
    if elements is None:
        result.status = "unsupported_shape"
        logger.debug("hour %02d: unsupported payload type %s", hour_index, type(snapshot).__name__)
        return result
    if not elements:
        result.status = "empty"
        return result

    try:
        for idx, item in enumerate(elements):
            coords = _read_element(item)
            if coords is None or not _in_range(coords[0], coords[1]):
                result.skipped += 1
                continue
            lat, lon, alt = coords
            result.positions.append(Position(
                id=f"balloon-{hour_index}-{idx}",
                latitude=lat,
                longitude=lon,
                altitude=alt,
                hour_index=hour_index,
            ))
    except Exception as e:  # keep what was already accepted
        result.status = "fault"
        result.error = f"{type(e).__name__}: {e}"
        logger.warning("hour %02d: extraction stopped after %d positions: %s",
                       hour_index, len(result.positions), result.error)
        return result

    if result.skipped:
        logger.debug("hour %02d: skipped %d malformed elements", hour_index, result.skipped)
    return result


def extract_positions(snapshot: Any, hour_index: int) -> list[Position]:
    return extract(snapshot, hour_index).positions


def merge_positions(positions: Iterable[Position]) -> list[Position]:
    """
    One position per id, the most recent (smallest hour_index) winning.

    Ids embed the hour today, so real collisions only happen if the id scheme
    changes; insertion order is preserved either way.
    """
    merged: dict[str, Position] = {}
    for pos in positions:
        current = merged.get(pos.id)
        if current is None or current.hour_index > pos.hour_index:
            merged[pos.id] = pos
    return list(merged.values())


def _hours(snapshots: Sequence[Any] | Mapping[int, Any]) -> list[tuple[int, Any]]:
    if not isinstance(snapshots, Mapping):
        return list(enumerate(snapshots))
    # JSON-decoded mappings carry the hour as a string key
    hours = []
    for key, payload in snapshots.items():
        try:
            hour = int(key)
        except (TypeError, ValueError):
            hour = -1
        if hour < 0:
            logger.warning("Ignoring snapshot with invalid hour key %r", key)
            continue
        hours.append((hour, payload))
    return sorted(hours, key=lambda kv: kv[0])


def merge_hours(snapshots: Sequence[Any] | Mapping[int, Any], max_results: int | None = None) -> MergeResult:
    """
    Extract every hour (index 0 = current) and merge them.

    `snapshots` is either a list where the position is the hour index (None for
    a failed fetch) or a mapping {hour_index: payload}. `max_results` is applied
    after merging so truncation never decides which hour wins.
    """
    if max_results is not None and max_results < 0:
        raise ValueError(f"max_results must be >= 0, got {max_results}")
    reports: list[HourReport] = []
    collected: list[Position] = []
    for hour_index, snapshot in _hours(snapshots):
        res = extract(snapshot, hour_index)
        collected.extend(res.positions)
        reports.append(HourReport(
            hour_index=hour_index,
            status=res.status,
            accepted=len(res.positions),
            skipped=res.skipped,
            error=res.error,
        ))

    merged = merge_positions(collected)
    limited = merged[:max_results] if max_results else merged
    return MergeResult(positions=limited, total=len(merged), reports=reports)


def balloon_extent(positions: Sequence[Position]) -> tuple[Location, BBox | None]:
    """Mean position and bounding box of what is shown; default center and no box when empty."""
    if not positions:
        return DEFAULT_CENTER, None
    arr = np.asarray([(p.longitude, p.latitude) for p in positions], dtype=float)
    lon, lat = arr.mean(axis=0)
    west, south = arr.min(axis=0)
    east, north = arr.max(axis=0)
    return (
        Location(lat=float(lat), lon=float(lon)),
        BBox(west=float(west), south=float(south), east=float(east), north=float(north)),
    )
