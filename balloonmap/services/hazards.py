# balloonmap/services/hazards.py
"""
NWS advisory parsing, severity classification and ranking.

Fields used from each GeoJSON feature:
    id            -> properties.id, then feature.id, then "alert-{index}"
    severity      -> properties.severity (Extreme/Severe/Moderate/Minor/Unknown)
    urgency       -> properties.urgency (Immediate/Expected/Future/...)
    headline      -> properties.headline or properties.event
    area          -> properties.areaDesc
    geometry      -> feature.geometry (only Point/Polygon/MultiPolygon kept)
"""
import logging
from typing import Any, Iterable, Optional

from pydantic import ValidationError

from ..schemas.hazards import Advisory, Classification, Geometry, HazardEntry, Tier

logger = logging.getLogger(__name__)

SUPPORTED_GEOMETRIES = ("Point", "Polygon", "MultiPolygon")

DARK_RED = "#C92A2A"
ORANGE = "#F76707"
YELLOW = "#FFD43B"
GREEN = "#51CF66"
GRAY = "#64748b"

TIER_ORDER = {
    Tier.extreme: 0,
    Tier.severe: 1,
    Tier.moderate: 2,
    Tier.minor: 3,
    Tier.unknown: 4,
}


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def parse_advisory(feature: Any, index: int = 0) -> Optional[Advisory]:
    """Map a GeoJSON feature to an Advisory; None if it is not a feature object."""
    if not isinstance(feature, dict):
        return None
    props = feature.get("properties")
    if not isinstance(props, dict):
        props = {}

    geometry = None
    geom = feature.get("geometry")
    if isinstance(geom, dict) and isinstance(geom.get("type"), str):
        geometry = Geometry(type=geom["type"], coordinates=geom.get("coordinates"))

    try:
        return Advisory(
            id=_text(props.get("id")) or _text(feature.get("id")) or f"alert-{index}",
            severity=_text(props.get("severity")),
            urgency=_text(props.get("urgency")),
            event=_text(props.get("event")),
            headline=_text(props.get("headline")) or _text(props.get("event")) or "Weather Alert",
            area_description=_text(props.get("areaDesc")) or "Unknown Area",
            description=_text(props.get("description")),
            geometry=geometry,
        )
    except ValidationError as e:
        logger.debug("Skipping malformed NWS feature %d: %s", index, e)
        return None


def is_supported(advisory: Advisory) -> bool:
    return advisory.geometry is not None and advisory.geometry.type in SUPPORTED_GEOMETRIES


def classify(advisory: Advisory) -> Classification:
    """
    Severity tier and display color; the first matching rule wins.

    An absent severity is shown as "Unknown" but does not count as an explicit
    "unknown" severity here, so an advisory with nothing set ends up gray.
    """
    severity = (advisory.severity or "").lower()
    urgency = (advisory.urgency or "").lower()

    if severity == "extreme" or urgency == "immediate":
        return Classification(tier=Tier.extreme, color=DARK_RED)
    if severity == "severe":
        return Classification(tier=Tier.severe, color=ORANGE)
    if severity == "moderate":
        return Classification(tier=Tier.moderate, color=YELLOW)
    if severity == "minor":
        return Classification(tier=Tier.minor, color=GREEN)
    if severity == "unknown":
        return Classification(tier=Tier.unknown, color=GREEN)
    if urgency == "expected":
        return Classification(tier=Tier.severe, color=ORANGE)
    return Classification(tier=Tier.unknown, color=GRAY)


def alert_style(classification: Classification, hover: bool = False) -> dict[str, Any]:
    """Polygon/marker style for the map layer."""
    style: dict[str, Any] = {
        "fillColor": classification.color,
        "color": classification.color,
        "weight": 7 if hover else 5,
        "opacity": 1.0,
        "fillOpacity": 0.65 if hover else 0.5,
    }
    if classification.tier == Tier.extreme:
        style["dashArray"] = "10, 5"
    return style


def _tier_rank(tier: Any) -> int:
    try:
        return TIER_ORDER[Tier(tier)]
    except ValueError:
        return len(TIER_ORDER)


def rank(entries: Iterable[HazardEntry]) -> list[HazardEntry]:
    # sorted() is stable, so feed order is kept within a tier
    return sorted(entries, key=lambda e: _tier_rank(e.tier))


def build_entry(advisory: Advisory) -> HazardEntry:
    c = classify(advisory)
    return HazardEntry(advisory=advisory, tier=c.tier, color=c.color,
                       style=alert_style(c), hover_style=alert_style(c, hover=True))


def build_hazard_list(features: Iterable[Any], limit: Optional[int] = None) -> list[HazardEntry]:
    """Raw NWS features -> supported, classified, severity-ordered entries."""
    entries = []
    dropped = 0
    for i, feature in enumerate(features or []):
        adv = parse_advisory(feature, i)
        if adv is None or not is_supported(adv):
            dropped += 1
            continue
        entries.append(build_entry(adv))
    if dropped:
        logger.debug("Dropped %d advisories without a supported geometry", dropped)
    ranked = rank(entries)
    return ranked[:limit] if limit else ranked
