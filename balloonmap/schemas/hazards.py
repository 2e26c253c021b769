# balloonmap/schemas/hazards.py
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel

from .common import Location

class Tier(str, Enum):
    extreme = "extreme"
    severe = "severe"
    moderate = "moderate"
    minor = "minor"
    unknown = "unknown"

class Geometry(BaseModel):
    type: str
    coordinates: Any = None

class Advisory(BaseModel):
    id: str
    severity: Optional[str] = None
    urgency: Optional[str] = None
    event: Optional[str] = None
    headline: str = "Weather Alert"
    area_description: str = "Unknown Area"
    description: Optional[str] = None
    geometry: Optional[Geometry] = None

class Classification(BaseModel):
    tier: Tier
    color: str

class HazardEntry(BaseModel):
    advisory: Advisory
    tier: Tier
    color: str
    style: dict[str, Any]
    hover_style: dict[str, Any]

class NavigationTarget(BaseModel):
    center: Location
    zoom: Optional[int] = None
    # [[south, west], [north, east]]
    bounds: Optional[list[list[float]]] = None
    padding_px: Optional[int] = None
    max_zoom: Optional[int] = None
    duration_s: float = 1.5

class Selection(BaseModel):
    advisory_id: str
    target: NavigationTarget
    expires_in_s: float
