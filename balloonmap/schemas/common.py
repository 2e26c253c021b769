from pydantic import BaseModel, Field
from typing import Literal

class Location(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)

class Position(BaseModel):
    id: str
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    altitude: float | None = None
    hour_index: int = Field(..., ge=0)

ExtractionStatus = Literal["ok", "empty", "unsupported_shape", "fault"]

class ExtractionResult(BaseModel):
    """Outcome of extracting one hourly snapshot.

    `fault` means an unexpected error stopped extraction early; `positions`
    still holds whatever was accepted before it.
    """
    hour_index: int
    status: ExtractionStatus = "ok"
    positions: list[Position] = []
    skipped: int = 0
    error: str | None = None

class HourReport(BaseModel):
    hour_index: int
    status: ExtractionStatus
    accepted: int
    skipped: int
    error: str | None = None

class MergeResult(BaseModel):
    positions: list[Position] = []
    total: int = 0  # merged count before any display limit
    reports: list[HourReport] = []
