from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .numbers import safe_number

@dataclass
class BBox:
    west: float
    south: float
    east: float
    north: float

    def as_latlng(self) -> list[list[float]]:
        # [[south, west], [north, east]], the corner order map libraries expect
        return [[self.south, self.west], [self.north, self.east]]

def ring_array(ring: Sequence) -> np.ndarray:
    """
    GeoJSON ring ([[lon, lat, ...], ...]) as an (n, 2) float array.

    Every vertex must carry a numeric lon in [-180, 180] and lat in [-90, 90];
    anything else raises ValueError.
    """
    vertices = []
    for vertex in ring:
        if not isinstance(vertex, (list, tuple)) or len(vertex) < 2:
            raise ValueError(f"bad vertex {vertex!r}")
        lon, lat = safe_number(vertex[0]), safe_number(vertex[1])
        if lon is None or lat is None or not (-180 <= lon <= 180 and -90 <= lat <= 90):
            raise ValueError(f"vertex out of range {vertex!r}")
        vertices.append((lon, lat))
    if not vertices:
        raise ValueError("ring must hold at least one [lon, lat] vertex")
    return np.asarray(vertices, dtype=float)

def ring_bbox(ring: Sequence) -> BBox:
    arr = ring_array(ring)
    west, south = arr.min(axis=0)
    east, north = arr.max(axis=0)
    return BBox(west=float(west), south=float(south), east=float(east), north=float(north))

def ring_mean(ring: Sequence) -> tuple[float, float]:
    """Arithmetic mean of the ring's vertices as (lat, lon); not an area centroid."""
    lon, lat = ring_array(ring).mean(axis=0)
    return float(lat), float(lon)
