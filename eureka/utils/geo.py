"""Great-circle helpers for story location routes."""
from __future__ import annotations

import math
from typing import Iterable, Sequence, Tuple

EARTH_RADIUS_KM = 6371.0

Point = Tuple[float, float]


def haversine_km(start: Point, end: Point) -> float:
    """Distance in kilometres between two ``(latitude, longitude)`` pairs."""
    lat1 = math.radians(start[0])
    lat2 = math.radians(end[0])
    delta_lat = math.radians(end[0] - start[0])
    delta_lng = math.radians(end[1] - start[1])
    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(delta_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def path_length_km(points: Iterable[Point]) -> float:
    """Sum of consecutive leg distances; fewer than two points yields 0."""
    seq: Sequence[Point] = list(points)
    if len(seq) < 2:
        return 0.0
    return sum(haversine_km(seq[i], seq[i + 1]) for i in range(len(seq) - 1))


def format_km(distance: float) -> str:
    return f"{distance:.1f} km"


def valid_coordinates(latitude: float, longitude: float) -> bool:
    return -90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0


__all__ = [
    "EARTH_RADIUS_KM",
    "haversine_km",
    "path_length_km",
    "format_km",
    "valid_coordinates",
]
