"""Story locations for Aozora books: listing, route summary and admin edits."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence

from eureka.db.repositories import catalog_repo
from eureka.services.catalog_service import BookNotFoundError
from eureka.utils.geo import format_km, path_length_km, valid_coordinates
from eureka.utils.logging import get_logger
from eureka.utils.text import clean_text

LOG = get_logger("locations_service")


class LocationValidationError(ValueError):
    """Raised when a location payload or reorder request is invalid."""


class LocationNotFoundError(RuntimeError):
    """Raised when a location id does not exist."""


def _matches(location: Dict[str, Any], query: str) -> bool:
    fields = (location["location_name"], location["description"], location["character_name"])
    return any(query in (f or "").lower() for f in fields)


def list_locations(book_id: int, query: Optional[str] = None) -> List[Dict[str, Any]]:
    locations = [loc.as_dict() for loc in catalog_repo.list_locations(book_id)]
    q = clean_text(query).lower()
    if q:
        locations = [loc for loc in locations if _matches(loc, q)]
    return locations


def total_distance_km(points: Iterable[Any]) -> float:
    """Haversine sum over consecutive points (dicts with latitude/longitude or pairs)."""
    pairs = []
    for point in points:
        if isinstance(point, dict):
            pairs.append((float(point["latitude"]), float(point["longitude"])))
        else:
            pairs.append((float(point[0]), float(point[1])))
    return path_length_km(pairs)


def route_summary(book_id: int) -> Dict[str, Any]:
    locations = list_locations(book_id)
    markers = [
        {
            "label": str(index + 1),
            "latitude": loc["latitude"],
            "longitude": loc["longitude"],
            "title": loc["location_name"],
        }
        for index, loc in enumerate(locations)
    ]
    center = None
    if locations:
        center = {"latitude": locations[0]["latitude"], "longitude": locations[0]["longitude"]}
    has_route = len(locations) >= 2
    distance = round(total_distance_km(locations), 1) if has_route else 0.0
    return {
        "book_id": book_id,
        "locations": locations,
        "markers": markers,
        "center": center,
        "distance_km": distance,
        "distance_label": format_km(distance) if has_route else None,
        "start_name": locations[0]["location_name"] if locations else None,
        "end_name": locations[-1]["location_name"] if has_route else None,
    }


def _coordinate(payload: Dict[str, Any], *keys: str) -> float:
    for key in keys:
        if payload.get(key) not in (None, ""):
            try:
                return float(payload[key])
            except (TypeError, ValueError):
                raise LocationValidationError("invalid_coordinates")
    raise LocationValidationError("invalid_coordinates")


def add_location(book_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
    if not catalog_repo.get_aozora_book(book_id):
        raise BookNotFoundError("book_not_found")
    name = clean_text(payload.get("location_name"))
    if not name:
        raise LocationValidationError("location_name_required")
    lat = _coordinate(payload, "latitude", "lat")
    lng = _coordinate(payload, "longitude", "lng")
    if not valid_coordinates(lat, lng):
        raise LocationValidationError("invalid_coordinates")
    location = catalog_repo.create_location(
        book_id,
        name,
        lat,
        lng,
        description=clean_text(payload.get("description")) or None,
        character_name=clean_text(payload.get("character_name")) or None,
    )
    LOG.info("Location added book_id=%s id=%s order=%s", book_id, location.id, location.order_index)
    return location.as_dict()


def delete_location(location_id: int) -> None:
    if not catalog_repo.delete_location(location_id):
        raise LocationNotFoundError("location_not_found")


def reorder_locations(book_id: int, ordered_ids: Sequence[Any]) -> List[Dict[str, Any]]:
    try:
        ids = [int(i) for i in ordered_ids]
    except (TypeError, ValueError):
        raise LocationValidationError("invalid_order")
    current = {loc.id for loc in catalog_repo.list_locations(book_id)}
    if len(ids) != len(set(ids)) or set(ids) != current:
        raise LocationValidationError("invalid_order")
    return [loc.as_dict() for loc in catalog_repo.reorder_locations(book_id, ids)]


__all__ = [
    "LocationValidationError",
    "LocationNotFoundError",
    "list_locations",
    "total_distance_km",
    "route_summary",
    "add_location",
    "delete_location",
    "reorder_locations",
]
