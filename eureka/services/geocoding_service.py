"""Place search (Google Geocoding) and place imagery (Wikipedia summaries)."""
from __future__ import annotations

from typing import Any, Dict, Tuple
from urllib.parse import quote

import requests

from eureka import config as app_config
from eureka.utils.logging import get_logger
from eureka.utils.text import clean_text

LOG = get_logger("geocoding_service")

_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "eureka-library/1.0",
}


def geocode(query: str, language: str = "ja", timeout: int = 10) -> Tuple[bool, Dict[str, Any]]:
    q = clean_text(query)
    if not q:
        return False, {"error": "query_required"}
    api_key = app_config.google_maps_api_key()
    if not api_key:
        return False, {"error": "api_key_missing"}
    try:
        r = requests.get(
            app_config.google_geocode_api_url(),
            params={"address": q, "key": api_key, "language": language or "ja"},
            headers=_HEADERS,
            timeout=timeout,
        )
    except requests.RequestException as exc:
        LOG.warning("geocode failed query=%s error=%s", q, exc)
        return False, {"error": str(exc)}
    if r.status_code != 200:
        return False, {"error": "http_error", "status": r.status_code}
    try:
        data = r.json()
    except ValueError:
        return False, {"error": "invalid_json"}
    status = data.get("status")
    if status == "ZERO_RESULTS":
        return True, {"results": []}
    if status != "OK":
        LOG.warning("geocode remote status=%s query=%s", status, q)
        return False, {"error": "remote_error", "status": status}
    results = []
    for item in data.get("results") or []:
        location = ((item.get("geometry") or {}).get("location")) or {}
        if "lat" not in location or "lng" not in location:
            continue
        components = item.get("address_components") or []
        name = components[0].get("long_name") if components else None
        results.append(
            {
                "name": name or item.get("formatted_address") or q,
                "formatted_address": item.get("formatted_address") or "",
                "latitude": float(location["lat"]),
                "longitude": float(location["lng"]),
                "place_id": item.get("place_id"),
            }
        )
    return True, {"results": results}


def fetch_location_image(title: str, language: str = "ja", timeout: int = 10) -> Tuple[bool, Dict[str, Any]]:
    name = clean_text(title)
    if not name:
        return False, {"error": "query_required"}
    url = f"{app_config.wikipedia_api_base(language)}/page/summary/{quote(name.replace(' ', '_'), safe='')}"
    try:
        r = requests.get(url, headers=_HEADERS, timeout=timeout)
    except requests.RequestException as exc:
        LOG.warning("encyclopedia lookup failed title=%s error=%s", name, exc)
        return False, {"error": str(exc)}
    if r.status_code == 404:
        return False, {"error": "not_found"}
    if r.status_code != 200:
        return False, {"error": "http_error", "status": r.status_code}
    try:
        data = r.json()
    except ValueError:
        return False, {"error": "invalid_json"}
    thumb = (data.get("thumbnail") or {}).get("source") or (data.get("originalimage") or {}).get("source")
    page = ((data.get("content_urls") or {}).get("desktop") or {}).get("page")
    return True, {
        "title": data.get("title") or name,
        "extract": data.get("extract") or "",
        "thumbnail_url": thumb,
        "page_url": page,
    }


__all__ = ["geocode", "fetch_location_image"]
