"""Google Books volume search client."""
from __future__ import annotations

from typing import Any, Dict, Tuple

import requests

from eureka import config as app_config
from eureka.utils.logging import get_logger
from eureka.utils.text import clean_text

LOG = get_logger("book_search_service")

DEFAULT_PAGE_SIZE = 20
UNKNOWN_TITLE = "不明なタイトル"
UNKNOWN_AUTHOR = "不明な著者"


def normalize_volume(item: Dict[str, Any]) -> Dict[str, Any]:
    info = item.get("volumeInfo") or {}
    sale = item.get("saleInfo") or {}
    access = item.get("accessInfo") or {}
    images = info.get("imageLinks") or {}
    list_price = sale.get("listPrice") or {}
    return {
        "id": item.get("id"),
        "title": info.get("title") or UNKNOWN_TITLE,
        "authors": info.get("authors") or [UNKNOWN_AUTHOR],
        "description": info.get("description") or "",
        "thumbnail": images.get("thumbnail") or "",
        "publishedDate": info.get("publishedDate") or "",
        "pageCount": info.get("pageCount") or 0,
        "categories": info.get("categories") or [],
        "previewLink": info.get("previewLink") or "",
        "infoLink": info.get("infoLink") or "",
        "buyLink": sale.get("buyLink") or "",
        "price": list_price.get("amount") or None,
        "isPublicDomain": bool(access.get("publicDomain") or False),
        "viewability": access.get("viewability") or "NO_PAGES",
    }


def search_books(
    query: str,
    start_index: int = 0,
    max_results: int = DEFAULT_PAGE_SIZE,
    lang: str = "ja",
    timeout: int = 10,
) -> Tuple[bool, Dict[str, Any]]:
    """Search volumes; returns ``(ok, {"books": [...], "totalItems": n})``."""
    q = clean_text(query)
    if not q:
        return False, {"error": "query_required"}
    api_key = app_config.google_books_api_key()
    if not api_key:
        LOG.error("Google Books API key is not configured")
        return False, {"error": "api_key_missing"}
    params = {
        "q": q,
        "key": api_key,
        "maxResults": max(1, min(int(max_results), 40)),
        "startIndex": max(0, int(start_index)),
    }
    if lang:
        params["langRestrict"] = lang
    url = f"{app_config.google_books_api_base()}/volumes"
    try:
        r = requests.get(url, params=params, timeout=timeout)
    except requests.RequestException as exc:
        LOG.warning("Book search failed query=%s error=%s", q, exc)
        return False, {"error": str(exc)}
    if r.status_code != 200:
        LOG.warning("Book search http error query=%s status=%s", q, r.status_code)
        return False, {"error": "http_error", "status": r.status_code}
    try:
        data = r.json()
    except ValueError:
        return False, {"error": "invalid_json"}
    books = [normalize_volume(item) for item in (data.get("items") or []) if isinstance(item, dict)]
    return True, {"books": books, "totalItems": int(data.get("totalItems") or 0)}


__all__ = ["normalize_volume", "search_books", "DEFAULT_PAGE_SIZE"]
