"""Tests for catalog_service and book_search_service."""
from __future__ import annotations

from typing import Any, Dict

import pytest
import requests

from eureka.db.engine import init_engine_once, reset_for_tests
from eureka.services import book_search_service, catalog_service


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("EUREKA_DB_PATH", ":memory:")
    monkeypatch.setenv("GOOGLE_BOOKS_API_KEY", "test-key")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


class _FakeResponse:
    def __init__(self, status_code: int, payload: Any):
        self.status_code = status_code
        self._payload = payload
        self.text = str(payload)

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


def test_categories_cover_curated_keys():
    keys = [c["key"] for c in catalog_service.list_categories()]
    assert keys == ["popular", "classics", "mystery", "romance", "scifi"]
    classics = catalog_service.get_category("classics")
    assert classics["books"][0]["title"] == "吾輩は猫である"
    assert all(b["category"] == "classics" for b in classics["books"])
    with pytest.raises(catalog_service.CategoryNotFoundError):
        catalog_service.get_category("poetry")


def test_aozora_book_paragraphs_skip_blank_lines():
    created = catalog_service.create_aozora_book("走れメロス", "太宰治", "一行目\n\n   \n二行目\n")

    book = catalog_service.get_aozora_book(created["id"])

    assert book["paragraphs"] == ["一行目", "二行目"]
    listed = catalog_service.list_aozora_books()
    assert listed[0]["isPublicDomain"] is True
    assert listed[0]["cover_url"] == ""


def test_get_aozora_book_missing():
    with pytest.raises(catalog_service.BookNotFoundError):
        catalog_service.get_aozora_book(404)


def test_create_aozora_book_requires_title():
    with pytest.raises(catalog_service.BookValidationError):
        catalog_service.create_aozora_book("  ", "誰か", "本文")


def test_search_books_normalizes_items(monkeypatch):
    captured: Dict[str, Any] = {}

    def fake_get(url, params=None, timeout=None, **_kwargs):
        captured["url"] = url
        captured["params"] = params
        return _FakeResponse(
            200,
            {
                "totalItems": 2,
                "items": [
                    {
                        "id": "vol-1",
                        "volumeInfo": {
                            "title": "こころ",
                            "authors": ["夏目漱石"],
                            "imageLinks": {"thumbnail": "http://img/1"},
                            "pageCount": 300,
                        },
                        "saleInfo": {"buyLink": "http://buy/1", "listPrice": {"amount": 550}},
                        "accessInfo": {"publicDomain": True, "viewability": "ALL_PAGES"},
                    },
                    {"id": "vol-2", "volumeInfo": {}},
                ],
            },
        )

    monkeypatch.setattr(requests, "get", fake_get)

    ok, data = book_search_service.search_books("漱石", start_index=20)

    assert ok is True
    assert captured["url"].endswith("/volumes")
    assert captured["params"]["startIndex"] == 20
    assert captured["params"]["maxResults"] == 20
    assert captured["params"]["langRestrict"] == "ja"
    assert data["totalItems"] == 2
    first, second = data["books"]
    assert first["thumbnail"] == "http://img/1"
    assert first["price"] == 550
    assert first["isPublicDomain"] is True
    assert second["title"] == "不明なタイトル"
    assert second["authors"] == ["不明な著者"]
    assert second["viewability"] == "NO_PAGES"
    assert second["price"] is None


def test_search_books_error_codes(monkeypatch):
    assert book_search_service.search_books("  ") == (False, {"error": "query_required"})

    monkeypatch.setattr(requests, "get", lambda *a, **k: _FakeResponse(503, {}))
    ok, data = book_search_service.search_books("漱石")
    assert ok is False and data["error"] == "http_error"

    def boom(*_a, **_k):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(requests, "get", boom)
    ok, data = book_search_service.search_books("漱石")
    assert ok is False and data["error"] == "offline"

    monkeypatch.delenv("GOOGLE_BOOKS_API_KEY")
    assert book_search_service.search_books("漱石") == (False, {"error": "api_key_missing"})
