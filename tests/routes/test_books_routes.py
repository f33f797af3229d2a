"""Book discovery endpoints: catalog, Aozora shelf and search."""
from __future__ import annotations

from typing import Any

import pytest
import requests

from eureka.db.engine import init_engine_once, reset_for_tests
from eureka.services import catalog_service
from eureka.startup.wiring import create_app


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("EUREKA_DB_PATH", ":memory:")
    monkeypatch.setenv("GOOGLE_BOOKS_API_KEY", "books-key")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


@pytest.fixture
def client():
    app = create_app({"TESTING": True, "SECRET_KEY": "books-test"})
    return app.test_client()


class _FakeResponse:
    def __init__(self, status_code: int, payload: Any):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        return self._payload


def test_catalog_lists_categories(client):
    resp = client.get("/api/books/catalog")

    assert resp.status_code == 200
    categories = resp.get_json()["categories"]
    assert categories[0]["key"] == "popular"
    assert categories[0]["books"][0]["title"] == "こころ"


def test_catalog_category_lookup(client):
    assert client.get("/api/books/catalog/classics").get_json()["key"] == "classics"

    resp = client.get("/api/books/catalog/poetry")
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "category_not_found"


def test_aozora_list(client):
    catalog_service.create_aozora_book("走れメロス", "太宰治", "メロスは激怒した。")

    books = client.get("/api/books/aozora").get_json()["books"]

    assert [b["title"] for b in books] == ["走れメロス"]
    assert books[0]["isPublicDomain"] is True
    assert "content" not in books[0]


def test_search_passes_start_index(client, monkeypatch):
    captured = {}

    def fake_get(url, params=None, timeout=None):
        captured.update(params)
        return _FakeResponse(200, {"totalItems": 0})

    monkeypatch.setattr(requests, "get", fake_get)

    resp = client.get("/api/books/search?q=漱石&startIndex=40")

    assert resp.status_code == 200
    assert resp.get_json() == {"books": [], "totalItems": 0}
    assert captured["startIndex"] == 40
    assert captured["q"] == "漱石"


def test_search_error_mapping(client, monkeypatch):
    resp = client.get("/api/books/search?q=")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "query_required"

    monkeypatch.setattr(requests, "get", lambda *a, **k: _FakeResponse(500, {}))
    resp = client.get("/api/books/search?q=漱石")
    assert resp.status_code == 502
    assert resp.get_json()["details"] == {"status": 500}

    monkeypatch.delenv("GOOGLE_BOOKS_API_KEY")
    resp = client.get("/api/books/search?q=漱石")
    assert resp.status_code == 500
    assert resp.get_json()["error"] == "api_key_missing"
