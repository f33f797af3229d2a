"""Saved vocabulary endpoints."""
from __future__ import annotations

import pytest

from eureka.db.engine import init_engine_once, reset_for_tests
from eureka.services import dictionary_service
from eureka.startup.wiring import create_app


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("EUREKA_DB_PATH", ":memory:")
    monkeypatch.delenv("EUREKA_SESSION_USER_KEY", raising=False)
    init_engine_once()
    yield
    reset_for_tests(drop=True)


@pytest.fixture
def client():
    app = create_app({"TESTING": True, "SECRET_KEY": "vocab-test"})
    c = app.test_client()
    with c.session_transaction() as sess:
        sess["user_id"] = "reader-1"
    return c


def test_save_copies_dictionary_and_rejects_duplicates(client):
    dictionary_service.create_word({"word": "書生", "reading": "しょせい", "modern_meaning": "学生"})

    resp = client.post("/api/vocabulary", json={"word": "書生", "book_id": 3, "book_title": "こころ"})
    assert resp.status_code == 201
    word = resp.get_json()["word"]
    assert word["reading"] == "しょせい"
    assert word["book_title"] == "こころ"

    dup = client.post("/api/vocabulary", json={"word": "書生"})
    assert dup.status_code == 409
    assert dup.get_json()["error"] == "word_already_saved"

    empty = client.post("/api/vocabulary", json={"word": " "})
    assert empty.status_code == 400
    assert empty.get_json()["error"] == "word_required"

    numeric = client.post("/api/vocabulary", json={"word": 123})
    assert numeric.status_code == 400
    assert numeric.get_json()["error"] == "word_required"


def test_list_stats_and_actions(client):
    entry = client.post("/api/vocabulary", json={"word": "下宿", "book_title": "こころ"}).get_json()["word"]
    client.post("/api/vocabulary", json={"word": "汽車"})

    mastered = client.post(f"/api/vocabulary/{entry['id']}/mastered").get_json()["word"]
    assert mastered["is_mastered"] is True
    reviewed = client.post(f"/api/vocabulary/{entry['id']}/review").get_json()["word"]
    assert reviewed["review_count"] == 1

    learning = client.get("/api/vocabulary?status=learning").get_json()["words"]
    assert [w["word"] for w in learning] == ["汽車"]
    assert client.get("/api/vocabulary?status=unknown").status_code == 400

    stats = client.get("/api/vocabulary/stats").get_json()
    assert stats["total"] == 2
    assert stats["mastered"] == 1
    assert stats["by_book"] == {"こころ": 1}

    assert client.delete(f"/api/vocabulary/{entry['id']}").status_code == 200
    assert client.post(f"/api/vocabulary/{entry['id']}/review").status_code == 404


def test_requires_login():
    app = create_app({"TESTING": True, "SECRET_KEY": "vocab-test"})
    assert app.test_client().get("/api/vocabulary/stats").status_code == 401
