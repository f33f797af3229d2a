"""Admin dictionary JSON API."""
from __future__ import annotations

import pytest

from eureka.db.engine import init_engine_once, reset_for_tests
from eureka.db.repositories import profiles_repo
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
def app():
    return create_app({"TESTING": True, "SECRET_KEY": "dictionary-test"})


@pytest.fixture
def admin(app):
    profiles_repo.create_profile("admin-1", "管理者", role="admin")
    client = app.test_client()
    with client.session_transaction() as sess:
        sess["user_id"] = "admin-1"
    return client


def test_non_admin_forbidden(app):
    assert app.test_client().get("/admin/dictionary/api/words").status_code == 401

    reader = app.test_client()
    with reader.session_transaction() as sess:
        sess["user_id"] = "reader-1"
    resp = reader.post("/admin/dictionary/api/words", json={"word": "書生", "reading": "しょせい"})
    assert resp.status_code == 403
    assert resp.get_json()["message"] == "Administrator access is required."


def test_crud(admin):
    created = admin.post(
        "/admin/dictionary/api/words",
        json={"word": "書生", "reading": "しょせい", "old_meaning": "住み込みの学生"},
    )
    assert created.status_code == 201
    word_id = created.get_json()["word"]["id"]

    dup = admin.post("/admin/dictionary/api/words", json={"word": "書生", "reading": "しょせい"})
    assert dup.status_code == 409
    assert dup.get_json()["error"] == "word_exists"
    missing_reading = admin.post("/admin/dictionary/api/words", json={"word": "汽車"})
    assert missing_reading.get_json()["error"] == "reading_required"

    updated = admin.put(f"/admin/dictionary/api/words/{word_id}", json={"modern_meaning": "学生"})
    assert updated.get_json()["word"]["modern_meaning"] == "学生"
    assert admin.put("/admin/dictionary/api/words/999", json={"notes": "x"}).status_code == 404

    listed = admin.get("/admin/dictionary/api/words?q=しょ").get_json()["words"]
    assert [w["word"] for w in listed] == ["書生"]

    assert admin.delete(f"/admin/dictionary/api/words/{word_id}").status_code == 200
    assert admin.delete(f"/admin/dictionary/api/words/{word_id}").status_code == 404
