"""Stories, reactions and comment endpoints."""
from __future__ import annotations

import pytest

from eureka.db.engine import init_engine_once, reset_for_tests
from eureka.services import profiles_service
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
    return create_app({"TESTING": True, "SECRET_KEY": "stories-test"})


def _client(app, user_id=None, **extra):
    client = app.test_client()
    if user_id:
        with client.session_transaction() as sess:
            sess["user_id"] = user_id
            sess.update(extra)
    return client


def _titles(resp):
    return [s["title"] for s in resp.get_json()["stories"]]


def _body(**overrides):
    body = {
        "title": "灯台守",
        "synopsis": "岬の灯台で暮らす男の話。",
        "genre": "小説",
        "chapters": [{"chapter_title": "霧", "content": "霧の朝だった。"}],
    }
    body.update(overrides)
    return body


def test_create_defaults_to_draft_and_creates_profile(app):
    author = _client(app, "author-1")

    resp = author.post("/api/stories", json=_body())

    assert resp.status_code == 201
    story = resp.get_json()["story"]
    assert story["status"] == "draft"
    assert story["author_name"] == profiles_service.DEFAULT_USERNAME
    assert profiles_service.get_profile("author-1")["user_id"] == "author-1"


def test_create_validation_and_login(app):
    assert _client(app).post("/api/stories", json=_body()).status_code == 401

    resp = _client(app, "author-1").post("/api/stories", json=_body(chapters=[]))
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "chapter_required"
    assert resp.get_json()["message"] == "Add at least one chapter."


def test_create_rejects_non_string_fields(app):
    author = _client(app, "author-1")

    bad_status = author.post("/api/stories", json=_body(status=1))
    assert bad_status.status_code == 400
    assert bad_status.get_json()["error"] == "invalid_status"
    assert author.post("/api/stories", json=_body(title=5)).get_json()["error"] == "title_required"
    assert author.post("/api/stories", json=_body(genre=["SF"])).get_json()["error"] == "invalid_genre"
    bad_chapter = author.post("/api/stories", json=_body(chapters=[{"content": 7}]))
    assert bad_chapter.status_code == 400
    assert bad_chapter.get_json()["error"] == "invalid_chapter"
    assert author.post("/api/stories", json=_body(status=None)).get_json()["story"]["status"] == "draft"


def test_draft_visibility_and_publish_toggle(app):
    author = _client(app, "author-1")
    story_id = author.post("/api/stories", json=_body()).get_json()["story"]["id"]
    visitor = _client(app)

    hidden = visitor.get(f"/api/stories/{story_id}")
    assert hidden.status_code == 403
    assert hidden.get_json()["error"] == "story_private"
    assert visitor.get(f"/api/stories/{story_id}/comments").status_code == 403
    assert visitor.get("/api/stories").get_json()["stories"] == []

    published = author.post(f"/api/stories/{story_id}/publish").get_json()["story"]
    assert published["status"] == "published"
    assert visitor.get(f"/api/stories/{story_id}").status_code == 200
    listing = visitor.get("/api/stories").get_json()
    assert [s["id"] for s in listing["stories"]] == [story_id]
    assert "ミステリー" in listing["genres"]

    intruder = _client(app, "intruder")
    assert intruder.post(f"/api/stories/{story_id}/publish").status_code == 403
    assert intruder.put(f"/api/stories/{story_id}", json=_body()).status_code == 403
    assert intruder.delete(f"/api/stories/{story_id}").status_code == 403


def test_update_and_delete(app):
    author = _client(app, "author-1")
    story_id = author.post("/api/stories", json=_body(status="published")).get_json()["story"]["id"]

    resp = author.put(
        f"/api/stories/{story_id}",
        json=_body(status="published", chapters=[{"content": "一"}, {"content": "二"}]),
    )
    assert resp.status_code == 200
    assert resp.get_json()["story"]["chapter_count"] == 2

    assert author.delete(f"/api/stories/{story_id}").status_code == 200
    assert author.get(f"/api/stories/{story_id}").status_code == 404


def test_listing_filters_and_mine(app):
    author = _client(app, "author-1")
    author.post("/api/stories", json=_body(status="published", title="公開作"))
    author.post("/api/stories", json=_body(title="下書き作"))

    assert _titles(_client(app).get("/api/stories?genre=ホラー")) == []
    assert _titles(_client(app).get("/api/stories?q=灯台")) == ["公開作"]
    assert _client(app).get("/api/stories?sort=random").status_code == 400
    assert _titles(author.get("/api/stories/mine?tab=draft")) == ["下書き作"]
    assert author.get("/api/stories/mine?tab=trash").status_code == 400


def test_view_like_and_bookmark(app):
    author = _client(app, "author-1")
    story_id = author.post("/api/stories", json=_body(status="published")).get_json()["story"]["id"]
    reader = _client(app, "reader-1")

    assert _client(app).post(f"/api/stories/{story_id}/view").get_json() == {"view_count": 1}
    assert _client(app).post("/api/stories/999/view").status_code == 404

    assert reader.post(f"/api/stories/{story_id}/like").get_json() == {"liked": True, "like_count": 1}
    assert reader.post(f"/api/stories/{story_id}/bookmark").get_json() == {"bookmarked": True}
    assert _titles(reader.get("/api/stories/bookmarks")) == ["灯台守"]

    story = reader.get(f"/api/stories/{story_id}").get_json()["story"]
    assert story["liked"] is True
    assert story["bookmarked"] is True
    assert story["is_owner"] is False
    assert story["view_count"] == 1


def test_view_on_draft_only_counts_for_owner(app):
    author = _client(app, "author-1")
    story_id = author.post("/api/stories", json=_body()).get_json()["story"]["id"]

    denied = _client(app, "reader-1").post(f"/api/stories/{story_id}/view")
    assert denied.status_code == 403
    assert denied.get_json()["error"] == "story_private"
    assert _client(app).post(f"/api/stories/{story_id}/view").status_code == 403
    assert author.post(f"/api/stories/{story_id}/view").get_json() == {"view_count": 1}


def test_comments_thread_and_delete(app):
    author = _client(app, "author-1")
    story_id = author.post("/api/stories", json=_body(status="published")).get_json()["story"]["id"]
    reader = _client(app, "reader-1")

    root = reader.post(f"/api/stories/{story_id}/comments", json={"content": "好きです"})
    assert root.status_code == 201
    root_id = root.get_json()["comment"]["id"]
    reply = author.post(
        f"/api/stories/{story_id}/comments", json={"content": "ありがとう", "parent_comment_id": root_id}
    )
    assert reply.get_json()["comment"]["parent_comment_id"] == root_id
    assert reader.post(f"/api/stories/{story_id}/comments", json={"content": ""}).status_code == 400
    assert (
        reader.post(f"/api/stories/{story_id}/comments", json={"content": "x", "parent_comment_id": "abc"}).status_code
        == 400
    )

    listing = _client(app).get(f"/api/stories/{story_id}/comments").get_json()
    assert listing["count"] == 2
    assert listing["comments"][0]["replies"][0]["content"] == "ありがとう"

    assert author.delete(f"/api/comments/{root_id}").status_code == 403
    deleted = reader.delete(f"/api/comments/{root_id}")
    assert deleted.get_json() == {"status": "deleted", "id": root_id, "removed": 2}
    assert reader.delete(f"/api/comments/{root_id}").status_code == 404


def test_admin_deletes_any_comment(app):
    author = _client(app, "author-1")
    story_id = author.post("/api/stories", json=_body(status="published")).get_json()["story"]["id"]
    comment_id = author.post(f"/api/stories/{story_id}/comments", json={"content": "宣伝"}).get_json()["comment"]["id"]

    moderator = _client(app, "moderator", is_admin=True)

    assert moderator.delete(f"/api/comments/{comment_id}").status_code == 200
