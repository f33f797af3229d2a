"""Tests for stories_service."""
from __future__ import annotations

import pytest

from eureka.db.engine import init_engine_once, reset_for_tests
from eureka.services import profiles_service, social_service, stories_service


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("EUREKA_DB_PATH", ":memory:")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


def _payload(**overrides):
    payload = {
        "title": "月夜の手紙",
        "synopsis": "古い手紙をめぐる短い物語。",
        "genre": "恋愛",
        "chapters": [
            {"chapter_title": "始まり", "content": "その夜、月は明るかった。"},
            {"content": "二通目の手紙が届いた。"},
        ],
    }
    payload.update(overrides)
    return payload


def _publish(user_id="author-1", **overrides):
    return stories_service.save_story(user_id, _payload(**overrides), "published")


def test_save_story_numbers_chapters():
    profiles_service.ensure_profile("author-1", "夏子")

    story = _publish()

    assert story["status"] == "published"
    assert story["author_name"] == "夏子"
    assert story["chapter_count"] == 2
    assert [c["chapter_number"] for c in story["chapters"]] == [1, 2]
    assert story["chapters"][1]["chapter_title"] == "第2章"
    assert story["is_owner"] is True


@pytest.mark.parametrize(
    "overrides, status, code",
    [
        ({}, "archived", "invalid_status"),
        ({"title": "  "}, "draft", "title_required"),
        ({"synopsis": ""}, "draft", "synopsis_required"),
        ({"genre": "詩"}, "draft", "invalid_genre"),
        ({"chapters": []}, "draft", "chapter_required"),
        ({"chapters": ["本文"]}, "draft", "invalid_chapter"),
        ({"chapters": [{"chapter_title": "空", "content": " "}]}, "draft", "chapter_content_required"),
    ],
)
def test_save_story_validation(overrides, status, code):
    with pytest.raises(stories_service.StoryValidationError) as exc:
        stories_service.save_story("author-1", _payload(**overrides), status)
    assert str(exc.value) == code


def test_update_replaces_chapters_and_checks_owner():
    story = _publish()

    updated = stories_service.save_story(
        "author-1",
        _payload(chapters=[{"chapter_title": "改稿", "content": "一章だけになった。"}]),
        "draft",
        story_id=story["id"],
    )
    assert updated["status"] == "draft"
    assert [c["chapter_title"] for c in updated["chapters"]] == ["改稿"]

    with pytest.raises(stories_service.StoryAccessError):
        stories_service.save_story("intruder", _payload(), "draft", story_id=story["id"])
    with pytest.raises(stories_service.StoryNotFoundError):
        stories_service.save_story("author-1", _payload(), "draft", story_id=999)


def test_drafts_are_private():
    draft = stories_service.save_story("author-1", _payload(), "draft")

    assert stories_service.get_story(draft["id"], viewer_id="author-1")["status"] == "draft"
    with pytest.raises(stories_service.StoryAccessError) as exc:
        stories_service.get_story(draft["id"], viewer_id="reader-1")
    assert str(exc.value) == "story_private"
    with pytest.raises(stories_service.StoryAccessError):
        stories_service.get_story(draft["id"])


def test_record_view_increments():
    story = _publish()
    assert stories_service.record_view(story["id"]) == 1
    assert stories_service.record_view(story["id"]) == 2
    with pytest.raises(stories_service.StoryNotFoundError):
        stories_service.record_view(12345)


def test_list_published_filters_and_sorts():
    profiles_service.ensure_profile("author-2", "森")
    first = _publish(title="雨の駅", genre="ミステリー")
    second = _publish(user_id="author-2", title="星の庭", genre="ファンタジー")
    stories_service.save_story("author-1", _payload(title="下書き"), "draft")
    stories_service.record_view(first["id"])
    social_service.toggle_like("reader-1", second["id"])

    assert [c["title"] for c in stories_service.list_published()] == ["星の庭", "雨の駅"]
    assert [c["title"] for c in stories_service.list_published(sort_by="popular")][0] == "雨の駅"
    assert [c["title"] for c in stories_service.list_published(sort_by="likes")][0] == "星の庭"
    assert [c["title"] for c in stories_service.list_published(genre="ミステリー")] == ["雨の駅"]
    assert [c["title"] for c in stories_service.list_published(genre="全て")] == ["星の庭", "雨の駅"]
    assert [c["title"] for c in stories_service.list_published(query="森")] == ["星の庭"]
    with pytest.raises(stories_service.StoryValidationError):
        stories_service.list_published(sort_by="random")


def test_list_my_stories_tabs():
    _publish(title="公開")
    stories_service.save_story("author-1", _payload(title="下書き"), "draft")
    _publish(user_id="author-2", title="他人")

    assert {c["title"] for c in stories_service.list_my_stories("author-1")} == {"公開", "下書き"}
    assert [c["title"] for c in stories_service.list_my_stories("author-1", "draft")] == ["下書き"]
    assert [c["title"] for c in stories_service.list_my_stories("author-1", "published")] == ["公開"]
    with pytest.raises(stories_service.StoryValidationError):
        stories_service.list_my_stories("author-1", "archived")


def test_toggle_publish_and_delete():
    story = stories_service.save_story("author-1", _payload(), "draft")

    assert stories_service.toggle_publish("author-1", story["id"])["status"] == "published"
    assert stories_service.toggle_publish("author-1", story["id"])["status"] == "draft"
    with pytest.raises(stories_service.StoryAccessError):
        stories_service.toggle_publish("author-2", story["id"])
    with pytest.raises(stories_service.StoryAccessError):
        stories_service.delete_story("author-2", story["id"])

    stories_service.delete_story("author-1", story["id"])
    with pytest.raises(stories_service.StoryNotFoundError):
        stories_service.get_story(story["id"], viewer_id="author-1")


def test_card_defaults_author_name():
    story = _publish(user_id="ghost")
    assert story["author_name"] == profiles_service.DEFAULT_USERNAME
