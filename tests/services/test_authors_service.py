"""Tests for authors_service."""
from __future__ import annotations

import pytest

from eureka.db.engine import init_engine_once, reset_for_tests
from eureka.services import authors_service, profiles_service, social_service, stories_service


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("EUREKA_DB_PATH", ":memory:")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


def _publish(user_id, title):
    payload = {"title": title, "synopsis": "あらすじ", "chapters": [{"content": "本文"}]}
    return stories_service.save_story(user_id, payload, "published")


def test_bio_excerpt():
    assert authors_service.bio_excerpt(None) is None
    assert authors_service.bio_excerpt("一行目\n二行目\n三行目") == "一行目 二行目"
    long_bio = "あ" * 150
    assert authors_service.bio_excerpt(long_bio) == "あ" * 100 + "..."


def test_list_authors_sorting():
    profiles_service.ensure_profile("a-1", "一葉")
    profiles_service.ensure_profile("a-2", "鏡花")
    profiles_service.update_profile("a-2", {"username": "鏡花", "author_bio": "金沢出身。\n幻想小説。\n他"})
    _publish("a-1", "たけくらべ")
    _publish("a-1", "にごりえ")
    _publish("a-2", "高野聖")
    followed = authors_service.toggle_follow("reader-1", "a-2")
    assert followed == {"following": True, "follower_count": 1}

    by_stories = authors_service.list_authors("stories")
    assert [a["user_id"] for a in by_stories] == ["a-1", "a-2"]
    assert by_stories[0]["story_count"] == 2
    assert by_stories[0]["latest_story_title"] == "にごりえ"

    by_followers = authors_service.list_authors("followers")
    assert by_followers[0]["user_id"] == "a-2"
    assert by_followers[0]["bio_excerpt"] == "金沢出身。 幻想小説。"

    assert [a["user_id"] for a in authors_service.list_authors()] == ["a-2", "a-1"]
    with pytest.raises(authors_service.AuthorValidationError):
        authors_service.list_authors("alphabetical")


def test_get_author_aggregates():
    profiles_service.ensure_profile("a-1", "一葉")
    story = _publish("a-1", "たけくらべ")
    stories_service.record_view(story["id"])
    stories_service.record_view(story["id"])
    social_service.toggle_like("reader-1", story["id"])
    stories_service.save_story(
        "a-1", {"title": "未完", "synopsis": "x", "chapters": [{"content": "y"}]}, "draft"
    )
    authors_service.toggle_follow("reader-1", "a-1")

    page = authors_service.get_author("a-1", viewer_id="reader-1")

    assert page["profile"]["username"] == "一葉"
    assert [s["title"] for s in page["stories"]] == ["たけくらべ"]
    assert page["total_views"] == 2
    assert page["total_likes"] == 1
    assert page["follower_count"] == 1
    assert page["is_following"] is True
    assert page["is_self"] is False


def test_get_author_without_profile():
    page = authors_service.get_author("unknown")
    assert page["profile"]["username"] == authors_service.PLACEHOLDER_NAME
    assert page["stories"] == []
    assert page["is_following"] is False


def test_toggle_follow_rules():
    with pytest.raises(authors_service.AuthorValidationError) as exc:
        authors_service.toggle_follow("a-1", "a-1")
    assert str(exc.value) == "cannot_follow_self"
    with pytest.raises(authors_service.AuthorValidationError):
        authors_service.toggle_follow("a-1", " ")

    authors_service.toggle_follow("reader-1", "a-1")
    assert authors_service.toggle_follow("reader-1", "a-1") == {"following": False, "follower_count": 0}
