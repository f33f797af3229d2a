"""User-authored stories: writing, publishing and browsing."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from eureka.db.repositories import profiles_repo, social_repo, stories_repo
from eureka.services.profiles_service import DEFAULT_USERNAME
from eureka.utils.logging import get_logger
from eureka.utils.text import clean_text

LOG = get_logger("stories_service")

GENRES = ("小説", "恋愛", "ファンタジー", "ミステリー", "SF", "ホラー", "歴史", "青春", "コメディ", "その他")
DEFAULT_GENRE = "小説"
ALL_GENRES = {"全て", "all", ""}
SORT_OPTIONS = ("latest", "popular", "likes")
MY_TABS = ("all", "published", "draft")
STATUSES = ("draft", "published")


class StoryValidationError(ValueError):
    """Raised when a story payload fails validation."""


class StoryNotFoundError(RuntimeError):
    """Raised when a story id does not exist."""


class StoryAccessError(RuntimeError):
    """Raised when the caller may not see or change the story."""


@dataclass
class StoryCard:
    id: int
    user_id: str
    title: str
    genre: str
    synopsis: str
    cover_image_url: Optional[str]
    status: str
    view_count: int
    like_count: int
    chapter_count: int
    author_name: str
    created_at: Optional[str]
    updated_at: Optional[str]


def _card(story, chapter_count: int, author_name: str) -> Dict[str, Any]:
    data = story.as_dict()
    return asdict(
        StoryCard(
            id=data["id"],
            user_id=data["user_id"],
            title=data["title"],
            genre=data["genre"],
            synopsis=data["synopsis"],
            cover_image_url=data["cover_image_url"],
            status=data["status"],
            view_count=data["view_count"],
            like_count=data["like_count"],
            chapter_count=chapter_count,
            author_name=author_name,
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )
    )


def _author_names(user_ids) -> Dict[str, str]:
    return {uid: (p.username or DEFAULT_USERNAME) for uid, p in profiles_repo.get_profiles(user_ids).items()}


def build_cards(stories) -> List[Dict[str, Any]]:
    stories = list(stories)
    counts = stories_repo.chapter_counts(s.id for s in stories)
    names = _author_names(s.user_id for s in stories)
    return [_card(s, counts.get(s.id, 0), names.get(s.user_id, DEFAULT_USERNAME)) for s in stories]


def _normalize_chapters(raw: Any) -> List[Dict[str, Any]]:
    if not isinstance(raw, (list, tuple)) or not raw:
        raise StoryValidationError("chapter_required")
    chapters = []
    for index, item in enumerate(raw, start=1):
        if not isinstance(item, dict) or not isinstance(item.get("content", ""), (str, type(None))):
            raise StoryValidationError("invalid_chapter")
        content = clean_text(item.get("content"))
        if not content:
            raise StoryValidationError("chapter_content_required")
        title = clean_text(item.get("chapter_title") or item.get("title"))
        chapters.append(
            {
                "chapter_number": index,
                "chapter_title": title or f"第{index}章",
                "content": item.get("content"),
            }
        )
    return chapters


def _validate(payload: Dict[str, Any], status: str) -> tuple:
    if status not in STATUSES:
        raise StoryValidationError("invalid_status")
    title = clean_text(payload.get("title"))
    if not title:
        raise StoryValidationError("title_required")
    synopsis = clean_text(payload.get("synopsis"))
    if not synopsis:
        raise StoryValidationError("synopsis_required")
    raw_genre = payload.get("genre")
    genre = raw_genre.strip() if isinstance(raw_genre, str) else raw_genre
    genre = genre or DEFAULT_GENRE
    if genre not in GENRES:
        raise StoryValidationError("invalid_genre")
    chapters = _normalize_chapters(payload.get("chapters"))
    fields = {
        "title": title,
        "synopsis": synopsis,
        "genre": genre,
        "cover_image_url": clean_text(payload.get("cover_image_url")) or None,
        "status": status,
    }
    return fields, chapters


def save_story(
    user_id: str,
    payload: Dict[str, Any],
    status: str,
    story_id: Optional[int] = None,
) -> Dict[str, Any]:
    """Create or fully replace a story; chapters are renumbered 1..n."""
    fields, chapters = _validate(payload, status)
    if story_id is None:
        story = stories_repo.create_story(user_id, fields, chapters)
        LOG.info("Story created id=%s user_id=%s status=%s", story.id, user_id, status)
    else:
        existing = stories_repo.get_story(story_id)
        if not existing:
            raise StoryNotFoundError("story_not_found")
        if existing.user_id != user_id:
            raise StoryAccessError("not_story_owner")
        story = stories_repo.update_story(story_id, fields, chapters)
        if story is None:  # pragma: no cover - deleted concurrently
            raise StoryNotFoundError("story_not_found")
        LOG.info("Story updated id=%s chapters=%s status=%s", story_id, len(chapters), status)
    return get_story(story.id, viewer_id=user_id)


def get_story(story_id: int, viewer_id: Optional[str] = None) -> Dict[str, Any]:
    story = stories_repo.get_story(story_id)
    if not story:
        raise StoryNotFoundError("story_not_found")
    if story.status != "published" and story.user_id != viewer_id:
        raise StoryAccessError("story_private")
    chapters = [c.as_dict() for c in stories_repo.list_chapters(story_id)]
    payload = _card(story, len(chapters), _author_names([story.user_id]).get(story.user_id, DEFAULT_USERNAME))
    payload["chapters"] = chapters
    payload["is_owner"] = bool(viewer_id) and story.user_id == viewer_id
    payload["liked"] = bool(viewer_id) and social_repo.has_like(viewer_id, story_id)
    payload["bookmarked"] = bool(viewer_id) and social_repo.has_bookmark(viewer_id, story_id)
    return payload


def record_view(story_id: int) -> int:
    count = stories_repo.increment_view(story_id)
    if count is None:
        raise StoryNotFoundError("story_not_found")
    return int(count)


def _sort_key(sort_by: str):
    if sort_by == "popular":
        return lambda c: (c["view_count"], c["created_at"] or "", c["id"])
    if sort_by == "likes":
        return lambda c: (c["like_count"], c["created_at"] or "", c["id"])
    return lambda c: (c["created_at"] or "", c["id"])


def list_published(
    query: Optional[str] = None,
    genre: Optional[str] = None,
    sort_by: str = "latest",
) -> List[Dict[str, Any]]:
    sort_by = (sort_by or "latest").strip().lower()
    if sort_by not in SORT_OPTIONS:
        raise StoryValidationError("invalid_sort")
    cards = build_cards(stories_repo.list_stories(status="published"))
    genre_value = clean_text(genre)
    if genre_value not in ALL_GENRES:
        cards = [c for c in cards if c["genre"] == genre_value]
    q = clean_text(query).lower()
    if q:
        cards = [
            c for c in cards
            if q in c["title"].lower() or q in c["synopsis"].lower() or q in c["author_name"].lower()
        ]
    return sorted(cards, key=_sort_key(sort_by), reverse=True)


def list_my_stories(user_id: str, tab: str = "all") -> List[Dict[str, Any]]:
    tab = (tab or "all").strip().lower()
    if tab not in MY_TABS:
        raise StoryValidationError("invalid_tab")
    status = None if tab == "all" else tab
    cards = build_cards(stories_repo.list_stories(status=status, user_id=user_id))
    return sorted(cards, key=lambda c: (c["updated_at"] or "", c["id"]), reverse=True)


def _owned(user_id: str, story_id: int):
    story = stories_repo.get_story(story_id)
    if not story:
        raise StoryNotFoundError("story_not_found")
    if story.user_id != user_id:
        raise StoryAccessError("not_story_owner")
    return story


def toggle_publish(user_id: str, story_id: int) -> Dict[str, Any]:
    story = _owned(user_id, story_id)
    new_status = "draft" if story.status == "published" else "published"
    stories_repo.set_status(story_id, new_status)
    LOG.info("Story status id=%s %s -> %s", story_id, story.status, new_status)
    return get_story(story_id, viewer_id=user_id)


def delete_story(user_id: str, story_id: int) -> None:
    _owned(user_id, story_id)
    stories_repo.delete_story(story_id)
    LOG.info("Story deleted id=%s user_id=%s", story_id, user_id)


def require_published(story_id: int, viewer_id: Optional[str] = None):
    """Return the story row when the viewer may interact with it."""
    story = stories_repo.get_story(story_id)
    if not story:
        raise StoryNotFoundError("story_not_found")
    if story.status != "published" and story.user_id != viewer_id:
        raise StoryAccessError("story_private")
    return story


__all__ = [
    "GENRES",
    "SORT_OPTIONS",
    "StoryValidationError",
    "StoryNotFoundError",
    "StoryAccessError",
    "StoryCard",
    "build_cards",
    "save_story",
    "get_story",
    "record_view",
    "list_published",
    "list_my_stories",
    "toggle_publish",
    "delete_story",
    "require_published",
]
