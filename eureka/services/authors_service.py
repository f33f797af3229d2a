"""Author directory, author pages and follows."""
from __future__ import annotations

from collections import Counter
from typing import Any, Dict, List, Optional

from eureka.db.repositories import profiles_repo, social_repo, stories_repo
from eureka.services import stories_service
from eureka.utils.logging import get_logger
from eureka.utils.text import clean_text

LOG = get_logger("authors_service")

AUTHOR_SORTS = ("newest", "followers", "stories")
PLACEHOLDER_NAME = "Anonymous Author"
BIO_EXCERPT_LENGTH = 100


class AuthorValidationError(ValueError):
    """Raised for invalid follow or listing requests."""


def bio_excerpt(bio: Optional[str]) -> Optional[str]:
    if not bio:
        return None
    text = " ".join(bio.split("\n")[:2])
    if len(text) > BIO_EXCERPT_LENGTH:
        return text[:BIO_EXCERPT_LENGTH] + "..."
    return text


def list_authors(sort_by: str = "newest") -> List[Dict[str, Any]]:
    sort_by = (sort_by or "newest").strip().lower()
    if sort_by not in AUTHOR_SORTS:
        raise AuthorValidationError("invalid_sort")
    profiles = profiles_repo.list_profiles()
    published = stories_repo.list_stories(status="published")
    story_counts = Counter(s.user_id for s in published)
    latest: Dict[str, Any] = {}
    for story in published:  # newest first
        latest.setdefault(story.user_id, story)
    followers = social_repo.follower_counts()
    authors = []
    for p in profiles:
        newest = latest.get(p.user_id)
        authors.append(
            {
                "user_id": p.user_id,
                "username": p.username,
                "avatar_url": p.avatar_url,
                "bio": p.bio,
                "author_bio": p.author_bio,
                "bio_excerpt": bio_excerpt(p.author_bio or p.bio),
                "created_at": p.created_at.isoformat() if p.created_at else None,
                "story_count": story_counts.get(p.user_id, 0),
                "follower_count": followers.get(p.user_id, 0),
                "latest_story_title": newest.title if newest else None,
                "latest_story_date": newest.created_at.isoformat() if newest else None,
            }
        )
    if sort_by == "followers":
        authors.sort(key=lambda a: a["follower_count"], reverse=True)
    elif sort_by == "stories":
        authors.sort(key=lambda a: a["story_count"], reverse=True)
    return authors


def get_author(author_id: str, viewer_id: Optional[str] = None) -> Dict[str, Any]:
    profile = profiles_repo.get_profile(author_id)
    if profile:
        info = profile.as_dict()
    else:
        info = {
            "user_id": author_id,
            "username": PLACEHOLDER_NAME,
            "avatar_url": None,
            "bio": None,
            "author_bio": None,
            "author_social_links": None,
        }
    stories = stories_service.build_cards(stories_repo.list_stories(status="published", user_id=author_id))
    return {
        "profile": info,
        "stories": stories,
        "story_count": len(stories),
        "total_views": sum(s["view_count"] for s in stories),
        "total_likes": sum(s["like_count"] for s in stories),
        "follower_count": social_repo.count_followers(author_id),
        "is_following": bool(viewer_id) and social_repo.is_following(viewer_id, author_id),
        "is_self": bool(viewer_id) and viewer_id == author_id,
    }


def toggle_follow(follower_id: str, author_id: str) -> Dict[str, Any]:
    target = clean_text(author_id)
    if not target:
        raise AuthorValidationError("author_required")
    if follower_id == target:
        raise AuthorValidationError("cannot_follow_self")
    following, count = social_repo.toggle_follow(follower_id, target)
    LOG.debug("Follow toggle follower=%s author=%s following=%s", follower_id, target, following)
    return {"following": following, "follower_count": count}


__all__ = [
    "AUTHOR_SORTS",
    "PLACEHOLDER_NAME",
    "AuthorValidationError",
    "bio_excerpt",
    "list_authors",
    "get_author",
    "toggle_follow",
]
