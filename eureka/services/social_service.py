"""Likes, bookmarks and threaded comments on stories."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from eureka.db.repositories import profiles_repo, social_repo, stories_repo
from eureka.services import stories_service
from eureka.services.profiles_service import DEFAULT_USERNAME
from eureka.utils.logging import get_logger
from eureka.utils.text import clean_text

LOG = get_logger("social_service")

MAX_COMMENT_LENGTH = 2000


class CommentValidationError(ValueError):
    """Raised when a comment payload is invalid."""


class CommentNotFoundError(RuntimeError):
    """Raised when a comment id does not exist."""


class CommentAccessError(RuntimeError):
    """Raised when the caller may not delete the comment."""


def toggle_like(user_id: str, story_id: int) -> Dict[str, Any]:
    stories_service.require_published(story_id, user_id)
    liked, count = social_repo.toggle_like(user_id, story_id)
    LOG.debug("Like toggle user_id=%s story_id=%s liked=%s", user_id, story_id, liked)
    return {"liked": liked, "like_count": count}


def toggle_bookmark(user_id: str, story_id: int) -> Dict[str, Any]:
    stories_service.require_published(story_id, user_id)
    bookmarked = social_repo.toggle_bookmark(user_id, story_id)
    return {"bookmarked": bookmarked}


def list_bookmarks(user_id: str) -> List[Dict[str, Any]]:
    """Bookmarked stories (newest bookmark first), hiding others' drafts."""
    ids = social_repo.list_bookmarked_story_ids(user_id)
    by_id = {s.id: s for s in stories_repo.list_stories_by_ids(ids)}
    visible = [
        by_id[i] for i in ids
        if i in by_id and (by_id[i].status == "published" or by_id[i].user_id == user_id)
    ]
    return stories_service.build_cards(visible)


def post_comment(
    user_id: str,
    story_id: int,
    content: str,
    parent_comment_id: Optional[int] = None,
) -> Dict[str, Any]:
    text = clean_text(content)
    if not text:
        raise CommentValidationError("content_required")
    if len(text) > MAX_COMMENT_LENGTH:
        raise CommentValidationError("content_too_long")
    stories_service.require_published(story_id, user_id)
    parent_id = None
    if parent_comment_id is not None:
        parent = social_repo.get_comment(int(parent_comment_id))
        if not parent or parent.story_id != story_id:
            raise CommentValidationError("invalid_parent")
        # threads are one level deep
        parent_id = parent.parent_comment_id or parent.id
    comment = social_repo.create_comment(story_id, user_id, text, parent_id)
    LOG.info("Comment posted id=%s story_id=%s parent=%s", comment.id, story_id, parent_id)
    payload = comment.as_dict()
    payload.update(_authors([user_id]).get(user_id, _anonymous()))
    payload["replies"] = []
    return payload


def _anonymous() -> Dict[str, Any]:
    return {"username": DEFAULT_USERNAME, "avatar_url": None}


def _authors(user_ids) -> Dict[str, Dict[str, Any]]:
    return {
        uid: {"username": p.username or DEFAULT_USERNAME, "avatar_url": p.avatar_url}
        for uid, p in profiles_repo.get_profiles(user_ids).items()
    }


def list_comments(story_id: int) -> Dict[str, Any]:
    rows = social_repo.list_comments(story_id)
    authors = _authors(r.user_id for r in rows)
    top: List[Dict[str, Any]] = []
    replies: Dict[int, List[Dict[str, Any]]] = {}
    for row in rows:
        item = row.as_dict()
        item.update(authors.get(row.user_id, _anonymous()))
        if row.parent_comment_id is None:
            item["replies"] = []
            top.append(item)
        else:
            replies.setdefault(row.parent_comment_id, []).append(item)
    for item in top:
        # replies read oldest first under their root
        item["replies"] = list(reversed(replies.get(item["id"], [])))
    return {"comments": top, "count": len(rows)}


def delete_comment(user_id: str, comment_id: int, *, is_admin: bool = False) -> int:
    comment = social_repo.get_comment(comment_id)
    if not comment:
        raise CommentNotFoundError("comment_not_found")
    if comment.user_id != user_id and not is_admin:
        raise CommentAccessError("not_comment_author")
    removed = social_repo.delete_comment(comment_id)
    LOG.info("Comment deleted id=%s by=%s removed=%s", comment_id, user_id, removed)
    return removed


__all__ = [
    "CommentValidationError",
    "CommentNotFoundError",
    "CommentAccessError",
    "toggle_like",
    "toggle_bookmark",
    "list_bookmarks",
    "post_comment",
    "list_comments",
    "delete_comment",
]
