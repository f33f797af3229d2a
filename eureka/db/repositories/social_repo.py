"""Repository helpers for likes, bookmarks, comments and author follows."""
from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from sqlalchemy import func

from eureka.db import app_session
from eureka.db.models import (
    AuthorFollow,
    StoryBookmark,
    StoryComment,
    StoryLike,
    UserStory,
)


def toggle_like(user_id: str, story_id: int) -> Tuple[bool, int]:
    """Flip the like row and store the recomputed count on the story."""
    with app_session() as session:
        existing = (
            session.query(StoryLike)
            .filter(StoryLike.user_id == user_id, StoryLike.story_id == story_id)
            .one_or_none()
        )
        if existing:
            session.delete(existing)
            liked = False
        else:
            session.add(StoryLike(user_id=user_id, story_id=story_id))
            liked = True
        session.flush()
        count = int(
            session.query(func.count(StoryLike.id)).filter(StoryLike.story_id == story_id).scalar() or 0
        )
        session.query(UserStory).filter(UserStory.id == story_id).update(
            {UserStory.like_count: count}, synchronize_session=False
        )
        return liked, count


def has_like(user_id: str, story_id: int) -> bool:
    with app_session() as session:
        return (
            session.query(StoryLike.id)
            .filter(StoryLike.user_id == user_id, StoryLike.story_id == story_id)
            .first()
            is not None
        )


def toggle_bookmark(user_id: str, story_id: int) -> bool:
    with app_session() as session:
        existing = (
            session.query(StoryBookmark)
            .filter(StoryBookmark.user_id == user_id, StoryBookmark.story_id == story_id)
            .one_or_none()
        )
        if existing:
            session.delete(existing)
            return False
        session.add(StoryBookmark(user_id=user_id, story_id=story_id))
        return True


def has_bookmark(user_id: str, story_id: int) -> bool:
    with app_session() as session:
        return (
            session.query(StoryBookmark.id)
            .filter(StoryBookmark.user_id == user_id, StoryBookmark.story_id == story_id)
            .first()
            is not None
        )


def list_bookmarked_story_ids(user_id: str) -> List[int]:
    with app_session() as session:
        rows = (
            session.query(StoryBookmark.story_id)
            .filter(StoryBookmark.user_id == user_id)
            .order_by(StoryBookmark.created_at.desc(), StoryBookmark.id.desc())
            .all()
        )
        return [row[0] for row in rows]


def create_comment(
    story_id: int, user_id: str, content: str, parent_comment_id: Optional[int] = None
) -> StoryComment:
    comment = StoryComment(
        story_id=story_id,
        user_id=user_id,
        content=content,
        parent_comment_id=parent_comment_id,
    )
    with app_session() as session:
        session.add(comment)
    return comment


def get_comment(comment_id: int) -> Optional[StoryComment]:
    with app_session() as session:
        return session.query(StoryComment).filter(StoryComment.id == comment_id).one_or_none()


def list_comments(story_id: int) -> List[StoryComment]:
    with app_session() as session:
        return (
            session.query(StoryComment)
            .filter(StoryComment.story_id == story_id)
            .order_by(StoryComment.created_at.desc(), StoryComment.id.desc())
            .all()
        )


def delete_comment(comment_id: int) -> int:
    """Delete a comment and its replies; returns the number of rows removed."""
    with app_session() as session:
        replies = (
            session.query(StoryComment)
            .filter(StoryComment.parent_comment_id == comment_id)
            .delete(synchronize_session=False)
        )
        removed = (
            session.query(StoryComment)
            .filter(StoryComment.id == comment_id)
            .delete(synchronize_session=False)
        )
        return int(replies) + int(removed) if removed else 0


def toggle_follow(follower_id: str, author_id: str) -> Tuple[bool, int]:
    with app_session() as session:
        existing = (
            session.query(AuthorFollow)
            .filter(AuthorFollow.follower_id == follower_id, AuthorFollow.author_id == author_id)
            .one_or_none()
        )
        if existing:
            session.delete(existing)
            following = False
        else:
            session.add(AuthorFollow(follower_id=follower_id, author_id=author_id))
            following = True
        session.flush()
        count = int(
            session.query(func.count(AuthorFollow.id))
            .filter(AuthorFollow.author_id == author_id)
            .scalar()
            or 0
        )
        return following, count


def is_following(follower_id: str, author_id: str) -> bool:
    with app_session() as session:
        return (
            session.query(AuthorFollow.id)
            .filter(AuthorFollow.follower_id == follower_id, AuthorFollow.author_id == author_id)
            .first()
            is not None
        )


def follower_counts() -> Dict[str, int]:
    with app_session() as session:
        rows = (
            session.query(AuthorFollow.author_id, func.count(AuthorFollow.id))
            .group_by(AuthorFollow.author_id)
            .all()
        )
        return {author_id: int(count) for author_id, count in rows}


def count_followers(author_id: str) -> int:
    return follower_counts().get(author_id, 0)


__all__ = [
    "toggle_like",
    "has_like",
    "toggle_bookmark",
    "has_bookmark",
    "list_bookmarked_story_ids",
    "create_comment",
    "get_comment",
    "list_comments",
    "delete_comment",
    "toggle_follow",
    "is_following",
    "follower_counts",
    "count_followers",
]
