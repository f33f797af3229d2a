"""Repository helpers for stories and chapters."""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import func

from eureka.db import app_session
from eureka.db.models import (
    StoryBookmark,
    StoryChapter,
    StoryComment,
    StoryLike,
    UserStory,
    utcnow,
)


def _replace_chapters(session, story_id: int, chapters: Sequence[dict]) -> None:
    session.query(StoryChapter).filter(StoryChapter.story_id == story_id).delete(
        synchronize_session=False
    )
    session.flush()
    for chapter in chapters:
        session.add(
            StoryChapter(
                story_id=story_id,
                chapter_number=chapter["chapter_number"],
                chapter_title=chapter["chapter_title"],
                content=chapter["content"],
            )
        )


def create_story(user_id: str, fields: dict, chapters: Sequence[dict]) -> UserStory:
    with app_session() as session:
        now = utcnow()
        story = UserStory(user_id=user_id, created_at=now, updated_at=now, **fields)
        session.add(story)
        session.flush()
        _replace_chapters(session, story.id, chapters)
        return story


def update_story(story_id: int, fields: dict, chapters: Sequence[dict]) -> Optional[UserStory]:
    with app_session() as session:
        story = session.query(UserStory).filter(UserStory.id == story_id).one_or_none()
        if not story:
            return None
        for key, value in fields.items():
            setattr(story, key, value)
        story.updated_at = utcnow()
        _replace_chapters(session, story.id, chapters)
        session.flush()
        return story


def get_story(story_id: int) -> Optional[UserStory]:
    with app_session() as session:
        return session.query(UserStory).filter(UserStory.id == story_id).one_or_none()


def list_chapters(story_id: int) -> List[StoryChapter]:
    with app_session() as session:
        return (
            session.query(StoryChapter)
            .filter(StoryChapter.story_id == story_id)
            .order_by(StoryChapter.chapter_number.asc())
            .all()
        )


def chapter_counts(story_ids: Iterable[int]) -> Dict[int, int]:
    ids = list(story_ids)
    if not ids:
        return {}
    with app_session() as session:
        rows = (
            session.query(StoryChapter.story_id, func.count(StoryChapter.id))
            .filter(StoryChapter.story_id.in_(ids))
            .group_by(StoryChapter.story_id)
            .all()
        )
        return {story_id: int(count) for story_id, count in rows}


def list_stories(
    *, status: Optional[str] = None, user_id: Optional[str] = None
) -> List[UserStory]:
    with app_session() as session:
        query = session.query(UserStory)
        if status:
            query = query.filter(UserStory.status == status)
        if user_id:
            query = query.filter(UserStory.user_id == user_id)
        return query.order_by(UserStory.created_at.desc(), UserStory.id.desc()).all()


def list_stories_by_ids(story_ids: Iterable[int]) -> List[UserStory]:
    ids = list(story_ids)
    if not ids:
        return []
    with app_session() as session:
        return session.query(UserStory).filter(UserStory.id.in_(ids)).all()


def increment_view(story_id: int) -> Optional[int]:
    """Atomically bump ``view_count``; returns the new value or None when missing."""
    with app_session() as session:
        updated = (
            session.query(UserStory)
            .filter(UserStory.id == story_id)
            .update({UserStory.view_count: UserStory.view_count + 1}, synchronize_session=False)
        )
        if not updated:
            return None
        return session.query(UserStory.view_count).filter(UserStory.id == story_id).scalar()


def set_status(story_id: int, status: str) -> Optional[UserStory]:
    with app_session() as session:
        story = session.query(UserStory).filter(UserStory.id == story_id).one_or_none()
        if not story:
            return None
        story.status = status
        story.updated_at = utcnow()
        session.flush()
        return story


def delete_story(story_id: int) -> bool:
    with app_session() as session:
        story = session.query(UserStory).filter(UserStory.id == story_id).one_or_none()
        if not story:
            return False
        # replies first so the self-referencing FK never dangles
        session.query(StoryComment).filter(
            StoryComment.story_id == story_id, StoryComment.parent_comment_id.isnot(None)
        ).delete(synchronize_session=False)
        for model in (StoryComment, StoryLike, StoryBookmark, StoryChapter):
            session.query(model).filter(model.story_id == story_id).delete(synchronize_session=False)
        session.delete(story)
        return True


__all__ = [
    "create_story",
    "update_story",
    "get_story",
    "list_chapters",
    "chapter_counts",
    "list_stories",
    "list_stories_by_ids",
    "increment_view",
    "set_status",
    "delete_story",
]
