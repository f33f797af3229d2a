"""ORM models for user-authored stories and the social layer around them."""
from __future__ import annotations

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from .library import Base, utcnow, _iso


class UserStory(Base):
    __tablename__ = "user_stories"

    STATUSES = ("draft", "published")

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    genre = Column(String(32), nullable=False, default="小説")
    synopsis = Column(Text, nullable=False, default="")
    cover_image_url = Column(String(500), nullable=True)
    status = Column(String(16), nullable=False, default="draft")
    view_count = Column(Integer, nullable=False, default=0)
    like_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_user_stories_status_created", "status", "created_at"),
    )

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "genre": self.genre,
            "synopsis": self.synopsis or "",
            "cover_image_url": self.cover_image_url,
            "status": self.status,
            "view_count": self.view_count or 0,
            "like_count": self.like_count or 0,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<UserStory id={self.id} user_id={self.user_id} status={self.status}>"


class StoryChapter(Base):
    __tablename__ = "story_chapters"

    id = Column(Integer, primary_key=True, autoincrement=True)
    story_id = Column(Integer, ForeignKey("user_stories.id", ondelete="CASCADE"), nullable=False, index=True)
    chapter_number = Column(Integer, nullable=False)
    chapter_title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("story_id", "chapter_number", name="uq_story_chapter_number"),
    )

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "story_id": self.story_id,
            "chapter_number": self.chapter_number,
            "chapter_title": self.chapter_title,
            "content": self.content or "",
        }


class StoryLike(Base):
    __tablename__ = "story_likes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    story_id = Column(Integer, ForeignKey("user_stories.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "story_id", name="uq_story_like"),
    )


class StoryBookmark(Base):
    __tablename__ = "story_bookmarks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    story_id = Column(Integer, ForeignKey("user_stories.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "story_id", name="uq_story_bookmark"),
    )


class StoryComment(Base):
    """Comment on a story; replies point at a top-level comment."""

    __tablename__ = "story_comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    story_id = Column(Integer, ForeignKey("user_stories.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(64), nullable=False)
    parent_comment_id = Column(
        Integer, ForeignKey("story_comments.id", ondelete="CASCADE"), nullable=True, index=True
    )
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "story_id": self.story_id,
            "user_id": self.user_id,
            "parent_comment_id": self.parent_comment_id,
            "content": self.content,
            "created_at": _iso(self.created_at),
        }


class AuthorFollow(Base):
    __tablename__ = "author_follows"

    id = Column(Integer, primary_key=True, autoincrement=True)
    follower_id = Column(String(64), nullable=False, index=True)
    author_id = Column(String(64), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("follower_id", "author_id", name="uq_author_follow"),
    )


__all__ = [
    "UserStory",
    "StoryChapter",
    "StoryLike",
    "StoryBookmark",
    "StoryComment",
    "AuthorFollow",
]
