"""ORM models for reader-facing data (profiles, books, shelves, words)."""
from __future__ import annotations

import datetime
import json
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime.datetime:
    """Naive UTC timestamp (SQLite stores datetimes without zone info)."""
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def load_json_list(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except ValueError:
        return []
    if not isinstance(data, list):
        return []
    return [str(item) for item in data]


def dump_json_list(values: Optional[List[str]]) -> Optional[str]:
    if not values:
        return None
    return json.dumps(list(values), ensure_ascii=False)


class Profile(Base):
    """Public profile keyed by the identity provider's opaque user id."""

    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, unique=True, index=True)
    username = Column(String(100), nullable=False, default="匿名")
    avatar_url = Column(String(500), nullable=True)
    bio = Column(Text, nullable=True)
    author_bio = Column(Text, nullable=True)
    author_social_links = Column(Text, nullable=True)  # JSON object
    age_range = Column(String(32), nullable=True)
    gender = Column(String(32), nullable=True)
    location = Column(String(100), nullable=True)
    reading_level = Column(String(32), nullable=False, default="初心者")
    reading_goal = Column(Integer, nullable=False, default=0)
    favorite_genres = Column(Text, nullable=True)  # JSON array
    favorite_authors = Column(Text, nullable=True)  # JSON array
    twitter_url = Column(String(500), nullable=True)
    instagram_url = Column(String(500), nullable=True)
    facebook_url = Column(String(500), nullable=True)
    role = Column(String(16), nullable=False, default="user")
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def social_links(self) -> dict:
        if not self.author_social_links:
            return {}
        try:
            data = json.loads(self.author_social_links)
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    def as_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "username": self.username,
            "avatar_url": self.avatar_url,
            "bio": self.bio,
            "author_bio": self.author_bio,
            "author_social_links": self.social_links() or None,
            "age_range": self.age_range,
            "gender": self.gender,
            "location": self.location,
            "reading_level": self.reading_level,
            "reading_goal": self.reading_goal,
            "favorite_genres": load_json_list(self.favorite_genres),
            "favorite_authors": load_json_list(self.favorite_authors),
            "twitter_url": self.twitter_url,
            "instagram_url": self.instagram_url,
            "facebook_url": self.facebook_url,
            "role": self.role,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Profile user_id={self.user_id} username={self.username}>"


class AozoraBook(Base):
    """Public-domain text readable in-app."""

    __tablename__ = "aozora_books"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    author = Column(String(255), nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    cover_url = Column(String(500), nullable=True)
    description = Column(Text, nullable=True)
    is_free = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    def as_dict(self, include_content: bool = False) -> dict:
        payload = {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "cover_url": self.cover_url or "",
            "description": self.description or "",
            "is_free": bool(self.is_free),
            "created_at": _iso(self.created_at),
        }
        if include_content:
            payload["content"] = self.content or ""
        return payload

    def __repr__(self) -> str:  # pragma: no cover
        return f"<AozoraBook id={self.id} title={self.title}>"


class BookLocation(Base):
    """A place in a book's story, ordered along the narrative."""

    __tablename__ = "book_locations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    book_id = Column(Integer, ForeignKey("aozora_books.id", ondelete="CASCADE"), nullable=False, index=True)
    location_name = Column(String(255), nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    description = Column(Text, nullable=True)
    character_name = Column(String(255), nullable=True)
    order_index = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("ix_book_locations_book_order", "book_id", "order_index"),
    )

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "book_id": self.book_id,
            "location_name": self.location_name,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "description": self.description or "",
            "character_name": self.character_name or "",
            "order_index": self.order_index,
        }


class BookshelfEntry(Base):
    """One book on a user's personal shelf."""

    __tablename__ = "bookshelves"

    STATUSES = ("want_to_read", "reading", "read", "paused")

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    author = Column(String(255), nullable=False, default="")
    cover_url = Column(String(500), nullable=True)
    status = Column(String(16), nullable=False, default="want_to_read")
    rating = Column(Integer, nullable=True)
    memo = Column(Text, nullable=True)
    page_count = Column(Integer, nullable=True)
    started_date = Column(Date, nullable=True)
    finished_date = Column(Date, nullable=True)
    tags = Column(Text, nullable=True)  # JSON array
    aozora_book_id = Column(String(64), nullable=True)
    preview_link = Column(String(500), nullable=True)
    buy_link = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_bookshelves_user_status", "user_id", "status"),
    )

    def tag_list(self) -> List[str]:
        return load_json_list(self.tags)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "author": self.author,
            "cover_url": self.cover_url,
            "status": self.status,
            "rating": self.rating,
            "memo": self.memo,
            "page_count": self.page_count,
            "started_date": _iso(self.started_date),
            "finished_date": _iso(self.finished_date),
            "tags": self.tag_list(),
            "aozora_book_id": self.aozora_book_id,
            "preview_link": self.preview_link,
            "buy_link": self.buy_link,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<BookshelfEntry id={self.id} user_id={self.user_id} status={self.status}>"


class DictionaryWord(Base):
    """Curated glossary entry for period vocabulary (Meiji-era vs modern meaning)."""

    __tablename__ = "word_dictionary"

    id = Column(Integer, primary_key=True, autoincrement=True)
    word = Column(String(64), nullable=False, unique=True, index=True)
    reading = Column(String(128), nullable=False, default="")
    old_meaning = Column(Text, nullable=True)
    modern_meaning = Column(Text, nullable=True)
    example = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "word": self.word,
            "reading": self.reading or "",
            "old_meaning": self.old_meaning or "",
            "modern_meaning": self.modern_meaning or "",
            "example": self.example or "",
            "notes": self.notes or "",
            "created_at": _iso(self.created_at),
        }


class VocabularyEntry(Base):
    """A word a user saved while reading."""

    __tablename__ = "user_vocabulary"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    word = Column(String(64), nullable=False)
    reading = Column(String(128), nullable=True)
    old_meaning = Column(Text, nullable=True)
    modern_meaning = Column(Text, nullable=True)
    example = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    book_id = Column(String(64), nullable=True)
    book_title = Column(String(255), nullable=True)
    saved_date = Column(DateTime, default=utcnow, nullable=False)
    review_count = Column(Integer, nullable=False, default=0)
    last_reviewed_at = Column(DateTime, nullable=True)
    is_mastered = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("user_id", "word", name="uq_user_vocabulary_word"),
    )

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "word": self.word,
            "reading": self.reading or "",
            "old_meaning": self.old_meaning or "",
            "modern_meaning": self.modern_meaning or "",
            "example": self.example or "",
            "notes": self.notes or "",
            "book_id": self.book_id,
            "book_title": self.book_title,
            "saved_date": _iso(self.saved_date),
            "review_count": self.review_count or 0,
            "last_reviewed_at": _iso(self.last_reviewed_at),
            "is_mastered": bool(self.is_mastered),
        }


__all__ = [
    "Base",
    "utcnow",
    "load_json_list",
    "dump_json_list",
    "Profile",
    "AozoraBook",
    "BookLocation",
    "BookshelfEntry",
    "DictionaryWord",
    "VocabularyEntry",
]
