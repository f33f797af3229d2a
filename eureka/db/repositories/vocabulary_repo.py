"""Repository helpers for per-user saved vocabulary."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from eureka.db import app_session
from eureka.db.models import VocabularyEntry, utcnow


class VocabularyExistsError(Exception):
    """Raised when the user already saved the word."""


def list_entries(user_id: str) -> List[VocabularyEntry]:
    with app_session() as session:
        return (
            session.query(VocabularyEntry)
            .filter(VocabularyEntry.user_id == user_id)
            .order_by(VocabularyEntry.saved_date.desc(), VocabularyEntry.id.desc())
            .all()
        )


def get_entry(user_id: str, entry_id: int) -> Optional[VocabularyEntry]:
    with app_session() as session:
        return (
            session.query(VocabularyEntry)
            .filter(VocabularyEntry.id == entry_id, VocabularyEntry.user_id == user_id)
            .one_or_none()
        )


def create_entry(user_id: str, word: str, **fields) -> VocabularyEntry:
    entry = VocabularyEntry(user_id=user_id, word=word, **fields)
    try:
        with app_session() as session:
            session.add(entry)
    except IntegrityError as exc:
        raise VocabularyExistsError("Word already saved") from exc
    return entry


def toggle_mastered(user_id: str, entry_id: int, *, now: Optional[datetime] = None) -> Optional[VocabularyEntry]:
    with app_session() as session:
        entry = (
            session.query(VocabularyEntry)
            .filter(VocabularyEntry.id == entry_id, VocabularyEntry.user_id == user_id)
            .one_or_none()
        )
        if not entry:
            return None
        entry.is_mastered = not bool(entry.is_mastered)
        entry.last_reviewed_at = now or utcnow()
        session.flush()
        return entry


def record_review(user_id: str, entry_id: int, *, now: Optional[datetime] = None) -> Optional[VocabularyEntry]:
    with app_session() as session:
        entry = (
            session.query(VocabularyEntry)
            .filter(VocabularyEntry.id == entry_id, VocabularyEntry.user_id == user_id)
            .one_or_none()
        )
        if not entry:
            return None
        entry.review_count = (entry.review_count or 0) + 1
        entry.last_reviewed_at = now or utcnow()
        session.flush()
        return entry


def delete_entry(user_id: str, entry_id: int) -> bool:
    with app_session() as session:
        deleted = (
            session.query(VocabularyEntry)
            .filter(VocabularyEntry.id == entry_id, VocabularyEntry.user_id == user_id)
            .delete(synchronize_session=False)
        )
        return bool(deleted)


def count_entries(user_id: str) -> int:
    with app_session() as session:
        return int(
            session.query(func.count(VocabularyEntry.id))
            .filter(VocabularyEntry.user_id == user_id)
            .scalar()
            or 0
        )


__all__ = [
    "VocabularyExistsError",
    "list_entries",
    "get_entry",
    "create_entry",
    "toggle_mastered",
    "record_review",
    "delete_entry",
    "count_entries",
]
