"""Repository helpers for personal bookshelf entries."""
from __future__ import annotations

from typing import Dict, List, Optional

from sqlalchemy import func

from eureka.db import app_session
from eureka.db.models import BookshelfEntry


def list_entries(user_id: str, status: Optional[str] = None) -> List[BookshelfEntry]:
    with app_session() as session:
        query = session.query(BookshelfEntry).filter(BookshelfEntry.user_id == user_id)
        if status:
            query = query.filter(BookshelfEntry.status == status)
        return query.order_by(BookshelfEntry.created_at.desc(), BookshelfEntry.id.desc()).all()


def get_entry(user_id: str, entry_id: int) -> Optional[BookshelfEntry]:
    with app_session() as session:
        return (
            session.query(BookshelfEntry)
            .filter(BookshelfEntry.id == entry_id, BookshelfEntry.user_id == user_id)
            .one_or_none()
        )


def find_entry(user_id: str, title: str, author: str) -> Optional[BookshelfEntry]:
    with app_session() as session:
        return (
            session.query(BookshelfEntry)
            .filter(
                BookshelfEntry.user_id == user_id,
                BookshelfEntry.title == title,
                BookshelfEntry.author == author,
            )
            .first()
        )


def create_entry(user_id: str, **fields) -> BookshelfEntry:
    entry = BookshelfEntry(user_id=user_id, **fields)
    with app_session() as session:
        session.add(entry)
    return entry


def update_entry(user_id: str, entry_id: int, fields: dict) -> Optional[BookshelfEntry]:
    with app_session() as session:
        entry = (
            session.query(BookshelfEntry)
            .filter(BookshelfEntry.id == entry_id, BookshelfEntry.user_id == user_id)
            .one_or_none()
        )
        if not entry:
            return None
        for key, value in fields.items():
            setattr(entry, key, value)
        session.flush()
        return entry


def delete_entry(user_id: str, entry_id: int) -> bool:
    with app_session() as session:
        deleted = (
            session.query(BookshelfEntry)
            .filter(BookshelfEntry.id == entry_id, BookshelfEntry.user_id == user_id)
            .delete(synchronize_session=False)
        )
        return bool(deleted)


def count_by_status(user_id: str) -> Dict[str, int]:
    with app_session() as session:
        rows = (
            session.query(BookshelfEntry.status, func.count(BookshelfEntry.id))
            .filter(BookshelfEntry.user_id == user_id)
            .group_by(BookshelfEntry.status)
            .all()
        )
        return {status: int(count) for status, count in rows}


__all__ = [
    "list_entries",
    "get_entry",
    "find_entry",
    "create_entry",
    "update_entry",
    "delete_entry",
    "count_by_status",
]
