"""Repository helpers for Aozora books and their story locations."""
from __future__ import annotations

from typing import List, Optional, Sequence

from sqlalchemy import func

from eureka.db import app_session
from eureka.db.models import AozoraBook, BookLocation


def list_aozora_books() -> List[AozoraBook]:
    with app_session() as session:
        return (
            session.query(AozoraBook)
            .order_by(AozoraBook.created_at.desc(), AozoraBook.id.desc())
            .all()
        )


def get_aozora_book(book_id: int) -> Optional[AozoraBook]:
    with app_session() as session:
        return session.query(AozoraBook).filter(AozoraBook.id == book_id).one_or_none()


def find_aozora_book(title: str, author: str) -> Optional[AozoraBook]:
    with app_session() as session:
        return (
            session.query(AozoraBook)
            .filter(AozoraBook.title == title, AozoraBook.author == author)
            .first()
        )


def create_aozora_book(
    title: str,
    author: str,
    content: str,
    *,
    cover_url: Optional[str] = None,
    description: Optional[str] = None,
    is_free: bool = True,
) -> AozoraBook:
    book = AozoraBook(
        title=title,
        author=author,
        content=content,
        cover_url=cover_url,
        description=description,
        is_free=is_free,
    )
    with app_session() as session:
        session.add(book)
    return book


def list_locations(book_id: int) -> List[BookLocation]:
    with app_session() as session:
        return (
            session.query(BookLocation)
            .filter(BookLocation.book_id == book_id)
            .order_by(BookLocation.order_index.asc(), BookLocation.id.asc())
            .all()
        )


def get_location(location_id: int) -> Optional[BookLocation]:
    with app_session() as session:
        return session.query(BookLocation).filter(BookLocation.id == location_id).one_or_none()


def create_location(
    book_id: int,
    location_name: str,
    latitude: float,
    longitude: float,
    *,
    description: Optional[str] = None,
    character_name: Optional[str] = None,
    order_index: Optional[int] = None,
) -> BookLocation:
    with app_session() as session:
        if order_index is None:
            current = (
                session.query(func.max(BookLocation.order_index))
                .filter(BookLocation.book_id == book_id)
                .scalar()
            )
            order_index = 0 if current is None else int(current) + 1
        location = BookLocation(
            book_id=book_id,
            location_name=location_name,
            latitude=latitude,
            longitude=longitude,
            description=description,
            character_name=character_name,
            order_index=order_index,
        )
        session.add(location)
        session.flush()
        return location


def delete_location(location_id: int) -> bool:
    with app_session() as session:
        location = session.query(BookLocation).filter(BookLocation.id == location_id).one_or_none()
        if not location:
            return False
        session.delete(location)
        return True


def reorder_locations(book_id: int, ordered_ids: Sequence[int]) -> List[BookLocation]:
    """Assign order_index 0..n-1 following ``ordered_ids``."""
    with app_session() as session:
        rows = {
            row.id: row
            for row in session.query(BookLocation).filter(BookLocation.book_id == book_id).all()
        }
        for index, location_id in enumerate(ordered_ids):
            rows[location_id].order_index = index
        session.flush()
        return sorted(rows.values(), key=lambda r: (r.order_index, r.id))


__all__ = [
    "list_aozora_books",
    "get_aozora_book",
    "find_aozora_book",
    "create_aozora_book",
    "list_locations",
    "get_location",
    "create_location",
    "delete_location",
    "reorder_locations",
]
