"""Repository helpers for the curated word dictionary."""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from eureka.db import app_session
from eureka.db.models import DictionaryWord


class DictionaryWordExistsError(Exception):
    """Raised when inserting a word that is already in the dictionary."""


def get_by_word(word: str) -> Optional[DictionaryWord]:
    with app_session() as session:
        return session.query(DictionaryWord).filter(DictionaryWord.word == word).one_or_none()


def get_word(word_id: int) -> Optional[DictionaryWord]:
    with app_session() as session:
        return session.query(DictionaryWord).filter(DictionaryWord.id == word_id).one_or_none()


def list_words(query: Optional[str] = None) -> List[DictionaryWord]:
    with app_session() as session:
        q = session.query(DictionaryWord)
        if query:
            pattern = f"%{query}%"
            q = q.filter(
                or_(
                    DictionaryWord.word.like(pattern),
                    DictionaryWord.reading.like(pattern),
                    DictionaryWord.old_meaning.like(pattern),
                    DictionaryWord.modern_meaning.like(pattern),
                )
            )
        return q.order_by(DictionaryWord.created_at.desc(), DictionaryWord.id.desc()).all()


def create_word(word: str, reading: str, **fields) -> DictionaryWord:
    record = DictionaryWord(word=word, reading=reading, **fields)
    try:
        with app_session() as session:
            session.add(record)
    except IntegrityError as exc:
        raise DictionaryWordExistsError("Word already in dictionary") from exc
    return record


def update_word(word_id: int, fields: dict) -> Optional[DictionaryWord]:
    try:
        with app_session() as session:
            record = session.query(DictionaryWord).filter(DictionaryWord.id == word_id).one_or_none()
            if not record:
                return None
            for key, value in fields.items():
                setattr(record, key, value)
            session.flush()
            return record
    except IntegrityError as exc:
        raise DictionaryWordExistsError("Word already in dictionary") from exc


def delete_word(word_id: int) -> bool:
    with app_session() as session:
        deleted = (
            session.query(DictionaryWord)
            .filter(DictionaryWord.id == word_id)
            .delete(synchronize_session=False)
        )
        return bool(deleted)


__all__ = [
    "DictionaryWordExistsError",
    "get_by_word",
    "get_word",
    "list_words",
    "create_word",
    "update_word",
    "delete_word",
]
