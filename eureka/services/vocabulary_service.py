"""Per-user vocabulary list built from reader lookups."""
from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from eureka.db.models import utcnow
from eureka.db.repositories import dictionary_repo, vocabulary_repo
from eureka.services.dictionary_service import normalize_selection
from eureka.utils.logging import get_logger
from eureka.utils.text import clean_text

LOG = get_logger("vocabulary_service")

STATUS_FILTERS = ("all", "mastered", "learning")
_COPIED_FIELDS = ("reading", "old_meaning", "modern_meaning", "example", "notes")


class VocabularyValidationError(ValueError):
    """Raised when a vocabulary request is invalid."""


class VocabularyExistsError(RuntimeError):
    """Raised when the user already saved the word."""


class VocabularyNotFoundError(RuntimeError):
    """Raised when the entry does not exist for the user."""


def save_word(
    user_id: str,
    word: str,
    book_id: Optional[str] = None,
    book_title: Optional[str] = None,
) -> Dict[str, Any]:
    try:
        text = normalize_selection(word)
    except ValueError:
        raise VocabularyValidationError("word_required")
    fields: Dict[str, Any] = {
        "book_id": str(book_id) if book_id not in (None, "") else None,
        "book_title": clean_text(book_title) or None,
    }
    known = dictionary_repo.get_by_word(text)
    if known:
        for key in _COPIED_FIELDS:
            fields[key] = getattr(known, key)
    try:
        entry = vocabulary_repo.create_entry(user_id, text, **fields)
    except vocabulary_repo.VocabularyExistsError as exc:
        raise VocabularyExistsError("word_already_saved") from exc
    LOG.info("Vocabulary saved user_id=%s word=%s known=%s", user_id, text, bool(known))
    return entry.as_dict()


def _matches(entry, query: str) -> bool:
    haystacks = (entry.word, entry.reading, entry.old_meaning, entry.modern_meaning)
    return any(query in (h or "").lower() for h in haystacks)


def list_words(
    user_id: str, query: Optional[str] = None, status: str = "all"
) -> List[Dict[str, Any]]:
    status = (status or "all").strip().lower()
    if status not in STATUS_FILTERS:
        raise VocabularyValidationError("invalid_status")
    entries = vocabulary_repo.list_entries(user_id)
    if status == "mastered":
        entries = [e for e in entries if e.is_mastered]
    elif status == "learning":
        entries = [e for e in entries if not e.is_mastered]
    q = clean_text(query).lower()
    if q:
        entries = [e for e in entries if _matches(e, q)]
    return [e.as_dict() for e in entries]


def vocabulary_stats(user_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    entries = vocabulary_repo.list_entries(user_id)
    cutoff = (now or utcnow()) - timedelta(days=7)
    mastered = sum(1 for e in entries if e.is_mastered)
    by_book = Counter(e.book_title for e in entries if e.book_title)
    return {
        "total": len(entries),
        "this_week": sum(1 for e in entries if e.saved_date and e.saved_date >= cutoff),
        "mastered": mastered,
        "learning": len(entries) - mastered,
        "by_book": dict(by_book),
    }


def toggle_mastered(user_id: str, entry_id: int) -> Dict[str, Any]:
    entry = vocabulary_repo.toggle_mastered(user_id, entry_id)
    if entry is None:
        raise VocabularyNotFoundError("entry_not_found")
    return entry.as_dict()


def record_review(user_id: str, entry_id: int) -> Dict[str, Any]:
    entry = vocabulary_repo.record_review(user_id, entry_id)
    if entry is None:
        raise VocabularyNotFoundError("entry_not_found")
    return entry.as_dict()


def delete_word(user_id: str, entry_id: int) -> None:
    if not vocabulary_repo.delete_entry(user_id, entry_id):
        raise VocabularyNotFoundError("entry_not_found")


def count_words(user_id: str) -> int:
    return vocabulary_repo.count_entries(user_id)


__all__ = [
    "STATUS_FILTERS",
    "VocabularyValidationError",
    "VocabularyExistsError",
    "VocabularyNotFoundError",
    "save_word",
    "list_words",
    "vocabulary_stats",
    "toggle_mastered",
    "record_review",
    "delete_word",
    "count_words",
]
