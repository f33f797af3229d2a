"""Reader word lookup and admin maintenance of the period-vocabulary dictionary."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from eureka.db.repositories import dictionary_repo
from eureka.utils.logging import get_logger
from eureka.utils.text import clean_text

LOG = get_logger("dictionary_service")

MAX_SELECTION_LENGTH = 19
MISSING_OLD_MEANING = "辞書に登録されていません"
MISSING_NOTES = "この言葉はまだ辞書に追加されていません"
_TEXT_FIELDS = ("old_meaning", "modern_meaning", "example", "notes")


class DictionaryValidationError(ValueError):
    """Raised when a lookup selection or dictionary payload is invalid."""


class DictionaryWordExistsError(RuntimeError):
    """Raised when the word is already in the dictionary."""


class DictionaryWordNotFoundError(RuntimeError):
    """Raised when a dictionary id does not exist."""


def normalize_selection(selection: Optional[str]) -> str:
    text = clean_text(selection)
    if not text or len(text) > MAX_SELECTION_LENGTH:
        raise DictionaryValidationError("invalid_selection")
    return text


def lookup_word(selection: Optional[str]) -> Dict[str, Any]:
    word = normalize_selection(selection)
    record = dictionary_repo.get_by_word(word)
    if record:
        payload = record.as_dict()
        payload["found"] = True
        return payload
    LOG.debug("Dictionary miss word=%s", word)
    return {
        "word": word,
        "reading": "",
        "old_meaning": MISSING_OLD_MEANING,
        "modern_meaning": "",
        "example": "",
        "notes": MISSING_NOTES,
        "found": False,
    }


def list_words(query: Optional[str] = None) -> List[Dict[str, Any]]:
    q = clean_text(query) or None
    return [w.as_dict() for w in dictionary_repo.list_words(q)]


def _text_fields(payload: Dict[str, Any]) -> Dict[str, Optional[str]]:
    out: Dict[str, Optional[str]] = {}
    for key in _TEXT_FIELDS:
        if key in payload:
            value = clean_text(payload.get(key))
            out[key] = value or None
    return out


def create_word(payload: Dict[str, Any]) -> Dict[str, Any]:
    word = clean_text(payload.get("word"))
    reading = clean_text(payload.get("reading"))
    if not word:
        raise DictionaryValidationError("word_required")
    if not reading:
        raise DictionaryValidationError("reading_required")
    try:
        record = dictionary_repo.create_word(word, reading, **_text_fields(payload))
    except dictionary_repo.DictionaryWordExistsError as exc:
        raise DictionaryWordExistsError("word_exists") from exc
    LOG.info("Dictionary word added id=%s word=%s", record.id, word)
    return record.as_dict()


def update_word(word_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
    fields: Dict[str, Any] = _text_fields(payload)
    if "word" in payload:
        word = clean_text(payload.get("word"))
        if not word:
            raise DictionaryValidationError("word_required")
        fields["word"] = word
    if "reading" in payload:
        reading = clean_text(payload.get("reading"))
        if not reading:
            raise DictionaryValidationError("reading_required")
        fields["reading"] = reading
    try:
        record = dictionary_repo.update_word(word_id, fields)
    except dictionary_repo.DictionaryWordExistsError as exc:
        raise DictionaryWordExistsError("word_exists") from exc
    if record is None:
        raise DictionaryWordNotFoundError("word_not_found")
    return record.as_dict()


def delete_word(word_id: int) -> None:
    if not dictionary_repo.delete_word(word_id):
        raise DictionaryWordNotFoundError("word_not_found")
    LOG.info("Dictionary word deleted id=%s", word_id)


__all__ = [
    "DictionaryValidationError",
    "DictionaryWordExistsError",
    "DictionaryWordNotFoundError",
    "normalize_selection",
    "lookup_word",
    "list_words",
    "create_word",
    "update_word",
    "delete_word",
]
