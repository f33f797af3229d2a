"""Personal bookshelf orchestration."""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from eureka.db.models import BookshelfEntry, dump_json_list
from eureka.db.repositories import bookshelf_repo, vocabulary_repo
from eureka.utils.logging import get_logger
from eureka.utils.text import clean_text

LOG = get_logger("bookshelf_service")

STATUSES = BookshelfEntry.STATUSES
DEFAULT_STATUS = "want_to_read"


class BookshelfValidationError(ValueError):
    """Raised when a shelf payload fails validation."""


class BookshelfEntryExistsError(RuntimeError):
    """Raised when the same title/author is already on the user's shelf."""


class BookshelfEntryNotFoundError(RuntimeError):
    """Raised when the entry does not exist or belongs to another user."""


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _validate_status(status: Any) -> str:
    value = status.strip() if isinstance(status, str) else status
    if value not in STATUSES:
        raise BookshelfValidationError("invalid_status")
    return value


def _parse_date(value: Any, code: str) -> Optional[date]:
    if value in (None, ""):
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        raise BookshelfValidationError(code)


def _normalize_tags(values: Any) -> List[str]:
    if values is None:
        return []
    if not isinstance(values, (list, tuple)):
        raise BookshelfValidationError("invalid_tags")
    tags: List[str] = []
    for raw in values:
        tag = str(raw).strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def add_book(user_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    title = _clean(payload.get("title"))
    if not title:
        raise BookshelfValidationError("title_required")
    author = _clean(payload.get("author")) or ""
    status = _validate_status(payload.get("status") or DEFAULT_STATUS)
    if bookshelf_repo.find_entry(user_id, title, author):
        raise BookshelfEntryExistsError("book_already_on_shelf")
    aozora_book_id = _clean(payload.get("aozora_book_id"))
    if aozora_book_id is None and payload.get("isPublicDomain"):
        aozora_book_id = _clean(payload.get("id"))
    entry = bookshelf_repo.create_entry(
        user_id,
        title=title,
        author=author,
        cover_url=_clean(payload.get("cover_url")),
        status=status,
        aozora_book_id=aozora_book_id,
        preview_link=_clean(payload.get("preview_link") or payload.get("previewLink")),
        buy_link=_clean(payload.get("buy_link") or payload.get("buyLink")),
    )
    LOG.info("Shelf add user_id=%s entry_id=%s status=%s", user_id, entry.id, status)
    return entry.as_dict()


def list_books(user_id: str, status: Optional[str] = None) -> List[Dict[str, Any]]:
    if status:
        status = _validate_status(status)
    return [e.as_dict() for e in bookshelf_repo.list_entries(user_id, status)]


def shelf_summary(user_id: str) -> Dict[str, int]:
    counts = bookshelf_repo.count_by_status(user_id)
    summary = {status: counts.get(status, 0) for status in STATUSES}
    summary["total"] = sum(summary.values())
    summary["vocabulary"] = vocabulary_repo.count_entries(user_id)
    return summary


def _get_owned(user_id: str, entry_id: int) -> BookshelfEntry:
    entry = bookshelf_repo.get_entry(user_id, entry_id)
    if not entry:
        raise BookshelfEntryNotFoundError("entry_not_found")
    return entry


def update_book(user_id: str, entry_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
    entry = _get_owned(user_id, entry_id)
    fields: Dict[str, Any] = {}
    if "status" in payload:
        fields["status"] = _validate_status(payload.get("status"))
    if "rating" in payload:
        rating = payload.get("rating")
        if rating in (None, ""):
            fields["rating"] = None
        else:
            if isinstance(rating, bool):
                raise BookshelfValidationError("invalid_rating")
            try:
                rating = int(rating)
            except (TypeError, ValueError):
                raise BookshelfValidationError("invalid_rating")
            if not 1 <= rating <= 5:
                raise BookshelfValidationError("invalid_rating")
            fields["rating"] = rating
    if "memo" in payload:
        fields["memo"] = _clean(payload.get("memo"))
    if "page_count" in payload:
        pages = payload.get("page_count")
        if pages in (None, ""):
            fields["page_count"] = None
        else:
            try:
                pages = int(pages)
            except (TypeError, ValueError):
                raise BookshelfValidationError("invalid_page_count")
            if pages < 0:
                raise BookshelfValidationError("invalid_page_count")
            fields["page_count"] = pages
    if "started_date" in payload:
        fields["started_date"] = _parse_date(payload.get("started_date"), "invalid_started_date")
    if "finished_date" in payload:
        fields["finished_date"] = _parse_date(payload.get("finished_date"), "invalid_finished_date")
    started = fields.get("started_date", entry.started_date)
    finished = fields.get("finished_date", entry.finished_date)
    if started and finished and finished < started:
        raise BookshelfValidationError("finished_before_started")
    if "tags" in payload:
        fields["tags"] = dump_json_list(_normalize_tags(payload.get("tags")))
    if not fields:
        return entry.as_dict()
    updated = bookshelf_repo.update_entry(user_id, entry_id, fields)
    if updated is None:  # pragma: no cover - deleted concurrently
        raise BookshelfEntryNotFoundError("entry_not_found")
    return updated.as_dict()


def add_tag(user_id: str, entry_id: int, tag: str) -> Dict[str, Any]:
    entry = _get_owned(user_id, entry_id)
    value = clean_text(tag)
    if not value:
        raise BookshelfValidationError("tag_required")
    tags = entry.tag_list()
    if value in tags:
        raise BookshelfValidationError("tag_exists")
    tags.append(value)
    updated = bookshelf_repo.update_entry(user_id, entry_id, {"tags": dump_json_list(tags)})
    return updated.as_dict()  # type: ignore[union-attr]


def remove_tag(user_id: str, entry_id: int, tag: str) -> Dict[str, Any]:
    entry = _get_owned(user_id, entry_id)
    value = clean_text(tag)
    tags = [t for t in entry.tag_list() if t != value]
    updated = bookshelf_repo.update_entry(user_id, entry_id, {"tags": dump_json_list(tags)})
    return updated.as_dict()  # type: ignore[union-attr]


def delete_book(user_id: str, entry_id: int) -> None:
    if not bookshelf_repo.delete_entry(user_id, entry_id):
        raise BookshelfEntryNotFoundError("entry_not_found")
    LOG.info("Shelf delete user_id=%s entry_id=%s", user_id, entry_id)


__all__ = [
    "STATUSES",
    "BookshelfValidationError",
    "BookshelfEntryExistsError",
    "BookshelfEntryNotFoundError",
    "add_book",
    "list_books",
    "shelf_summary",
    "update_book",
    "add_tag",
    "remove_tag",
    "delete_book",
]
