"""Shared helpers for JSON blueprints: error payloads and access guards."""
from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from flask import jsonify, request
from flask_babel import lazy_gettext as _

from eureka.utils import ensure_admin, ensure_login, PermissionError

_ERROR_MESSAGES = {
    "login_required": _("Please sign in to continue."),
    "admin_required": _("Administrator access is required."),
    "invalid_payload": _("Request body must be a JSON object."),
    "query_required": _("Enter a search term."),
    "api_key_missing": _("The API key is not configured."),
    "http_error": _("The upstream service request failed."),
    "invalid_json": _("The upstream service returned invalid JSON."),
    "remote_error": _("The upstream service reported an error."),
    "not_found": _("Nothing was found."),
    "title_required": _("Title is required."),
    "invalid_status": _("Status is not supported."),
    "book_already_on_shelf": _("This book is already on your bookshelf."),
    "entry_not_found": _("Entry could not be found."),
    "invalid_rating": _("Rating must be between 1 and 5."),
    "invalid_page_count": _("Page count must be zero or more."),
    "invalid_started_date": _("Enter the start date as YYYY-MM-DD."),
    "invalid_finished_date": _("Enter the finish date as YYYY-MM-DD."),
    "finished_before_started": _("Finish date must be on or after the start date."),
    "invalid_tags": _("Tags must be a list."),
    "tag_required": _("Tag is required."),
    "tag_exists": _("This tag is already added."),
    "book_not_found": _("Book could not be found."),
    "category_not_found": _("Category could not be found."),
    "invalid_selection": _("Select between 1 and 19 characters."),
    "word_required": _("Word is required."),
    "reading_required": _("Reading is required."),
    "word_exists": _("This word is already in the dictionary."),
    "word_not_found": _("Word could not be found."),
    "word_already_saved": _("This word is already in your vocabulary."),
    "location_name_required": _("Location name is required."),
    "invalid_coordinates": _("Latitude or longitude is out of range."),
    "location_not_found": _("Location could not be found."),
    "invalid_order": _("The order must list every location of the book exactly once."),
    "synopsis_required": _("Synopsis is required."),
    "chapter_required": _("Add at least one chapter."),
    "chapter_content_required": _("Every chapter needs content."),
    "invalid_chapter": _("Chapter data is invalid."),
    "invalid_genre": _("Genre is not supported."),
    "invalid_sort": _("Sort option is not supported."),
    "invalid_tab": _("Tab is not supported."),
    "story_not_found": _("Story could not be found."),
    "story_private": _("This story is not published."),
    "not_story_owner": _("Only the author can change this story."),
    "content_required": _("Comment cannot be empty."),
    "content_too_long": _("Comment is too long."),
    "invalid_parent": _("The comment you are replying to is not on this story."),
    "comment_not_found": _("Comment could not be found."),
    "not_comment_author": _("Only the author or an administrator can delete this comment."),
    "cannot_follow_self": _("You cannot follow yourself."),
    "author_required": _("Author is required."),
    "profile_not_found": _("Profile could not be found."),
    "username_required": _("Username is required."),
    "username_too_long": _("Username is too long."),
    "invalid_reading_goal": _("Reading goal must be zero or more."),
    "invalid_favorite_kind": _("Favorites must be genres or authors."),
    "favorite_required": _("Favorite value is required."),
    "file_required": _("Choose an image to upload."),
    "file_too_large": _("Images must be 5 MB or smaller."),
    "invalid_image": _("The file is not a supported image."),
    "invalid_crop": _("Crop area is invalid."),
    "crop_out_of_bounds": _("Crop area lies outside the image."),
    "invalid_size": _("Avatar size is out of range."),
    "unsupported_language": _("Selected language is not supported."),
}


def error_message_for(code: str) -> Optional[str]:
    message = _ERROR_MESSAGES.get(code)
    return str(message) if message is not None else None


def json_error(
    code: str,
    status: int = 400,
    *,
    message: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
):
    payload: Dict[str, Any] = {"error": code}
    final_message = message or error_message_for(code)
    if final_message:
        payload["message"] = final_message
    if details is not None:
        payload["details"] = details
    return jsonify(payload), status


def upstream_error(payload: Dict[str, Any]):
    """Map an ``(ok=False, payload)`` client result onto an HTTP error."""
    code = str(payload.get("error") or "http_error")
    if code == "query_required":
        return json_error(code, 400)
    if code == "api_key_missing":
        return json_error(code, 500)
    if code == "not_found":
        return json_error(code, 404)
    details = {k: v for k, v in payload.items() if k != "error"} or None
    return json_error(code, 502, message=error_message_for(code) or error_message_for("http_error"), details=details)


def require_login_json() -> Tuple[Optional[str], Any]:
    """Return ``(user_id, None)`` or ``(None, error_response)``."""
    try:
        return ensure_login(), None
    except PermissionError:
        return None, json_error("login_required", 401)


def require_admin_json():
    user_id, denied = require_login_json()
    if denied:
        return denied
    try:
        ensure_admin()
    except PermissionError:
        return json_error("admin_required", 403)
    return True


def json_body() -> Optional[Dict[str, Any]]:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    return payload if isinstance(payload, dict) else None


def int_arg(name: str, default: int = 0) -> int:
    try:
        return int(request.args.get(name, default))
    except (TypeError, ValueError):
        return default


__all__ = [
    "error_message_for",
    "json_error",
    "upstream_error",
    "require_login_json",
    "require_admin_json",
    "json_body",
    "int_arg",
]
