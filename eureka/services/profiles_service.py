"""Profile orchestration: creation, editing and reading overview."""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from eureka.db.models import dump_json_list, load_json_list
from eureka.db.repositories import bookshelf_repo, profiles_repo
from eureka.utils.logging import get_logger
from eureka.utils.text import clean_text

LOG = get_logger("profiles_service")

DEFAULT_USERNAME = "匿名"
DEFAULT_READING_LEVEL = "初心者"
FAVORITE_KINDS = {"genres": "favorite_genres", "authors": "favorite_authors"}
_OPTIONAL_TEXT_FIELDS = (
    "bio",
    "author_bio",
    "age_range",
    "gender",
    "location",
    "twitter_url",
    "instagram_url",
    "facebook_url",
)
_USERNAME_MAX = 100


class ProfileValidationError(ValueError):
    """Raised when profile payload fails validation."""


class ProfileNotFoundError(RuntimeError):
    """Raised when no profile exists for the user id."""


def avatar_display_url(username: Optional[str], avatar_url: Optional[str]) -> str:
    """Stored avatar, or a generated initials image keyed on the username."""
    if avatar_url:
        return avatar_url
    name = quote(username or DEFAULT_USERNAME, safe="")
    return f"https://ui-avatars.com/api/?name={name}&background=2563eb&color=fff&size=200"


def ensure_profile(user_id: str, username: Optional[str] = None) -> Dict[str, Any]:
    existing = profiles_repo.get_profile(user_id)
    if existing:
        return existing.as_dict()
    name = clean_text(username) or DEFAULT_USERNAME
    try:
        profile = profiles_repo.create_profile(user_id, name[:_USERNAME_MAX])
    except profiles_repo.ProfileExistsError:
        # concurrent first request created it
        profile = profiles_repo.get_profile(user_id)
        if profile is None:  # pragma: no cover
            raise
    else:
        LOG.info("Created profile user_id=%s", user_id)
    return profile.as_dict()


def get_profile(user_id: str) -> Dict[str, Any]:
    profile = profiles_repo.get_profile(user_id)
    if not profile:
        raise ProfileNotFoundError("profile_not_found")
    return profile.as_dict()


def get_profile_overview(user_id: str) -> Dict[str, Any]:
    profile = get_profile(user_id)
    counts = bookshelf_repo.count_by_status(user_id)
    return {
        "profile": profile,
        "books_read": counts.get("read", 0),
        "books_reading": counts.get("reading", 0),
        "avatar_display_url": avatar_display_url(profile["username"], profile["avatar_url"]),
    }


def _dedupe(values: Any, field: str) -> List[str]:
    if values is None:
        return []
    if not isinstance(values, (list, tuple)):
        raise ProfileValidationError(f"invalid_{field}")
    seen: List[str] = []
    for raw in values:
        value = str(raw).strip()
        if value and value not in seen:
            seen.append(value)
    return seen


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def update_profile(user_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    if not profiles_repo.get_profile(user_id):
        raise ProfileNotFoundError("profile_not_found")
    fields: Dict[str, Any] = {}
    username = clean_text(payload.get("username"))
    if not username:
        raise ProfileValidationError("username_required")
    if len(username) > _USERNAME_MAX:
        raise ProfileValidationError("username_too_long")
    fields["username"] = username
    for key in _OPTIONAL_TEXT_FIELDS:
        if key in payload:
            fields[key] = _optional_text(payload.get(key))
    if "reading_level" in payload:
        fields["reading_level"] = _optional_text(payload.get("reading_level")) or DEFAULT_READING_LEVEL
    if "reading_goal" in payload:
        raw_goal = payload.get("reading_goal")
        if raw_goal in (None, ""):
            goal = 0
        else:
            try:
                goal = int(raw_goal)
            except (TypeError, ValueError):
                raise ProfileValidationError("invalid_reading_goal")
        if goal < 0 or isinstance(raw_goal, bool):
            raise ProfileValidationError("invalid_reading_goal")
        fields["reading_goal"] = goal
    for kind, column in FAVORITE_KINDS.items():
        if column in payload:
            fields[column] = dump_json_list(_dedupe(payload.get(column), column))
    if "author_social_links" in payload:
        links = payload.get("author_social_links")
        if links in (None, "", {}):
            fields["author_social_links"] = None
        elif isinstance(links, dict):
            cleaned = {str(k): str(v).strip() for k, v in links.items() if v and str(v).strip()}
            fields["author_social_links"] = json.dumps(cleaned, ensure_ascii=False) if cleaned else None
        else:
            raise ProfileValidationError("invalid_author_social_links")
    profile = profiles_repo.update_profile(user_id, fields)
    if profile is None:  # pragma: no cover - deleted between calls
        raise ProfileNotFoundError("profile_not_found")
    LOG.debug("Updated profile user_id=%s fields=%s", user_id, sorted(fields))
    return profile.as_dict()


def _favorite_column(kind: str) -> str:
    column = FAVORITE_KINDS.get(clean_text(kind).lower())
    if not column:
        raise ProfileValidationError("invalid_favorite_kind")
    return column


def add_favorite(user_id: str, kind: str, value: str) -> List[str]:
    column = _favorite_column(kind)
    item = clean_text(value)
    if not item:
        raise ProfileValidationError("favorite_required")
    profile = profiles_repo.get_profile(user_id)
    if not profile:
        raise ProfileNotFoundError("profile_not_found")
    current = load_json_list(getattr(profile, column))
    if item in current:
        return current
    current.append(item)
    profiles_repo.update_profile(user_id, {column: dump_json_list(current)})
    return current


def remove_favorite(user_id: str, kind: str, value: str) -> List[str]:
    column = _favorite_column(kind)
    profile = profiles_repo.get_profile(user_id)
    if not profile:
        raise ProfileNotFoundError("profile_not_found")
    item = clean_text(value)
    current = [v for v in load_json_list(getattr(profile, column)) if v != item]
    profiles_repo.update_profile(user_id, {column: dump_json_list(current)})
    return current


def set_avatar_url(user_id: str, avatar_url: Optional[str]) -> Dict[str, Any]:
    ensure_profile(user_id)
    profile = profiles_repo.update_profile(user_id, {"avatar_url": avatar_url})
    return profile.as_dict()  # type: ignore[union-attr]


__all__ = [
    "DEFAULT_USERNAME",
    "ProfileValidationError",
    "ProfileNotFoundError",
    "avatar_display_url",
    "ensure_profile",
    "get_profile",
    "get_profile_overview",
    "update_profile",
    "add_favorite",
    "remove_favorite",
    "set_avatar_url",
]
