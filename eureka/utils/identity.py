"""Identity & permission helpers.

Sign-in is owned by the hosting session (reverse proxy / host app); we only
read the opaque user id it stores and resolve roles from the profile table.
"""
from __future__ import annotations
from typing import Optional, Any
from flask import session

from eureka import config as app_config


def normalize_user_id(raw: Any) -> Optional[str]:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return str(raw)
    if not isinstance(raw, str):
        return None
    cleaned = raw.strip()
    return cleaned or None


def get_session_user_key() -> str:
    return app_config.session_user_key()


def get_current_user_id() -> Optional[str]:
    return normalize_user_id(session.get(get_session_user_key()))


def is_admin_user() -> bool:
    user_id = get_current_user_id()
    if user_id:
        from eureka.db.repositories import profiles_repo  # local import avoids db <-> utils cycle

        profile = profiles_repo.get_profile(user_id)
        if profile is not None and profile.role == "admin":
            return True
    return bool(session.get("is_admin", False))


class PermissionError(Exception):
    pass


def ensure_login() -> str:
    user_id = get_current_user_id()
    if not user_id:
        raise PermissionError("login_required")
    return user_id


def ensure_admin() -> None:
    if not is_admin_user():
        raise PermissionError("admin_required")


__all__ = [
    "normalize_user_id",
    "get_session_user_key",
    "get_current_user_id",
    "is_admin_user",
    "ensure_login",
    "ensure_admin",
    "PermissionError",
]
