"""Utility helpers."""
from .identity import (
    normalize_user_id,
    get_session_user_key,
    get_current_user_id,
    is_admin_user,
    ensure_login,
    ensure_admin,
    PermissionError,
)
from .text import clean_text

__all__ = [
    "clean_text",
    "normalize_user_id",
    "get_session_user_key",
    "get_current_user_id",
    "is_admin_user",
    "ensure_login",
    "ensure_admin",
    "PermissionError",
]
