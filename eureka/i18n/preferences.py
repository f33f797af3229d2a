"""Shared language preference helpers for UI switching."""
from __future__ import annotations

from typing import Optional

SESSION_LOCALE_KEY = "eureka_locale"
SUPPORTED_LANGUAGES = ("ja", "en")


def normalize_language_choice(raw: Optional[str]) -> Optional[str]:
    """Normalize a user-provided language code (``ja_JP``, ``EN-us``) to a supported value."""
    if not isinstance(raw, str):
        return None
    code = raw.strip().lower().replace("_", "-").split("-", 1)[0]
    return code if code in SUPPORTED_LANGUAGES else None


__all__ = [
    "SESSION_LOCALE_KEY",
    "SUPPORTED_LANGUAGES",
    "normalize_language_choice",
]
