"""Coercion helpers for loosely typed JSON input."""
from __future__ import annotations

from typing import Any


def clean_text(raw: Any) -> str:
    """Stripped string value; anything that is not a string reads as empty."""
    return raw.strip() if isinstance(raw, str) else ""


__all__ = ["clean_text"]
