"""Application configuration accessors.

Centralizes environment variable parsing & defaults so services never read
``os.environ`` directly.
"""
from __future__ import annotations

import os
from functools import lru_cache

APP_NAME = "eureka"
APP_VERSION = "0.1.0"
APP_DESCRIPTION = "Eureka Library reading & stories API"

DEFAULT_DB_PATH = "eureka.db"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_UPLOAD_DIR = "uploads"
DEFAULT_LOCALE = "ja"


def _raw_env(name: str, default: str | None = None) -> str | None:
    val = os.getenv(name)
    return val if val is not None else default


def _stripped_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def data_dir() -> str | None:
    """Optional base directory for relative DB and upload paths (EUREKA_DATA_DIR)."""
    return _stripped_env("EUREKA_DATA_DIR")


def get_db_path() -> str:
    raw = _raw_env("EUREKA_DB_PATH", DEFAULT_DB_PATH) or DEFAULT_DB_PATH
    if raw != ":memory:" and not os.path.isabs(raw):
        root = data_dir()
        if root:
            return os.path.join(root, raw)
    return raw


def upload_dir() -> str:
    raw = _raw_env("EUREKA_UPLOAD_DIR", DEFAULT_UPLOAD_DIR) or DEFAULT_UPLOAD_DIR
    if not os.path.isabs(raw):
        root = data_dir()
        if root:
            return os.path.join(root, raw)
    return os.path.abspath(raw)


def public_base_url() -> str:
    """Prefix for public media URLs; empty string yields root-relative URLs."""
    return (_stripped_env("EUREKA_PUBLIC_BASE_URL") or "").rstrip("/")


def secret_key() -> str:
    return _raw_env("EUREKA_SECRET_KEY", "dev-secret")  # type: ignore[return-value]


def session_user_key() -> str:
    return os.getenv("EUREKA_SESSION_USER_KEY", "user_id")


def log_level_name() -> str:
    return (_raw_env("EUREKA_LOG_LEVEL", DEFAULT_LOG_LEVEL) or DEFAULT_LOG_LEVEL).upper()


def default_locale() -> str:
    return _stripped_env("EUREKA_DEFAULT_LOCALE") or DEFAULT_LOCALE


@lru_cache(maxsize=1)
def metadata() -> dict:
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "description": APP_DESCRIPTION,
    }


def summarize_runtime_config() -> dict:
    return {
        "db_path": get_db_path(),
        "log_level": log_level_name(),
        "upload_dir": upload_dir(),
        "google_books_key_set": bool(google_books_api_key()),
        "google_maps_key_set": bool(google_maps_api_key()),
    }


__all__ = [
    "APP_NAME",
    "APP_VERSION",
    "APP_DESCRIPTION",
    "data_dir",
    "get_db_path",
    "upload_dir",
    "public_base_url",
    "secret_key",
    "session_user_key",
    "log_level_name",
    "default_locale",
    "metadata",
    "summarize_runtime_config",
]


def google_books_api_key() -> str | None:
    """Return GOOGLE_BOOKS_API_KEY (server side only, no default)."""
    return _stripped_env("GOOGLE_BOOKS_API_KEY")

__all__.append("google_books_api_key")


def google_books_api_base() -> str:
    """Base URL for the Google Books API (override with GOOGLE_BOOKS_API_BASE)."""
    return os.getenv("GOOGLE_BOOKS_API_BASE", "https://www.googleapis.com/books/v1").rstrip("/")

__all__.append("google_books_api_base")


def google_maps_api_key() -> str | None:
    """Return GOOGLE_MAPS_API_KEY used for geocoding search."""
    return _stripped_env("GOOGLE_MAPS_API_KEY")

__all__.append("google_maps_api_key")


def google_geocode_api_url() -> str:
    return os.getenv(
        "GOOGLE_GEOCODE_API_BASE",
        "https://maps.googleapis.com/maps/api/geocode/json",
    )

__all__.append("google_geocode_api_url")


def wikipedia_api_base(language: str = "ja") -> str:
    """REST base for the image encyclopedia.

    Environment Variable: WIKIPEDIA_API_BASE
    May contain a ``{lang}`` placeholder which is filled with the requested
    language code.
    """
    template = os.getenv("WIKIPEDIA_API_BASE", "https://{lang}.wikipedia.org/api/rest_v1")
    return template.replace("{lang}", language or "ja").rstrip("/")

__all__.append("wikipedia_api_base")
