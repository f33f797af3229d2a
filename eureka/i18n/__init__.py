"""Flask-Babel setup: locale selection and translation directories."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Sequence

from flask import has_request_context, request, session
from flask_babel import Babel, get_babel

from eureka import config as app_config
from eureka.utils.logging import get_logger
from eureka.i18n.preferences import (
    SESSION_LOCALE_KEY,
    SUPPORTED_LANGUAGES,
    normalize_language_choice,
)

LOG = get_logger("i18n")

_PKG_ROOT = Path(__file__).resolve().parents[1]
_REPO_ROOT = _PKG_ROOT.parent
_DEFAULT_TRANSLATION_ROOTS: Sequence[Path] = (
    _REPO_ROOT / "translations",
    _PKG_ROOT / "translations",
)


def select_locale() -> str:
    """Session preference, then Accept-Language, then the configured default."""
    if has_request_context():
        preferred = normalize_language_choice(session.get(SESSION_LOCALE_KEY))
        if preferred:
            return preferred
        best = request.accept_languages.best_match(SUPPORTED_LANGUAGES)
        if best:
            return best
    return normalize_language_choice(app_config.default_locale()) or SUPPORTED_LANGUAGES[0]


def _normalize_paths(paths: Iterable[Path | str]) -> List[str]:
    seen: List[str] = []
    for candidate in paths:
        path = Path(candidate).resolve()
        if not path.is_dir():
            LOG.debug("Translation directory missing; skipping: %s", path)
            continue
        as_str = str(path)
        if as_str not in seen:
            seen.append(as_str)
    return seen


def init_babel(app) -> None:
    if "babel" in getattr(app, "extensions", {}):
        return
    app.config.setdefault("BABEL_DEFAULT_LOCALE", app_config.default_locale())
    Babel(app, locale_selector=select_locale)
    LOG.debug("Flask-Babel initialized default_locale=%s", app.config["BABEL_DEFAULT_LOCALE"])


def configure_translations(app, extra_roots: Iterable[Path | str] | None = None) -> None:
    """Register first-party translation directories ahead of existing ones."""
    babel_cfg = get_babel(app)
    candidates: List[Path | str] = list(_DEFAULT_TRANSLATION_ROOTS)
    if extra_roots:
        candidates.extend(extra_roots)

    desired = _normalize_paths(candidates)
    existing = list(getattr(babel_cfg, "translation_directories", []))
    merged: List[str] = []
    for directory in desired + existing:
        if directory not in merged:
            merged.append(directory)
    if merged == existing:
        return

    babel_cfg.translation_directories = merged
    app.config["BABEL_TRANSLATION_DIRECTORIES"] = ";".join(merged)
    LOG.info("Registered %s custom translation directories", len(desired))


__all__ = [
    "SESSION_LOCALE_KEY",
    "SUPPORTED_LANGUAGES",
    "normalize_language_choice",
    "select_locale",
    "init_babel",
    "configure_translations",
]
