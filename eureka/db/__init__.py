"""Database layer root (engine, scoped sessions, models, repositories)."""

from .engine import (
    init_engine_once,
    get_engine,
    get_session_factory,
    get_scoped_session,
    app_session,
    reset_for_tests,
)

__all__ = [
    "init_engine_once",
    "get_engine",
    "get_session_factory",
    "get_scoped_session",
    "app_session",
    "reset_for_tests",
]
