"""SQLite engine and session lifecycle for the library database.

A single engine per process backs a thread-scoped session registry. Tables
for profiles, books, shelves, vocabulary and stories are created on first
use; ``EUREKA_DB_PATH=:memory:`` gives an isolated throwaway database.
"""
from __future__ import annotations

import os
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

try:  # POSIX file locking for multi-worker schema creation
    import fcntl  # type: ignore
except ImportError:  # pragma: no cover - non-POSIX platforms
    fcntl = None  # type: ignore

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, scoped_session, sessionmaker

from eureka import config as app_config
from eureka.db.models import Base
from eureka.utils.logging import get_logger

LOG = get_logger("eureka.db")

MEMORY_PATH = ":memory:"
SCHEMA_LOCK_NAME = ".eureka_schema.lock"
BUSY_TIMEOUT_MS = 5000

_engine: Optional[Engine] = None
_factory: Optional[Callable[[], Session]] = None
_scoped: Optional[scoped_session] = None
_LOCK = threading.Lock()


def _on_connect(dbapi_conn, _record) -> None:
    # cascades on chapters, likes, bookmarks and comments rely on FK enforcement
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute(f"PRAGMA busy_timeout={BUSY_TIMEOUT_MS}")
    cursor.close()


def _database_dir(db_path: str) -> Optional[str]:
    """Create the directory holding the DB file; None for in-memory databases."""
    if db_path == MEMORY_PATH:
        return None
    directory = os.path.dirname(os.path.abspath(db_path)) or "."
    os.makedirs(directory, exist_ok=True)
    if not os.access(directory, os.W_OK):
        raise RuntimeError(f"database directory not writable: {directory}")
    return directory


@contextmanager
def _schema_lock(directory: Optional[str]) -> Iterator[None]:
    if directory is None or fcntl is None:
        yield
        return
    with open(os.path.join(directory, SCHEMA_LOCK_NAME), "w") as lock_file:
        fcntl.flock(lock_file, fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(lock_file, fcntl.LOCK_UN)


def _create_tables(engine: Engine) -> None:
    try:
        Base.metadata.create_all(engine)
    except OperationalError as exc:  # pragma: no cover - another worker won the race
        if "already exists" not in str(exc).lower():
            raise
        LOG.warning("Tables already present while creating schema: %s", exc)


def init_engine_once() -> None:
    global _engine, _factory, _scoped
    if _engine is not None:
        return
    with _LOCK:
        if _engine is not None:
            return
        db_path = app_config.get_db_path()
        directory = _database_dir(db_path)
        engine = create_engine(f"sqlite:///{db_path}", future=True)
        event.listen(engine, "connect", _on_connect)
        with _schema_lock(directory):
            _create_tables(engine)
        _factory = sessionmaker(bind=engine, expire_on_commit=False, class_=Session)
        _scoped = scoped_session(_factory)
        _engine = engine
        LOG.info("Library database ready path=%s tables=%s", db_path, len(Base.metadata.tables))


def get_engine() -> Engine:
    init_engine_once()
    return _engine  # type: ignore[return-value]


def get_session_factory() -> Callable[[], Session]:
    init_engine_once()
    return _factory  # type: ignore[return-value]


def get_scoped_session() -> scoped_session:
    init_engine_once()
    if _scoped is None:
        raise RuntimeError("Scoped session could not be initialized.")
    return _scoped


@contextmanager
def app_session() -> Iterator[Session]:
    """Yield a session that commits on exit and rolls back on error."""
    sess = get_scoped_session()()
    try:
        yield sess
        sess.commit()
    except Exception:
        sess.rollback()
        raise
    finally:
        sess.close()


def reset_for_tests(drop: bool = False) -> None:
    """Forget the engine so the next init reads EUREKA_DB_PATH again."""
    global _engine, _factory, _scoped
    with _LOCK:
        if _scoped is not None:
            _scoped.remove()
        if _engine is not None:
            if drop:
                try:
                    Base.metadata.drop_all(_engine)
                except SQLAlchemyError:
                    LOG.warning("Dropping tables during reset failed", exc_info=True)
            _engine.dispose()
        _engine = None
        _factory = None
        _scoped = None


__all__ = [
    "init_engine_once",
    "get_engine",
    "get_session_factory",
    "get_scoped_session",
    "app_session",
    "reset_for_tests",
]
