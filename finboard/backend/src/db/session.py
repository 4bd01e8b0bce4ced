"""SQLAlchemy engine and session factory for the relational store."""

from __future__ import annotations

from pathlib import Path

import structlog
from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.orm import sessionmaker

from finboard.backend.src.core.config import get_settings

LOGGER = structlog.get_logger(__name__)
PROJECT_ROOT = Path(__file__).resolve().parents[4]


def _normalize_database_url(raw_url: str) -> URL:
    """Return an absolute :class:`~sqlalchemy.engine.URL` for SQLite databases."""

    url = make_url(raw_url)
    if not url.drivername.startswith("sqlite"):
        return url

    database = url.database or ""
    if database in {"", ":memory:"}:
        return url

    db_path = Path(database)
    resolved = (db_path if db_path.is_absolute() else PROJECT_ROOT / db_path).resolve()
    if resolved != db_path:
        LOGGER.info("database_path_normalized", given=str(db_path), resolved=str(resolved))
    return url.set(database=str(resolved))


def _unicode_lower(value: str | None) -> str | None:
    return value.lower() if isinstance(value, str) else value


def _register_sqlite_functions(engine: Engine) -> None:
    """Replace SQLite's ASCII-only ``lower()`` with a Unicode-aware one.

    ``ilike`` compiles to ``lower(x) LIKE lower(y)`` on SQLite, so search
    terms such as ``"émile"`` only match ``"Émile"`` with this override.
    """

    @event.listens_for(engine, "connect")
    def on_connect(dbapi_connection, connection_record):  # type: ignore[no-untyped-def]
        dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


def build_engine(raw_url: str) -> Engine:
    """Create the engine for ``raw_url`` with store-specific hooks attached."""

    url = _normalize_database_url(raw_url)
    created = create_engine(url, pool_pre_ping=True, future=True)
    if url.drivername.startswith("sqlite"):
        _register_sqlite_functions(created)
    LOGGER.info("database_engine_initialized", url=url.render_as_string(hide_password=True))
    return created


engine = build_engine(get_settings().database_url)
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)

__all__ = ["SessionLocal", "build_engine", "engine"]
