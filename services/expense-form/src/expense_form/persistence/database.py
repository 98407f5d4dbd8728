"""Database configuration helpers for the draft store."""

from __future__ import annotations

from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, URL, make_url
from sqlalchemy.orm import Session, sessionmaker

from shared.form_settings import get_database_url


def _prepare_sqlite_path(url: URL) -> None:
    """Ensure on-disk SQLite paths exist before engine creation."""
    database = url.database
    if not database or database == ":memory:":
        return

    db_path = Path(database)
    if not db_path.is_absolute():
        db_path = (Path.cwd() / db_path).resolve()
    db_path.parent.mkdir(parents=True, exist_ok=True)


def create_engine_for_url(database_url: str | None = None) -> Engine:
    """Create a SQLAlchemy engine for the given URL (defaults to the configured one)."""
    url = database_url or get_database_url()
    parsed_url = make_url(url)
    if parsed_url.drivername.startswith("sqlite"):
        _prepare_sqlite_path(parsed_url)
        connect_args = {"check_same_thread": False}
    else:
        connect_args = {}
    return create_engine(url, future=True, connect_args=connect_args)


def init_db(engine: Engine) -> None:
    """Create tables if they are missing."""
    from . import models  # noqa: WPS433 (import inside function)

    models.Base.metadata.create_all(bind=engine)


def build_session_factory(database_url: str | None = None) -> sessionmaker[Session]:
    """
    Return a session factory bound to a ready-to-use database.

    The factory is the storage handle handed to `DraftStore`; each form
    instance (or test) can point at its own database.
    """
    engine = create_engine_for_url(database_url)
    init_db(engine)
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        future=True,
    )
