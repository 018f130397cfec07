"""
db.engine - Engine bootstrap, session factory and transaction scope.

Designed so the connection string can be swapped to Postgres
by changing config.DB_URL; no other code needs to change.

Imports rely on transaction(): every delete and insert of one call
commits together or not at all.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from db.models import Base

_engine: Engine | None = None
_SessionLocal: sessionmaker | None = None


def init_db(db_url: str) -> None:
    """Create the engine, apply SQLite pragmas, and emit CREATE TABLE."""
    global _engine, _SessionLocal

    # Re-initialising (tests, CLI after app factory) replaces the old pool
    if _engine is not None:
        _engine.dispose()

    _engine = create_engine(db_url, echo=False, future=True)

    if db_url.startswith("sqlite"):
        @event.listens_for(_engine, "connect")
        def _sqlite_pragmas(dbapi_conn, _rec):
            cur = dbapi_conn.cursor()
            cur.execute("PRAGMA journal_mode=WAL")
            cur.execute("PRAGMA synchronous=NORMAL")
            cur.close()

    Base.metadata.create_all(_engine)
    _SessionLocal = sessionmaker(bind=_engine, expire_on_commit=False)


def get_session() -> Session:
    """Return a new session.  Caller is responsible for .close()."""
    if _SessionLocal is None:
        raise RuntimeError("Database not initialised - call init_db() first")
    return _SessionLocal()


@contextmanager
def transaction() -> Iterator[Session]:
    """
    Yield a session inside one transaction.  Commits when the block
    exits normally, rolls back if it raises, always closes.
    """
    session = get_session()
    try:
        with session.begin():
            yield session
    finally:
        session.close()
