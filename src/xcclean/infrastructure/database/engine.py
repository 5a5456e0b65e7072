"""Database engine setup for the SQLite history store.

SQLAlchemy Core (not ORM) is used because xcclean is a short-lived
CLI process — no benefit from session management or identity maps.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from xcclean.infrastructure.database.schema import metadata


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with foreign keys enabled."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def init_database(db_path: Path) -> Engine:
    """Create the parent directory and all tables. Idempotent."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(db_path)
    metadata.create_all(engine)
    return engine
