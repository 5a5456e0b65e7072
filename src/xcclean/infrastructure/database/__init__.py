"""SQLite persistence for cleanup history."""

from xcclean.infrastructure.database.engine import create_db_engine, init_database
from xcclean.infrastructure.database.schema import metadata, removed_items, runs

__all__ = [
    "create_db_engine",
    "init_database",
    "metadata",
    "removed_items",
    "runs",
]
