"""SQLAlchemy Core table definitions for the cleanup history database."""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Index, Integer, MetaData, Table, Text

metadata = MetaData()

runs = Table(
    "runs",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("started", Text, nullable=False),
    Column("finished", Text, nullable=False),
    Column("mode", Text, nullable=False),  # delete | trash
    Column("bytes_freed", Integer, nullable=False, default=0, server_default="0"),
    Column("items_removed", Integer, nullable=False, default=0, server_default="0"),
    Column("categories", Text, nullable=False),  # JSON array of keys
)

removed_items = Table(
    "removed_items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("run_id", Integer, ForeignKey("runs.id", ondelete="CASCADE"), nullable=False),
    Column("category", Text, nullable=False),
    Column("path", Text, nullable=False),
    Column("bytes", Integer, nullable=False, default=0, server_default="0"),
)

Index("ix_removed_items_run_id", removed_items.c.run_id)
