"""HistoryStore — persistent record of cleanup runs.

Only real cleans are recorded; dry runs leave no trace. The database is
created lazily on first use so read-only commands never touch disk.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sqlalchemy import delete, desc, func, insert, select
from sqlalchemy.engine import Engine

from xcclean.infrastructure.database import init_database, removed_items, runs


@dataclass(frozen=True)
class RemovedItem:
    """One path removed during a run."""

    category: str
    path: str
    bytes: int


class HistoryStore:
    """Read/write access to ``history.db``."""

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._engine: Engine | None = None

    @property
    def db_path(self) -> Path:
        return self._db_path

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = init_database(self._db_path)
        return self._engine

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def record_run(
        self,
        *,
        started: str,
        finished: str,
        mode: str,
        categories: list[str],
        items: Iterable[RemovedItem],
        keep_runs: int | None = None,
    ) -> int:
        """Insert a run with its removed items and return the run id.

        When *keep_runs* is given, runs beyond the newest *keep_runs* are
        pruned in the same transaction.
        """
        items = list(items)
        with self.engine.begin() as conn:
            run_id = conn.execute(
                insert(runs).values(
                    started=started,
                    finished=finished,
                    mode=mode,
                    bytes_freed=sum(i.bytes for i in items),
                    items_removed=len(items),
                    categories=json.dumps(categories),
                )
            ).inserted_primary_key[0]
            if items:
                conn.execute(
                    insert(removed_items),
                    [
                        {"run_id": run_id, "category": i.category, "path": i.path, "bytes": i.bytes}
                        for i in items
                    ],
                )
            if keep_runs is not None:
                stale = select(runs.c.id).order_by(desc(runs.c.id)).offset(keep_runs)
                stale_ids = [row.id for row in conn.execute(stale)]
                if stale_ids:
                    conn.execute(delete(removed_items).where(removed_items.c.run_id.in_(stale_ids)))
                    conn.execute(delete(runs).where(runs.c.id.in_(stale_ids)))
        return int(run_id)

    def clear(self) -> int:
        """Delete all history. Returns the number of runs removed."""
        with self.engine.begin() as conn:
            count = conn.execute(select(func.count()).select_from(runs)).scalar_one()
            conn.execute(delete(removed_items))
            conn.execute(delete(runs))
        return int(count)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def recent_runs(self, limit: int = 10) -> list[dict[str, Any]]:
        """Newest runs first."""
        with self.engine.connect() as conn:
            rows = conn.execute(select(runs).order_by(desc(runs.c.id)).limit(limit)).all()
        return [_run_to_dict(row._mapping) for row in rows]

    def get_run(self, run_id: int) -> dict[str, Any] | None:
        with self.engine.connect() as conn:
            row = conn.execute(select(runs).where(runs.c.id == run_id)).first()
        return _run_to_dict(row._mapping) if row else None

    def run_items(self, run_id: int) -> list[RemovedItem]:
        with self.engine.connect() as conn:
            rows = conn.execute(
                select(removed_items.c.category, removed_items.c.path, removed_items.c.bytes)
                .where(removed_items.c.run_id == run_id)
                .order_by(desc(removed_items.c.bytes), removed_items.c.path)
            ).all()
        return [RemovedItem(category=r.category, path=r.path, bytes=r.bytes) for r in rows]

    def totals(self) -> dict[str, int]:
        """All-time totals across recorded runs."""
        with self.engine.connect() as conn:
            row = conn.execute(
                select(
                    func.count(runs.c.id),
                    func.coalesce(func.sum(runs.c.bytes_freed), 0),
                    func.coalesce(func.sum(runs.c.items_removed), 0),
                )
            ).one()
        return {"runs": int(row[0]), "bytes_freed": int(row[1]), "items_removed": int(row[2])}


def _run_to_dict(row: Any) -> dict[str, Any]:
    return {
        "id": row["id"],
        "started": row["started"],
        "finished": row["finished"],
        "mode": row["mode"],
        "bytes_freed": row["bytes_freed"],
        "items_removed": row["items_removed"],
        "categories": json.loads(row["categories"]),
    }
