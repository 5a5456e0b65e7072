"""HistoryService — browse and clear the record of past cleans."""

from __future__ import annotations

import logging
from dataclasses import asdict

from sqlalchemy.exc import SQLAlchemyError

from xcclean.services.base import BaseService
from xcclean.services.result import (
    HISTORY_DISABLED,
    HISTORY_UNAVAILABLE,
    INVALID_INPUT,
    NOT_FOUND,
    ServiceResult,
)

logger = logging.getLogger(__name__)


class HistoryService(BaseService):
    """Read and reset ``history.db``."""

    def _disabled(self, op: str) -> ServiceResult | None:
        if self._settings.history.enabled:
            return None
        return ServiceResult.failure(
            op,
            HISTORY_DISABLED,
            "History is disabled ([history] enabled = false)",
        )

    def history(self, *, limit: int = 10) -> ServiceResult:
        """Most recent runs, newest first, plus all-time totals."""
        if (err := self._disabled("history")) is not None:
            return err
        if limit < 1:
            return ServiceResult.failure("history", INVALID_INPUT, "limit must be at least 1")
        try:
            store = self._env.history
            runs = store.recent_runs(limit)
            totals = store.totals()
        except (SQLAlchemyError, OSError) as exc:
            logger.debug("History read failed", exc_info=True)
            return ServiceResult.failure("history", HISTORY_UNAVAILABLE, str(exc))
        return ServiceResult(
            ok=True,
            op="history",
            data={"runs": runs, "count": len(runs), "totals": totals},
        )

    def show(self, run_id: int) -> ServiceResult:
        """One run with every path it removed."""
        if (err := self._disabled("history_run")) is not None:
            return err
        try:
            store = self._env.history
            run = store.get_run(run_id)
            items = store.run_items(run_id) if run else []
        except (SQLAlchemyError, OSError) as exc:
            logger.debug("History read failed", exc_info=True)
            return ServiceResult.failure("history_run", HISTORY_UNAVAILABLE, str(exc))
        if run is None:
            return ServiceResult.failure(
                "history_run",
                NOT_FOUND,
                f"No cleanup run with id {run_id}",
                run_id=run_id,
            )
        return ServiceResult(
            ok=True,
            op="history_run",
            data={**run, "items": [asdict(i) for i in items]},
        )

    def clear(self) -> ServiceResult:
        if (err := self._disabled("history_clear")) is not None:
            return err
        try:
            removed = self._env.history.clear()
        except (SQLAlchemyError, OSError) as exc:
            logger.debug("History clear failed", exc_info=True)
            return ServiceResult.failure("history_clear", HISTORY_UNAVAILABLE, str(exc))
        return ServiceResult(ok=True, op="history_clear", data={"runs_removed": removed})
