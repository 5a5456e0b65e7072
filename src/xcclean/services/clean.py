"""CleanService — remove what a scan found.

Per-item failures never abort a run: the item is reported under
``failed``, surfaced as a warning, and the remaining items proceed.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from xcclean.domain.categories import KIND_SIMULATORS, Category, UnknownCategoryError
from xcclean.infrastructure import xcode
from xcclean.infrastructure.filesystem import UnsafePathError, remove_path
from xcclean.infrastructure.history import RemovedItem
from xcclean.services._helpers import elapsed_ms, now_iso
from xcclean.services.base import BaseService
from xcclean.services.result import NOTHING_SELECTED, UNKNOWN_CATEGORY, ServiceResult
from xcclean.services.scan import Candidate, ScanService

logger = logging.getLogger(__name__)

MODE_DELETE = "delete"
MODE_TRASH = "trash"

# Categories Xcode keeps open while running.
_XCODE_LOCKED = frozenset({"derived_data", "xcode_caches"})


class CleanService(BaseService):
    """Removes cleanable items, records history, and fires plugin hooks."""

    def select(self, keys: list[str] | None, *, all_safe: bool) -> list[Category]:
        """Categories for a clean: explicit *keys*, or every visible safe one.

        Raises UnknownCategoryError for unknown keys.
        """
        if keys:
            return self._env.registry.resolve(keys)
        if all_safe:
            return [c for c in self._env.visible_categories() if c.is_safe]
        return []

    def clean(
        self,
        keys: list[str] | None = None,
        *,
        all_safe: bool = False,
        dry_run: bool = False,
        older_than_days: int | None = None,
        min_size: int | None = None,
        trash: bool | None = None,
    ) -> ServiceResult:
        """Clean the selected categories.

        Unset filters and *trash* fall back to the ``[clean]`` config.
        """
        start = time.perf_counter()
        try:
            categories = self.select(keys, all_safe=all_safe)
        except UnknownCategoryError as exc:
            return ServiceResult.failure(
                "clean",
                UNKNOWN_CATEGORY,
                str(exc),
                unknown=exc.keys,
                available=self._env.registry.keys(),
            )
        if not categories:
            return ServiceResult.failure(
                "clean",
                NOTHING_SELECTED,
                "No categories selected; name categories or pass --all",
            )

        use_trash = self._settings.clean.use_trash if trash is None else trash
        mode = MODE_TRASH if use_trash else MODE_DELETE
        if all(c.kind == KIND_SIMULATORS for c in categories):
            mode = MODE_DELETE
        scanner = ScanService(self._env)
        older, smallest = scanner.resolve_filters(older_than_days, min_size)

        warnings: list[str] = []
        if not dry_run and any(c.key in _XCODE_LOCKED for c in categories) and xcode.xcode_running():
            warnings.append("Xcode is running; quit it first for a complete clean")

        started = now_iso()
        reports = scanner.measure(
            categories,
            older_than_days=older,
            min_size=smallest,
            warnings=warnings,
        )

        removed: list[RemovedItem] = []
        failed: list[dict[str, str]] = []
        breakdown: list[dict[str, Any]] = []

        for report in reports:
            freed = 0
            items: list[str] = []
            category_mode = mode
            if report.category.kind == KIND_SIMULATORS:
                # simctl has no trash; devices are always deleted.
                category_mode = MODE_DELETE
                if use_trash and report.candidates:
                    warnings.append(
                        "Unavailable simulators are deleted via simctl; "
                        "they cannot be moved to the Trash"
                    )
            for candidate in report.candidates:
                if not dry_run:
                    error = self._remove(candidate, report.category, trash=use_trash)
                    if error is not None:
                        failed.append({"path": str(candidate.path), "error": error})
                        warnings.append(f"Could not remove {candidate.path}: {error}")
                        continue
                    removed.append(
                        RemovedItem(
                            category=candidate.category,
                            path=str(candidate.path),
                            bytes=candidate.size,
                        )
                    )
                freed += candidate.size
                items.append(str(candidate.path))

            breakdown.append(
                {
                    "key": report.category.key,
                    "name": report.category.name,
                    "mode": category_mode,
                    "bytes_freed": freed,
                    "items_removed": len(items),
                    "items": items,
                }
            )
            self._dispatch_event(
                "post_clean",
                {
                    "category": report.category.key,
                    "bytes_freed": freed,
                    "items_removed": len(items),
                    "dry_run": dry_run,
                },
                warnings,
            )

        run_id = None
        if not dry_run and removed:
            run_id = self._record(started, mode, [c.key for c in categories], removed, warnings)

        logger.debug(
            "Clean finished: %d items, %d failed, dry_run=%s",
            sum(b["items_removed"] for b in breakdown),
            len(failed),
            dry_run,
        )

        return ServiceResult(
            ok=True,
            op="clean",
            data={
                "dry_run": dry_run,
                "mode": mode,
                "bytes_freed": sum(b["bytes_freed"] for b in breakdown),
                "items_removed": sum(b["items_removed"] for b in breakdown),
                "categories": breakdown,
                "failed": failed,
                "run_id": run_id,
                "filters": {"older_than_days": older, "min_size": smallest},
            },
            warnings=warnings,
            meta={"elapsed_ms": elapsed_ms(start)},
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _remove(self, candidate: Candidate, category: Category, *, trash: bool) -> str | None:
        """Remove one candidate. Returns an error message, or None on success."""
        try:
            if category.kind == KIND_SIMULATORS and candidate.udid:
                xcode.delete_simulator(candidate.udid)
            else:
                remove_path(
                    candidate.path,
                    candidate.root,
                    trash=trash,
                    trash_dir=self._settings.trash_dir,
                )
        except (OSError, UnsafePathError, xcode.XcrunError) as exc:
            logger.debug("Removal failed for %s", candidate.path, exc_info=True)
            return str(exc)
        return None

    def _record(
        self,
        started: str,
        mode: str,
        category_keys: list[str],
        removed: list[RemovedItem],
        warnings: list[str],
    ) -> int | None:
        """Write the run to history. Failures degrade to a warning."""
        cfg = self._settings.history
        if not cfg.enabled:
            return None
        try:
            return self._env.history.record_run(
                started=started,
                finished=now_iso(),
                mode=mode,
                categories=category_keys,
                items=removed,
                keep_runs=cfg.keep_runs,
            )
        except (SQLAlchemyError, OSError) as exc:
            logger.debug("History write failed", exc_info=True)
            warnings.append(f"Could not record history: {exc}")
            return None
