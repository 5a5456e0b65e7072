"""ScanService — measure what each category would free.

Measurement is shared with the status overview and with clean, so that
``scan`` always previews exactly what ``clean`` would remove under the
same filters.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from xcclean.domain.categories import KIND_SIMULATORS, Category, UnknownCategoryError
from xcclean.domain.sizes import age_days
from xcclean.infrastructure import xcode
from xcclean.infrastructure.filesystem import directory_size, list_entries
from xcclean.services._helpers import elapsed_ms
from xcclean.services.base import BaseService
from xcclean.services.result import UNKNOWN_CATEGORY, ServiceResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    """A removable item: a child of a category root, or a simulator device."""

    category: str
    root: Path
    path: Path
    name: str
    size: int
    modified: float | None
    udid: str | None = None

    def to_dict(self, now: float) -> dict[str, Any]:
        d: dict[str, Any] = {
            "name": self.name,
            "path": str(self.path),
            "size": self.size,
            "age_days": age_days(self.modified, now) if self.modified is not None else None,
        }
        if self.udid:
            d["udid"] = self.udid
        return d


@dataclass
class CategoryReport:
    """Measurement of one category under a given filter."""

    category: Category
    roots: list[Path]
    exists: bool
    candidates: list[Candidate] = field(default_factory=list)

    @property
    def size(self) -> int:
        return sum(c.size for c in self.candidates)

    def to_dict(self, now: float, *, include_items: bool = True) -> dict[str, Any]:
        d: dict[str, Any] = {
            "key": self.category.key,
            "name": self.category.name,
            "risk": self.category.risk,
            "exists": self.exists,
            "size": self.size,
            "item_count": len(self.candidates),
            "paths": [str(r) for r in self.roots],
        }
        if include_items:
            d["items"] = [c.to_dict(now) for c in self.candidates]
        return d


def _passes(
    modified: float | None,
    size: int,
    *,
    now: float,
    older_than_days: int,
    min_size: int,
) -> bool:
    if size < min_size:
        return False
    if older_than_days > 0:
        if modified is None:
            return False
        return age_days(modified, now) >= older_than_days
    return True


def measure_category(
    category: Category,
    home: Path,
    *,
    older_than_days: int = 0,
    min_size: int = 0,
    now: float | None = None,
    warnings: list[str] | None = None,
) -> CategoryReport:
    """Collect the removable items of *category* that pass the filters."""
    now = time.time() if now is None else now
    roots = category.roots(home)
    report = CategoryReport(category=category, roots=roots, exists=any(r.is_dir() for r in roots))

    if category.kind == KIND_SIMULATORS:
        report.candidates = _simulator_candidates(
            category,
            roots[0],
            now=now,
            older_than_days=older_than_days,
            min_size=min_size,
            warnings=warnings,
        )
        return report

    for root in roots:
        for entry in list_entries(root):
            if _passes(
                entry.modified,
                entry.size,
                now=now,
                older_than_days=older_than_days,
                min_size=min_size,
            ):
                report.candidates.append(
                    Candidate(
                        category=category.key,
                        root=root,
                        path=entry.path,
                        name=entry.name,
                        size=entry.size,
                        modified=entry.modified,
                    )
                )
    report.candidates.sort(key=lambda c: (-c.size, c.name))
    return report


def _simulator_candidates(
    category: Category,
    devices_root: Path,
    *,
    now: float,
    older_than_days: int,
    min_size: int,
    warnings: list[str] | None,
) -> list[Candidate]:
    """Unavailable simulators, sized by their device directories.

    When there is no device directory there is nothing to ask simctl
    about, so a missing xcrun only warns if simulators exist on disk.
    """
    if not devices_root.is_dir():
        return []
    try:
        simulators = xcode.unavailable_simulators()
    except xcode.XcrunError as exc:
        logger.debug("Simulator listing failed", exc_info=True)
        if warnings is not None:
            warnings.append(f"{category.name}: {exc}")
        return []

    candidates: list[Candidate] = []
    for sim in simulators:
        device_dir = devices_root / sim.udid
        try:
            modified: float | None = device_dir.lstat().st_mtime
        except OSError:
            modified = None
        size = directory_size(device_dir) if modified is not None else 0
        if not _passes(modified, size, now=now, older_than_days=older_than_days, min_size=min_size):
            continue
        candidates.append(
            Candidate(
                category=category.key,
                root=devices_root,
                path=device_dir,
                name=f"{sim.name} ({sim.runtime})",
                size=size,
                modified=modified,
                udid=sim.udid,
            )
        )
    candidates.sort(key=lambda c: (-c.size, c.name))
    return candidates


class ScanService(BaseService):
    """Reports cleanable items per category."""

    def resolve_filters(
        self,
        older_than_days: int | None,
        min_size: int | None,
    ) -> tuple[int, int]:
        """Fill unset filters from the ``[clean]`` config section."""
        cfg = self._settings.clean
        return (
            cfg.older_than_days if older_than_days is None else older_than_days,
            cfg.min_size if min_size is None else min_size,
        )

    def measure(
        self,
        categories: list[Category],
        *,
        older_than_days: int = 0,
        min_size: int = 0,
        warnings: list[str],
    ) -> list[CategoryReport]:
        now = time.time()
        reports = []
        for category in categories:
            report = measure_category(
                category,
                self._env.home,
                older_than_days=older_than_days,
                min_size=min_size,
                now=now,
                warnings=warnings,
            )
            logger.debug(
                "Measured %s: %d items, %d bytes",
                category.key,
                len(report.candidates),
                report.size,
            )
            reports.append(report)
        return reports

    def scan(
        self,
        keys: list[str] | None = None,
        *,
        older_than_days: int | None = None,
        min_size: int | None = None,
    ) -> ServiceResult:
        """Scan *keys* (default: every visible category)."""
        start = time.perf_counter()
        try:
            categories = (
                self._env.registry.resolve(keys) if keys else self._env.visible_categories()
            )
        except UnknownCategoryError as exc:
            return ServiceResult.failure(
                "scan",
                UNKNOWN_CATEGORY,
                str(exc),
                unknown=exc.keys,
                available=self._env.registry.keys(),
            )

        older, smallest = self.resolve_filters(older_than_days, min_size)
        warnings: list[str] = []
        reports = self.measure(
            categories,
            older_than_days=older,
            min_size=smallest,
            warnings=warnings,
        )

        now = time.time()
        category_data = [r.to_dict(now) for r in reports]
        total_size = sum(r.size for r in reports)
        self._dispatch_event(
            "post_scan",
            {
                "total_size": total_size,
                "categories": [r.to_dict(now, include_items=False) for r in reports],
            },
            warnings,
        )

        return ServiceResult(
            ok=True,
            op="scan",
            data={
                "categories": category_data,
                "total_size": total_size,
                "total_items": sum(len(r.candidates) for r in reports),
                "reclaimable": sum(r.size for r in reports if r.category.is_safe),
                "filters": {"older_than_days": older, "min_size": smallest},
            },
            warnings=warnings,
            meta={"elapsed_ms": elapsed_ms(start)},
        )
