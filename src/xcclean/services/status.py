"""StatusService — the Mac Storage Overview."""

from __future__ import annotations

import time

from xcclean.infrastructure import xcode
from xcclean.infrastructure.filesystem import disk_usage
from xcclean.services._helpers import elapsed_ms
from xcclean.services.base import BaseService
from xcclean.services.result import ServiceResult
from xcclean.services.scan import ScanService

OVERVIEW_TITLE = "Mac Storage Overview"


class StatusService(BaseService):
    """Summarizes disk capacity and the developer-cache footprint."""

    def status(self) -> ServiceResult:
        """Volume capacity, Xcode install info, and per-category totals.

        Category sizes are unfiltered: this is the whole footprint, not
        what a filtered clean would free.
        """
        start = time.perf_counter()
        warnings: list[str] = []
        home = self._env.home

        usage = disk_usage(home)
        reports = ScanService(self._env).measure(self._env.visible_categories(), warnings=warnings)

        categories = [
            {
                "key": r.category.key,
                "name": r.category.name,
                "risk": r.category.risk,
                "exists": r.exists,
                "size": r.size,
                "item_count": len(r.candidates),
            }
            for r in reports
        ]
        developer_total = sum(r.size for r in reports)
        reclaimable = sum(r.size for r in reports if r.category.is_safe)

        self._dispatch_event(
            "post_scan",
            {"total_size": developer_total, "categories": categories},
            warnings,
        )

        return ServiceResult(
            ok=True,
            op="status",
            data={
                "title": OVERVIEW_TITLE,
                "disk": {
                    "path": str(home),
                    "total": usage.total,
                    "used": usage.used,
                    "free": usage.free,
                    "percent_used": usage.percent_used,
                },
                "xcode": {
                    "version": xcode.xcode_version(),
                    "developer_dir": xcode.developer_dir(),
                    "running": xcode.xcode_running(),
                },
                "categories": categories,
                "developer_total": developer_total,
                "reclaimable": reclaimable,
            },
            warnings=warnings,
            meta={"elapsed_ms": elapsed_ms(start)},
        )
