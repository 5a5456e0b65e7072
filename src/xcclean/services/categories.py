"""CategoryService — describe the registered categories."""

from __future__ import annotations

from xcclean.services.base import BaseService
from xcclean.services.result import ServiceResult


class CategoryService(BaseService):
    def list_categories(self) -> ServiceResult:
        """Every registered category with its resolved roots."""
        excluded = set(self._settings.scan.exclude)
        home = self._env.home
        items = [
            {
                "key": c.key,
                "name": c.name,
                "description": c.description,
                "risk": c.risk,
                "kind": c.kind,
                "excluded": c.key in excluded,
                "paths": [str(p) for p in c.roots(home)],
            }
            for c in self._env.registry
        ]
        return ServiceResult(
            ok=True,
            op="list_categories",
            data={"items": items, "count": len(items)},
        )
