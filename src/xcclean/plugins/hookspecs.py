"""Pluggy hook specifications for xcclean.

One setup-time hook lets plugins contribute extra cleanable categories
(for example a team's custom build cache). Two event hooks are fired
synchronously after scans and cleans.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pluggy

if TYPE_CHECKING:
    from xcclean.domain.categories import Category

hookspec = pluggy.HookspecMarker("xcclean")
hookimpl = pluggy.HookimplMarker("xcclean")


class XccleanHookSpec:
    """Hook specifications for the xcclean plugin system."""

    @hookspec
    def register_categories(self) -> list[Category] | None:
        """Return extra categories to append to the registry."""

    @hookspec
    def post_scan(self, total_size: int, categories: list[dict[str, Any]]) -> None:
        """Called after a scan (or status overview) completes."""

    @hookspec
    def post_clean(
        self,
        category: str,
        bytes_freed: int,
        items_removed: int,
        dry_run: bool,
    ) -> None:
        """Called once per category after a clean."""
