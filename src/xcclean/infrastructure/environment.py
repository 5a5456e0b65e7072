"""Environment — the machine-level resources a service operates on.

Bundles settings with the category registry (built-ins plus plugin
contributions), the plugin manager, and the history store. Everything
is created lazily so ``--help`` and ``--version`` stay cheap.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from xcclean.domain.categories import Category, CategoryRegistry
from xcclean.infrastructure.history import HistoryStore

if TYPE_CHECKING:
    from pathlib import Path

    from xcclean.config.settings import XcSettings
    from xcclean.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class Environment:
    """Lazily-initialized access to registry, plugins, and history."""

    def __init__(self, settings: XcSettings) -> None:
        self.settings = settings
        self._registry: CategoryRegistry | None = None
        self._plugins: PluginManager | None = None
        self._plugins_loaded = False
        self._history: HistoryStore | None = None

    @property
    def home(self) -> Path:
        return self.settings.home

    @property
    def plugins(self) -> PluginManager | None:
        """Loaded plugin manager, or None when plugins are disabled."""
        if not self.settings.plugins.enabled:
            return None
        if not self._plugins_loaded:
            from xcclean.plugins.manager import PluginManager

            self._plugins = PluginManager()
            names = self._plugins.discover_and_load(local_dir=self.settings.plugins_dir)
            self._plugins_loaded = True
            if names:
                logger.debug("Loaded plugins: %s", ", ".join(names))
        return self._plugins

    @property
    def registry(self) -> CategoryRegistry:
        """Built-in categories followed by plugin-provided ones."""
        if self._registry is None:
            registry = CategoryRegistry.default()
            if self.plugins is not None:
                self.plugins.extend_registry(registry)
            self._registry = registry
        return self._registry

    @property
    def history(self) -> HistoryStore:
        if self._history is None:
            self._history = HistoryStore(self.settings.history_db)
        return self._history

    def visible_categories(self) -> list[Category]:
        """Registered categories minus ``[scan] exclude``."""
        return self.registry.without(self.settings.scan.exclude)

    def close(self) -> None:
        if self._history is not None:
            self._history.close()
            self._history = None
