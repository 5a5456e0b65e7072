"""Plugin discovery and loading.

Discovery: ``xcclean.plugins`` entry points (pip-installed), each loaded
in isolation, plus local single-file plugins from ``~/.xcclean/plugins/``.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from importlib.metadata import entry_points
from pathlib import Path

import pluggy

from xcclean.domain.categories import Category, CategoryRegistry
from xcclean.plugins.hookspecs import XccleanHookSpec

PROJECT_NAME = "xcclean"
ENTRY_POINT_GROUP = "xcclean.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and hook dispatch."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(XccleanHookSpec)
        self._loaded: bool = False

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Discover plugins from entry points and an optional local directory.

        Returns a list of loaded plugin names.
        """
        self._discover_entry_points()
        if local_dir is not None:
            self._discover_local(local_dir)
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        """Access the hook relay for dispatching events."""
        return self._pm.hook

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def extend_registry(self, registry: CategoryRegistry) -> list[str]:
        """Append plugin-provided categories to *registry*.

        Invalid or duplicate categories are skipped with a warning.
        Returns the keys that were added.
        """
        added: list[str] = []
        for plugin in self._pm.get_plugins():
            plugin_name = self._pm.get_name(plugin) or plugin.__class__.__name__
            hook = getattr(plugin, "register_categories", None)
            if hook is None:
                continue
            try:
                categories = hook()
            except Exception:
                logger.warning(
                    "Failed to collect categories from plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue
            for category in categories or []:
                if not isinstance(category, Category):
                    logger.warning("Plugin %s returned a non-Category: %r", plugin_name, category)
                    continue
                try:
                    registry.register(category)
                except ValueError:
                    logger.warning(
                        "Skipping category %r from plugin %s",
                        category.key,
                        plugin_name,
                        exc_info=True,
                    )
                    continue
                added.append(category.key)
        return added

    # ------------------------------------------------------------------
    # Entry-point discovery
    # ------------------------------------------------------------------

    def _discover_entry_points(self) -> None:
        """Load each ``xcclean.plugins`` entry point on its own.

        A distribution whose plugin fails to import or instantiate is
        logged and skipped; the other entry points still load.
        """
        for ep in entry_points(group=ENTRY_POINT_GROUP):
            if self._pm.get_plugin(ep.name) is not None or self._pm.is_blocked(ep.name):
                continue
            try:
                plugin = ep.load()
                if inspect.isclass(plugin) and self._has_hook_impls(plugin):
                    # Hook dispatch against a class object leaves ``self`` unbound.
                    plugin = plugin()
                self._pm.register(plugin, name=ep.name)
            except Exception:
                logger.warning("Failed to load plugin entry point %s", ep.name, exc_info=True)
                continue
            logger.debug("Loaded entry-point plugin: %s", ep.name)

    # ------------------------------------------------------------------
    # Local directory discovery
    # ------------------------------------------------------------------

    def _discover_local(self, local_dir: Path) -> None:
        """Load ``*.py`` files in *local_dir* and register their hook classes.

        A broken local plugin is logged and skipped; it never prevents
        xcclean from running.
        """
        if not local_dir.is_dir():
            return

        for py_file in sorted(local_dir.glob("*.py")):
            if py_file.name.startswith("_"):
                continue
            module_name = f"xcclean_local_plugin_{py_file.stem}"
            try:
                spec = importlib.util.spec_from_file_location(module_name, py_file)
                if spec is None or spec.loader is None:
                    logger.warning("Could not create module spec for %s", py_file)
                    continue
                module = importlib.util.module_from_spec(spec)
                sys.modules[module_name] = module
                spec.loader.exec_module(module)
            except Exception:
                logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
                sys.modules.pop(module_name, None)
                continue

            for _attr_name, obj in inspect.getmembers(module, inspect.isclass):
                if obj.__module__ != module_name:
                    continue
                if not self._has_hook_impls(obj):
                    continue
                try:
                    self.register_plugin(obj(), name=f"{module_name}.{obj.__name__}")
                except Exception:
                    logger.warning(
                        "Failed to instantiate plugin class %s from %s",
                        obj.__name__,
                        py_file,
                        exc_info=True,
                    )

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Whether *cls* has methods decorated with ``@hookimpl``.

        ``HookimplMarker("xcclean")`` sets an ``xcclean_impl`` attribute.
        """
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, "xcclean_impl", None):
                return True
        return False
