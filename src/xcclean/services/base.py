"""BaseService — foundation for all xcclean services.

Every service receives an :class:`Environment` at construction time.
The environment provides settings, the category registry, plugins, and
the history store.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from xcclean.config.settings import XcSettings
    from xcclean.infrastructure.environment import Environment

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class ScanService(BaseService):
            def scan(self, ...) -> ServiceResult:
                for category in self._env.visible_categories():
                    ...
    """

    def __init__(self, env: Environment) -> None:
        self._env = env

    @property
    def _settings(self) -> XcSettings:
        return self._env.settings

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Fire a plugin hook. No-op if plugins are disabled.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        plugins = self._env.plugins
        if plugins is None:
            return
        try:
            getattr(plugins.hook, hook_name)(**payload)
        except Exception:
            logger.debug("Plugin hook %s failed", hook_name, exc_info=True)
            warnings.append(f"Plugin hook {hook_name} failed")
