"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``XCCLEAN_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``~/.config/xcclean/config.toml`` (or ``--config``)
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from xcclean.config.discovery import find_config
from xcclean.config.models import (
    CleanConfig,
    HistoryConfig,
    PathsConfig,
    PluginsConfig,
    ScanConfig,
)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from the TOML config file, if one was found."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class XcSettings(BaseSettings):
    """Unified settings for the xcclean CLI.

    Stored on the :class:`~xcclean.commands._context.AppContext` created
    by the root group. Path accessors resolve the ``[paths]`` section
    against the effective home directory.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "XCCLEAN_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    no_interact: bool = False
    no_color: bool = False

    # --- TOML sections ---
    paths: PathsConfig = Field(default_factory=PathsConfig)
    clean: CleanConfig = Field(default_factory=CleanConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        **cli_flags: Any,
    ) -> XcSettings:
        """Construct settings from a CLI invocation.

        Uses *config_path* when given (a missing file is ignored, as with
        an absent default config), otherwise discovers the default file.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path).expanduser()
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config()

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None

    # --- Resolved paths ---

    @property
    def home(self) -> Path:
        """Home directory whose Library/ tree is scanned."""
        return self.paths.home.expanduser() if self.paths.home else Path.home()

    @property
    def state_dir(self) -> Path:
        """Directory holding history.db and local plugins."""
        if self.paths.state_dir:
            return self.paths.state_dir.expanduser()
        return self.home / ".xcclean"

    @property
    def trash_dir(self) -> Path:
        if self.paths.trash_dir:
            return self.paths.trash_dir.expanduser()
        return self.home / ".Trash"

    @property
    def history_db(self) -> Path:
        return self.state_dir / "history.db"

    @property
    def plugins_dir(self) -> Path:
        return self.state_dir / "plugins"
