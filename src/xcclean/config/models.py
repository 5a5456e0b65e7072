"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, config.toml only contains
overrides. A fresh install needs no config file at all.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from xcclean.domain.sizes import parse_size


class PathsConfig(BaseModel):
    """[paths] section.

    ``None`` means "derive from the home directory" at resolution time.
    """

    model_config = {"frozen": True}

    home: Path | None = None
    state_dir: Path | None = None
    trash_dir: Path | None = None


class CleanConfig(BaseModel):
    """[clean] section."""

    model_config = {"frozen": True}

    confirm: bool = True
    use_trash: bool = False
    older_than_days: int = Field(default=0, ge=0)
    min_size: int = Field(default=0, ge=0)

    @field_validator("min_size", mode="before")
    @classmethod
    def _parse_min_size(cls, value: object) -> object:
        if isinstance(value, str):
            return parse_size(value)
        return value


class ScanConfig(BaseModel):
    """[scan] section."""

    model_config = {"frozen": True}

    exclude: list[str] = Field(default_factory=list)


class HistoryConfig(BaseModel):
    """[history] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    keep_runs: int = Field(default=100, ge=1)


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True


class XcConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    paths: PathsConfig = Field(default_factory=PathsConfig)
    clean: CleanConfig = Field(default_factory=CleanConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
