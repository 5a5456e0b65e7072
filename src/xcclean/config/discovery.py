"""Config file discovery and loading.

xcclean is a per-user tool, so there is no walk-up search: the config
lives in the user's config directory. Supports the XCCLEAN_CONFIG env
var and the --config CLI flag as overrides.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from xcclean.config.models import XcConfig

CONFIG_DIRNAME = "xcclean"
CONFIG_FILENAME = "config.toml"
CONFIG_ENV_VAR = "XCCLEAN_CONFIG"


def default_config_path(home: Path | None = None) -> Path:
    """Return ``$XDG_CONFIG_HOME/xcclean/config.toml`` (``~/.config`` fallback)."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else (home or Path.home()) / ".config"
    return base / CONFIG_DIRNAME / CONFIG_FILENAME


def find_config(home: Path | None = None) -> Path | None:
    """Locate the config file.

    Checks XCCLEAN_CONFIG first; when set, it is authoritative even if the
    file does not exist. Returns None if no file is found.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path).expanduser()
        if p.is_file():
            return p
        return None

    candidate = default_config_path(home)
    if candidate.is_file():
        return candidate
    return None


def load_config(path: Path | None = None) -> XcConfig:
    """Load and validate config from a TOML file.

    If *path* is None, uses find_config() to discover the file.
    Returns default XcConfig if no file is found.
    """
    if path is None:
        path = find_config()

    if path is None:
        return XcConfig()

    raw = path.read_text(encoding="utf-8")
    data: dict[str, Any] = tomllib.loads(raw)
    return XcConfig.model_validate(data)
