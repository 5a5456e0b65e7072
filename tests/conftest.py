"""Shared pytest fixtures and test helpers for xcclean tests."""

from __future__ import annotations

import os
import time
from collections.abc import Generator
from dataclasses import dataclass, field
from pathlib import Path

import pytest
from click.testing import CliRunner

from xcclean.config.settings import XcSettings
from xcclean.infrastructure import xcode
from xcclean.infrastructure.environment import Environment

DERIVED_DATA = "Library/Developer/Xcode/DerivedData"
ARCHIVES = "Library/Developer/Xcode/Archives"
IOS_DEVICE_SUPPORT = "Library/Developer/Xcode/iOS DeviceSupport"
XCODE_CACHES = "Library/Caches/com.apple.dt.Xcode"
SIM_DEVICES = "Library/Developer/CoreSimulator/Devices"

# Sizes of the sample tree built by ``home``.
DERIVED_DATA_SIZE = 6000
ARCHIVES_SIZE = 5000
DEVICE_SUPPORT_SIZE = 8000
XCODE_CACHES_SIZE = 500
TOTAL_SIZE = DERIVED_DATA_SIZE + ARCHIVES_SIZE + DEVICE_SUPPORT_SIZE + XCODE_CACHES_SIZE
RECLAIMABLE = TOTAL_SIZE - ARCHIVES_SIZE


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def write_file(path: Path, size: int) -> Path:
    """Create *path* (and parents) holding *size* bytes."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)
    return path


def set_age(path: Path, days: float) -> None:
    """Backdate the mtime of *path* by *days*."""
    stamp = time.time() - days * 86_400
    os.utime(path, (stamp, stamp), follow_symlinks=False)


@dataclass
class FakeXcode:
    """Stand-in for the Apple tooling probes in :mod:`xcclean.infrastructure.xcode`."""

    version: str | None = "Xcode 15.4 (15F31d)"
    developer_dir: str | None = "/Applications/Xcode.app/Contents/Developer"
    running: bool = False
    xcrun_available: bool = True
    simulators: list[xcode.Simulator] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)

    def list_unavailable(self) -> list[xcode.Simulator]:
        if not self.xcrun_available:
            raise xcode.XcrunError("xcrun is not available")
        return [s for s in self.simulators if s.udid not in self.deleted]

    def delete(self, udid: str) -> None:
        if not self.xcrun_available:
            raise xcode.XcrunError("xcrun is not available")
        self.deleted.append(udid)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def fake_xcode(monkeypatch: pytest.MonkeyPatch) -> FakeXcode:
    fake = FakeXcode()
    monkeypatch.setattr(xcode, "xcode_version", lambda: fake.version)
    monkeypatch.setattr(xcode, "developer_dir", lambda: fake.developer_dir)
    monkeypatch.setattr(xcode, "xcode_running", lambda: fake.running)
    monkeypatch.setattr(xcode, "unavailable_simulators", fake.list_unavailable)
    monkeypatch.setattr(xcode, "delete_simulator", fake.delete)
    return fake


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """A fake home directory with a small, known set of developer caches.

    * DerivedData: ``App-abc`` (4000 B, fresh) and ``Old-def`` (2000 B, 60 days old)
    * Archives: one 5000 B archive (caution category)
    * iOS DeviceSupport: one 8000 B symbol directory, 100 days old
    * Xcode caches: one 500 B file
    """
    root = tmp_path / "home"
    dd = root / DERIVED_DATA
    write_file(dd / "App-abc" / "Build" / "out.o", 3000)
    write_file(dd / "App-abc" / "Index" / "idx", 1000)
    write_file(dd / "Old-def" / "data", 2000)
    set_age(dd / "Old-def", 60)

    write_file(root / ARCHIVES / "2024-01-01" / "App.xcarchive" / "Info.plist", 5000)

    ds = root / IOS_DEVICE_SUPPORT / "17.2 (21C62)"
    write_file(ds / "Symbols" / "dyld", 8000)
    set_age(ds, 100)

    write_file(root / XCODE_CACHES / "cache.db", 500)
    return root


@pytest.fixture
def isolated(home: Path, fake_xcode: FakeXcode, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point xcclean at the fake home with no config file. Returns the home path."""
    monkeypatch.setenv("XCCLEAN_PATHS__HOME", str(home))
    monkeypatch.setenv("XCCLEAN_CONFIG", str(home / "missing-config.toml"))
    for var in list(os.environ):
        if var.startswith("XCCLEAN_") and var not in ("XCCLEAN_PATHS__HOME", "XCCLEAN_CONFIG"):
            monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def settings(isolated: Path) -> XcSettings:
    return XcSettings.from_cli()


@pytest.fixture
def env(settings: XcSettings) -> Generator[Environment]:
    e = Environment(settings)
    try:
        yield e
    finally:
        e.close()


def make_env(**overrides: object) -> Environment:
    """Environment built from the current process env plus setting overrides."""
    return Environment(XcSettings.from_cli(**overrides))
