"""Thin wrappers around Apple developer tooling.

Every probe degrades to ``None``/``False`` when the tool is missing
(non-macOS hosts, Command Line Tools without Xcode), so ``status`` and
``scan`` work everywhere. Only the simulator operations raise, because
callers must be able to tell "no unavailable simulators" apart from
"could not ask simctl".
"""

from __future__ import annotations

import json
import logging
import re
import shutil
import subprocess
from dataclasses import dataclass

logger = logging.getLogger(__name__)

PROBE_TIMEOUT = 10
SIMCTL_TIMEOUT = 120

_RUNTIME_PREFIX = "com.apple.CoreSimulator.SimRuntime."


class XcrunError(RuntimeError):
    """Raised when ``xcrun simctl`` is unavailable or fails."""


@dataclass(frozen=True)
class Simulator:
    """A simulator device as reported by ``simctl``."""

    udid: str
    name: str
    runtime: str


def _run(args: list[str], *, timeout: int = PROBE_TIMEOUT) -> subprocess.CompletedProcess[str] | None:
    """Run a probe command, returning None when it cannot be executed."""
    if shutil.which(args[0]) is None:
        logger.debug("%s not found on PATH", args[0])
        return None
    try:
        return subprocess.run(  # noqa: S603
            args,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired):
        logger.debug("Command failed: %s", " ".join(args), exc_info=True)
        return None


def xcode_version() -> str | None:
    """Return e.g. ``"Xcode 15.4 (15F31d)"``, or None if Xcode is not installed."""
    proc = _run(["xcodebuild", "-version"])
    if proc is None or proc.returncode != 0:
        return None
    lines = [line.strip() for line in proc.stdout.splitlines() if line.strip()]
    if not lines or not lines[0].startswith("Xcode"):
        return None
    build = next((ln.split(" ", 2)[-1] for ln in lines[1:] if ln.startswith("Build version")), None)
    return f"{lines[0]} ({build})" if build else lines[0]


def developer_dir() -> str | None:
    """Active developer directory from ``xcode-select -p``."""
    proc = _run(["xcode-select", "-p"])
    if proc is None or proc.returncode != 0:
        return None
    return proc.stdout.strip() or None


def xcode_running() -> bool:
    """Whether an Xcode process is currently running."""
    proc = _run(["pgrep", "-x", "Xcode"])
    return proc is not None and proc.returncode == 0


def _runtime_label(identifier: str) -> str:
    """``com.apple.CoreSimulator.SimRuntime.iOS-17-2`` -> ``iOS 17.2``."""
    tail = identifier.removeprefix(_RUNTIME_PREFIX)
    match = re.match(r"^([A-Za-z]+)-(\d+(?:-\d+)*)$", tail)
    if not match:
        return tail
    return f"{match.group(1)} {match.group(2).replace('-', '.')}"


def parse_simctl_devices(payload: str) -> list[Simulator]:
    """Parse ``simctl list devices -j`` JSON into Simulator records."""
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        msg = f"Unexpected simctl output: {exc}"
        raise XcrunError(msg) from exc

    simulators: list[Simulator] = []
    for runtime, devices in (data.get("devices") or {}).items():
        for device in devices or []:
            udid = device.get("udid")
            if not udid:
                continue
            simulators.append(
                Simulator(
                    udid=udid,
                    name=device.get("name", udid),
                    runtime=_runtime_label(runtime),
                )
            )
    return simulators


def unavailable_simulators() -> list[Simulator]:
    """Simulators whose runtime is no longer installed."""
    proc = _run(["xcrun", "simctl", "list", "devices", "unavailable", "-j"], timeout=SIMCTL_TIMEOUT)
    if proc is None:
        raise XcrunError("xcrun is not available")
    if proc.returncode != 0:
        msg = f"simctl list failed: {proc.stderr.strip() or proc.returncode}"
        raise XcrunError(msg)
    return parse_simctl_devices(proc.stdout)


def delete_simulator(udid: str) -> None:
    """Delete one simulator device via ``simctl``."""
    proc = _run(["xcrun", "simctl", "delete", udid], timeout=SIMCTL_TIMEOUT)
    if proc is None:
        raise XcrunError("xcrun is not available")
    if proc.returncode != 0:
        msg = f"simctl delete {udid} failed: {proc.stderr.strip() or proc.returncode}"
        raise XcrunError(msg)
