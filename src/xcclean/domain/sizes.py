"""Byte-size formatting and parsing.

Uses decimal (SI) units, matching what Finder and ``About This Mac``
report, so numbers printed by xcclean line up with the system UI.
"""

from __future__ import annotations

import re

_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")
_STEP = 1000

_MULTIPLIERS: dict[str, int] = {
    "": 1,
    "b": 1,
    "k": _STEP,
    "kb": _STEP,
    "m": _STEP**2,
    "mb": _STEP**2,
    "g": _STEP**3,
    "gb": _STEP**3,
    "t": _STEP**4,
    "tb": _STEP**4,
}

_SIZE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([a-zA-Z]*)\s*$")

SECONDS_PER_DAY = 86_400


def format_bytes(n: int) -> str:
    """Format a byte count for humans.

    Examples:
        >>> format_bytes(0)
        '0 B'
        >>> format_bytes(1500)
        '1.5 KB'
        >>> format_bytes(1_234_000_000)
        '1.2 GB'
    """
    if n < 0:
        msg = f"Byte count cannot be negative: {n}"
        raise ValueError(msg)
    if n < _STEP:
        return f"{n} B"
    value = float(n)
    for unit in _UNITS[1:]:
        value /= _STEP
        # Round first so 999_999 B reads 1.0 MB, not 1000.0 KB.
        if round(value, 1) < _STEP or unit == _UNITS[-1]:
            return f"{value:.1f} {unit}"
    raise AssertionError("unreachable")


def parse_size(text: str) -> int:
    """Parse a human size such as ``500``, ``10KB`` or ``1.5 GB`` into bytes."""
    match = _SIZE_RE.match(text)
    if match is None:
        msg = f"Invalid size: {text!r}"
        raise ValueError(msg)
    number, unit = match.groups()
    multiplier = _MULTIPLIERS.get(unit.lower())
    if multiplier is None:
        msg = f"Unknown size unit {unit!r} in {text!r}"
        raise ValueError(msg)
    return int(float(number) * multiplier)


def age_days(mtime: float, now: float) -> int:
    """Whole days between *mtime* and *now* (clock skew clamps to 0)."""
    return max(0, int((now - mtime) // SECONDS_PER_DAY))
