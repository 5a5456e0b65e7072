"""Parsing of interactive-menu selections such as ``1,3 5-7``."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

_QUIT = frozenset({"q", "quit", "exit"})
_ALL = frozenset({"a", "all"})
_RANGE_RE = re.compile(r"^(\d+)-(\d+)$")
_SPLIT_RE = re.compile(r"[,\s]+")


@dataclass(frozen=True)
class Selection:
    """A parsed menu selection: zero-based indices, or a request to quit."""

    indices: list[int] = field(default_factory=list)
    quit: bool = False


def parse_selection(text: str, count: int, *, safe: Iterable[int] = ()) -> Selection:
    """Parse menu input against a list of *count* items numbered from 1.

    ``q`` quits, ``a`` selects the zero-based indices in *safe*, anything
    else is a list of numbers and ``lo-hi`` ranges separated by commas or
    spaces. Raises ValueError naming the first bad token.
    """
    stripped = text.strip().lower()
    if stripped in _QUIT:
        return Selection(quit=True)
    if stripped in _ALL:
        return Selection(indices=sorted(set(safe)))

    chosen: set[int] = set()
    for token in _SPLIT_RE.split(stripped):
        if not token:
            continue
        match = _RANGE_RE.match(token)
        if match:
            lo, hi = int(match.group(1)), int(match.group(2))
            if lo > hi:
                lo, hi = hi, lo
            numbers = range(lo, hi + 1)
        elif token.isdigit():
            numbers = range(int(token), int(token) + 1)
        else:
            msg = f"Invalid selection: {token!r}"
            raise ValueError(msg)

        for n in numbers:
            if not 1 <= n <= count:
                msg = f"Selection out of range (1-{count}): {token!r}"
                raise ValueError(msg)
            chosen.add(n - 1)

    return Selection(indices=sorted(chosen))
