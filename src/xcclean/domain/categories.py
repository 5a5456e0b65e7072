"""Cleanable storage categories and the category registry.

A category is a named group of directories under the user's home whose
*children* can be removed to reclaim space. The category roots
themselves are never removed; Xcode recreates their contents on demand.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

RISK_SAFE = "safe"
RISK_CAUTION = "caution"

KIND_DIRECTORY = "directory"
KIND_SIMULATORS = "simulators"

_KEY_RE = re.compile(r"^[a-z][a-z0-9_]*$")

_DEVELOPER = "Library/Developer"
_XCODE = f"{_DEVELOPER}/Xcode"
_CACHES = "Library/Caches"


class UnknownCategoryError(KeyError):
    """Raised when one or more category keys are not registered."""

    def __init__(self, keys: list[str]) -> None:
        super().__init__(", ".join(keys))
        self.keys = keys

    def __str__(self) -> str:
        return f"Unknown category: {', '.join(self.keys)}"


class Category(BaseModel):
    """A group of cleanable directories."""

    model_config = {"frozen": True}

    key: str
    name: str
    description: str = ""
    paths: list[str] = Field(min_length=1)
    risk: Literal["safe", "caution"] = RISK_SAFE
    kind: Literal["directory", "simulators"] = KIND_DIRECTORY

    @field_validator("key")
    @classmethod
    def _validate_key(cls, value: str) -> str:
        if not _KEY_RE.match(value):
            msg = f"Category key must be lowercase snake_case: {value!r}"
            raise ValueError(msg)
        return value

    @field_validator("paths")
    @classmethod
    def _validate_paths(cls, value: list[str]) -> list[str]:
        for p in value:
            if Path(p).is_absolute() or ".." in Path(p).parts:
                msg = f"Category paths must be relative to home: {p!r}"
                raise ValueError(msg)
        return value

    @property
    def is_safe(self) -> bool:
        return self.risk == RISK_SAFE

    def roots(self, home: Path) -> list[Path]:
        """Absolute category roots under *home*."""
        return [home / p for p in self.paths]


def builtin_categories() -> list[Category]:
    """The categories xcclean knows about out of the box, in display order."""
    return [
        Category(
            key="derived_data",
            name="DerivedData",
            description="Build intermediates and indexes, rebuilt on next build",
            paths=[f"{_XCODE}/DerivedData"],
        ),
        Category(
            key="archives",
            name="Archives",
            description="App archives and their dSYMs, needed to symbolicate crash reports",
            paths=[f"{_XCODE}/Archives"],
            risk=RISK_CAUTION,
        ),
        Category(
            key="ios_device_support",
            name="iOS Device Support",
            description="Debug symbols copied from connected iOS devices",
            paths=[f"{_XCODE}/iOS DeviceSupport"],
        ),
        Category(
            key="watchos_device_support",
            name="watchOS Device Support",
            description="Debug symbols copied from paired Apple Watches",
            paths=[f"{_XCODE}/watchOS DeviceSupport"],
        ),
        Category(
            key="tvos_device_support",
            name="tvOS Device Support",
            description="Debug symbols copied from Apple TV devices",
            paths=[f"{_XCODE}/tvOS DeviceSupport"],
        ),
        Category(
            key="visionos_device_support",
            name="visionOS Device Support",
            description="Debug symbols copied from Vision Pro devices",
            paths=[f"{_XCODE}/visionOS DeviceSupport"],
        ),
        Category(
            key="simulator_caches",
            name="Simulator Caches",
            description="CoreSimulator dyld and runtime caches",
            paths=[f"{_DEVELOPER}/CoreSimulator/Caches"],
        ),
        Category(
            key="unavailable_simulators",
            name="Unavailable Simulators",
            description="Simulator devices whose runtime is no longer installed",
            paths=[f"{_DEVELOPER}/CoreSimulator/Devices"],
            kind=KIND_SIMULATORS,
        ),
        Category(
            key="xcode_caches",
            name="Xcode Caches",
            description="Xcode's own cache directory",
            paths=[f"{_CACHES}/com.apple.dt.Xcode"],
        ),
        Category(
            key="documentation_cache",
            name="Documentation Cache",
            description="Downloaded developer documentation",
            paths=[f"{_XCODE}/DocumentationCache"],
        ),
        Category(
            key="device_logs",
            name="Device Logs",
            description="Device and simulator logs",
            paths=[f"{_XCODE}/iOS Device Logs", "Library/Logs/CoreSimulator"],
        ),
        Category(
            key="swiftpm_cache",
            name="SwiftPM Cache",
            description="Swift Package Manager repository and artifact cache",
            paths=[f"{_CACHES}/org.swift.swiftpm"],
        ),
        Category(
            key="cocoapods_cache",
            name="CocoaPods Cache",
            description="Downloaded pod specs and sources",
            paths=[f"{_CACHES}/CocoaPods"],
        ),
        Category(
            key="carthage_cache",
            name="Carthage Cache",
            description="Carthage dependency cache",
            paths=[f"{_CACHES}/org.carthage.CarthageKit"],
        ),
    ]


class CategoryRegistry:
    """Ordered key -> Category mapping.

    Built-ins are registered first; plugins may append more. Iteration
    order is registration order, which is also display order.
    """

    def __init__(self, categories: Iterable[Category] = ()) -> None:
        self._categories: dict[str, Category] = {}
        for category in categories:
            self.register(category)

    @classmethod
    def default(cls) -> CategoryRegistry:
        return cls(builtin_categories())

    def register(self, category: Category) -> None:
        if category.key in self._categories:
            msg = f"Category already registered: {category.key!r}"
            raise ValueError(msg)
        self._categories[category.key] = category

    def get(self, key: str) -> Category:
        try:
            return self._categories[key]
        except KeyError:
            raise UnknownCategoryError([key]) from None

    def resolve(self, keys: Iterable[str]) -> list[Category]:
        """Return categories for *keys* in registry order.

        Raises UnknownCategoryError listing every unknown key.
        """
        wanted = set(keys)
        unknown = sorted(wanted - self._categories.keys())
        if unknown:
            raise UnknownCategoryError(unknown)
        return [c for c in self._categories.values() if c.key in wanted]

    def safe(self) -> list[Category]:
        return [c for c in self._categories.values() if c.is_safe]

    def keys(self) -> list[str]:
        return list(self._categories)

    def without(self, keys: Iterable[str]) -> list[Category]:
        """All categories except *keys* (unknown keys are ignored)."""
        excluded = set(keys)
        return [c for c in self._categories.values() if c.key not in excluded]

    def __contains__(self, key: object) -> bool:
        return key in self._categories

    def __iter__(self) -> Iterator[Category]:
        return iter(self._categories.values())

    def __len__(self) -> int:
        return len(self._categories)
