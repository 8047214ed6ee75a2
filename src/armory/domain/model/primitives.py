"""Domain primitives: scalar aliases + small value objects."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

type EntityId = str
type Tag = str
type Note = str

_VERSION_PATTERN: Final = re.compile(r"([0-9]+)\.([0-9]+)\.([0-9]+)")


@dataclass(frozen=True, order=True, slots=True)
class CatalogVersion:
    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        if min(self.major, self.minor, self.patch) < 0:
            raise ValueError("version components must be non-negative")

    @classmethod
    def parse(cls, text: str) -> CatalogVersion:
        match = _VERSION_PATTERN.fullmatch(text) if isinstance(text, str) else None
        if match is None:
            raise ValueError(f"malformed catalog version: {text!r}")
        major, minor, patch = (int(part) for part in match.groups())
        return cls(major, minor, patch)

    def bump_patch(self) -> CatalogVersion:
        """Ingestion merges are additive, so only the patch component moves."""

        return CatalogVersion(self.major, self.minor, self.patch + 1)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def unique(values: tuple[str, ...] | list[str]) -> tuple[str, ...]:
    """Drop exact duplicates while keeping first-seen order."""

    return tuple(dict.fromkeys(values))


def union(existing: tuple[str, ...], incoming: tuple[str, ...]) -> tuple[str, ...]:
    """Set union of two duplicate-free tuples; existing values keep their position."""

    return unique((*existing, *incoming))
