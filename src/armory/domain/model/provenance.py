"""Audit records for ingestion events."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import TYPE_CHECKING

from armory.domain.model.enums import Category

if TYPE_CHECKING:
    from collections.abc import Mapping


def as_utc(value: datetime) -> datetime:
    """Naive timestamps are taken to be UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


@dataclass(frozen=True, slots=True)
class ProvenanceDescriptor:
    """Caller-supplied description of where a delta came from."""

    source: str
    timestamp: datetime

    def __post_init__(self) -> None:
        if not self.source or not self.source.strip():
            raise ValueError("provenance source must not be blank")
        object.__setattr__(self, "timestamp", as_utc(self.timestamp))


@dataclass(frozen=True, slots=True)
class CategorySummary:
    added: int = 0
    updated: int = 0
    tags_added: int = 0
    notes_added: int = 0


@dataclass(frozen=True, slots=True)
class MetaSummary:
    synergy_added: int = 0
    counters_added: int = 0


@dataclass(frozen=True, slots=True, kw_only=True)
class ProvenanceEntry:
    """One applied merge. Entries are appended and never rewritten."""

    source: str
    timestamp: datetime
    summary: Mapping[Category, CategorySummary] = field(
        default_factory=dict["Category", "CategorySummary"]
    )
    meta: MetaSummary = field(default_factory=MetaSummary)
    from_version: str | None = None
    to_version: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", as_utc(self.timestamp))
        complete = {category: self.summary.get(category, CategorySummary()) for category in Category}
        object.__setattr__(self, "summary", MappingProxyType(complete))

    def for_category(self, category: Category) -> CategorySummary:
        return self.summary[category]

    @property
    def total_added(self) -> int:
        return sum(item.added for item in self.summary.values())

    @property
    def total_updated(self) -> int:
        return sum(item.updated for item in self.summary.values())
