"""Catalog entities and catalog-wide meta facts."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from armory.domain.model.enums import PlayerClass
    from armory.domain.model.primitives import EntityId, Note, Tag

RESERVED_FIELDS: Final[frozenset[str]] = frozenset(
    {"id", "class", "classRestriction", "class_restriction", "tags", "notes"}
)


def _ensure_duplicate_free(label: str, values: tuple[str, ...]) -> None:
    if len(set(values)) != len(values):
        raise ValueError(f"{label} must be duplicate-free")


@dataclass(frozen=True, slots=True, kw_only=True)
class CatalogEntity:
    """One weapon, gadget or specialization.

    ``tags`` and ``notes`` are sets semantically; they are kept as tuples in
    first-seen order so serialized catalogs are reproducible. ``attributes``
    holds the remaining fields of the source record (name, damage,
    cooldown, ...); it is a read-only deep copy of what was passed in.
    """

    id: EntityId
    class_restriction: tuple[PlayerClass, ...] | None = None
    tags: tuple[Tag, ...] = ()
    notes: tuple[Note, ...] = ()
    attributes: Mapping[str, object] = field(default_factory=dict["str", "object"])

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise ValueError("entity id must be a non-blank string")
        if self.class_restriction is not None and not self.class_restriction:
            raise ValueError("class restriction must name at least one class")
        _ensure_duplicate_free("tags", self.tags)
        _ensure_duplicate_free("notes", self.notes)
        reserved = RESERVED_FIELDS.intersection(self.attributes)
        if reserved:
            raise ValueError(f"reserved fields in attributes: {', '.join(sorted(reserved))}")
        attributes = copy.deepcopy(dict(self.attributes))
        object.__setattr__(self, "attributes", MappingProxyType(attributes))


@dataclass(frozen=True, slots=True, kw_only=True)
class MetaFacts:
    """Catalog-wide synergy and counter-play observations."""

    synergy: tuple[str, ...] = ()
    counters: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _ensure_duplicate_free("synergy", self.synergy)
        _ensure_duplicate_free("counters", self.counters)


def ensure_unique_ids(label: str, entities: Iterable[CatalogEntity]) -> None:
    seen: set[EntityId] = set()
    for entity in entities:
        if entity.id in seen:
            raise ValueError(f"duplicate id {entity.id!r} in {label}")
        seen.add(entity.id)
