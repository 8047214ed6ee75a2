"""The catalog aggregate root and the delta value folded into it."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from armory.domain.model.entity import CatalogEntity, MetaFacts, ensure_unique_ids
from armory.domain.model.enums import Category
from armory.domain.model.primitives import CatalogVersion

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime

    from armory.domain.model.primitives import EntityId
    from armory.domain.model.provenance import ProvenanceEntry

INITIAL_VERSION: Final[str] = "1.0.0"


@dataclass(frozen=True, slots=True, kw_only=True)
class Catalog:
    """Canonical, versioned catalog document.

    ``version`` stays a raw string: a corrupted value must survive loading so
    the reconciler can refuse it instead of silently repairing it. ``extras``
    holds top-level document keys the engine does not own (for example curated
    meta loadouts); merges carry them forward untouched.
    """

    version: str = INITIAL_VERSION
    updated_at: datetime | None = None
    weapons: tuple[CatalogEntity, ...] = ()
    gadgets: tuple[CatalogEntity, ...] = ()
    specializations: tuple[CatalogEntity, ...] = ()
    meta: MetaFacts = field(default_factory=MetaFacts)
    provenance: tuple[ProvenanceEntry, ...] = ()
    extras: Mapping[str, object] = field(default_factory=dict["str", "object"])

    def __post_init__(self) -> None:
        for category in Category:
            ensure_unique_ids(category.value, self.entities(category))
        extras = copy.deepcopy(dict(self.extras))
        object.__setattr__(self, "extras", MappingProxyType(extras))

    @classmethod
    def empty(cls, version: CatalogVersion | str = INITIAL_VERSION) -> Catalog:
        return cls(version=str(version))

    def entities(self, category: Category) -> tuple[CatalogEntity, ...]:
        return getattr(self, category.value)

    def find(self, category: Category, entity_id: EntityId) -> CatalogEntity | None:
        for entity in self.entities(category):
            if entity.id == entity_id:
                return entity
        return None

    def parsed_version(self) -> CatalogVersion:
        return CatalogVersion.parse(self.version)

    @property
    def entity_count(self) -> int:
        return sum(len(self.entities(category)) for category in Category)


@dataclass(frozen=True, slots=True, kw_only=True)
class Delta:
    """New or additional facts for a catalog; never a full catalog."""

    weapons: tuple[CatalogEntity, ...] = ()
    gadgets: tuple[CatalogEntity, ...] = ()
    specializations: tuple[CatalogEntity, ...] = ()
    meta: MetaFacts = field(default_factory=MetaFacts)

    def __post_init__(self) -> None:
        for category in Category:
            ensure_unique_ids(f"delta {category.value}", self.entities(category))

    def entities(self, category: Category) -> tuple[CatalogEntity, ...]:
        return getattr(self, category.value)

    @property
    def is_empty(self) -> bool:
        return not any(self.entities(category) for category in Category) and not (
            self.meta.synergy or self.meta.counters
        )
