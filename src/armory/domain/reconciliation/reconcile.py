"""Catalog reconciler: fold a normalized delta into the current catalog.

Tie-break rules:
- identity is the entity ``id`` within its category
- scalar fields (class restriction, attributes) of the existing entity win;
  incoming values only fill fields the existing entity does not have
- tags, notes, synergy and counters are always unioned, never replaced
- existing entities keep their order, new entities follow in delta order

The input catalog is never mutated; a new catalog value is returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from armory.domain.errors import MergeError
from armory.domain.model import (
    Category,
    CategorySummary,
    MetaFacts,
    MetaSummary,
    ProvenanceEntry,
)
from armory.domain.model.primitives import union

if TYPE_CHECKING:
    from collections.abc import Sequence

    from armory.domain.model import (
        Catalog,
        CatalogEntity,
        CatalogVersion,
        Delta,
        ProvenanceDescriptor,
    )

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EntityMerge:
    """Outcome of overlaying one incoming entity onto an existing one."""

    entity: CatalogEntity
    tags_added: int = 0
    notes_added: int = 0
    fields_filled: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.tags_added or self.notes_added or self.fields_filled)


def merge_entity(base: CatalogEntity, incoming: CatalogEntity) -> EntityMerge:
    """Overlay ``incoming`` onto ``base`` (both must share the same id)."""

    if base.id != incoming.id:
        raise ValueError(f"cannot merge entity {incoming.id!r} into {base.id!r}")

    fields_filled = 0
    class_restriction = base.class_restriction
    if class_restriction is None and incoming.class_restriction is not None:
        class_restriction = incoming.class_restriction
        fields_filled += 1

    attributes = dict(base.attributes)
    for key, value in incoming.attributes.items():
        if attributes.get(key) is None and value is not None:
            attributes[key] = value
            fields_filled += 1

    tags = union(base.tags, incoming.tags)
    notes = union(base.notes, incoming.notes)
    result = EntityMerge(
        entity=base,
        tags_added=len(tags) - len(base.tags),
        notes_added=len(notes) - len(base.notes),
        fields_filled=fields_filled,
    )
    if not result.changed:
        return result
    merged = replace(
        base,
        class_restriction=class_restriction,
        tags=tags,
        notes=notes,
        attributes=attributes,
    )
    return replace(result, entity=merged)


def reconcile_category(
    existing: Sequence[CatalogEntity],
    incoming: Sequence[CatalogEntity],
) -> tuple[tuple[CatalogEntity, ...], CategorySummary]:
    """Merge one entity collection and summarize what changed."""

    pending = {entity.id: entity for entity in incoming}
    merged: list[CatalogEntity] = []
    updated = tags_added = notes_added = 0

    for entity in existing:
        candidate = pending.pop(entity.id, None)
        if candidate is None:
            merged.append(entity)
            continue
        result = merge_entity(entity, candidate)
        merged.append(result.entity)
        if result.changed:
            updated += 1
            tags_added += result.tags_added
            notes_added += result.notes_added

    # whatever is left was not in the catalog; dict order is delta order
    for entity in pending.values():
        merged.append(entity)
        tags_added += len(entity.tags)
        notes_added += len(entity.notes)

    summary = CategorySummary(
        added=len(pending),
        updated=updated,
        tags_added=tags_added,
        notes_added=notes_added,
    )
    return tuple(merged), summary


def _current_version(catalog: Catalog) -> CatalogVersion:
    try:
        return catalog.parsed_version()
    except ValueError as exc:
        raise MergeError(f"Catalog version {catalog.version!r} is malformed") from exc


def reconcile(
    current: Catalog,
    delta: Delta,
    descriptor: ProvenanceDescriptor,
) -> tuple[Catalog, ProvenanceEntry]:
    """Return the merged catalog and the provenance entry appended to it."""

    next_version = _current_version(current).bump_patch()

    collections: dict[str, tuple[CatalogEntity, ...]] = {}
    summary: dict[Category, CategorySummary] = {}
    for category in Category:
        collections[category.value], summary[category] = reconcile_category(
            current.entities(category),
            delta.entities(category),
        )

    synergy = union(current.meta.synergy, delta.meta.synergy)
    counters = union(current.meta.counters, delta.meta.counters)
    entry = ProvenanceEntry(
        source=descriptor.source,
        timestamp=descriptor.timestamp,
        summary=summary,
        meta=MetaSummary(
            synergy_added=len(synergy) - len(current.meta.synergy),
            counters_added=len(counters) - len(current.meta.counters),
        ),
        from_version=current.version,
        to_version=str(next_version),
    )
    merged = replace(
        current,
        version=str(next_version),
        updated_at=descriptor.timestamp,
        weapons=collections[Category.WEAPONS.value],
        gadgets=collections[Category.GADGETS.value],
        specializations=collections[Category.SPECIALIZATIONS.value],
        meta=MetaFacts(synergy=synergy, counters=counters),
        provenance=(*current.provenance, entry),
    )
    log.debug(
        "Reconciled catalog %s -> %s: added=%s, updated=%s",
        current.version,
        merged.version,
        entry.total_added,
        entry.total_updated,
    )
    return merged, entry
