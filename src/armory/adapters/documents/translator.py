"""Translate between catalog documents (JSON) and domain catalog values."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

from armory.domain.model import (
    Catalog,
    CatalogEntity,
    Category,
    CategorySummary,
    MetaFacts,
    MetaSummary,
    PlayerClass,
    ProvenanceEntry,
)
from armory.domain.model.entity import RESERVED_FIELDS
from armory.domain.model.primitives import unique

from .schema import CatalogDocument, EntityDocument, ProvenanceDocument

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime


log = getLogger(__name__)


class DocumentError(ValueError):
    """Raised when a stored catalog document cannot be read into the domain."""


def catalog_from_document(payload: Mapping[str, object] | CatalogDocument) -> Catalog:
    """Parse a catalog document.

    Duplicate tags or notes are collapsed on load; duplicate entity ids are a
    ``DocumentError``. The version string is taken as-is so that a corrupted
    version reaches the reconciler.
    """

    try:
        document = (
            payload
            if isinstance(payload, CatalogDocument)
            else CatalogDocument.model_validate(payload)
        )
        return Catalog(
            version=document.version,
            updated_at=document.updated_at,
            weapons=tuple(_entity_from_document(item) for item in document.weapons),
            gadgets=tuple(_entity_from_document(item) for item in document.gadgets),
            specializations=tuple(
                _entity_from_document(item) for item in document.specializations
            ),
            meta=MetaFacts(
                synergy=unique(document.meta.synergy),
                counters=unique(document.meta.counters),
            ),
            provenance=tuple(_provenance_from_document(item) for item in document.provenance),
            extras=dict(document.model_extra or {}),
        )
    except (PydanticValidationError, ValueError) as exc:
        raise DocumentError(f"Invalid catalog document: {exc}") from exc


def catalog_to_document(catalog: Catalog) -> dict[str, object]:
    """Render ``catalog`` as a JSON-ready mapping in a stable key order."""

    document: dict[str, object] = {
        "version": catalog.version,
        "updated_at": _timestamp(catalog.updated_at),
    }
    for category in Category:
        document[category.value] = [
            _entity_to_document(entity) for entity in catalog.entities(category)
        ]
    document["meta"] = {
        "synergy": list(catalog.meta.synergy),
        "counters": list(catalog.meta.counters),
    }
    document.update(catalog.extras)
    document["_provenance"] = [_provenance_to_document(entry) for entry in catalog.provenance]
    return document


def _entity_from_document(item: EntityDocument) -> CatalogEntity:
    return CatalogEntity(
        id=item.id,
        class_restriction=_class_from_document(item.class_restriction),
        tags=unique(item.tags),
        notes=unique(item.notes),
        attributes={
            key: value
            for key, value in (item.model_extra or {}).items()
            if key not in RESERVED_FIELDS and value is not None
        },
    )


def _class_from_document(value: str | list[str] | None) -> tuple[PlayerClass, ...] | None:
    if value is None:
        return None
    names = [value] if isinstance(value, str) else value
    classes = tuple(dict.fromkeys(PlayerClass.parse(name) for name in names if name.strip()))
    return classes or None


def _entity_to_document(entity: CatalogEntity) -> dict[str, object]:
    document: dict[str, object] = {"id": entity.id}
    if entity.class_restriction is not None:
        classes = [str(item) for item in entity.class_restriction]
        document["class"] = classes[0] if len(classes) == 1 else classes
    document["tags"] = list(entity.tags)
    document["notes"] = list(entity.notes)
    document.update(entity.attributes)
    return document


def _provenance_from_document(item: ProvenanceDocument) -> ProvenanceEntry:
    summary = item.summary
    return ProvenanceEntry(
        source=item.source,
        timestamp=item.timestamp,
        summary={
            category: CategorySummary(**getattr(summary, category.value).model_dump())
            for category in Category
        },
        meta=MetaSummary(**summary.meta.model_dump()),
        from_version=item.from_version,
        to_version=item.to_version,
    )


def _provenance_to_document(entry: ProvenanceEntry) -> dict[str, object]:
    summary: dict[str, object] = {
        category.value: {
            "added": item.added,
            "updated": item.updated,
            "tags_added": item.tags_added,
            "notes_added": item.notes_added,
        }
        for category, item in entry.summary.items()
    }
    summary["meta"] = {
        "synergy_added": entry.meta.synergy_added,
        "counters_added": entry.meta.counters_added,
    }
    return {
        "source": entry.source,
        "timestamp": _timestamp(entry.timestamp),
        "from_version": entry.from_version,
        "to_version": entry.to_version,
        "summary": summary,
    }


def _timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None
