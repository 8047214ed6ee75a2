"""Delta normalizer: validate an extracted delta and shape it for merging.

Responsibilities of this stage:
- reject malformed input before it reaches the reconciler
- collapse tag and note sequences into duplicate-free sets
- key entities by identity within each category
- stay free of side effects

Every problem found is collected and reported in one ``ValidationError``;
a delta is accepted whole or not at all.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from pydantic import ValidationError as PydanticValidationError

from armory.domain.errors import ValidationError
from armory.domain.model import CatalogEntity, Category, Delta, MetaFacts, PlayerClass
from armory.domain.model.entity import RESERVED_FIELDS
from armory.domain.model.primitives import unique

from .reconcile import merge_entity
from .schema import DeltaPayload, EntityPayload, MetaPayload

if TYPE_CHECKING:
    from armory.domain.tags import TagRegistry

    from .contracts import RawDelta

DEFAULT_NOTE_MAX_LENGTH: Final[int] = 240
log = logging.getLogger(__name__)


@dataclass(slots=True, kw_only=True)
class DeltaNormalizer:
    """Default normalization strategy; optionally enforces a tag vocabulary."""

    registry: TagRegistry | None = None
    max_note_length: int = DEFAULT_NOTE_MAX_LENGTH

    def __call__(self, raw: RawDelta) -> Delta:
        payload = parse_payload(raw)
        issues: list[str] = []
        collections = {
            category: self._normalize_category(category, payload.records(category), issues)
            for category in Category
        }
        meta = _normalize_meta(payload.meta)
        if issues:
            raise ValidationError(issues)

        delta = Delta(
            weapons=collections[Category.WEAPONS],
            gadgets=collections[Category.GADGETS],
            specializations=collections[Category.SPECIALIZATIONS],
            meta=meta,
        )
        log.debug(
            "Normalized delta: weapons=%s, gadgets=%s, specializations=%s",
            len(delta.weapons),
            len(delta.gadgets),
            len(delta.specializations),
        )
        return delta

    def _normalize_category(
        self,
        category: Category,
        records: list[EntityPayload],
        issues: list[str],
    ) -> tuple[CatalogEntity, ...]:
        by_id: dict[str, CatalogEntity] = {}
        for index, record in enumerate(records):
            entity = self._normalize_entity(record, f"{category.value}[{index}]", issues)
            if entity is None:
                continue
            existing = by_id.get(entity.id)
            # repeated ids inside one delta fold into the first occurrence
            by_id[entity.id] = entity if existing is None else merge_entity(existing, entity).entity
        return tuple(by_id.values())

    def _normalize_entity(
        self,
        record: EntityPayload,
        location: str,
        issues: list[str],
    ) -> CatalogEntity | None:
        entity_id = (record.id or "").strip()
        if not entity_id:
            issues.append(f"{location}: missing id")
            return None
        location = f"{location} ({entity_id})"
        problems_before = len(issues)

        class_restriction = _normalize_class(record.class_restriction, location, issues)
        tags = normalize_tags(record.tags or [])
        if self.registry is not None:
            issues.extend(
                f"{location}: tag {tag!r} is not in the tag registry"
                for tag in self.registry.unknown(tags)
            )
        raw_notes = unique(record.notes or [])
        issues.extend(
            f"{location}: note exceeds {self.max_note_length} characters ({len(note)})"
            for note in raw_notes
            if len(note) > self.max_note_length
        )
        notes = tuple(note for note in raw_notes if note.strip())
        if len(issues) > problems_before:
            return None

        attributes = {
            key: value
            for key, value in record.extra_fields.items()
            if key not in RESERVED_FIELDS and value is not None
        }
        return CatalogEntity(
            id=entity_id,
            class_restriction=class_restriction,
            tags=tags,
            notes=notes,
            attributes=attributes,
        )


def parse_payload(raw: RawDelta) -> DeltaPayload:
    """Validate the raw delta shape, translating schema errors."""

    if isinstance(raw, DeltaPayload):
        return raw
    try:
        return DeltaPayload.model_validate(raw)
    except PydanticValidationError as exc:
        raise ValidationError(
            f"{'.'.join(str(part) for part in error['loc']) or 'delta'}: {error['msg']}"
            for error in exc.errors()
        ) from exc


def normalize_tags(tags: list[str]) -> tuple[str, ...]:
    """Lower-case, trim and deduplicate tags, dropping blanks."""

    return unique([tag.strip().lower() for tag in tags if tag.strip()])


def _normalize_class(
    value: str | list[str] | None,
    location: str,
    issues: list[str],
) -> tuple[PlayerClass, ...] | None:
    if value is None:
        return None
    names = [value] if isinstance(value, str) else value
    names = [name for name in names if name.strip()]
    classes: list[PlayerClass] = []
    for name in names:
        try:
            classes.append(PlayerClass.parse(name))
        except ValueError:
            issues.append(f"{location}: unknown class {name!r}")
    parsed = tuple(dict.fromkeys(classes))
    return parsed or None


def _normalize_meta(meta: MetaPayload | None) -> MetaFacts:
    if meta is None:
        return MetaFacts()
    return MetaFacts(
        synergy=unique([item for item in meta.synergy or [] if item.strip()]),
        counters=unique([item for item in meta.counters or [] if item.strip()]),
    )


def normalize_delta(
    raw: RawDelta,
    *,
    registry: TagRegistry | None = None,
    max_note_length: int = DEFAULT_NOTE_MAX_LENGTH,
) -> Delta:
    """Normalize ``raw`` with the default strategy."""

    return DeltaNormalizer(registry=registry, max_note_length=max_note_length)(raw)
