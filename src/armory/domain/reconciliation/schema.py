"""Pydantic models describing the delta payload produced by transcript extraction."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from armory.domain.model import Category


class DeltaBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class EntityPayload(DeltaBaseModel):
    """One extracted entity record.

    Keys beyond the known ones are kept (``extra="allow"``) and become the
    entity's scalar attributes.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str | None = None
    class_restriction: str | list[str] | None = Field(
        default=None,
        validation_alias=AliasChoices("class", "classRestriction", "class_restriction"),
    )
    tags: list[str] | None = None
    notes: list[str] | None = None

    @property
    def extra_fields(self) -> dict[str, object]:
        return dict(self.model_extra or {})


class MetaPayload(DeltaBaseModel):
    synergy: list[str] | None = None
    counters: list[str] | None = None


class DeltaPayload(DeltaBaseModel):
    weapons: list[EntityPayload] | None = None
    gadgets: list[EntityPayload] | None = None
    specializations: list[EntityPayload] | None = None
    meta: MetaPayload | None = None

    def records(self, category: Category) -> list[EntityPayload]:
        return getattr(self, category.value) or []
