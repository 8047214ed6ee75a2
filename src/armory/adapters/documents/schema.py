"""Pydantic models describing the persisted catalog document."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CatalogBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class EntityDocument(CatalogBaseModel):
    """Stored entity; unknown keys are the entity's attributes."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    class_restriction: str | list[str] | None = Field(default=None, alias="class")
    tags: list[str] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)


class MetaDocument(CatalogBaseModel):
    synergy: list[str] = Field(default_factory=list)
    counters: list[str] = Field(default_factory=list)


class CategorySummaryDocument(CatalogBaseModel):
    added: int = 0
    updated: int = 0
    tags_added: int = 0
    notes_added: int = 0


class MetaSummaryDocument(CatalogBaseModel):
    synergy_added: int = 0
    counters_added: int = 0


class SummaryDocument(CatalogBaseModel):
    weapons: CategorySummaryDocument = Field(default_factory=CategorySummaryDocument)
    gadgets: CategorySummaryDocument = Field(default_factory=CategorySummaryDocument)
    specializations: CategorySummaryDocument = Field(default_factory=CategorySummaryDocument)
    meta: MetaSummaryDocument = Field(default_factory=MetaSummaryDocument)


class ProvenanceDocument(CatalogBaseModel):
    source: str
    timestamp: datetime
    from_version: str | None = None
    to_version: str | None = None
    summary: SummaryDocument = Field(default_factory=SummaryDocument)


class CatalogDocument(CatalogBaseModel):
    """Top-level catalog; unknown keys (e.g. ``metaLoadouts``) are preserved."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    version: str
    updated_at: datetime | None = None
    weapons: list[EntityDocument] = Field(default_factory=list)
    gadgets: list[EntityDocument] = Field(default_factory=list)
    specializations: list[EntityDocument] = Field(default_factory=list)
    meta: MetaDocument = Field(default_factory=MetaDocument)
    provenance: list[ProvenanceDocument] = Field(default_factory=list, alias="_provenance")

    @field_validator("version", mode="before")
    @classmethod
    def _stringify_version(cls, value: object) -> object:
        # keep odd scalars so the reconciler, not the loader, reports them
        if isinstance(value, int | float):
            return str(value)
        return value
