"""Public domain model surface."""

from __future__ import annotations

from armory.domain.model.catalog import INITIAL_VERSION, Catalog, Delta
from armory.domain.model.entity import CatalogEntity, MetaFacts
from armory.domain.model.enums import Category, PlayerClass
from armory.domain.model.primitives import CatalogVersion, EntityId, Note, Tag
from armory.domain.model.provenance import (
    CategorySummary,
    MetaSummary,
    ProvenanceDescriptor,
    ProvenanceEntry,
)

__all__ = [
    "INITIAL_VERSION",
    "Catalog",
    "CatalogEntity",
    "CatalogVersion",
    "Category",
    "CategorySummary",
    "Delta",
    "EntityId",
    "MetaFacts",
    "MetaSummary",
    "Note",
    "PlayerClass",
    "ProvenanceDescriptor",
    "ProvenanceEntry",
    "Tag",
]
