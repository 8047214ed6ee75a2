"""Catalog document schema and translation."""

from __future__ import annotations

from .schema import CatalogDocument, EntityDocument, ProvenanceDocument
from .translator import DocumentError, catalog_from_document, catalog_to_document

__all__ = [
    "CatalogDocument",
    "DocumentError",
    "EntityDocument",
    "ProvenanceDocument",
    "catalog_from_document",
    "catalog_to_document",
]
