from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from armory.adapters.store import JsonCatalogStore
from armory.domain.model import Catalog, CatalogEntity, PlayerClass, ProvenanceDescriptor

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def merged_at() -> datetime:
    return datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def descriptor(merged_at: datetime) -> ProvenanceDescriptor:
    return ProvenanceDescriptor(source="transcript-001", timestamp=merged_at)


@pytest.fixture
def base_catalog() -> Catalog:
    return Catalog(
        version="1.0.0",
        weapons=(
            CatalogEntity(id="KS23", class_restriction=(PlayerClass.HEAVY,), tags=("shotgun",)),
            CatalogEntity(id="FCAR", class_restriction=(PlayerClass.MEDIUM,), tags=("rifle",)),
        ),
        gadgets=(CatalogEntity(id="Goo Grenade", tags=("utility",)),),
        specializations=(
            CatalogEntity(
                id="Cloaking Device",
                class_restriction=(PlayerClass.LIGHT,),
                attributes={"description": "Turns the player nearly invisible."},
            ),
        ),
        extras={"metaLoadouts": [{"class": "Heavy", "weapon": "KS23"}]},
    )


@pytest.fixture
def catalog_store(tmp_path: Path) -> JsonCatalogStore:
    store = JsonCatalogStore(tmp_path / "catalog.json")
    store.initialize("1.0.0")
    return store
