from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime

import pytest

from armory.domain.errors import MergeError
from armory.domain.model import (
    Catalog,
    CatalogEntity,
    CatalogVersion,
    Category,
    CategorySummary,
    Delta,
    MetaFacts,
    PlayerClass,
    ProvenanceDescriptor,
)
from armory.domain.reconciliation import merge_entity, normalize_delta, reconcile


def _descriptor(source: str = "transcript-001", day: int = 1) -> ProvenanceDescriptor:
    return ProvenanceDescriptor(source=source, timestamp=datetime(2025, 3, day, tzinfo=UTC))


def test_ks23_example() -> None:
    catalog = Catalog(version="1.0.0", weapons=(CatalogEntity(id="KS23", tags=("shotgun",)),))
    delta = normalize_delta(
        {"weapons": [{"id": "KS23", "tags": ["close-range", "shotgun"], "notes": ["strong vs light"]}]}
    )

    merged, entry = reconcile(catalog, delta, _descriptor())

    ks23 = merged.find(Category.WEAPONS, "KS23")
    assert ks23 is not None
    assert set(ks23.tags) == {"shotgun", "close-range"}
    assert set(ks23.notes) == {"strong vs light"}
    assert merged.version == "1.0.1"
    assert merged.provenance == (entry,)
    assert entry.for_category(Category.WEAPONS) == CategorySummary(
        added=0, updated=1, tags_added=1, notes_added=1
    )
    assert entry.from_version == "1.0.0"
    assert entry.to_version == "1.0.1"


def test_malformed_version_raises_merge_error(base_catalog: Catalog) -> None:
    corrupted = replace(base_catalog, version="bad.version")
    delta = normalize_delta({"weapons": [{"id": "KS23", "tags": ["close-range"]}]})

    with pytest.raises(MergeError, match="bad.version"):
        reconcile(corrupted, delta, _descriptor())

    assert corrupted.version == "bad.version"
    assert corrupted.provenance == ()


def test_input_catalog_is_not_mutated(base_catalog: Catalog) -> None:
    snapshot = replace(base_catalog)
    delta = normalize_delta(
        {
            "weapons": [{"id": "KS23", "tags": ["close-range"]}, {"id": "M60", "tags": ["lmg"]}],
            "meta": {"synergy": ["Heal beam + KS23"]},
        }
    )

    reconcile(base_catalog, delta, _descriptor())

    assert base_catalog == snapshot
    assert base_catalog.version == "1.0.0"
    assert len(base_catalog.weapons) == 2


def test_existing_scalars_win_and_absent_scalars_are_filled(base_catalog: Catalog) -> None:
    delta = normalize_delta(
        {
            "weapons": [{"id": "KS23", "class": "Light", "damage": 142}],
            "gadgets": [{"id": "Goo Grenade", "class": "Medium"}],
            "specializations": [{"id": "Cloaking Device", "description": "Something else"}],
        }
    )

    merged, entry = reconcile(base_catalog, delta, _descriptor())

    ks23 = merged.find(Category.WEAPONS, "KS23")
    goo = merged.find(Category.GADGETS, "Goo Grenade")
    cloak = merged.find(Category.SPECIALIZATIONS, "Cloaking Device")
    assert ks23 is not None and goo is not None and cloak is not None
    assert ks23.class_restriction == (PlayerClass.HEAVY,)
    assert ks23.attributes["damage"] == 142
    assert goo.class_restriction == (PlayerClass.MEDIUM,)
    assert cloak.attributes["description"] == "Turns the player nearly invisible."
    assert entry.for_category(Category.WEAPONS).updated == 1
    assert entry.for_category(Category.GADGETS).updated == 1
    assert entry.for_category(Category.SPECIALIZATIONS).updated == 0


def test_ordering_keeps_existing_then_appends_new_in_delta_order(base_catalog: Catalog) -> None:
    delta = normalize_delta(
        {
            "weapons": [
                {"id": "M60", "tags": ["lmg"]},
                {"id": "FCAR", "tags": ["medium-range"]},
                {"id": "93R", "tags": ["pistol"]},
            ]
        }
    )

    merged, entry = reconcile(base_catalog, delta, _descriptor())

    assert [entity.id for entity in merged.weapons] == ["KS23", "FCAR", "M60", "93R"]
    assert entry.for_category(Category.WEAPONS) == CategorySummary(
        added=2, updated=1, tags_added=3, notes_added=0
    )


def test_new_entities_are_inserted_as_given(base_catalog: Catalog) -> None:
    delta = normalize_delta(
        {"gadgets": [{"id": "Barricade", "class": ["Heavy"], "tags": ["defense"], "notes": ["blocks doors"]}]}
    )

    merged, _ = reconcile(base_catalog, delta, _descriptor())

    assert merged.find(Category.GADGETS, "Barricade") == delta.gadgets[0]


def test_meta_is_unioned(base_catalog: Catalog) -> None:
    catalog = replace(base_catalog, meta=MetaFacts(synergy=("a",), counters=("x",)))
    delta = normalize_delta({"meta": {"synergy": ["b", "a"], "counters": ["x"]}})

    merged, entry = reconcile(catalog, delta, _descriptor())

    assert merged.meta.synergy == ("a", "b")
    assert merged.meta.counters == ("x",)
    assert entry.meta.synergy_added == 1
    assert entry.meta.counters_added == 0


def test_updated_at_and_extras(base_catalog: Catalog) -> None:
    descriptor = _descriptor(day=7)

    merged, _ = reconcile(base_catalog, Delta(), descriptor)

    assert merged.updated_at == descriptor.timestamp
    assert merged.extras == base_catalog.extras


def test_unchanged_match_is_neither_added_nor_updated(base_catalog: Catalog) -> None:
    delta = normalize_delta({"weapons": [{"id": "KS23", "tags": ["shotgun"], "class": "Light"}]})

    merged, entry = reconcile(base_catalog, delta, _descriptor())

    assert entry.for_category(Category.WEAPONS) == CategorySummary()
    assert merged.weapons[0] is base_catalog.weapons[0]


def test_remerging_identical_delta_only_advances_version_and_provenance(
    base_catalog: Catalog,
) -> None:
    delta = normalize_delta(
        {
            "weapons": [{"id": "KS23", "tags": ["close-range"], "notes": ["strong vs light"]}],
            "gadgets": [{"id": "Barricade", "tags": ["defense"]}],
            "meta": {"counters": ["Goo blocks doors"]},
        }
    )

    once, _ = reconcile(base_catalog, delta, _descriptor(day=1))
    twice, second_entry = reconcile(once, delta, _descriptor(day=2))

    for category in Category:
        assert twice.entities(category) == once.entities(category)
    assert twice.meta == once.meta
    assert twice.version == "1.0.2"
    assert len(twice.provenance) == 2
    assert second_entry.total_added == 0
    assert second_entry.total_updated == 0


def test_tag_union_is_order_independent(base_catalog: Catalog) -> None:
    first = normalize_delta({"weapons": [{"id": "KS23", "tags": ["close-range", "burst"]}]})
    second = normalize_delta({"weapons": [{"id": "KS23", "tags": ["breach", "close-range"]}]})

    a, _ = reconcile(reconcile(base_catalog, first, _descriptor())[0], second, _descriptor(day=2))
    b, _ = reconcile(reconcile(base_catalog, second, _descriptor())[0], first, _descriptor(day=2))

    tags_a = a.find(Category.WEAPONS, "KS23")
    tags_b = b.find(Category.WEAPONS, "KS23")
    assert tags_a is not None and tags_b is not None
    assert set(tags_a.tags) == set(tags_b.tags) == {"shotgun", "close-range", "burst", "breach"}


def test_identity_preservation_and_provenance_append_only(base_catalog: Catalog) -> None:
    catalog = base_catalog
    deltas = [
        {"weapons": [{"id": "KS23", "notes": ["one-shot light at close range"]}]},
        {"gadgets": [{"id": "Goo Grenade", "tags": ["zone"]}, {"id": "Barricade"}]},
        {"specializations": [{"id": "Cloaking Device", "tags": ["stealth"]}]},
    ]

    for day, raw in enumerate(deltas, start=1):
        before = catalog
        catalog, entry = reconcile(before, normalize_delta(raw), _descriptor(day=day))

        assert catalog.provenance[:-1] == before.provenance
        assert catalog.provenance[-1] is entry
        new_version = catalog.parsed_version()
        old_version = before.parsed_version()
        assert new_version == CatalogVersion(old_version.major, old_version.minor, old_version.patch + 1)
        for category in Category:
            for old in before.entities(category):
                new = catalog.find(category, old.id)
                assert new is not None
                assert set(old.tags) <= set(new.tags)
                assert set(old.notes) <= set(new.notes)

    assert catalog.version == "1.0.3"


def test_merge_entity_requires_same_id() -> None:
    with pytest.raises(ValueError, match="cannot merge"):
        merge_entity(CatalogEntity(id="KS23"), CatalogEntity(id="FCAR"))


def test_merge_entity_reports_changes() -> None:
    result = merge_entity(
        CatalogEntity(id="KS23", tags=("shotgun",), notes=("a",)),
        CatalogEntity(id="KS23", class_restriction=(PlayerClass.HEAVY,), tags=("shotgun", "burst"), notes=("a",)),
    )

    assert result.changed
    assert result.tags_added == 1
    assert result.notes_added == 0
    assert result.fields_filled == 1
    assert result.entity.tags == ("shotgun", "burst")


def test_null_attribute_is_treated_as_absent() -> None:
    result = merge_entity(
        CatalogEntity(id="KS23", attributes={"damage": None, "name": "KS-23"}),
        CatalogEntity(id="KS23", attributes={"damage": 90, "name": "Shotgun"}),
    )

    assert result.fields_filled == 1
    assert dict(result.entity.attributes) == {"damage": 90, "name": "KS-23"}
