"""Application orchestration entry points."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from armory.adapters.store import JsonCatalogStore, StaleCatalogError
from armory.config import get_merge_config, get_storage_config
from armory.domain.model import INITIAL_VERSION, ProvenanceDescriptor
from armory.domain.reconciliation import build_engine
from armory.domain.tags import TagRegistry

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from armory.config import MergeConfig
    from armory.domain.model import Catalog, ProvenanceEntry
    from armory.domain.reconciliation.contracts import RawDelta


log = getLogger(__name__)


@dataclass(slots=True)
class IngestResult:
    """Outcome of one ingestion: the stored catalog and its new provenance entry."""

    catalog: Catalog
    entry: ProvenanceEntry
    attempts: int


def default_store(path: Path | None = None) -> JsonCatalogStore:
    return JsonCatalogStore(path or get_storage_config().catalog_path())


def initialize_catalog(
    *,
    store: JsonCatalogStore | None = None,
    version: str = INITIAL_VERSION,
    force: bool = False,
) -> Catalog:
    effective_store = store or default_store()
    return effective_store.initialize(version, force=force)


def read_delta_file(path: Path) -> Mapping[str, object]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"Delta file {path} must contain a JSON object")
    return payload


def ingest_delta(
    raw_delta: RawDelta,
    *,
    source: str,
    store: JsonCatalogStore | None = None,
    timestamp: datetime | None = None,
    registry: TagRegistry | None = None,
    config: MergeConfig | None = None,
) -> IngestResult:
    """Merge ``raw_delta`` into the stored catalog and persist the result.

    Writers are serialized optimistically: the catalog is saved only if its
    stored version is still the one merged against, otherwise the whole
    load-merge-save cycle is retried. Engine errors are never retried.
    """

    effective_store = store or default_store()
    effective_config = config or get_merge_config()
    effective_registry = registry
    if effective_registry is None and effective_config.tag_registry_path is not None:
        effective_registry = TagRegistry.from_file(effective_config.tag_registry_path)

    engine = build_engine(
        registry=effective_registry,
        max_note_length=effective_config.max_note_length,
    )
    descriptor = ProvenanceDescriptor(source=source, timestamp=timestamp or datetime.now(UTC))
    log.info(
        "Starting ingestion: source=%s, catalog=%s, tag_registry=%s",
        descriptor.source,
        effective_store.path,
        effective_registry is not None,
    )

    attempt = 0
    while True:
        attempt += 1
        current = effective_store.load()
        result = engine.merge(current, raw_delta, descriptor)
        try:
            effective_store.save(result.catalog, expected_version=current.version)
        except StaleCatalogError:
            if attempt >= effective_config.max_attempts:
                raise
            log.warning(
                "Catalog moved past %s during ingestion, retrying (%s/%s)",
                current.version,
                attempt,
                effective_config.max_attempts,
            )
            continue
        break

    log.info(
        "Finished ingestion: version=%s, added=%s, updated=%s, attempts=%s",
        result.catalog.version,
        result.entry.total_added,
        result.entry.total_updated,
        attempt,
    )
    return IngestResult(catalog=result.catalog, entry=result.entry, attempts=attempt)


def catalog_history(
    *,
    store: JsonCatalogStore | None = None,
    limit: int | None = None,
) -> tuple[ProvenanceEntry, ...]:
    """Return provenance entries, newest last, optionally only the last ``limit``."""

    provenance = (store or default_store()).load().provenance
    if limit is not None:
        if limit <= 0:
            return ()
        return provenance[-limit:]
    return provenance
