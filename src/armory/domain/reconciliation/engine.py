"""Orchestrator for the merge engine.

The engine composes the normalizer and reconciler stages. A merge is atomic:
it either returns a complete new catalog or raises, leaving the caller with
the catalog it passed in. The engine assumes it is the sole writer for the
duration of one call; serializing writers is the caller's job.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from armory.domain.errors import CatalogError

from .contracts import MergeOutcome, MergeResult
from .normalize import DEFAULT_NOTE_MAX_LENGTH, DeltaNormalizer
from .reconcile import reconcile

if TYPE_CHECKING:
    from armory.domain.model import Catalog, ProvenanceDescriptor
    from armory.domain.tags import TagRegistry

    from .contracts import NormalizeDelta, RawDelta, ReconcileCatalog

log = logging.getLogger(__name__)


@dataclass(slots=True)
class MergeEngine:
    """Run normalization and reconciliation for one delta."""

    normalize: NormalizeDelta = field(default_factory=DeltaNormalizer)
    reconcile: ReconcileCatalog = reconcile

    def merge(
        self,
        current: Catalog,
        raw_delta: RawDelta,
        descriptor: ProvenanceDescriptor,
    ) -> MergeResult:
        """Fold ``raw_delta`` into ``current``; raises ValidationError or MergeError."""

        delta = self.normalize(raw_delta)
        catalog, entry = self.reconcile(current, delta, descriptor)
        log.info(
            "Merged delta from %s: version %s -> %s, added=%s, updated=%s",
            descriptor.source,
            current.version,
            catalog.version,
            entry.total_added,
            entry.total_updated,
        )
        return MergeResult(catalog=catalog, entry=entry, delta=delta)

    def try_merge(
        self,
        current: Catalog,
        raw_delta: RawDelta,
        descriptor: ProvenanceDescriptor,
    ) -> MergeOutcome:
        """Like ``merge`` but reports engine errors alongside the unchanged catalog."""

        try:
            result = self.merge(current, raw_delta, descriptor)
        except CatalogError as exc:
            log.warning("Rejected delta from %s: %s", descriptor.source, exc)
            return MergeOutcome(catalog=current, error=exc)
        return MergeOutcome(catalog=result.catalog, entry=result.entry)


def build_engine(
    *,
    registry: TagRegistry | None = None,
    max_note_length: int = DEFAULT_NOTE_MAX_LENGTH,
) -> MergeEngine:
    return MergeEngine(
        normalize=DeltaNormalizer(registry=registry, max_note_length=max_note_length)
    )


def merge(
    current: Catalog,
    raw_delta: RawDelta,
    descriptor: ProvenanceDescriptor,
    *,
    registry: TagRegistry | None = None,
    max_note_length: int = DEFAULT_NOTE_MAX_LENGTH,
) -> MergeResult:
    engine = build_engine(registry=registry, max_note_length=max_note_length)
    return engine.merge(current, raw_delta, descriptor)


def try_merge(
    current: Catalog,
    raw_delta: RawDelta,
    descriptor: ProvenanceDescriptor,
    *,
    registry: TagRegistry | None = None,
    max_note_length: int = DEFAULT_NOTE_MAX_LENGTH,
) -> MergeOutcome:
    engine = build_engine(registry=registry, max_note_length=max_note_length)
    return engine.try_merge(current, raw_delta, descriptor)
