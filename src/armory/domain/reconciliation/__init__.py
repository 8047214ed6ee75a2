"""Catalog ingestion and merge engine.

Flow: raw delta -> normalize -> reconcile(current catalog, delta, descriptor)
-> new catalog with one more provenance entry and a bumped patch version.
"""

from __future__ import annotations

from .contracts import MergeOutcome, MergeResult
from .engine import MergeEngine, build_engine, merge, try_merge
from .normalize import DEFAULT_NOTE_MAX_LENGTH, DeltaNormalizer, normalize_delta
from .reconcile import merge_entity, reconcile, reconcile_category
from .schema import DeltaPayload

__all__ = [
    "DEFAULT_NOTE_MAX_LENGTH",
    "DeltaNormalizer",
    "DeltaPayload",
    "MergeEngine",
    "MergeOutcome",
    "MergeResult",
    "build_engine",
    "merge",
    "merge_entity",
    "normalize_delta",
    "reconcile",
    "reconcile_category",
    "try_merge",
]
