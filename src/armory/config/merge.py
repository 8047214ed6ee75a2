"""Merge engine configuration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from armory.domain.reconciliation import DEFAULT_NOTE_MAX_LENGTH

from .env import optional_env_var, positive_int_env_var

DEFAULT_MERGE_ATTEMPTS: Final[int] = 3


@dataclass(frozen=True, slots=True)
class MergeConfig:
    """Tunables for ingestion: note limit, tag vocabulary, optimistic retries."""

    max_note_length: int = DEFAULT_NOTE_MAX_LENGTH
    tag_registry_path: Path | None = None
    max_attempts: int = DEFAULT_MERGE_ATTEMPTS


def get_merge_config() -> MergeConfig:
    registry = optional_env_var("ARMORY_TAG_REGISTRY")
    return MergeConfig(
        max_note_length=positive_int_env_var("ARMORY_NOTE_MAX_LENGTH", DEFAULT_NOTE_MAX_LENGTH),
        tag_registry_path=Path(registry) if registry else None,
        max_attempts=positive_int_env_var("ARMORY_MERGE_ATTEMPTS", DEFAULT_MERGE_ATTEMPTS),
    )
