"""Closed tag vocabulary used to optionally validate incoming deltas."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, init=False)
class TagRegistry:
    tags: frozenset[str]

    def __init__(self, tags: Iterable[str]) -> None:
        normalized = frozenset(tag.strip().lower() for tag in tags if tag and tag.strip())
        object.__setattr__(self, "tags", normalized)

    def __contains__(self, tag: object) -> bool:
        return isinstance(tag, str) and tag in self.tags

    def __len__(self) -> int:
        return len(self.tags)

    def allows(self, tag: str) -> bool:
        return tag in self.tags

    def unknown(self, tags: Iterable[str]) -> tuple[str, ...]:
        """Return the tags outside the vocabulary, in input order."""

        return tuple(dict.fromkeys(tag for tag in tags if tag not in self.tags))

    @classmethod
    def from_file(cls, path: Path) -> TagRegistry:
        """Load a registry from a JSON array or a one-tag-per-line text file.

        Blank lines and lines starting with ``#`` are ignored in the text form.
        """

        text = path.read_text(encoding="utf-8")
        if text.lstrip().startswith("["):
            payload = json.loads(text)
            if not isinstance(payload, list) or not all(isinstance(item, str) for item in payload):
                raise ValueError(f"Tag registry {path} must be a JSON array of strings")
            registry = cls(payload)
        else:
            lines = (line.strip() for line in text.splitlines())
            registry = cls(line for line in lines if line and not line.startswith("#"))
        log.debug("Loaded %s tags from %s", len(registry), path)
        return registry
