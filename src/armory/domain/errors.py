"""Errors raised by the ingestion and merge engine.

Both kinds are non-retryable: they describe bad input or bad state supplied by
the caller, never a transient condition.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class CatalogError(Exception):
    """Base class for engine errors."""


class ValidationError(CatalogError):
    """Raised when a delta is malformed or out of contract."""

    def __init__(self, issues: Iterable[str]) -> None:
        self.issues = tuple(issues)
        if not self.issues:
            raise ValueError("ValidationError requires at least one issue")
        super().__init__("Invalid delta: " + "; ".join(self.issues))


class MergeError(CatalogError):
    """Raised when the current catalog is corrupted and cannot be merged into."""
