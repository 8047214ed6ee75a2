"""Stage contracts and result values of the merge engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping

    from armory.domain.errors import CatalogError
    from armory.domain.model import Catalog, Delta, ProvenanceDescriptor, ProvenanceEntry

    from .schema import DeltaPayload

type RawDelta = Mapping[str, object] | DeltaPayload


class NormalizeDelta(Protocol):
    """Validate and shape a raw delta into a merge-ready ``Delta``."""

    def __call__(self, raw: RawDelta) -> Delta: ...


class ReconcileCatalog(Protocol):
    """Fold a normalized delta into a catalog, producing a new catalog."""

    def __call__(
        self,
        current: Catalog,
        delta: Delta,
        descriptor: ProvenanceDescriptor,
    ) -> tuple[Catalog, ProvenanceEntry]: ...


@dataclass(frozen=True, slots=True)
class MergeResult:
    """A successful merge: the new catalog and the provenance entry appended to it."""

    catalog: Catalog
    entry: ProvenanceEntry
    delta: Delta


@dataclass(frozen=True, slots=True)
class MergeOutcome:
    """Result-or-error form of a merge.

    On failure ``catalog`` is the untouched input catalog and ``entry`` is None.
    """

    catalog: Catalog
    entry: ProvenanceEntry | None = None
    error: CatalogError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
