"""Single-document catalog store backed by a JSON file.

The store is the serialization point for writers: ``save`` performs a
compare-and-swap on the stored version and refuses to overwrite a catalog
that moved on since it was loaded. The check and the write happen under an
exclusive lock file next to the catalog, so two writers holding the same
base version can never both succeed.
"""

from __future__ import annotations

import json
import os
import tempfile
import time
from contextlib import contextmanager
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Final

from armory.domain.model import INITIAL_VERSION, Catalog

from .documents import DocumentError, catalog_from_document, catalog_to_document

if TYPE_CHECKING:
    from collections.abc import Iterator

    from armory.domain.model import CatalogVersion

DEFAULT_LOCK_TIMEOUT: Final[float] = 10.0
_LOCK_POLL_INTERVAL: Final[float] = 0.01

log = getLogger(__name__)


class StaleCatalogError(RuntimeError):
    """Raised when the stored catalog version differs from the expected one."""

    def __init__(self, *, expected: str | None, actual: str | None) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Catalog changed concurrently: expected {expected!r}, found {actual!r}")


class CatalogNotFoundError(FileNotFoundError):
    """Raised when loading a catalog that was never initialized."""


class CatalogLockedError(TimeoutError):
    """Raised when the catalog lock could not be acquired in time."""

    def __init__(self, lock_path: Path) -> None:
        self.lock_path = lock_path
        super().__init__(
            f"Catalog is locked by another writer ({lock_path}); "
            "remove the lock file if no ingestion is running"
        )


@dataclass(frozen=True, slots=True)
class JsonCatalogStore:
    path: Path
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT

    @property
    def lock_path(self) -> Path:
        return self.path.with_name(self.path.name + ".lock")

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Catalog:
        if not self.exists():
            raise CatalogNotFoundError(f"No catalog at {self.path}; run 'armory init' first")
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise DocumentError(f"Catalog {self.path} is not valid JSON: {exc}") from exc
        return catalog_from_document(payload)

    def initialize(
        self,
        version: CatalogVersion | str = INITIAL_VERSION,
        *,
        force: bool = False,
    ) -> Catalog:
        """Create an empty catalog document; refuses to clobber an existing one."""

        catalog = Catalog.empty(version)
        with self._locked():
            if self.exists() and not force:
                raise FileExistsError(f"Catalog already exists at {self.path}")
            self._write(catalog)
        log.info("Initialized catalog %s at version %s", self.path, catalog.version)
        return catalog

    def save(self, catalog: Catalog, *, expected_version: str | None) -> None:
        """Write ``catalog`` if the stored version still equals ``expected_version``.

        ``expected_version=None`` means the document must not exist yet.
        """

        with self._locked():
            actual = self._stored_version()
            if actual != expected_version:
                raise StaleCatalogError(expected=expected_version, actual=actual)
            self._write(catalog)
        log.debug("Saved catalog %s at version %s", self.path, catalog.version)

    def _stored_version(self) -> str | None:
        if not self.exists():
            return None
        return self.load().version

    @contextmanager
    def _locked(self) -> Iterator[None]:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        deadline = time.monotonic() + self.lock_timeout
        while True:
            try:
                fd = os.open(self.lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
            except FileExistsError:
                if time.monotonic() >= deadline:
                    raise CatalogLockedError(self.lock_path) from None
                time.sleep(_LOCK_POLL_INTERVAL)
                continue
            break
        try:
            try:
                os.write(fd, str(os.getpid()).encode("ascii"))
            finally:
                os.close(fd)
            yield
        finally:
            self.lock_path.unlink(missing_ok=True)

    def _write(self, catalog: Catalog) -> None:
        text = json.dumps(catalog_to_document(catalog), indent=2, ensure_ascii=False) + "\n"
        handle = tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self.path.parent,
            prefix=self.path.name + ".",
            suffix=".tmp",
            delete=False,
        )
        tmp = Path(handle.name)
        try:
            with handle:
                handle.write(text)
            os.replace(tmp, self.path)
        finally:
            tmp.unlink(missing_ok=True)
