"""Ports for reading and writing catalog documents."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path

    from datmerge.domain.filtering import FilterCriteria
    from datmerge.domain.model import Catalog


@runtime_checkable
class CatalogReader(Protocol):
    """Callable port parsing one catalog document into a hash-bucketed catalog.

    Every produced record is tagged with ``source_system_id`` and ``source_id``
    and goes through admission, so it is sanitized and filtered by ``criteria``.
    A malformed record is logged and skipped; only an unreadable document raises.
    """

    def __call__(
        self,
        path: Path,
        *,
        source_system_id: int = 0,
        source_id: int = 0,
        criteria: FilterCriteria | None = None,
    ) -> Catalog: ...


@runtime_checkable
class CatalogWriter(Protocol):
    """Callable port serializing a catalog, machine by machine, to ``path``."""

    def __call__(self, catalog: Catalog, path: Path) -> None: ...


__all__ = ["CatalogReader", "CatalogWriter"]
