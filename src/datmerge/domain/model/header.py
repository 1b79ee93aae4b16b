"""Catalog header metadata."""

from __future__ import annotations

from dataclasses import dataclass, replace

from .enums import ForceMerging, ForceNodump, ForcePacking


@dataclass(kw_only=True)
class CatalogHeader:
    file_name: str = ""
    name: str = ""
    description: str = ""
    category: str | None = None
    version: str | None = None
    date: str | None = None
    author: str | None = None
    email: str | None = None
    homepage: str | None = None
    url: str | None = None
    comment: str | None = None
    is_superdat: bool = False
    force_merging: ForceMerging = ForceMerging.NONE
    force_nodump: ForceNodump = ForceNodump.NONE
    force_packing: ForcePacking = ForcePacking.NONE
    dedupe_on_write: bool = False

    def copy(self) -> CatalogHeader:
        return replace(self)

    def with_suffix(self, suffix: str) -> CatalogHeader:
        """Return a copy whose file name, name and description end in ``suffix``."""
        return replace(
            self,
            file_name=self.file_name + suffix,
            name=self.name + suffix,
            description=self.description + suffix,
        )

    def with_defaults(self, default: str) -> CatalogHeader:
        """Return a copy where blank file name, name and description become ``default``."""
        return replace(
            self,
            file_name=self.file_name or default,
            name=self.name or default,
            description=self.description or default,
        )
