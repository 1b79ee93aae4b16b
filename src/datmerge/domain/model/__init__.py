"""Public domain model surface."""

from __future__ import annotations

from datmerge.domain.model.catalog import Catalog, CatalogStats
from datmerge.domain.model.constants import (
    CRC_LENGTH,
    CRC_ZERO,
    MD5_LENGTH,
    MD5_ZERO,
    SHA1_LENGTH,
    SHA1_ZERO,
    SIZE_UNKNOWN,
    SIZE_ZERO,
)
from datmerge.domain.model.enums import (
    DupeType,
    ForceMerging,
    ForceNodump,
    ForcePacking,
    ItemStatus,
    ItemType,
)
from datmerge.domain.model.header import CatalogHeader
from datmerge.domain.model.items import (
    ITEM_CLASSES,
    Archive,
    BiosSet,
    DatItem,
    Disk,
    HashedItem,
    Item,
    Release,
    Rom,
    Sample,
)
from datmerge.domain.model.machine import Machine

__all__ = [  # noqa: RUF022
    # catalog
    "Catalog",
    "CatalogHeader",
    "CatalogStats",
    # items
    "DatItem",
    "Item",
    "HashedItem",
    "ITEM_CLASSES",
    "Rom",
    "Disk",
    "Release",
    "BiosSet",
    "Sample",
    "Archive",
    "Machine",
    # enums
    "DupeType",
    "ForceMerging",
    "ForceNodump",
    "ForcePacking",
    "ItemStatus",
    "ItemType",
    # constants
    "CRC_LENGTH",
    "CRC_ZERO",
    "MD5_LENGTH",
    "MD5_ZERO",
    "SHA1_LENGTH",
    "SHA1_ZERO",
    "SIZE_UNKNOWN",
    "SIZE_ZERO",
]
