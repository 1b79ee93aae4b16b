"""Catalog items: the closed set of record kinds a machine can carry.

Every kind-specific field lives on its own variant; code that needs to tell
kinds apart pattern-matches on the concrete class instead of casting.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, field, replace
from typing import ClassVar, Self, TypeAlias

from .constants import SIZE_UNKNOWN
from .enums import DupeType, ItemStatus, ItemType
from .machine import Machine


@dataclass(kw_only=True)
class DatItem(ABC):
    """Base record: a name under a machine plus its merge classification."""

    name: str
    machine: Machine = field(default_factory=Machine)
    dupe_type: DupeType = DupeType.NONE

    # class-level discriminator; subclasses must override
    ITEM_TYPE: ClassVar[ItemType]

    @property
    def item_type(self) -> ItemType:
        return self.ITEM_TYPE

    @property
    def nodump(self) -> bool:
        return False

    @property
    def source_system_id(self) -> int:
        return self.machine.source_system_id

    @property
    def source_id(self) -> int:
        return self.machine.source_id

    def copy(self) -> Self:
        """Return an independent copy, including its own machine instance."""
        return replace(self, machine=self.machine.copy())


@dataclass(kw_only=True)
class Rom(DatItem):
    ITEM_TYPE: ClassVar[ItemType] = ItemType.ROM

    size: int = SIZE_UNKNOWN
    crc: str | None = None
    md5: str | None = None
    sha1: str | None = None
    date: str | None = None
    status: ItemStatus = ItemStatus.NONE

    @property
    def nodump(self) -> bool:
        return self.status is ItemStatus.NODUMP

    @nodump.setter
    def nodump(self, value: bool) -> None:
        if value:
            self.status = ItemStatus.NODUMP
        elif self.status is ItemStatus.NODUMP:
            self.status = ItemStatus.NONE

    @property
    def has_hashes(self) -> bool:
        return bool(self.crc or self.md5 or self.sha1)


@dataclass(kw_only=True)
class Disk(DatItem):
    ITEM_TYPE: ClassVar[ItemType] = ItemType.DISK

    md5: str | None = None
    sha1: str | None = None
    status: ItemStatus = ItemStatus.NONE

    @property
    def size(self) -> int:
        # disks have no byte-size concept
        return SIZE_UNKNOWN

    @property
    def nodump(self) -> bool:
        return self.status is ItemStatus.NODUMP

    @nodump.setter
    def nodump(self, value: bool) -> None:
        if value:
            self.status = ItemStatus.NODUMP
        elif self.status is ItemStatus.NODUMP:
            self.status = ItemStatus.NONE

    @property
    def has_hashes(self) -> bool:
        return bool(self.md5 or self.sha1)


@dataclass(kw_only=True)
class Release(DatItem):
    ITEM_TYPE: ClassVar[ItemType] = ItemType.RELEASE

    region: str | None = None
    language: str | None = None
    date: str | None = None
    is_default: bool | None = None


@dataclass(kw_only=True)
class BiosSet(DatItem):
    ITEM_TYPE: ClassVar[ItemType] = ItemType.BIOS_SET

    description: str | None = None
    is_default: bool | None = None


@dataclass(kw_only=True)
class Sample(DatItem):
    ITEM_TYPE: ClassVar[ItemType] = ItemType.SAMPLE


@dataclass(kw_only=True)
class Archive(DatItem):
    ITEM_TYPE: ClassVar[ItemType] = ItemType.ARCHIVE


Item: TypeAlias = Rom | Disk | Release | BiosSet | Sample | Archive
HashedItem: TypeAlias = Rom | Disk

ITEM_CLASSES: dict[ItemType, type[DatItem]] = {
    ItemType.ROM: Rom,
    ItemType.DISK: Disk,
    ItemType.RELEASE: Release,
    ItemType.BIOS_SET: BiosSet,
    ItemType.SAMPLE: Sample,
    ItemType.ARCHIVE: Archive,
}
