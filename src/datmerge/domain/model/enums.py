"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ItemType(StrEnum):
    ROM = "rom"
    DISK = "disk"
    RELEASE = "release"
    BIOS_SET = "biosset"
    SAMPLE = "sample"
    ARCHIVE = "archive"


class ItemStatus(StrEnum):
    NONE = "none"
    GOOD = "good"
    BAD_DUMP = "baddump"
    NODUMP = "nodump"
    VERIFIED = "verified"


# Explicit total order; comparisons never fall back to declaration order or string order.
_DUPE_RANK: dict[str, int] = {
    "none": 0,
    "internal-hash": 1,
    "internal-all": 2,
    "external-hash": 3,
    "external-all": 4,
}


class DupeType(StrEnum):
    """Duplicate strength of a merged record.

    ``INTERNAL_*`` means the matched records came from the same source pair,
    ``EXTERNAL_*`` that they came from different ones. ``*_ALL`` additionally
    requires equal machine and item names.
    """

    NONE = "none"
    INTERNAL_HASH = "internal-hash"
    INTERNAL_ALL = "internal-all"
    EXTERNAL_HASH = "external-hash"
    EXTERNAL_ALL = "external-all"

    @property
    def rank(self) -> int:
        return _DUPE_RANK[self.value]

    @property
    def is_external(self) -> bool:
        return self.rank >= _DUPE_RANK["external-hash"]

    @property
    def is_exact(self) -> bool:
        return self in (DupeType.INTERNAL_ALL, DupeType.EXTERNAL_ALL)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, DupeType):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, DupeType):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, DupeType):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, DupeType):
            return NotImplemented
        return self.rank >= other.rank


class ForceMerging(StrEnum):
    NONE = "none"
    SPLIT = "split"
    FULL = "full"


class ForceNodump(StrEnum):
    NONE = "none"
    OBSOLETE = "obsolete"
    REQUIRED = "required"
    IGNORE = "ignore"


class ForcePacking(StrEnum):
    NONE = "none"
    ZIP = "zip"
    UNZIP = "unzip"
