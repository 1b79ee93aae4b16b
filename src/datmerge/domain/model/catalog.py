"""The working catalog: header, bucketed items and running statistics.

``Catalog`` is a read-only ``Mapping`` from bucket key to a tuple of items.
All mutation goes through ``add``/``add_range``/``remove``/``replace_bucket``,
which are the only writers of the aggregate counters, so the counters always
equal ``recompute_stats()``.

The tuples are snapshots but the items in them are the stored objects. Treat
them as read-only: to change a stored item, build an edited copy and swap it
in with ``replace_bucket``. Editing one in place (its hashes, size or status)
leaves the counters stale.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .enums import ItemStatus
from .header import CatalogHeader
from .items import DatItem, Disk, Rom

if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass(slots=True)
class CatalogStats:
    rom_count: int = 0
    disk_count: int = 0
    total_size: int = 0
    crc_count: int = 0
    md5_count: int = 0
    sha1_count: int = 0
    nodump_count: int = 0
    baddump_count: int = 0

    def record(self, item: DatItem, *, sign: int = 1) -> None:
        match item:
            case Rom():
                self.rom_count += sign
                if not item.nodump:
                    self.total_size += sign * item.size
                self.crc_count += sign * bool(item.crc)
                self.md5_count += sign * bool(item.md5)
                self.sha1_count += sign * bool(item.sha1)
                self.nodump_count += sign * item.nodump
                self.baddump_count += sign * (item.status is ItemStatus.BAD_DUMP)
            case Disk():
                self.disk_count += sign
                self.md5_count += sign * bool(item.md5)
                self.sha1_count += sign * bool(item.sha1)
                self.nodump_count += sign * item.nodump
                self.baddump_count += sign * (item.status is ItemStatus.BAD_DUMP)
            case _:
                pass

    @classmethod
    def of(cls, items: Iterable[DatItem]) -> CatalogStats:
        stats = cls()
        for item in items:
            stats.record(item)
        return stats


@dataclass(eq=False)
class Catalog(Mapping[str, tuple[DatItem, ...]]):
    header: CatalogHeader = field(default_factory=CatalogHeader)
    _buckets: dict[str, list[DatItem]] = field(
        default_factory=dict["str", "list[DatItem]"], repr=False
    )
    _stats: CatalogStats = field(default_factory=CatalogStats, repr=False)

    @classmethod
    def clone_header(cls, other: Catalog) -> Catalog:
        """Return an empty catalog carrying a copy of ``other``'s header."""
        return cls(header=other.header.copy())

    # Mapping protocol

    def __getitem__(self, key: str) -> tuple[DatItem, ...]:
        """Snapshot of a bucket; the items themselves are shared, not copied."""
        return tuple(self._buckets[key])

    def __iter__(self) -> Iterator[str]:
        return iter(self._buckets)

    def __len__(self) -> int:
        return len(self._buckets)

    # statistics

    @property
    def stats(self) -> CatalogStats:
        return CatalogStats(
            rom_count=self._stats.rom_count,
            disk_count=self._stats.disk_count,
            total_size=self._stats.total_size,
            crc_count=self._stats.crc_count,
            md5_count=self._stats.md5_count,
            sha1_count=self._stats.sha1_count,
            nodump_count=self._stats.nodump_count,
            baddump_count=self._stats.baddump_count,
        )

    @property
    def rom_count(self) -> int:
        return self._stats.rom_count

    @property
    def disk_count(self) -> int:
        return self._stats.disk_count

    @property
    def total_size(self) -> int:
        return self._stats.total_size

    @property
    def crc_count(self) -> int:
        return self._stats.crc_count

    @property
    def md5_count(self) -> int:
        return self._stats.md5_count

    @property
    def sha1_count(self) -> int:
        return self._stats.sha1_count

    @property
    def nodump_count(self) -> int:
        return self._stats.nodump_count

    @property
    def baddump_count(self) -> int:
        return self._stats.baddump_count

    @property
    def item_count(self) -> int:
        return sum(len(items) for items in self._buckets.values())

    def recompute_stats(self) -> CatalogStats:
        return CatalogStats.of(self.iter_items())

    def iter_items(self) -> Iterator[DatItem]:
        for items in self._buckets.values():
            yield from items

    # mutation (single writer of the counters)

    def add(self, key: str, item: DatItem) -> None:
        self._buckets.setdefault(key, []).append(item)
        self._stats.record(item)

    def add_range(self, key: str, items: Iterable[DatItem]) -> None:
        for item in items:
            self.add(key, item)

    def remove(self, key: str) -> list[DatItem]:
        """Drop a bucket and return its items; unknown keys yield an empty list."""
        items = self._buckets.pop(key, [])
        for item in items:
            self._stats.record(item, sign=-1)
        return items

    def replace_bucket(self, key: str, items: Iterable[DatItem]) -> None:
        self.remove(key)
        new_items = list(items)
        if new_items:
            self.add_range(key, new_items)

    def extend(self, other: Mapping[str, tuple[DatItem, ...]]) -> None:
        """Fold every bucket of ``other`` into this catalog."""
        for key, items in other.items():
            self.add_range(key, items)
