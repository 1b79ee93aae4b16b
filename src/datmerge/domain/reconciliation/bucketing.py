"""Group flat record collections into keyed buckets.

Two groupings exist: by machine (what writers consume) and by hash (what the
merge engine consumes to find duplicates across machines and inputs). Both
work on copies, so callers can keep using the source catalog afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from datmerge.domain.model import Catalog, CatalogHeader, DatItem
from datmerge.domain.natural import natural_key

from .keys import hash_key, machine_key
from .merge import merge
from .naming import resolve_names, sort_items

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

log = logging.getLogger(__name__)


@dataclass(slots=True)
class BucketResult:
    """Buckets in natural key order plus the number of records placed in them."""

    buckets: dict[str, list[DatItem]] = field(default_factory=dict["str", "list[DatItem]"])
    count: int = 0

    def to_catalog(self, header: CatalogHeader | None = None) -> Catalog:
        catalog = Catalog(header=header or CatalogHeader())
        for key, items in self.buckets.items():
            catalog.add_range(key, items)
        return catalog


def bucket_by_machine(
    source: Mapping[str, Sequence[DatItem]],
    *,
    dedupe: bool = False,
    no_rename: bool = False,
    lower: bool = True,
) -> BucketResult:
    """Regroup ``source`` by machine, optionally merging each input bucket first.

    Without ``no_rename`` the keys carry the zero-padded source ids, so machines
    of the same name from different inputs stay apart.
    """

    def key_of(item: DatItem) -> str:
        return machine_key(item, no_rename=no_rename, lower=lower)

    result = _regroup(source, key_of, merge_first=dedupe)
    for key, items in result.buckets.items():
        result.buckets[key] = sort_items(items, no_rename=no_rename)
    log.info("Bucketed %d records by machine into %d buckets", result.count, len(result.buckets))
    return result


def bucket_by_hash(
    source: Mapping[str, Sequence[DatItem]], *, dedupe: bool = False
) -> BucketResult:
    """Regroup ``source`` by :func:`hash_key`, then merge each bucket when asked."""

    result = _regroup(source, hash_key, merge_first=False)
    if dedupe:
        for key, items in result.buckets.items():
            result.buckets[key] = merge(items)
        result.count = sum(len(items) for items in result.buckets.values())
    log.info("Bucketed %d records by hash into %d buckets", result.count, len(result.buckets))
    return result


def bucket_for_write(catalog: Catalog) -> dict[str, list[DatItem]]:
    """Machine buckets in the shape writers consume, with item names made unique."""

    result = bucket_by_machine(catalog, dedupe=catalog.header.dedupe_on_write, no_rename=True)
    return {key: resolve_names(items) for key, items in result.buckets.items()}


def _regroup(
    source: Mapping[str, Sequence[DatItem]],
    key_of: Callable[[DatItem], str],
    *,
    merge_first: bool,
) -> BucketResult:
    grouped: dict[str, list[DatItem]] = {}
    count = 0
    for items in source.values():
        copies = [item.copy() for item in items]
        if merge_first:
            copies = merge(copies)
        for item in copies:
            grouped.setdefault(key_of(item), []).append(item)
            count += 1
    ordered = {key: grouped[key] for key in sorted(grouped, key=natural_key)}
    return BucketResult(buckets=ordered, count=count)
