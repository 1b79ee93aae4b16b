"""Partial-hash duplicate detection and merge of records sharing a bucket.

Responsibilities of this stage:
- decide whether two records describe the same file (``is_partial_match``)
- classify the strength of a duplicate (``duplicate_status``)
- collapse duplicates while enriching missing hashes and keeping the name of
  the highest-priority (lowest-index) source (``merge``)
- query a hash-bucketed catalog for the duplicates of one record

Absent hashes act as wildcards. Wildcard equality is not transitive, so
``merge`` scans its whole output for every record instead of indexing by a
single key; the preceding sort only keeps true duplicates close together.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from functools import singledispatch
from typing import TYPE_CHECKING

from datmerge.domain.model import BiosSet, DatItem, Disk, DupeType, Release, Rom

from .keys import hash_key

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from datmerge.domain.model import Catalog

log = logging.getLogger(__name__)


def _hashes_agree(left: str | None, right: str | None) -> bool:
    return not left or not right or left == right


def is_partial_match(a: DatItem, b: DatItem) -> bool:
    """Return whether ``a`` and ``b`` describe the same file.

    Never raises: records of different kinds, and nodump records, simply do
    not match.
    """

    if type(a) is not type(b):
        return False
    if a.nodump or b.nodump:
        return False
    match a, b:
        case Rom(), Rom():
            return (
                a.size == b.size
                and _hashes_agree(a.crc, b.crc)
                and _hashes_agree(a.md5, b.md5)
                and _hashes_agree(a.sha1, b.sha1)
            )
        case Disk(), Disk():
            # two disks without any hash carry no identity to compare
            if not a.has_hashes and not b.has_hashes:
                return False
            return _hashes_agree(a.md5, b.md5) and _hashes_agree(a.sha1, b.sha1)
        case _:
            return a.machine.name == b.machine.name and _identity(a) == _identity(b)


@singledispatch
def _identity(item: DatItem) -> tuple[object, ...]:
    return (item.name,)


@_identity.register
def _(release: Release) -> tuple[object, ...]:
    return (release.name, release.region, release.language, release.date)


@_identity.register
def _(bios_set: BiosSet) -> tuple[object, ...]:
    return (bios_set.name, bios_set.description, bios_set.is_default)


def duplicate_status(item: DatItem, saved: DatItem) -> DupeType:
    """Classify ``item`` against an already accepted record ``saved``."""

    if not is_partial_match(item, saved):
        return DupeType.NONE

    cross_source = (
        saved.source_system_id != item.source_system_id or saved.source_id != item.source_id
    )
    same_names = saved.machine.name == item.machine.name and saved.name == item.name
    if saved.dupe_type.is_external or cross_source:
        return DupeType.EXTERNAL_ALL if same_names else DupeType.EXTERNAL_HASH
    return DupeType.INTERNAL_ALL if same_names else DupeType.INTERNAL_HASH


def _merge_sort_key(item: DatItem) -> tuple[int, str, str, str, int, int]:
    match item:
        case Rom():
            hashes = (item.crc or "", item.md5 or "", item.sha1 or "")
            size = item.size
        case Disk():
            hashes = ("", item.md5 or "", item.sha1 or "")
            size = item.size
        case _:
            hashes = ("", "", "")
            size = -1
    return (size, *hashes, item.source_system_id, item.source_id)


def merge(items: Iterable[DatItem]) -> list[DatItem]:
    """Collapse duplicates in ``items`` and return the surviving records.

    Records are processed in ``(size, crc, md5, sha1)`` order (absent hashes
    first), ties broken by source ids and then input order. Surviving records
    are mutated in place: missing hashes are filled from their duplicates,
    their ``dupe_type`` is only ever upgraded, and the visible machine/item
    name follows the lowest source system id and source id seen. The
    survivors come back in the same order, so merging them again is a no-op.
    """

    ordered = sorted(items, key=_merge_sort_key)
    merged: list[DatItem] = []
    for item in ordered:
        if item.nodump:
            merged.append(item)
            continue

        for saved in merged:
            dupe_type = duplicate_status(item, saved)
            if dupe_type is DupeType.NONE:
                continue
            _absorb(saved, item, dupe_type)
            break
        else:
            merged.append(item)

    log.debug("Merged %d records into %d", len(ordered), len(merged))
    return sorted(merged, key=_merge_sort_key)


def _absorb(saved: DatItem, item: DatItem, dupe_type: DupeType) -> None:
    match saved, item:
        case Rom(), Rom():
            saved.crc = saved.crc or item.crc
            saved.md5 = saved.md5 or item.md5
            saved.sha1 = saved.sha1 or item.sha1
        case Disk(), Disk():
            saved.md5 = saved.md5 or item.md5
            saved.sha1 = saved.sha1 or item.sha1
        case _:
            pass

    saved.dupe_type = max(saved.dupe_type, dupe_type)

    # only the name and provenance move over; other machine fields stay
    if item.source_system_id < saved.source_system_id:
        saved.machine = replace(
            saved.machine,
            name=item.machine.name,
            source_system_id=item.machine.source_system_id,
            source_system_name=item.machine.source_system_name,
        )
        saved.name = item.name
    if item.source_id < saved.source_id:
        saved.machine = replace(
            saved.machine,
            name=item.machine.name,
            source_id=item.machine.source_id,
            source_name=item.machine.source_name,
        )
        saved.name = item.name


def has_duplicates(item: DatItem, buckets: Mapping[str, Sequence[DatItem]]) -> bool:
    """Return whether hash-bucketed ``buckets`` hold a partial match for ``item``."""

    return any(is_partial_match(item, candidate) for candidate in buckets.get(hash_key(item), ()))


def get_duplicates(item: DatItem, catalog: Catalog, *, remove: bool = False) -> list[DatItem]:
    """Return the partial matches of ``item`` in a hash-bucketed catalog.

    With ``remove=True`` the matches are taken out of ``catalog``.
    """

    key = hash_key(item)
    matched: list[DatItem] = []
    left: list[DatItem] = []
    for candidate in catalog.get(key, ()):
        (matched if is_partial_match(item, candidate) else left).append(candidate)
    if remove and matched:
        catalog.replace_bucket(key, left)
    return matched
