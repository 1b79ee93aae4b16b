"""Item ordering inside machine buckets and name-collision resolution for writers."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from datmerge.domain.model import DatItem, Disk, Rom
from datmerge.domain.natural import natural_key

from .merge import duplicate_status

if TYPE_CHECKING:
    from collections.abc import Iterable

log = logging.getLogger(__name__)

_PATH_SEPARATORS = re.compile(r"[\\/]")


def _split_item_path(name: str) -> tuple[str, str]:
    parts = _PATH_SEPARATORS.split(name)
    return "\\".join(parts[:-1]), parts[-1]


def item_sort_key(item: DatItem, *, no_rename: bool = False) -> tuple[object, ...]:
    """Order within a machine bucket: sources, machine, roms/disks first, then path."""

    directory, file_name = _split_item_path(item.name)
    kind_rank = 0 if isinstance(item, Rom | Disk) else 1
    key: tuple[object, ...] = (
        natural_key(item.machine.name),
        kind_rank,
        natural_key(directory),
        natural_key(file_name),
    )
    if no_rename:
        return key
    return (item.source_system_id, item.source_id, *key)


def sort_items(items: Iterable[DatItem], *, no_rename: bool = False) -> list[DatItem]:
    return sorted(items, key=lambda item: item_sort_key(item, no_rename=no_rename))


def _rename_suffix(item: DatItem) -> str | None:
    match item:
        case Rom():
            return item.crc or item.md5 or item.sha1 or "1"
        case Disk():
            return item.md5 or item.sha1 or "1"
        case _:
            return None


def resolve_names(items: Iterable[DatItem]) -> list[DatItem]:
    """Drop exact duplicates and rename colliding item names within one machine."""

    output: list[DatItem] = []
    last_item: DatItem | None = None
    last_renamed: str | None = None
    last_id = 0

    for item in sort_items(items, no_rename=True):
        if last_item is None:
            output.append(item)
            last_item = item
            continue

        if duplicate_status(item, last_item).is_exact:
            log.debug("Exact duplicate found for %r", item.name)
            continue

        if item.name != last_item.name:
            output.append(item)
            last_item = item
            last_renamed = None
            last_id = 0
            continue

        log.debug("Name duplicate found for %r", item.name)
        suffix = _rename_suffix(item)
        if suffix is not None:
            item.name = f"{item.name}_{suffix}"
            last_renamed = last_renamed or item.name

        if item.name == last_renamed:
            item.name = item.name if last_id == 0 else f"{item.name}_{last_id}"
            last_id += 1
        else:
            last_renamed = None
            last_id = 0
        output.append(item)

    return sort_items(output, no_rename=True)
