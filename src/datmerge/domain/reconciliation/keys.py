"""Bucket keys for hash grouping and machine grouping."""

from __future__ import annotations

from datmerge.domain.model import DatItem, Disk, Rom
from datmerge.domain.model.constants import DEFAULT_MACHINE_KEY


def hash_key(item: DatItem) -> str:
    """``"<size>-<crc>"`` for roms, ``"<size>-"`` for disks, the kind otherwise.

    Disks share one bucket per size: an md5-only disk and a sha1-only disk can
    still be the same image, so no single hash may key them.
    """

    match item:
        case Rom():
            return f"{item.size}-{item.crc or ''}"
        case Disk():
            return f"{item.size}-"
        case _:
            return item.item_type.value


def machine_key(item: DatItem, *, no_rename: bool = False, lower: bool = True) -> str:
    prefix = "" if no_rename else f"{item.source_system_id:010d}-{item.source_id:010d}-"
    name = item.machine.name.strip() or DEFAULT_MACHINE_KEY
    key = prefix + name
    return key.lower() if lower else key
