"""Hash canonicalization and incomplete-record classification."""

from __future__ import annotations

import logging
import re
from typing import TypeVar

from datmerge.domain.model import (
    CRC_LENGTH,
    CRC_ZERO,
    MD5_LENGTH,
    MD5_ZERO,
    SHA1_LENGTH,
    SHA1_ZERO,
    SIZE_UNKNOWN,
    SIZE_ZERO,
    DatItem,
    Disk,
    Rom,
)

log = logging.getLogger(__name__)

_HEX = re.compile(r"[0-9a-f]+")


def clean_hash(value: str | None, length: int) -> str | None:
    """Return ``value`` as a lowercase hex digest of ``length`` chars, or ``None``.

    A leading ``0x`` is stripped, a lone ``-`` means absent, short values are
    left-padded with ``0``. Anything that is not exactly ``length`` hex digits
    afterwards is rejected.
    """

    if value is None:
        return None
    cleaned = value.strip().lower()
    if cleaned.startswith("0x"):
        cleaned = cleaned[2:]
    if not cleaned or cleaned == "-":
        return None
    cleaned = cleaned.rjust(length, "0")
    if len(cleaned) != length or _HEX.fullmatch(cleaned) is None:
        return None
    return cleaned


TItem = TypeVar("TItem", bound=DatItem)


def sanitize(item: TItem) -> TItem:
    """Canonicalize hashes in place and return the same item.

    Roms without a usable size become the empty file when their hashes allow it,
    otherwise they are downgraded to nodump. Disks without any hash are nodump.
    """

    match item:
        case Rom():
            _sanitize_rom(item)
        case Disk():
            _sanitize_disk(item)
        case _:
            pass
    return item


def _sanitize_rom(rom: Rom) -> None:
    rom.crc = clean_hash(rom.crc, CRC_LENGTH)
    rom.md5 = clean_hash(rom.md5, MD5_LENGTH)
    rom.sha1 = clean_hash(rom.sha1, SHA1_LENGTH)

    size_unknown = rom.size in (SIZE_UNKNOWN, SIZE_ZERO)
    if size_unknown and (
        not rom.crc or rom.crc == CRC_ZERO or rom.md5 == MD5_ZERO or rom.sha1 == SHA1_ZERO
    ):
        rom.size = SIZE_ZERO
        rom.crc = CRC_ZERO
        rom.md5 = MD5_ZERO
        rom.sha1 = SHA1_ZERO
    elif not rom.nodump and size_unknown:
        _mark_incomplete(rom)
    elif not rom.nodump and rom.size > 0 and not rom.has_hashes:
        _mark_incomplete(rom)


def _sanitize_disk(disk: Disk) -> None:
    disk.md5 = clean_hash(disk.md5, MD5_LENGTH)
    disk.sha1 = clean_hash(disk.sha1, SHA1_LENGTH)
    if not disk.nodump and not disk.has_hashes:
        _mark_incomplete(disk)


def _mark_incomplete(item: Rom | Disk) -> None:
    log.warning(
        "Incomplete entry for %r in machine %r treated as nodump", item.name, item.machine.name
    )
    item.nodump = True
