"""Serialize catalogs as ClrMamePro text datafiles."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from datmerge.adapters._xml import item_attributes, item_status
from datmerge.domain.model import ForceMerging, ForceNodump, ForcePacking, ItemStatus
from datmerge.domain.model.constants import SUPERDAT_TYPE
from datmerge.domain.reconciliation import bucket_for_write

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

    from datmerge.domain.model import Catalog, CatalogHeader, DatItem, Machine

log = logging.getLogger(__name__)

INDENT = "\t"
BARE_KEYS = frozenset({"size", "crc", "md5", "sha1", "default", "flags"})
OPTIONAL_HEADER_FIELDS = ("category", "date", "email", "homepage", "url", "comment")
FORCEZIPPING = {ForcePacking.ZIP: "yes", ForcePacking.UNZIP: "no"}


def quote(value: str) -> str:
    return f'"{value}"'


def write_clrmamepro(catalog: Catalog, path: Path) -> None:
    lines = _header_lines(catalog.header)

    machines = 0
    for items in bucket_for_write(catalog).values():
        if not items:
            continue
        lines.append("")
        lines.extend(_machine_lines(items[0].machine, items))
        machines += 1

    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    log.info("Wrote %d machines to %s", machines, path)


def _block(tag: str, fields: Iterable[tuple[str, str]]) -> list[str]:
    return [f"{tag} (", *(f"{INDENT}{key} {value}" for key, value in fields), ")"]


def _header_lines(header: CatalogHeader) -> list[str]:
    fields = [
        ("name", quote(header.name)),
        ("description", quote(header.description)),
        ("version", quote(header.version or "")),
        ("author", quote(header.author or "")),
    ]
    fields.extend(
        (name, quote(value))
        for name in OPTIONAL_HEADER_FIELDS
        if (value := getattr(header, name))
    )
    if header.is_superdat:
        fields.append(("type", quote(SUPERDAT_TYPE)))
    if header.force_merging is not ForceMerging.NONE:
        fields.append(("forcemerging", header.force_merging.value))
    if header.force_nodump is not ForceNodump.NONE:
        fields.append(("forcenodump", header.force_nodump.value))
    if header.force_packing is not ForcePacking.NONE:
        fields.append(("forcezipping", FORCEZIPPING[header.force_packing]))
    return _block("clrmamepro", fields)


def _machine_lines(machine: Machine, items: Iterable[DatItem]) -> list[str]:
    # no set name may start with a path separator
    fields = [("name", quote(machine.name.lstrip("\\/")))]
    for key, value in (
        ("romof", machine.rom_of),
        ("cloneof", machine.clone_of),
        ("sampleof", machine.sample_of),
    ):
        if value:
            fields.append((key, quote(value)))
    fields.append(("description", quote(machine.description or machine.name)))
    for key, value in (
        ("year", machine.year),
        ("manufacturer", machine.manufacturer),
        ("comment", machine.comment),
    ):
        if value:
            fields.append((key, quote(value)))
    fields.extend((item.item_type.value, _item_body(item)) for item in items)
    return _block("resource" if machine.is_bios else "game", fields)


def _item_body(item: DatItem) -> str:
    attrs = item_attributes(item)
    status = item_status(item)
    if status is not ItemStatus.NONE:
        attrs["flags"] = status.value
    return f"( {_attribute_text(attrs)} )"


def _attribute_text(attrs: Mapping[str, str]) -> str:
    return " ".join(
        f"{key} {value if key in BARE_KEYS else quote(value)}" for key, value in attrs.items()
    )
