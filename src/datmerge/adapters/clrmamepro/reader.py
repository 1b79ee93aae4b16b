"""Parse ClrMamePro text datafiles into hash-bucketed catalogs.

The format is line oriented::

    clrmamepro (
        name "Arcade Set"
        forcemerging split
    )

    game (
        name "alpha"
        rom ( name "alpha.bin" size 1024 crc abc12345 )
    )

A line is a block opener (``game (``), a one-line item (``rom ( ... )``), a
``key value`` field, a closing ``)`` or a ``#`` comment.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from datmerge.adapters._xml import build_item, parse_enum
from datmerge.adapters.errors import CatalogFormatError
from datmerge.adapters.provenance import tag_source
from datmerge.domain.admission import admit
from datmerge.domain.model import (
    Catalog,
    CatalogHeader,
    ForceMerging,
    ForceNodump,
    ForcePacking,
    ItemType,
    Machine,
)
from datmerge.domain.model.constants import SUPERDAT_TYPE

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from pathlib import Path

    from datmerge.domain.filtering import FilterCriteria

log = logging.getLogger(__name__)

HEADER_BLOCKS = frozenset({"clrmamepro", "romvault"})
SET_BLOCKS = frozenset({"set", "game", "machine", "resource"})
BIOS_BLOCK = "resource"

ITEM_TAGS: dict[str, ItemType] = {item_type.value: item_type for item_type in ItemType}
STATUS_WORDS = frozenset({"baddump", "good", "nodump", "verified"})
MACHINE_FIELDS = {
    "name": "name",
    "description": "description",
    "year": "year",
    "manufacturer": "manufacturer",
    "cloneof": "clone_of",
    "romof": "rom_of",
    "sampleof": "sample_of",
    "comment": "comment",
}
HEADER_FIELDS = frozenset(
    {
        "name",
        "description",
        "category",
        "version",
        "date",
        "author",
        "email",
        "homepage",
        "url",
        "comment",
    }
)
FORCEZIPPING = {"yes": ForcePacking.ZIP, "no": ForcePacking.UNZIP}

_BLOCK_START = re.compile(r"^(\S+)\s*\($")
_INLINE_ITEM = re.compile(r"^(\S+)\s*\((.*)\)$")
_FIELD = re.compile(r"^(\S+)\s+(.*)$")
_BLOCK_END = re.compile(r"^\)$")
_ATTRIBUTE_TOKEN = re.compile(r'"[^"]*"|[^\s"]+')


class RowKind(StrEnum):
    START = "start"
    ITEM = "item"
    FIELD = "field"
    END = "end"


@dataclass(frozen=True, slots=True)
class Row:
    kind: RowKind
    key: str = ""
    value: str = ""
    line: int = 0


@dataclass(slots=True)
class _SetBlock:
    kind: str
    fields: dict[str, str] = field(default_factory=dict)
    entries: list[tuple[int, str, str]] = field(default_factory=list)


def unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def iter_rows(lines: Iterable[str]) -> Iterator[Row]:
    """Classify ``lines``; blank lines, comments and unparseable lines are dropped."""

    for number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if _BLOCK_END.match(line):
            yield Row(RowKind.END, line=number)
        elif match := _BLOCK_START.match(line):
            yield Row(RowKind.START, match[1].lower(), line=number)
        elif match := _INLINE_ITEM.match(line):
            yield Row(RowKind.ITEM, match[1].lower(), match[2].strip(), line=number)
        elif match := _FIELD.match(line):
            yield Row(RowKind.FIELD, match[1].lower(), unquote(match[2]), line=number)
        else:
            log.debug("Ignoring line %d: %r", number, line)


def parse_attributes(kind: str, body: str) -> dict[str, str]:
    """Split the inside of ``rom ( ... )`` into attributes. Raises ``ValueError``.

    Bare status words (``baddump``) and ``flags <status>`` both set ``status``;
    a sample may give its name without a key.
    """

    tokens = [unquote(token) for token in _ATTRIBUTE_TOKEN.findall(body)]
    attrs: dict[str, str] = {}
    index = 0
    while index < len(tokens):
        key = tokens[index].lower()
        index += 1
        if not key:
            continue
        if key in STATUS_WORDS:
            attrs["status"] = key
            continue
        if kind == ItemType.SAMPLE and key != "name":
            attrs["name"] = tokens[index - 1]
            continue
        if index >= len(tokens):
            raise ValueError(f"attribute {key!r} has no value")
        attrs["status" if key == "flags" else key] = tokens[index]
        index += 1
    return attrs


def read_clrmamepro(
    path: Path,
    *,
    source_system_id: int = 0,
    source_id: int = 0,
    criteria: FilterCriteria | None = None,
) -> Catalog:
    """Read ``path``; malformed records are logged and skipped."""

    with path.open(encoding="utf-8-sig", errors="replace") as handle:
        rows = list(iter_rows(handle))

    header = CatalogHeader()
    sets: list[_SetBlock] = []
    current: _SetBlock | None = None
    in_header = recognised = False
    skipped_depth = 0
    for row in rows:
        if skipped_depth:
            if row.kind is RowKind.START:
                skipped_depth += 1
            elif row.kind is RowKind.END:
                skipped_depth -= 1
            continue

        match row.kind:
            case RowKind.START if current is None and not in_header:
                if row.key in HEADER_BLOCKS:
                    in_header = recognised = True
                elif row.key in SET_BLOCKS:
                    current = _SetBlock(kind=row.key)
                    recognised = True
                else:
                    skipped_depth = 1
            case RowKind.START:
                skipped_depth = 1
            case RowKind.END if in_header:
                in_header = False
            case RowKind.END if current is not None:
                sets.append(current)
                current = None
            case RowKind.FIELD if in_header:
                _apply_header_field(header, row.key, row.value)
            case RowKind.FIELD if current is not None:
                if row.key == ItemType.SAMPLE:
                    current.entries.append((row.line, row.key, f'name "{row.value}"'))
                else:
                    current.fields.setdefault(row.key, row.value)
            case RowKind.ITEM if current is not None:
                current.entries.append((row.line, row.key, row.value))
            case _:
                pass

    if current is not None:
        log.warning("Unterminated %s block at end of %s", current.kind, path)
        sets.append(current)
    if not recognised:
        raise CatalogFormatError(f"{path} is not a ClrMamePro datafile")

    header.file_name = header.file_name or path.stem
    catalog = Catalog(header=header)
    admitted = rejected = 0
    for block in sets:
        machine = tag_source(
            _build_machine(block),
            path,
            source_system_id=source_system_id,
            source_id=source_id,
        )
        for line, tag, body in block.entries:
            kind = ITEM_TAGS.get(tag)
            if kind is None:
                continue
            try:
                item = build_item(kind, parse_attributes(kind, body), machine)
            except ValueError as exc:
                log.warning("Skipping malformed %s on line %d of %s: %s", kind, line, path, exc)
                rejected += 1
                continue
            if admit(catalog, item, criteria):
                admitted += 1
            else:
                rejected += 1

    log.info("Parsed %s: admitted=%d, rejected=%d", path, admitted, rejected)
    return catalog


def _apply_header_field(header: CatalogHeader, key: str, value: str) -> None:
    # first value wins
    if key in HEADER_FIELDS:
        if value and not getattr(header, key):
            setattr(header, key, value)
    elif key == "type":
        header.is_superdat = header.is_superdat or SUPERDAT_TYPE in value
    elif key == "forcemerging" and header.force_merging is ForceMerging.NONE:
        header.force_merging = parse_enum(ForceMerging, value, ForceMerging.NONE)
    elif key == "forcenodump" and header.force_nodump is ForceNodump.NONE:
        header.force_nodump = parse_enum(ForceNodump, value, ForceNodump.NONE)
    elif key == "forcepacking" and header.force_packing is ForcePacking.NONE:
        header.force_packing = parse_enum(ForcePacking, value, ForcePacking.NONE)
    elif key == "forcezipping" and header.force_packing is ForcePacking.NONE:
        header.force_packing = FORCEZIPPING.get(value.lower(), ForcePacking.NONE)


def _build_machine(block: _SetBlock) -> Machine:
    values = {
        attribute: block.fields[key]
        for key, attribute in MACHINE_FIELDS.items()
        if block.fields.get(key)
    }
    values["name"] = values.get("name", "").strip()
    return Machine(is_bios=block.kind == BIOS_BLOCK, **values)
