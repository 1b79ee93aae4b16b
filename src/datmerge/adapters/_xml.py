"""Helpers shared by the catalog codecs.

Element helpers serve the XML formats (Logiqx and SabreDAT); ``build_item``,
``item_attributes`` and ``item_status`` also back the ClrMamePro text codec.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from functools import singledispatch
from typing import TYPE_CHECKING, TypeVar

from datmerge.domain.model import (
    SIZE_UNKNOWN,
    Archive,
    BiosSet,
    CatalogHeader,
    DatItem,
    Disk,
    ForceMerging,
    ForceNodump,
    ForcePacking,
    ItemStatus,
    ItemType,
    Machine,
    Release,
    Rom,
    Sample,
)
from datmerge.domain.model.constants import SUPERDAT_TYPE

from .errors import CatalogFormatError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from enum import StrEnum
    from pathlib import Path

log = logging.getLogger(__name__)

HEADER_TEXT_FIELDS = (
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
)

_TRUE_VALUES = frozenset({"yes", "true", "1"})
_FALSE_VALUES = frozenset({"no", "false", "0"})


def load_document(path: Path) -> ET.Element:
    try:
        return ET.parse(path).getroot()
    except ET.ParseError as exc:
        raise CatalogFormatError(f"Malformed XML in {path}: {exc}") from exc


def write_document(root: ET.Element, path: Path, *, doctype: str | None = None) -> None:
    ET.indent(root, space="\t")
    body = ET.tostring(root, encoding="unicode")
    prolog = '<?xml version="1.0" encoding="utf-8"?>\n'
    if doctype is not None:
        prolog += doctype + "\n"
    path.write_text(prolog + body + "\n", encoding="utf-8")


# parsing


def parse_size(raw: str | None) -> int:
    """Decimal or ``0x`` hex size; blank means unknown. Raises ``ValueError``."""

    if raw is None or not raw.strip() or raw.strip() == "-":
        return SIZE_UNKNOWN
    value = raw.strip().lower()
    size = int(value, 16) if value.startswith("0x") else int(value)
    if size < SIZE_UNKNOWN:
        raise ValueError(f"negative size {raw!r}")
    return size


def parse_yes_no(raw: str | None) -> bool | None:
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return None


TEnum = TypeVar("TEnum", bound="StrEnum")


def parse_enum(enum_type: type[TEnum], raw: str | None, default: TEnum) -> TEnum:
    if not raw:
        return default
    try:
        return enum_type(raw.strip().lower())
    except ValueError:
        log.debug("Unknown %s value %r", enum_type.__name__, raw)
        return default


def build_item(
    kind: ItemType,
    attrs: Mapping[str, str],
    machine: Machine,
    *,
    status: str | None = None,
) -> DatItem:
    """Build one record from element attributes; malformed sizes raise ``ValueError``."""

    name = attrs.get("name", "")
    raw_status = status if status is not None else attrs.get("status")
    match kind:
        case ItemType.ROM:
            return Rom(
                name=name,
                machine=machine,
                size=parse_size(attrs.get("size")),
                crc=attrs.get("crc"),
                md5=attrs.get("md5"),
                sha1=attrs.get("sha1"),
                date=attrs.get("date"),
                status=parse_enum(ItemStatus, raw_status, ItemStatus.NONE),
            )
        case ItemType.DISK:
            return Disk(
                name=name,
                machine=machine,
                md5=attrs.get("md5"),
                sha1=attrs.get("sha1"),
                status=parse_enum(ItemStatus, raw_status, ItemStatus.NONE),
            )
        case ItemType.RELEASE:
            return Release(
                name=name,
                machine=machine,
                region=attrs.get("region"),
                language=attrs.get("language"),
                date=attrs.get("date"),
                is_default=parse_yes_no(attrs.get("default")),
            )
        case ItemType.BIOS_SET:
            return BiosSet(
                name=name,
                machine=machine,
                description=attrs.get("description"),
                is_default=parse_yes_no(attrs.get("default")),
            )
        case ItemType.SAMPLE:
            return Sample(name=name, machine=machine)
        case ItemType.ARCHIVE:
            return Archive(name=name, machine=machine)


def read_header(element: ET.Element | None) -> CatalogHeader:
    """Text fields, SuperDAT type and clrmamepro/flag switches of a ``<header>``."""

    header = CatalogHeader()
    if element is None:
        return header
    for field_name in HEADER_TEXT_FIELDS:
        value = element.findtext(field_name)
        if value is not None and value.strip():
            setattr(header, field_name, value.strip())

    switches: dict[str, str] = {}
    type_value = element.findtext("type")
    clrmamepro = element.find("clrmamepro")
    if clrmamepro is not None:
        switches.update(clrmamepro.attrib)
    for flag in element.iterfind("flags/flag"):
        name, value = flag.get("name"), flag.get("value")
        if name is None or value is None:
            continue
        if name.lower() == "type":
            type_value = value
        else:
            switches[name.lower()] = value

    header.is_superdat = SUPERDAT_TYPE in (type_value or "")
    header.force_merging = parse_enum(ForceMerging, switches.get("forcemerging"), ForceMerging.NONE)
    header.force_nodump = parse_enum(ForceNodump, switches.get("forcenodump"), ForceNodump.NONE)
    header.force_packing = parse_enum(ForcePacking, switches.get("forcepacking"), ForcePacking.NONE)
    return header


# writing


def header_text_element(header: CatalogHeader) -> ET.Element:
    """A ``<header>`` with the text fields that are set; name and description always."""

    element = ET.Element("header")
    for field_name in HEADER_TEXT_FIELDS:
        value = getattr(header, field_name)
        if value or field_name in ("name", "description"):
            ET.SubElement(element, field_name).text = value or ""
    return element


def header_switches(header: CatalogHeader) -> dict[str, str]:
    switches: dict[str, str] = {}
    if header.force_merging is not ForceMerging.NONE:
        switches["forcemerging"] = header.force_merging.value
    if header.force_nodump is not ForceNodump.NONE:
        switches["forcenodump"] = header.force_nodump.value
    if header.force_packing is not ForcePacking.NONE:
        switches["forcepacking"] = header.force_packing.value
    return switches


def _set(attrs: dict[str, str], key: str, value: str | None) -> None:
    if value:
        attrs[key] = value


def _yes_no(value: bool | None) -> str | None:
    if value is None:
        return None
    return "yes" if value else "no"


@singledispatch
def item_attributes(item: DatItem) -> dict[str, str]:
    """Attributes describing ``item``; the status is left to the caller's flavour."""

    return {"name": item.name}


@item_attributes.register
def _(rom: Rom) -> dict[str, str]:
    attrs = {"name": rom.name}
    if rom.size != SIZE_UNKNOWN:
        attrs["size"] = str(rom.size)
    _set(attrs, "crc", rom.crc)
    _set(attrs, "md5", rom.md5)
    _set(attrs, "sha1", rom.sha1)
    _set(attrs, "date", rom.date)
    return attrs


@item_attributes.register
def _(disk: Disk) -> dict[str, str]:
    attrs = {"name": disk.name}
    _set(attrs, "md5", disk.md5)
    _set(attrs, "sha1", disk.sha1)
    return attrs


@item_attributes.register
def _(release: Release) -> dict[str, str]:
    attrs = {"name": release.name}
    _set(attrs, "region", release.region)
    _set(attrs, "language", release.language)
    _set(attrs, "date", release.date)
    _set(attrs, "default", _yes_no(release.is_default))
    return attrs


@item_attributes.register
def _(bios_set: BiosSet) -> dict[str, str]:
    attrs = {"name": bios_set.name}
    _set(attrs, "description", bios_set.description)
    _set(attrs, "default", _yes_no(bios_set.is_default))
    return attrs


def item_status(item: DatItem) -> ItemStatus:
    match item:
        case Rom() | Disk():
            return item.status
        case _:
            return ItemStatus.NONE
