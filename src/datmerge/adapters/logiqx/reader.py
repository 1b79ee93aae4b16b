"""Parse Logiqx XML datafiles into hash-bucketed catalogs."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from datmerge.adapters._xml import build_item, load_document, parse_yes_no, read_header
from datmerge.adapters.errors import CatalogFormatError
from datmerge.adapters.provenance import tag_source
from datmerge.domain.admission import admit
from datmerge.domain.model import Catalog, ItemType, Machine

if TYPE_CHECKING:
    import xml.etree.ElementTree as ET
    from pathlib import Path

    from datmerge.domain.filtering import FilterCriteria

log = logging.getLogger(__name__)

MACHINE_TAGS = frozenset({"machine", "game", "software"})
ITEM_TAGS: dict[str, ItemType] = {item_type.value: item_type for item_type in ItemType}


def read_logiqx(
    path: Path,
    *,
    source_system_id: int = 0,
    source_id: int = 0,
    criteria: FilterCriteria | None = None,
) -> Catalog:
    """Read ``path``; malformed records are logged and skipped."""

    root = load_document(path)
    if root.tag != "datafile":
        raise CatalogFormatError(f"{path} is not a Logiqx datafile (root is <{root.tag}>)")

    header = read_header(root.find("header"))
    header.file_name = header.file_name or path.stem
    catalog = Catalog(header=header)

    admitted = rejected = 0
    for element in root:
        if element.tag not in MACHINE_TAGS:
            continue
        machine = tag_source(
            _read_machine(element),
            path,
            source_system_id=source_system_id,
            source_id=source_id,
        )
        for child in element:
            kind = ITEM_TAGS.get(child.tag)
            if kind is None:
                continue
            try:
                item = build_item(kind, child.attrib, machine)
            except ValueError as exc:
                log.warning(
                    "Skipping malformed %s in machine %r of %s: %s", kind, machine.name, path, exc
                )
                rejected += 1
                continue
            if admit(catalog, item, criteria):
                admitted += 1
            else:
                rejected += 1

    log.info("Parsed %s: admitted=%d, rejected=%d", path, admitted, rejected)
    return catalog


def _read_machine(element: ET.Element) -> Machine:
    def text(tag: str) -> str | None:
        value = element.findtext(tag)
        return value.strip() if value and value.strip() else None

    return Machine(
        name=element.get("name", "").strip(),
        description=text("description"),
        clone_of=element.get("cloneof"),
        rom_of=element.get("romof"),
        sample_of=element.get("sampleof"),
        year=text("year"),
        manufacturer=text("manufacturer"),
        comment=text("comment"),
        is_bios=bool(parse_yes_no(element.get("isbios"))),
        board=element.get("board") or text("board"),
    )
