"""Serialize catalogs as SabreDAT documents.

Machine names are split on ``\\`` into nested ``<directory>`` elements.
Between consecutive machines only the differing tail of the path is closed
and reopened; the shared prefix stays open.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import TYPE_CHECKING

from datmerge.adapters._xml import (
    header_switches,
    header_text_element,
    item_attributes,
    item_status,
    write_document,
)
from datmerge.domain.model import ItemStatus
from datmerge.domain.model.constants import SUPERDAT_TYPE
from datmerge.domain.reconciliation import bucket_for_write

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from datmerge.domain.model import Catalog, CatalogHeader, DatItem

log = logging.getLogger(__name__)

PATH_SEPARATOR = "\\"


def write_sabredat(catalog: Catalog, path: Path) -> None:
    root = ET.Element("datafile")
    root.append(_header_element(catalog.header))
    data = ET.SubElement(root, "data")

    open_path: list[str] = []
    open_elements: list[ET.Element] = [data]
    machines = 0
    for items in bucket_for_write(catalog).values():
        if not items:
            continue
        machine = items[0].machine
        parts = machine.name.split(PATH_SEPARATOR)
        shared = common_prefix_length(open_path, parts)
        del open_elements[shared + 1 :]
        for depth in range(shared, len(parts)):
            part = parts[depth]
            # only the innermost directory carries the machine description
            description = part
            if depth == len(parts) - 1:
                description = machine.description or part
            open_elements.append(
                ET.SubElement(
                    open_elements[-1], "directory", {"name": part, "description": description}
                )
            )
        open_path = parts
        for item in items:
            open_elements[-1].append(_file_element(item))
        machines += 1

    write_document(root, path)
    log.info("Wrote %d machines to %s", machines, path)


def common_prefix_length(left: Sequence[str], right: Sequence[str]) -> int:
    length = 0
    for a, b in zip(left, right, strict=False):
        if a != b:
            break
        length += 1
    return length


def _header_element(header: CatalogHeader) -> ET.Element:
    element = header_text_element(header)
    flags: dict[str, str] = {}
    if header.is_superdat:
        flags["type"] = SUPERDAT_TYPE
    flags.update(header_switches(header))
    if flags:
        container = ET.SubElement(element, "flags")
        for name, value in flags.items():
            ET.SubElement(container, "flag", {"name": name, "value": value})
    return element


def _file_element(item: DatItem) -> ET.Element:
    element = ET.Element("file", {"type": item.item_type.value, **item_attributes(item)})
    status = item_status(item)
    if status is not ItemStatus.NONE:
        flags = ET.SubElement(element, "flags")
        ET.SubElement(flags, "flag", {"name": "status", "value": status.value})
    return element
