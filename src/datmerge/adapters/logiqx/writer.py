"""Serialize catalogs as Logiqx XML datafiles."""

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
    from pathlib import Path

    from datmerge.domain.model import Catalog, CatalogHeader, Machine

log = logging.getLogger(__name__)

LOGIQX_DOCTYPE = (
    '<!DOCTYPE datafile PUBLIC "-//Logiqx//DTD ROM Management Datafile//EN" '
    '"http://www.logiqx.com/Dats/datafile.dtd">'
)


def write_logiqx(catalog: Catalog, path: Path) -> None:
    root = ET.Element("datafile")
    root.append(_header_element(catalog.header))

    machines = 0
    for items in bucket_for_write(catalog).values():
        if not items:
            continue
        element = _machine_element(items[0].machine)
        for item in items:
            attrs = item_attributes(item)
            status = item_status(item)
            if status is not ItemStatus.NONE:
                attrs["status"] = status.value
            ET.SubElement(element, item.item_type.value, attrs)
        root.append(element)
        machines += 1

    write_document(root, path, doctype=LOGIQX_DOCTYPE)
    log.info("Wrote %d machines to %s", machines, path)


def _header_element(header: CatalogHeader) -> ET.Element:
    element = header_text_element(header)
    if header.is_superdat:
        ET.SubElement(element, "type").text = SUPERDAT_TYPE
    switches = header_switches(header)
    if switches:
        ET.SubElement(element, "clrmamepro", switches)
    return element


def _machine_element(machine: Machine) -> ET.Element:
    attrs = {"name": machine.name}
    if machine.is_bios:
        attrs["isbios"] = "yes"
    for key, value in (
        ("cloneof", machine.clone_of),
        ("romof", machine.rom_of),
        ("sampleof", machine.sample_of),
    ):
        if value:
            attrs[key] = value

    element = ET.Element("machine", attrs)
    ET.SubElement(element, "description").text = machine.description or machine.name
    for tag, value in (
        ("year", machine.year),
        ("manufacturer", machine.manufacturer),
        ("comment", machine.comment),
    ):
        if value:
            ET.SubElement(element, tag).text = value
    return element
