"""Parse SabreDAT documents.

Machine names are the ``\\``-joined names of the directories enclosing each
``<file>``. Files nested more than one directory deep mark the catalog as a
SuperDAT.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from datmerge.adapters._xml import build_item, load_document, read_header
from datmerge.adapters.errors import CatalogFormatError
from datmerge.adapters.provenance import tag_source
from datmerge.domain.admission import admit
from datmerge.domain.model import Catalog, ItemType, Machine

if TYPE_CHECKING:
    import xml.etree.ElementTree as ET
    from pathlib import Path

    from datmerge.domain.filtering import FilterCriteria

log = logging.getLogger(__name__)

DIRECTORY_TAGS = frozenset({"directory", "dir"})
ITEM_TYPES: dict[str, ItemType] = {item_type.value: item_type for item_type in ItemType}


@dataclass(slots=True)
class _ReadState:
    path: Path
    catalog: Catalog
    source_system_id: int
    source_id: int
    criteria: FilterCriteria | None
    nested: bool = False
    admitted: int = 0
    rejected: int = 0


def read_sabredat(
    path: Path,
    *,
    source_system_id: int = 0,
    source_id: int = 0,
    criteria: FilterCriteria | None = None,
) -> Catalog:
    root = load_document(path)
    data = root.find("data") if root.tag == "datafile" else None
    if data is None:
        raise CatalogFormatError(f"{path} is not a SabreDAT document (no <data> element)")

    header = read_header(root.find("header"))
    header.file_name = header.file_name or path.stem
    state = _ReadState(
        path=path,
        catalog=Catalog(header=header),
        source_system_id=source_system_id,
        source_id=source_id,
        criteria=criteria,
    )
    _walk(data, [], state)
    if state.nested:
        header.is_superdat = True

    log.info("Parsed %s: admitted=%d, rejected=%d", path, state.admitted, state.rejected)
    return state.catalog


def _walk(element: ET.Element, parents: list[str], state: _ReadState) -> None:
    machine: Machine | None = None
    for child in element:
        if child.tag in DIRECTORY_TAGS:
            name = child.get("name", "").strip()
            _walk(child, [*parents, name] if name else parents, state)
        elif child.tag == "file":
            if machine is None:
                machine = _machine_for(parents, element, state)
                state.nested = state.nested or len(parents) > 1
            _read_file(child, machine, state)


def _machine_for(parents: list[str], element: ET.Element, state: _ReadState) -> Machine:
    description = element.get("description")
    if description == (parents[-1] if parents else ""):
        description = None
    return tag_source(
        Machine(name="\\".join(parents), description=description),
        state.path,
        source_system_id=state.source_system_id,
        source_id=state.source_id,
    )


def _read_file(element: ET.Element, machine: Machine, state: _ReadState) -> None:
    raw_type = (element.get("type") or "").strip().lower()
    kind = ITEM_TYPES.get(raw_type)
    if kind is None:
        log.warning(
            "Skipping file of unknown type %r in %r of %s", raw_type, machine.name, state.path
        )
        state.rejected += 1
        return

    status = None
    for flag in element.iterfind("flags/flag"):
        if (flag.get("name") or "").lower() == "status":
            status = flag.get("value")

    try:
        item = build_item(kind, element.attrib, machine, status=status)
    except ValueError as exc:
        log.warning("Skipping malformed %s in %r of %s: %s", kind, machine.name, state.path, exc)
        state.rejected += 1
        return

    if admit(state.catalog, item, state.criteria):
        state.admitted += 1
    else:
        state.rejected += 1
