"""Read and write SabreJSON catalog documents."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from datmerge.adapters.errors import CatalogFormatError
from datmerge.adapters.provenance import tag_source
from datmerge.domain.admission import admit
from datmerge.domain.model import Catalog
from datmerge.domain.reconciliation import bucket_for_write

from .schema import CatalogPayload
from .translator import (
    header_from_payload,
    header_to_payload,
    items_from_payload,
    machine_from_payload,
    machine_to_payload,
)

if TYPE_CHECKING:
    from pathlib import Path

    from datmerge.domain.filtering import FilterCriteria

log = logging.getLogger(__name__)


def read_sabrejson(
    path: Path,
    *,
    source_system_id: int = 0,
    source_id: int = 0,
    criteria: FilterCriteria | None = None,
) -> Catalog:
    try:
        payload = CatalogPayload.model_validate_json(path.read_bytes())
    except ValidationError as exc:
        raise CatalogFormatError(f"Invalid SabreJSON document {path}: {exc}") from exc

    header = header_from_payload(payload.header)
    header.file_name = path.stem
    catalog = Catalog(header=header)

    admitted = rejected = 0
    for machine_payload in payload.machines:
        machine = tag_source(
            machine_from_payload(machine_payload),
            path,
            source_system_id=source_system_id,
            source_id=source_id,
        )
        for item in items_from_payload(machine_payload, machine):
            if admit(catalog, item, criteria):
                admitted += 1
            else:
                rejected += 1

    log.info("Parsed %s: admitted=%d, rejected=%d", path, admitted, rejected)
    return catalog


def write_sabrejson(catalog: Catalog, path: Path) -> None:
    payload = CatalogPayload(
        header=header_to_payload(catalog.header),
        machines=[
            machine_to_payload(items[0].machine, items)
            for items in bucket_for_write(catalog).values()
            if items
        ],
    )
    path.write_text(
        payload.model_dump_json(indent=2, by_alias=True, exclude_none=True) + "\n",
        encoding="utf-8",
    )
    log.info("Wrote %d machines to %s", len(payload.machines), path)
