"""Format detection and codec lookup."""

from __future__ import annotations

import logging
import re
from enum import StrEnum
from typing import TYPE_CHECKING

from .clrmamepro import read_clrmamepro, write_clrmamepro
from .errors import CatalogFormatError, UnsupportedFormatError
from .logiqx import read_logiqx, write_logiqx
from .sabredat import read_sabredat, write_sabredat
from .sabrejson import read_sabrejson, write_sabrejson

if TYPE_CHECKING:
    from pathlib import Path

    from datmerge.domain.filtering import FilterCriteria
    from datmerge.domain.model import Catalog
    from datmerge.domain.ports import CatalogReader, CatalogWriter

log = logging.getLogger(__name__)

SNIFF_BYTES = 64 * 1024
_CLRMAMEPRO_START = re.compile(
    r"^(clrmamepro|romvault|set|game|machine|resource)\s*\(", re.IGNORECASE
)


class CatalogFormat(StrEnum):
    LOGIQX = "logiqx"
    SABREDAT = "sabredat"
    JSON = "json"
    CLRMAMEPRO = "clrmamepro"


READERS: dict[CatalogFormat, CatalogReader] = {
    CatalogFormat.LOGIQX: read_logiqx,
    CatalogFormat.SABREDAT: read_sabredat,
    CatalogFormat.JSON: read_sabrejson,
    CatalogFormat.CLRMAMEPRO: read_clrmamepro,
}

WRITERS: dict[CatalogFormat, CatalogWriter] = {
    CatalogFormat.LOGIQX: write_logiqx,
    CatalogFormat.SABREDAT: write_sabredat,
    CatalogFormat.JSON: write_sabrejson,
    CatalogFormat.CLRMAMEPRO: write_clrmamepro,
}

EXTENSIONS: dict[CatalogFormat, str] = {
    CatalogFormat.LOGIQX: ".xml",
    CatalogFormat.SABREDAT: ".xml",
    CatalogFormat.JSON: ".json",
    CatalogFormat.CLRMAMEPRO: ".dat",
}


def parse_format(value: str) -> CatalogFormat:
    try:
        return CatalogFormat(value.strip().lower())
    except ValueError as exc:
        raise UnsupportedFormatError(f"Unsupported catalog format: {value!r}") from exc


def detect_format(path: Path) -> CatalogFormat:
    """Guess the format of ``path`` from its leading content."""

    try:
        with path.open("rb") as handle:
            head = handle.read(SNIFF_BYTES)
    except OSError as exc:
        raise CatalogFormatError(f"Cannot read {path}: {exc}") from exc

    text = head.decode("utf-8", errors="replace").lstrip("\ufeff \t\r\n")
    if text.startswith("{"):
        return CatalogFormat.JSON
    if text.startswith("<") and "<datafile" in text:
        if "<data>" in text or "<data " in text:
            return CatalogFormat.SABREDAT
        return CatalogFormat.LOGIQX
    if _CLRMAMEPRO_START.match(_first_statement(text)):
        return CatalogFormat.CLRMAMEPRO
    raise UnsupportedFormatError(f"Unrecognised catalog format: {path}")


def _first_statement(text: str) -> str:
    for line in text.splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith("#"):
            return stripped
    return ""


def extension_for(catalog_format: CatalogFormat) -> str:
    return EXTENSIONS[catalog_format]


def read_catalog(
    path: Path,
    *,
    catalog_format: CatalogFormat | None = None,
    source_system_id: int = 0,
    source_id: int = 0,
    criteria: FilterCriteria | None = None,
) -> Catalog:
    """Parse ``path`` with the given codec, detecting it when not given."""

    resolved = catalog_format or detect_format(path)
    log.debug("Reading %s as %s", path, resolved)
    return READERS[resolved](
        path, source_system_id=source_system_id, source_id=source_id, criteria=criteria
    )


def write_catalog(catalog: Catalog, path: Path, catalog_format: CatalogFormat) -> None:
    WRITERS[catalog_format](catalog, path)
