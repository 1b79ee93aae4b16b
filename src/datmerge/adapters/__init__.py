"""Catalog format adapters (codecs) and format detection."""

from __future__ import annotations

from .errors import CatalogFormatError, UnsupportedFormatError
from .registry import (
    CatalogFormat,
    detect_format,
    extension_for,
    parse_format,
    read_catalog,
    write_catalog,
)

__all__ = [
    "CatalogFormat",
    "CatalogFormatError",
    "UnsupportedFormatError",
    "detect_format",
    "extension_for",
    "parse_format",
    "read_catalog",
    "write_catalog",
]
