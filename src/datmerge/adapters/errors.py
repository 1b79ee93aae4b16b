"""Errors raised by the catalog format adapters."""

from __future__ import annotations


class CatalogFormatError(ValueError):
    """Raised when a catalog document is unreadable or structurally malformed."""


class UnsupportedFormatError(CatalogFormatError):
    """Raised when no codec exists for a requested or detected format."""
