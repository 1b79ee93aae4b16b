"""Ports implemented by the catalog format adapters."""

from __future__ import annotations

from .codec import CatalogReader, CatalogWriter

__all__ = ["CatalogReader", "CatalogWriter"]
