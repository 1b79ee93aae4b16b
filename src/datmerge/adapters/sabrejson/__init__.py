"""SabreJSON codec: the catalog as one JSON document validated with pydantic."""

from __future__ import annotations

from .codec import read_sabrejson, write_sabrejson

__all__ = ["read_sabrejson", "write_sabrejson"]
