"""SabreDAT XML codec: Logiqx-like header, machines as nested directories."""

from __future__ import annotations

from .reader import read_sabredat
from .writer import write_sabredat

__all__ = ["read_sabredat", "write_sabredat"]
