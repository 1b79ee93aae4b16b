"""ClrMamePro text datafile codec."""

from __future__ import annotations

from .reader import read_clrmamepro
from .writer import write_clrmamepro

__all__ = ["read_clrmamepro", "write_clrmamepro"]
