"""Logiqx XML datafile codec."""

from __future__ import annotations

from .reader import read_logiqx
from .writer import write_logiqx

__all__ = ["read_logiqx", "write_logiqx"]
