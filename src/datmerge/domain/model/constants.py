"""Well-known hash lengths and the empty-file hash triple."""

from __future__ import annotations

from typing import Final

CRC_LENGTH: Final[int] = 8
MD5_LENGTH: Final[int] = 32
SHA1_LENGTH: Final[int] = 40

SIZE_UNKNOWN: Final[int] = -1
SIZE_ZERO: Final[int] = 0
CRC_ZERO: Final[str] = "00000000"
MD5_ZERO: Final[str] = "d41d8cd98f00b204e9800998ecf8427e"
SHA1_ZERO: Final[str] = "da39a3ee5e6b4b0d3255bfef95601890afd80709"

DEFAULT_MACHINE_KEY: Final[str] = "Default"
SUPERDAT_TYPE: Final[str] = "SuperDAT"
