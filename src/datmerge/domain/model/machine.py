"""Machine metadata: the game/device an item belongs to, plus its provenance."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(kw_only=True)
class Machine:
    """Grouping context and provenance attached to every item.

    ``source_system_id`` is the 0-based index of the input catalog during a
    multi-catalog run and acts as the priority tie-breaker (lower wins).
    """

    name: str = ""
    description: str | None = None
    clone_of: str | None = None
    rom_of: str | None = None
    sample_of: str | None = None
    year: str | None = None
    manufacturer: str | None = None
    comment: str | None = None
    is_bios: bool = False
    board: str | None = None

    source_system_id: int = 0
    source_system_name: str = ""
    source_id: int = 0
    source_name: str = ""

    def copy(self) -> Machine:
        return replace(self)

    def with_name(self, name: str) -> Machine:
        return replace(self, name=name)
