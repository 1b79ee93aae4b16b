"""Source tagging applied by every reader to the machines it produces."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from datmerge.domain.model import Machine


def tag_source(
    machine: Machine, path: Path, *, source_system_id: int, source_id: int
) -> Machine:
    """Stamp ``machine`` with the input's index and file name, in place."""

    machine.source_system_id = source_system_id
    machine.source_system_name = path.name
    machine.source_id = source_id
    machine.source_name = path.name
    return machine
