"""Admission of parsed records into a working catalog.

Every codec funnels its records through :func:`admit`, which makes it the
single writer of freshly parsed data: sanitize, filter, rewrite, then add
under the record's hash key.
"""

from __future__ import annotations

import logging
from pathlib import PurePath
from typing import TYPE_CHECKING

from datmerge.domain.filtering import accepts
from datmerge.domain.reconciliation.keys import hash_key
from datmerge.domain.sanitize import sanitize

if TYPE_CHECKING:
    from datmerge.domain.filtering import FilterCriteria
    from datmerge.domain.model import Catalog, DatItem

log = logging.getLogger(__name__)

MAX_PATH_LENGTH = 260
SINGLE_GAME_NAME = "!"


def admit(catalog: Catalog, item: DatItem, criteria: FilterCriteria | None = None) -> bool:
    """Sanitize and filter ``item`` and add it to ``catalog``.

    Returns whether the record was added. Rejections are not errors.
    """

    if not item.name:
        log.warning("Rejected record with empty name in machine %r", item.machine.name)
        return False

    sanitize(item)
    if criteria is not None:
        if not accepts(item, criteria):
            return False
        if criteria.has_rewrites:
            rewrite(item, criteria)

    catalog.add(hash_key(item), item)
    return True


def rewrite(item: DatItem, criteria: FilterCriteria) -> None:
    """Apply the single-game and path-trimming rewrites carried on ``criteria``."""

    if criteria.single_game:
        item.machine = item.machine.with_name(SINGLE_GAME_NAME)
    if criteria.trim_root is not None:
        item.name = trim_name(item.name, machine=item.machine.name, root=criteria.trim_root)


def trim_name(name: str, *, machine: str, root: str) -> str:
    """Shorten ``name`` so root, machine and name fit a 260 character path."""

    usable = MAX_PATH_LENGTH - len(machine) - len(root)
    if len(name) <= usable:
        return name
    extension = PurePath(name).suffix
    return name[: max(usable - len(extension), 0)] + extension
