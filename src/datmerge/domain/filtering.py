"""Admission filter: decide whether a record belongs in the working catalog.

Patterns are case-insensitive. ``*text*`` matches a substring, ``*text`` a
suffix, ``text*`` a prefix and anything else the whole value. An absent
pattern always passes.
"""

from __future__ import annotations

from dataclasses import dataclass

from datmerge.domain.model import DatItem, Disk, ItemType, Rom


@dataclass(frozen=True, slots=True, kw_only=True)
class FilterCriteria:
    game_name_pattern: str | None = None
    item_name_pattern: str | None = None
    item_type: ItemType | None = None
    size_eq: int | None = None
    size_gte: int | None = None
    size_lte: int | None = None
    crc_pattern: str | None = None
    md5_pattern: str | None = None
    sha1_pattern: str | None = None
    nodump: bool | None = None

    not_game_name_pattern: str | None = None
    not_item_name_pattern: str | None = None
    not_item_type: ItemType | None = None
    not_crc_pattern: str | None = None
    not_md5_pattern: str | None = None
    not_sha1_pattern: str | None = None

    # post-admission rewrites
    single_game: bool = False
    trim_root: str | None = None

    @property
    def has_rewrites(self) -> bool:
        return self.single_game or self.trim_root is not None


def matches_pattern(value: str | None, pattern: str | None) -> bool:
    if not pattern:
        return True
    candidate = (value or "").lower()
    needle = pattern.lower()
    bare = needle.replace("*", "")
    if needle.startswith("*") and needle.endswith("*"):
        return bare in candidate
    if needle.startswith("*"):
        return candidate.endswith(bare)
    if needle.endswith("*"):
        return candidate.startswith(bare)
    return candidate == needle


def _excluded_by(value: str | None, pattern: str | None) -> bool:
    return bool(pattern) and matches_pattern(value, pattern)


def accepts(item: DatItem, criteria: FilterCriteria) -> bool:
    """Return whether ``item`` (with its machine) passes ``criteria``. Pure."""

    if not item.name:
        return False

    machine_name = item.machine.name
    if not matches_pattern(machine_name, criteria.game_name_pattern):
        return False
    if _excluded_by(machine_name, criteria.not_game_name_pattern):
        return False

    if not matches_pattern(item.name, criteria.item_name_pattern):
        return False
    if _excluded_by(item.name, criteria.not_item_name_pattern):
        return False

    if criteria.item_type is not None and item.item_type is not criteria.item_type:
        return False
    if criteria.not_item_type is not None and item.item_type is criteria.not_item_type:
        return False

    if criteria.nodump is not None and item.nodump is not criteria.nodump:
        return False

    match item:
        case Rom():
            return _size_passes(item.size, criteria) and _hashes_pass(
                item.crc, item.md5, item.sha1, criteria
            )
        case Disk():
            return _hashes_pass(None, item.md5, item.sha1, criteria, check_crc=False)
        case _:
            return True


def _size_passes(size: int, criteria: FilterCriteria) -> bool:
    if criteria.size_eq is not None:
        return size == criteria.size_eq
    if criteria.size_gte is not None and size < criteria.size_gte:
        return False
    return not (criteria.size_lte is not None and size > criteria.size_lte)


def _hashes_pass(
    crc: str | None,
    md5: str | None,
    sha1: str | None,
    criteria: FilterCriteria,
    *,
    check_crc: bool = True,
) -> bool:
    checks: list[tuple[str | None, str | None, str | None]] = [
        (md5, criteria.md5_pattern, criteria.not_md5_pattern),
        (sha1, criteria.sha1_pattern, criteria.not_sha1_pattern),
    ]
    if check_crc:
        checks.append((crc, criteria.crc_pattern, criteria.not_crc_pattern))
    for value, pattern, not_pattern in checks:
        if not matches_pattern(value, pattern):
            return False
        if _excluded_by(value, not_pattern):
            return False
    return True
