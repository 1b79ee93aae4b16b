from __future__ import annotations

import logging

import pytest

from datmerge.domain.admission import admit, trim_name
from datmerge.domain.filtering import FilterCriteria
from datmerge.domain.model import Catalog, Rom
from tests.helpers.items import make_rom


def test_admit_sanitizes_and_buckets_by_hash() -> None:
    catalog = Catalog()
    rom = make_rom(size=1024, crc="0xABC12345")

    assert admit(catalog, rom)

    assert list(catalog) == ["1024-abc12345"]
    assert catalog.rom_count == 1
    assert catalog.total_size == 1024


def test_admit_rejects_empty_names_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    catalog = Catalog()

    with caplog.at_level(logging.WARNING):
        assert not admit(catalog, Rom(name="", size=1, crc="00000001"))

    assert catalog.item_count == 0
    assert "empty name" in caplog.text


def test_filter_rejection_is_silent(caplog: pytest.LogCaptureFixture) -> None:
    catalog = Catalog()

    with caplog.at_level(logging.WARNING):
        added = admit(catalog, make_rom(crc="00000001"), FilterCriteria(size_eq=1))

    assert not added
    assert catalog.item_count == 0
    assert caplog.text == ""


def test_filter_sees_sanitized_record() -> None:
    catalog = Catalog()
    rom = make_rom(size=-1, crc="12345678")

    assert admit(catalog, rom, FilterCriteria(nodump=True))
    assert catalog.nodump_count == 1


def test_single_game_rewrite() -> None:
    catalog = Catalog()
    rom = make_rom(machine="Some Game", crc="00000001")

    admit(catalog, rom, FilterCriteria(single_game=True))

    assert rom.machine.name == "!"


def test_trim_root_rewrite_keeps_extension() -> None:
    catalog = Catalog()
    long_name = "x" * 300 + ".bin"
    rom = make_rom(name=long_name, machine="game", crc="00000001")

    admit(catalog, rom, FilterCriteria(trim_root="C:\\roms"))

    assert rom.name.endswith(".bin")
    assert len("C:\\roms") + len("game") + len(rom.name) == 260


def test_trim_name_leaves_short_names_alone() -> None:
    assert trim_name("short.bin", machine="game", root="/roms") == "short.bin"


def test_counters_match_after_many_admissions() -> None:
    catalog = Catalog()
    for index in range(20):
        admit(catalog, make_rom(name=f"f{index}", size=index, crc=f"{index:08x}"))

    assert catalog.rom_count == 20
    assert catalog.stats == catalog.recompute_stats()
    expected_size = sum(
        item.size for item in catalog.iter_items() if isinstance(item, Rom) and not item.nodump
    )
    assert catalog.total_size == expected_size
