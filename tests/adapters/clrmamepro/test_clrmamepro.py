from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from datmerge.adapters.clrmamepro import read_clrmamepro, write_clrmamepro
from datmerge.adapters.clrmamepro.reader import RowKind, iter_rows, parse_attributes
from datmerge.adapters.errors import CatalogFormatError
from datmerge.domain.filtering import FilterCriteria
from datmerge.domain.model import (
    BiosSet,
    Catalog,
    DatItem,
    Disk,
    ForceMerging,
    ForcePacking,
    ItemStatus,
    ItemType,
    Release,
    Rom,
    Sample,
)

if TYPE_CHECKING:
    from pathlib import Path


def _by_name(catalog: Catalog) -> dict[str, DatItem]:
    return {item.name: item for item in catalog.iter_items()}


def test_iter_rows_classifies_lines() -> None:
    lines = [
        "# comment",
        "game (",
        '\tname "Alpha (Rev 1)"',
        '\trom ( name "a (1).bin" size 4 )',
        ")",
        "",
    ]

    rows = list(iter_rows(lines))

    assert [row.kind for row in rows] == [
        RowKind.START,
        RowKind.FIELD,
        RowKind.ITEM,
        RowKind.END,
    ]
    assert (rows[1].key, rows[1].value) == ("name", "Alpha (Rev 1)")
    assert rows[2].value == 'name "a (1).bin" size 4'
    assert rows[2].line == 4


def test_parse_attributes_handles_status_words_and_samples() -> None:
    assert parse_attributes(ItemType.ROM, 'name "a b.bin" size 4 baddump') == {
        "name": "a b.bin",
        "size": "4",
        "status": "baddump",
    }
    assert parse_attributes(ItemType.DISK, 'name "d" flags verified') == {
        "name": "d",
        "status": "verified",
    }
    assert parse_attributes(ItemType.SAMPLE, "crash") == {"name": "crash"}
    with pytest.raises(ValueError, match="no value"):
        parse_attributes(ItemType.ROM, 'name "a.bin" size')


def test_read_clrmamepro_parses_header(clrmamepro_path: Path) -> None:
    header = read_clrmamepro(clrmamepro_path).header

    assert header.file_name == "clrmamepro"
    assert header.name == "Arcade Set"
    assert header.description == "Arcade Set (2024-01-01)"
    assert header.version == "2024-01-01"
    assert header.author == "tester"
    assert header.is_superdat is True
    assert header.force_merging is ForceMerging.SPLIT
    assert header.force_packing is ForcePacking.UNZIP


def test_read_clrmamepro_parses_records(clrmamepro_path: Path) -> None:
    catalog = read_clrmamepro(clrmamepro_path, source_system_id=2, source_id=3)
    items = _by_name(catalog)

    assert set(items) == {
        "alpha.bin",
        "missing.bin",
        "bad.bin",
        "alpha-disk",
        "alpha",
        "crash",
        "beta.bin",
        "default",
    }
    alpha = items["alpha.bin"]
    assert isinstance(alpha, Rom)
    assert (alpha.size, alpha.crc) == (1024, "abc12345")
    assert alpha.machine.name == "alpha"
    assert alpha.machine.description == "Alpha (World, Rev 1)"
    assert alpha.machine.clone_of == "alphap"
    assert alpha.machine.year == "1990"
    assert alpha.machine.manufacturer == "Maker"
    assert (alpha.source_system_id, alpha.source_id) == (2, 3)
    assert alpha.machine.source_name == "clrmamepro.dat"

    bad = items["bad.bin"]
    assert isinstance(bad, Rom)
    assert bad.status is ItemStatus.BAD_DUMP

    beta = items["beta.bin"]
    assert isinstance(beta, Rom)
    assert (beta.size, beta.crc) == (16, "00001234")
    assert beta.machine.is_bios is True

    disk = items["alpha-disk"]
    assert isinstance(disk, Disk)
    assert disk.sha1 == "0123456789abcdef0123456789abcdef01234567"

    release = items["alpha"]
    assert isinstance(release, Release)
    assert (release.region, release.is_default) == ("USA", True)

    assert isinstance(items["crash"], Sample)
    bios = items["default"]
    assert isinstance(bios, BiosSet)
    assert bios.description == "Default BIOS"


def test_read_clrmamepro_skips_malformed_records(clrmamepro_path: Path) -> None:
    catalog = read_clrmamepro(clrmamepro_path)

    assert "broken.bin" not in _by_name(catalog)
    assert "ignored" not in {item.machine.name for item in catalog.iter_items()}
    assert catalog.rom_count == 4
    assert catalog.disk_count == 1
    assert catalog.nodump_count == 1
    assert catalog.baddump_count == 1
    assert catalog.total_size == 1048
    assert catalog.stats == catalog.recompute_stats()


def test_read_clrmamepro_applies_filter(clrmamepro_path: Path) -> None:
    catalog = read_clrmamepro(clrmamepro_path, criteria=FilterCriteria(game_name_pattern="bet*"))

    assert set(_by_name(catalog)) == {"beta.bin", "default"}


def test_read_clrmamepro_rejects_other_documents(tmp_path: Path) -> None:
    notes = tmp_path / "notes.dat"
    notes.write_text("just some notes\nabout roms\n", encoding="utf-8")

    with pytest.raises(CatalogFormatError):
        read_clrmamepro(notes)


def test_read_clrmamepro_keeps_unterminated_last_set(tmp_path: Path) -> None:
    target = tmp_path / "cut.dat"
    target.write_text(
        'game (\n\tname "cut"\n\trom ( name "c.bin" size 1 crc 00000001 )\n', encoding="utf-8"
    )

    (item,) = read_clrmamepro(target).iter_items()

    assert (item.machine.name, item.name) == ("cut", "c.bin")


def test_write_clrmamepro_round_trips(clrmamepro_path: Path, tmp_path: Path) -> None:
    original = read_clrmamepro(clrmamepro_path)
    target = tmp_path / "out.dat"

    write_clrmamepro(original, target)
    reread = read_clrmamepro(target)

    assert reread.header.name == "Arcade Set"
    assert reread.header.is_superdat is True
    assert reread.header.force_merging is ForceMerging.SPLIT
    assert reread.header.force_packing is ForcePacking.UNZIP
    assert set(_by_name(reread)) == set(_by_name(original))
    missing = _by_name(reread)["missing.bin"]
    assert isinstance(missing, Rom)
    assert missing.status is ItemStatus.NODUMP
    assert reread.stats == original.stats


def test_write_clrmamepro_layout(clrmamepro_path: Path, tmp_path: Path) -> None:
    target = tmp_path / "out.dat"

    write_clrmamepro(read_clrmamepro(clrmamepro_path), target)

    lines = target.read_text(encoding="utf-8").splitlines()
    assert lines[:2] == ["clrmamepro (", '\tname "Arcade Set"']
    assert "\tforcezipping no" in lines
    assert lines.index("game (") < lines.index("resource (")
    assert '\tdescription "Alpha (World, Rev 1)"' in lines
    assert '\trom ( name "alpha.bin" size 1024 crc abc12345 )' in lines
    assert '\trom ( name "missing.bin" size 16 flags nodump )' in lines
    assert '\tsample ( name "crash" )' in lines
