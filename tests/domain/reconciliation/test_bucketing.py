from __future__ import annotations

from datmerge.domain.model import Catalog, CatalogHeader, DupeType, Rom, Sample
from datmerge.domain.reconciliation import (
    bucket_by_hash,
    bucket_by_machine,
    bucket_for_write,
    hash_key,
    machine_key,
)
from tests.helpers.items import CRC_A, make_catalog, make_disk, make_machine, make_rom


def test_machine_key_formats() -> None:
    rom = make_rom(machine="Street Fighter", source=3)
    rom.machine.source_id = 12

    assert machine_key(rom) == "0000000003-0000000012-street fighter"
    assert machine_key(rom, no_rename=True) == "street fighter"
    assert machine_key(rom, no_rename=True, lower=False) == "Street Fighter"


def test_machine_key_defaults_empty_names() -> None:
    rom = make_rom(machine="")

    assert machine_key(rom, no_rename=True, lower=False) == "Default"


def test_hash_key_formats() -> None:
    assert hash_key(make_rom(size=10, crc=CRC_A)) == f"10-{CRC_A}"
    assert hash_key(make_disk(sha1="b" * 40)) == "-1-"
    assert hash_key(make_disk(md5="a" * 32)) == "-1-"
    assert hash_key(Sample(name="s")) == "sample"


def test_bucket_by_machine_groups_and_orders_naturally() -> None:
    catalog = make_catalog(
        [
            make_rom(name="b.bin", machine="game10", crc="00000001"),
            make_rom(name="a.bin", machine="game2", crc="00000002"),
            make_rom(name="a.bin", machine="Game10", crc="00000003"),
        ]
    )

    result = bucket_by_machine(catalog, no_rename=True)

    assert list(result.buckets) == ["game2", "game10"]
    assert [item.name for item in result.buckets["game10"]] == ["a.bin", "b.bin"]
    assert result.count == 3


def test_bucket_by_machine_keeps_sources_apart_unless_no_rename() -> None:
    catalog = make_catalog(
        [
            make_rom(machine="game", crc="00000001", source=0),
            make_rom(machine="game", crc="00000002", source=1),
        ]
    )

    assert len(bucket_by_machine(catalog).buckets) == 2
    assert len(bucket_by_machine(catalog, no_rename=True).buckets) == 1


def test_bucket_by_machine_dedupes_input_buckets() -> None:
    catalog = make_catalog(
        [
            make_rom(name="a.bin", machine="one", size=5, crc=CRC_A),
            make_rom(name="b.bin", machine="two", size=5, crc=CRC_A),
        ]
    )

    result = bucket_by_machine(catalog, dedupe=True, no_rename=True)

    assert result.count == 1
    assert list(result.buckets) == ["one"]


def test_bucketing_works_on_copies() -> None:
    catalog = make_catalog(
        [
            make_rom(name="a.bin", size=5, crc=CRC_A),
            make_rom(name="b.bin", size=5, crc=CRC_A),
        ]
    )

    result = bucket_by_hash(catalog, dedupe=True)

    assert result.count == 1
    assert all(item.dupe_type is DupeType.NONE for item in catalog.iter_items())
    assert catalog.item_count == 2
    assert catalog.stats == catalog.recompute_stats()


def test_bucket_by_hash_merges_across_machines() -> None:
    catalog = Catalog()
    for source, machine in enumerate(["left", "right"]):
        rom = make_rom(name="same.bin", machine=machine, size=5, crc=CRC_A, source=source)
        catalog.add(machine, rom)

    result = bucket_by_hash(catalog, dedupe=True)

    assert list(result.buckets) == [f"5-{CRC_A}"]
    (merged,) = result.buckets[f"5-{CRC_A}"]
    assert merged.machine.name == "left"
    assert merged.dupe_type is DupeType.EXTERNAL_HASH


def test_bucket_result_to_catalog_counts() -> None:
    catalog = make_catalog([make_rom(size=5, crc=CRC_A), make_rom(size=6, crc="00000006")])

    rebuilt = bucket_by_hash(catalog).to_catalog(CatalogHeader(name="rebuilt"))

    assert rebuilt.header.name == "rebuilt"
    assert rebuilt.rom_count == 2
    assert rebuilt.total_size == 11


def test_bucket_for_write_resolves_name_collisions() -> None:
    header = CatalogHeader(name="out")
    catalog = Catalog(header=header)
    machine = make_machine("game")
    catalog.add("a", Rom(name="file.bin", machine=machine, size=1, crc="00000001"))
    catalog.add("b", Rom(name="file.bin", machine=machine, size=2, crc="00000002"))
    catalog.add("c", Rom(name="file.bin", machine=machine, size=1, crc="00000001"))

    buckets = bucket_for_write(catalog)

    assert list(buckets) == ["game"]
    assert sorted(item.name for item in buckets["game"]) == ["file.bin", "file.bin_00000002"]
