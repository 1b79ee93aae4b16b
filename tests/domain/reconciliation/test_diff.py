from __future__ import annotations

from datmerge.domain.model import Catalog, CatalogHeader, Disk, DupeType, Rom
from datmerge.domain.reconciliation import (
    DiffMode,
    DiffRequest,
    InputSource,
    combine,
    diff,
    diff_against,
    diff_cascade,
    diff_no_cascade,
    merge_no_diff,
    update,
)
from tests.helpers.items import crc_for, make_disk, make_rom, make_source

MD5 = "a" * 32
SHA1 = "b" * 40


def _roms(indexes: range | list[int], *, source: int, machine: str) -> list[Rom]:
    return [
        make_rom(f"{machine}-{index}.bin", machine=machine, source=source, crc=crc_for(index))
        for index in indexes
    ]


def _crcs(catalog: Catalog) -> set[str | None]:
    return {getattr(item, "crc", None) for item in catalog.iter_items()}


def _two_sources_sharing_one_record() -> list[InputSource]:
    first = make_source("a", _roms(range(1, 6), source=0, machine="a-game"))
    second = make_source("b", _roms(range(5, 11), source=1, machine="b-game"))
    return [first, second]


def test_combine_keeps_every_record() -> None:
    inputs = _two_sources_sharing_one_record()

    combined = combine(inputs, CatalogHeader(name="all"))

    assert combined.item_count == 11
    assert combined.header.name == "all"


def test_diff_no_cascade_routes_all_outputs() -> None:
    inputs = _two_sources_sharing_one_record()

    outputs = diff_no_cascade(inputs, CatalogHeader(), DiffMode.ALL)

    by_label = {(output.label, output.source_index): output.catalog for output in outputs}
    no_dupes = by_label[("no-dupes", None)]
    dupes = by_label[("dupes", None)]
    only_a = by_label[("individual", 0)]
    only_b = by_label[("individual", 1)]

    assert no_dupes.item_count == 9
    assert dupes.item_count == 1
    assert only_a.item_count == 4
    assert only_b.item_count == 5
    assert _crcs(dupes) == {crc_for(5)}
    assert crc_for(5) not in _crcs(only_a) | _crcs(only_b) | _crcs(no_dupes)


def test_diff_no_cascade_headers_default_to_all_dats() -> None:
    inputs = _two_sources_sharing_one_record()

    outputs = diff_no_cascade(inputs, CatalogHeader(), DiffMode.ALL)

    names = [output.catalog.header.name for output in outputs]
    assert names == [
        "All DATs (No Duplicates)",
        "All DATs (Duplicates)",
        "All DATs (a Only)",
        "All DATs (b Only)",
    ]


def test_diff_no_cascade_tags_machines_with_their_source() -> None:
    inputs = _two_sources_sharing_one_record()

    outputs = diff_no_cascade(inputs, CatalogHeader(name="set"), DiffMode.DUPES)

    (dupes,) = outputs
    (item,) = dupes.catalog.iter_items()
    assert item.machine.name == "a-game (a)"
    assert item.dupe_type is DupeType.EXTERNAL_HASH
    assert dupes.catalog.header.name == "set (Duplicates)"


def test_diff_no_cascade_leaves_inputs_untouched() -> None:
    inputs = _two_sources_sharing_one_record()

    diff_no_cascade(inputs, CatalogHeader(), DiffMode.ALL)

    assert all(
        item.dupe_type is DupeType.NONE
        for source in inputs
        for item in source.catalog.iter_items()
    )


def test_diff_no_cascade_omits_empty_outputs() -> None:
    inputs = [
        make_source("a", _roms([1, 2], source=0, machine="game")),
        make_source("b", _roms([1, 2], source=1, machine="game")),
    ]

    outputs = diff_no_cascade(inputs, CatalogHeader(), DiffMode.ALL)

    assert [output.label for output in outputs] == ["dupes"]


def test_diff_no_cascade_skips_records_with_unknown_source() -> None:
    stray = make_rom("stray.bin", source=-1, crc=crc_for(99))
    inputs = [make_source("a", [*_roms([1], source=0, machine="game"), stray])]

    outputs = diff_no_cascade(inputs, CatalogHeader(), DiffMode.NO_DUPES)

    (no_dupes,) = outputs
    assert _crcs(no_dupes.catalog) == {crc_for(1)}


def test_diff_cascade_keeps_what_each_input_adds() -> None:
    inputs = [
        make_source("a", _roms([1, 2], source=0, machine="game")),
        make_source("b", _roms([2, 3], source=1, machine="game")),
        make_source("c", _roms([3, 4], source=2, machine="game")),
    ]

    outputs = diff_cascade(inputs)

    assert [output.source_index for output in outputs] == [0, 1, 2]
    assert [_crcs(output.catalog) for output in outputs] == [
        {crc_for(1), crc_for(2)},
        {crc_for(3)},
        {crc_for(4)},
    ]
    assert [output.catalog.header.name for output in outputs] == ["a", "b", "c"]


def test_diff_cascade_skip_first_and_empty_outputs() -> None:
    inputs = [
        make_source("a", _roms([1, 2], source=0, machine="game")),
        make_source("b", _roms([1, 2], source=1, machine="game")),
        make_source("c", _roms([2, 3], source=2, machine="game")),
    ]

    outputs = diff_cascade(inputs, skip_first=True)

    assert [output.source_index for output in outputs] == [2]
    assert _crcs(outputs[0].catalog) == {crc_for(3)}


def test_merge_no_diff_merges_into_one_catalog() -> None:
    inputs = _two_sources_sharing_one_record()

    (merged,) = merge_no_diff(inputs, CatalogHeader())

    assert merged.label == "merged"
    assert merged.catalog.item_count == 10
    assert merged.catalog.header.name == "All DATs"


def test_merge_no_diff_prefixes_machines_for_superdat() -> None:
    inputs = [
        make_source(
            "left", _roms([1], source=0, machine="game"), root="dats", directory="dats/sub"
        ),
        make_source("right", _roms([2], source=1, machine="game")),
    ]

    (merged,) = merge_no_diff(inputs, CatalogHeader(name="super", is_superdat=True))

    machines = {item.machine.name for item in merged.catalog.iter_items()}
    assert machines == {"sub\\left\\game", "right\\game"}


def test_diff_dispatches_on_request() -> None:
    inputs = _two_sources_sharing_one_record()

    assert [o.label for o in diff(inputs, CatalogHeader(), DiffRequest())] == ["merged"]
    assert [o.label for o in diff(inputs, CatalogHeader(), DiffRequest(cascade=True))] == [
        "cascade",
        "cascade",
    ]
    labels = [o.label for o in diff(inputs, CatalogHeader(), DiffRequest(mode=DiffMode.DUPES))]
    assert labels == ["dupes"]


def test_diff_against_strips_records_present_in_bases() -> None:
    bases = [make_source("base", _roms([1, 2], source=0, machine="game"))]
    inputs = [
        make_source("new", _roms([2, 3], source=0, machine="other")),
        make_source("covered", _roms([1], source=1, machine="other")),
    ]

    outputs = diff_against(bases, inputs)

    (output,) = outputs
    assert output.source_index == 0
    assert _crcs(output.catalog) == {crc_for(3)}
    assert output.catalog.header.name == "new"


def test_update_reemits_each_input() -> None:
    inputs = [
        make_source("a", _roms([1, 2], source=0, machine="game")),
        make_source("empty", []),
    ]

    outputs = update(inputs)

    (output,) = outputs
    assert output.label == "update"
    assert output.catalog.item_count == 2
    assert output.catalog is not inputs[0].catalog


def test_diff_no_cascade_matches_disks_hashed_differently_across_sources() -> None:
    inputs = [
        make_source("a", [make_disk(machine="a-game", source=0, md5=MD5, sha1=SHA1)]),
        make_source("b", [make_disk(machine="b-game", source=1, sha1=SHA1)]),
    ]

    outputs = diff_no_cascade(inputs, CatalogHeader(), DiffMode.ALL)

    (dupes,) = outputs
    assert dupes.label == "dupes"
    (item,) = dupes.catalog.iter_items()
    assert isinstance(item, Disk)
    assert (item.md5, item.sha1) == (MD5, SHA1)
    assert item.dupe_type is DupeType.EXTERNAL_HASH
    assert item.machine.name == "a-game (a)"
