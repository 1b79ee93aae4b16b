"""Multi-catalog diff: turn N parsed inputs into the requested output catalogs.

All modes share the same first steps: fold every input into one working
catalog (sequentially, so there is a single writer) and bucket it by hash
with merging, which assigns each surviving record its ``DupeType`` and the
source index that owns its visible name. The modes only differ in how the
merged records are routed into output catalogs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntFlag
from pathlib import PurePath
from typing import TYPE_CHECKING

from datmerge.domain.model import Catalog, CatalogHeader

from .bucketing import bucket_by_hash
from .merge import has_duplicates

if TYPE_CHECKING:
    from collections.abc import Sequence

    from datmerge.domain.model import DatItem

log = logging.getLogger(__name__)

ALL_DATS = "All DATs"
NO_DUPES_SUFFIX = " (No Duplicates)"
DUPES_SUFFIX = " (Duplicates)"


class DiffMode(IntFlag):
    NONE = 0
    NO_DUPES = 1
    DUPES = 2
    INDIVIDUALS = 4
    ALL = NO_DUPES | DUPES | INDIVIDUALS


@dataclass(frozen=True, slots=True)
class InputSource:
    """One parsed input file; its position in the input list is its source system id."""

    path: PurePath
    catalog: Catalog
    root: PurePath | None = None

    @property
    def stem(self) -> str:
        return self.path.stem

    @property
    def relative_name(self) -> str:
        """Directory below ``root`` plus the file stem, joined with ``\\``."""

        relative = PurePath(self.path.name)
        if self.root is not None and self.path.is_relative_to(self.root):
            relative = self.path.relative_to(self.root)
        return "\\".join((*relative.parent.parts, relative.stem))

    @property
    def output_header(self) -> CatalogHeader:
        return self.catalog.header.with_defaults(self.stem)


@dataclass(frozen=True, slots=True)
class OutputCatalog:
    """A catalog ready to be written; ``source_index`` is set for per-input outputs."""

    label: str
    catalog: Catalog
    source_index: int | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class DiffRequest:
    mode: DiffMode = DiffMode.NONE
    cascade: bool = False
    skip_first: bool = False


def combine(inputs: Sequence[InputSource], header: CatalogHeader) -> Catalog:
    """Fold every input catalog into one working catalog, in input order."""

    combined = Catalog(header=header.copy())
    for source in inputs:
        combined.extend(source.catalog)
    log.info("Combined %d inputs into %d records", len(inputs), combined.item_count)
    return combined


def diff(
    inputs: Sequence[InputSource], header: CatalogHeader, request: DiffRequest
) -> list[OutputCatalog]:
    """Dispatch to cascade, non-cascade or plain merge depending on ``request``."""

    if request.cascade:
        return diff_cascade(inputs, skip_first=request.skip_first)
    if request.mode:
        return diff_no_cascade(inputs, header, request.mode)
    return merge_no_diff(inputs, header)


def diff_no_cascade(
    inputs: Sequence[InputSource], header: CatalogHeader, mode: DiffMode
) -> list[OutputCatalog]:
    """Route merged records into no-dupes, dupes and per-input outputs.

    The three modes are independent: a record may land in several outputs.
    """

    merged = bucket_by_hash(combine(inputs, header), dedupe=True)
    base = header.with_defaults(ALL_DATS)

    no_dupes = dupes = None
    if mode & DiffMode.NO_DUPES:
        no_dupes = Catalog(header=base.with_suffix(NO_DUPES_SUFFIX))
    if mode & DiffMode.DUPES:
        dupes = Catalog(header=base.with_suffix(DUPES_SUFFIX))
    individuals = (
        [Catalog(header=base.with_suffix(f" ({source.stem} Only)")) for source in inputs]
        if mode & DiffMode.INDIVIDUALS
        else []
    )

    for key, items in merged.buckets.items():
        for item in items:
            source = _source_of(item, inputs)
            if source is None:
                continue
            if not item.dupe_type.is_external:
                if individuals:
                    individuals[item.source_system_id].add(key, item)
                if no_dupes is not None:
                    no_dupes.add(key, _tagged_copy(item, source))
            elif dupes is not None:
                dupes.add(key, _tagged_copy(item, source))

    outputs: list[OutputCatalog] = []
    if no_dupes is not None:
        outputs.append(OutputCatalog("no-dupes", no_dupes))
    if dupes is not None:
        outputs.append(OutputCatalog("dupes", dupes))
    outputs.extend(
        OutputCatalog("individual", catalog, index) for index, catalog in enumerate(individuals)
    )
    return _non_empty(outputs)


def diff_cascade(
    inputs: Sequence[InputSource], *, skip_first: bool = False
) -> list[OutputCatalog]:
    """Reduce every input to what it adds beyond the inputs before it.

    Merging moves a duplicate's source index to the lowest input holding it,
    so routing by source index is all that is left to do here.
    """

    merged = bucket_by_hash(combine(inputs, CatalogHeader()), dedupe=True)
    outputs = [Catalog(header=source.output_header) for source in inputs]

    for key, items in merged.buckets.items():
        for item in items:
            if _source_of(item, inputs) is None:
                continue
            outputs[item.source_system_id].add(key, item)

    start = 1 if skip_first else 0
    return _non_empty(
        [
            OutputCatalog("cascade", outputs[index], index)
            for index in range(start, len(inputs))
        ]
    )


def merge_no_diff(inputs: Sequence[InputSource], header: CatalogHeader) -> list[OutputCatalog]:
    """Merge every input into a single catalog.

    For a SuperDAT header each machine name is prefixed with the relative path
    of the input it came from.
    """

    combined = combine(inputs, header.with_defaults(ALL_DATS))
    if combined.header.is_superdat:
        combined = _prefixed_with_source(combined, inputs)
    merged = bucket_by_hash(combined, dedupe=True)
    return _non_empty([OutputCatalog("merged", merged.to_catalog(combined.header))])


def diff_against(
    bases: Sequence[InputSource], inputs: Sequence[InputSource]
) -> list[OutputCatalog]:
    """Strip from every input the records already present in the base catalogs."""

    base = bucket_by_hash(combine(bases, CatalogHeader()), dedupe=True)
    outputs: list[OutputCatalog] = []
    for index, source in enumerate(inputs):
        log.info("Comparing %s against %d base catalogs", source.path, len(bases))
        remainder = Catalog(header=source.output_header)
        for key, items in bucket_by_hash(source.catalog, dedupe=True).buckets.items():
            kept = [item for item in items if not has_duplicates(item, base.buckets)]
            remainder.add_range(key, kept)
        outputs.append(OutputCatalog("against", remainder, index))
    return _non_empty(outputs)


def update(inputs: Sequence[InputSource]) -> list[OutputCatalog]:
    """Re-emit each input on its own, as admitted (filtered and sanitized)."""

    outputs: list[OutputCatalog] = []
    for index, source in enumerate(inputs):
        catalog = Catalog(header=source.output_header)
        catalog.extend(source.catalog)
        outputs.append(OutputCatalog("update", catalog, index))
    return _non_empty(outputs)


def _source_of(item: DatItem, inputs: Sequence[InputSource]) -> InputSource | None:
    index = item.source_system_id
    if 0 <= index < len(inputs):
        return inputs[index]
    log.warning("Item found with source system id %d out of range: %r", index, item.name)
    return None


def _tagged_copy(item: DatItem, source: InputSource) -> DatItem:
    copy = item.copy()
    copy.machine = copy.machine.with_name(f"{copy.machine.name} ({source.stem})")
    return copy


def _prefixed_with_source(catalog: Catalog, inputs: Sequence[InputSource]) -> Catalog:
    prefixed = Catalog(header=catalog.header.copy())
    for key, items in catalog.items():
        for item in items:
            source = _source_of(item, inputs)
            copy = item.copy()
            if source is not None:
                copy.machine = copy.machine.with_name(
                    f"{source.relative_name}\\{copy.machine.name}"
                )
            prefixed.add(key, copy)
    return prefixed


def _non_empty(outputs: list[OutputCatalog]) -> list[OutputCatalog]:
    kept = [output for output in outputs if output.catalog.item_count]
    for output in outputs:
        if not output.catalog.item_count:
            log.info("Skipping empty output %r", output.catalog.header.file_name)
    return kept
