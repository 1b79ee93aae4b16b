"""Application orchestration entry points."""

from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from datmerge.adapters import (
    CatalogFormatError,
    extension_for,
    parse_format,
    read_catalog,
    write_catalog,
)
from datmerge.domain.model import Catalog, CatalogHeader
from datmerge.domain.reconciliation import (
    DiffMode,
    InputSource,
    OutputCatalog,
    diff_against,
    diff_cascade,
    diff_no_cascade,
    merge_no_diff,
    update,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from datmerge.adapters import CatalogFormat
    from datmerge.config import RunConfig
    from datmerge.domain.filtering import FilterCriteria
    from datmerge.domain.model import CatalogStats

log = logging.getLogger(__name__)

CATALOG_SUFFIXES = frozenset({".xml", ".dat", ".json"})
_UNSAFE_FILE_CHARS = re.compile(r'[\\/:*?"<>|]')


@dataclass(frozen=True, slots=True)
class FileFailure:
    path: Path
    stage: str
    error: str


@dataclass(slots=True)
class RunReport:
    """What a run wrote, what it could not read or write, and per-input stats."""

    written: list[Path] = field(default_factory=list["Path"])
    failures: list[FileFailure] = field(default_factory=list["FileFailure"])
    stats: dict[Path, CatalogStats] = field(default_factory=dict["Path", "CatalogStats"])

    @property
    def ok(self) -> bool:
        return not self.failures


def expand_inputs(paths: Sequence[Path]) -> list[tuple[Path, Path | None]]:
    """Files as given, directories expanded recursively; each with its root directory."""

    entries: list[tuple[Path, Path | None]] = []
    for path in paths:
        if path.is_dir():
            found = sorted(
                candidate
                for candidate in path.rglob("*")
                if candidate.is_file() and candidate.suffix.lower() in CATALOG_SUFFIXES
            )
            if not found:
                log.warning("No catalog files found under %s", path)
            entries.extend((candidate, path) for candidate in found)
        else:
            entries.append((path, None))
    return entries


def load_inputs(
    paths: Sequence[Path],
    *,
    criteria: FilterCriteria | None = None,
    workers: int = 1,
    report: RunReport,
) -> list[InputSource]:
    """Parse every input on a worker pool; position in the result is the source id.

    Each worker returns its own catalog. An input that fails to parse is
    recorded in ``report`` and kept as an empty catalog so later ids stay put.
    """

    entries = expand_inputs(paths)
    log.info("Parsing %d inputs with %d workers", len(entries), workers)
    with ThreadPoolExecutor(max_workers=max(1, workers)) as pool:
        futures = [
            pool.submit(
                read_catalog,
                path,
                source_system_id=index,
                source_id=index,
                criteria=criteria,
            )
            for index, (path, _root) in enumerate(entries)
        ]

        sources: list[InputSource] = []
        for (path, root), future in zip(entries, futures, strict=True):
            try:
                catalog = future.result()
            except (CatalogFormatError, OSError) as exc:
                log.error("Failed to parse %s: %s", path, exc)  # noqa: TRY400
                report.failures.append(FileFailure(path=path, stage="read", error=str(exc)))
                catalog = Catalog(header=CatalogHeader(file_name=path.stem))
            sources.append(InputSource(path=path, catalog=catalog, root=root))
    return sources


def write_outputs(
    outputs: Sequence[OutputCatalog],
    *,
    config: RunConfig,
    report: RunReport,
    dedupe: bool = False,
) -> None:
    """Write every output; a failure is recorded and the remaining outputs still go out."""

    catalog_format = parse_format(config.output_format)
    output_dir = config.ensure_output_dir()
    taken: set[Path] = set()
    for output in outputs:
        catalog = output.catalog
        if dedupe:
            catalog.header.dedupe_on_write = True
        stem = catalog.header.file_name or output.label
        path = _unique_path(output_dir, stem, catalog_format, taken)
        try:
            write_catalog(catalog, path, catalog_format)
        except (OSError, ValueError) as exc:
            log.exception("Failed to write %s", path)
            report.failures.append(FileFailure(path=path, stage="write", error=str(exc)))
            continue
        report.written.append(path)
        log.info("Wrote %s (%d records)", path, catalog.item_count)


def _unique_path(
    directory: Path, stem: str, catalog_format: CatalogFormat, taken: set[Path]
) -> Path:
    safe_stem = _UNSAFE_FILE_CHARS.sub("_", stem).strip() or "catalog"
    extension = extension_for(catalog_format)
    path = directory / f"{safe_stem}{extension}"
    counter = 1
    while path in taken:
        path = directory / f"{safe_stem}_{counter}{extension}"
        counter += 1
    taken.add(path)
    return path


def _run(
    paths: Sequence[Path],
    build: Callable[[list[InputSource]], list[OutputCatalog]],
    *,
    config: RunConfig,
    criteria: FilterCriteria | None,
    dedupe: bool,
) -> RunReport:
    report = RunReport()
    sources = load_inputs(paths, criteria=criteria, workers=config.workers, report=report)
    outputs = build(sources)
    log.info("Built %d non-empty output catalogs", len(outputs))
    write_outputs(outputs, config=config, report=report, dedupe=dedupe)
    return report


def run_merge(
    paths: Sequence[Path],
    *,
    config: RunConfig,
    criteria: FilterCriteria | None = None,
    header: CatalogHeader | None = None,
    dedupe: bool = False,
) -> RunReport:
    """Merge all inputs into one catalog."""

    combined = header or CatalogHeader()
    return _run(
        paths,
        lambda sources: merge_no_diff(sources, combined),
        config=config,
        criteria=criteria,
        dedupe=dedupe,
    )


def run_diff(
    paths: Sequence[Path],
    *,
    mode: DiffMode = DiffMode.ALL,
    config: RunConfig,
    criteria: FilterCriteria | None = None,
    header: CatalogHeader | None = None,
    dedupe: bool = False,
) -> RunReport:
    """Non-cascading diff producing the outputs selected by ``mode``."""

    combined = header or CatalogHeader()
    return _run(
        paths,
        lambda sources: diff_no_cascade(sources, combined, mode),
        config=config,
        criteria=criteria,
        dedupe=dedupe,
    )


def run_cascade(
    paths: Sequence[Path],
    *,
    config: RunConfig,
    criteria: FilterCriteria | None = None,
    skip_first: bool = False,
    reverse: bool = False,
    dedupe: bool = False,
) -> RunReport:
    """Cascading diff; ``reverse`` cascades from the last input to the first."""

    ordered = list(reversed(paths)) if reverse else list(paths)
    return _run(
        ordered,
        lambda sources: diff_cascade(sources, skip_first=skip_first),
        config=config,
        criteria=criteria,
        dedupe=dedupe,
    )


def run_against(
    paths: Sequence[Path],
    *,
    base_paths: Sequence[Path],
    config: RunConfig,
    criteria: FilterCriteria | None = None,
    dedupe: bool = False,
) -> RunReport:
    """Write every input minus what the base catalogs already hold."""

    report = RunReport()
    bases = load_inputs(base_paths, workers=config.workers, report=report)
    sources = load_inputs(paths, criteria=criteria, workers=config.workers, report=report)
    write_outputs(diff_against(bases, sources), config=config, report=report, dedupe=dedupe)
    return report


def run_update(
    paths: Sequence[Path],
    *,
    config: RunConfig,
    criteria: FilterCriteria | None = None,
    dedupe: bool = False,
) -> RunReport:
    """Convert and filter each input on its own."""

    return _run(paths, update, config=config, criteria=criteria, dedupe=dedupe)


def run_stats(
    paths: Sequence[Path],
    *,
    config: RunConfig,
    criteria: FilterCriteria | None = None,
) -> RunReport:
    """Collect per-input statistics without writing anything."""

    report = RunReport()
    for source in load_inputs(paths, criteria=criteria, workers=config.workers, report=report):
        stats = source.catalog.stats
        report.stats[source.path] = stats
        log.info(
            "%s: roms=%d, disks=%d, size=%d, crc=%d, md5=%d, sha1=%d, nodump=%d, baddump=%d",
            source.path,
            stats.rom_count,
            stats.disk_count,
            stats.total_size,
            stats.crc_count,
            stats.md5_count,
            stats.sha1_count,
            stats.nodump_count,
            stats.baddump_count,
        )
    return report
