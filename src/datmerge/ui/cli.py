from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from datmerge.app import run_against, run_cascade, run_diff, run_merge, run_stats, run_update
from datmerge.config import (
    SUPPORTED_OUTPUT_FORMATS,
    ConfigurationError,
    configure_logging,
    get_run_config,
    validate_output_format,
)
from datmerge.domain.filtering import FilterCriteria
from datmerge.domain.model import CatalogHeader, ItemType
from datmerge.domain.reconciliation import DiffMode

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from datmerge.app import RunReport
    from datmerge.config import RunConfig

log = logging.getLogger(__name__)


def _common_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("inputs", nargs="+", type=Path, help="Catalog files or directories")
    common.add_argument("--output-dir", type=Path, help="Directory for written catalogs")
    common.add_argument(
        "--format",
        dest="output_format",
        choices=SUPPORTED_OUTPUT_FORMATS,
        help="Output catalog format (defaults to config)",
    )
    common.add_argument("--workers", type=int, help="Number of parallel parse workers")
    common.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    common.add_argument(
        "--dedupe",
        action="store_true",
        help="Merge duplicate records again when writing each catalog",
    )

    header = common.add_argument_group("header overrides")
    header.add_argument("--name", help="Name of the combined output catalog")
    header.add_argument("--description", help="Description of the combined output catalog")
    header.add_argument("--author", help="Author of the combined output catalog")

    filters = common.add_argument_group("filters")
    filters.add_argument("--game-name", help="Keep machines matching this pattern")
    filters.add_argument("--not-game-name", help="Drop machines matching this pattern")
    filters.add_argument("--item-name", help="Keep items matching this pattern")
    filters.add_argument("--not-item-name", help="Drop items matching this pattern")
    item_types = [item_type.value for item_type in ItemType]
    filters.add_argument("--item-type", choices=item_types, help="Keep only this item type")
    filters.add_argument("--not-item-type", choices=item_types, help="Drop this item type")
    filters.add_argument("--size", type=int, help="Keep roms of exactly this size")
    filters.add_argument("--size-gte", type=int, help="Keep roms at least this large")
    filters.add_argument("--size-lte", type=int, help="Keep roms at most this large")
    filters.add_argument("--crc", help="Keep items whose CRC matches this pattern")
    filters.add_argument("--not-crc", help="Drop items whose CRC matches this pattern")
    filters.add_argument("--md5", help="Keep items whose MD5 matches this pattern")
    filters.add_argument("--not-md5", help="Drop items whose MD5 matches this pattern")
    filters.add_argument("--sha1", help="Keep items whose SHA1 matches this pattern")
    filters.add_argument("--not-sha1", help="Drop items whose SHA1 matches this pattern")
    filters.add_argument(
        "--nodump",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Keep only nodump items (or, negated, only dumped items)",
    )
    filters.add_argument("--single", action="store_true", help="Put every item in machine '!'")
    filters.add_argument(
        "--trim-root",
        help="Trim item names so root, machine and item fit in 260 characters",
    )
    return common


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Merge and diff ROM catalog files")
    subparsers = parser.add_subparsers(dest="command", required=True)
    common = _common_parser()

    merge = subparsers.add_parser("merge", parents=[common], help="Merge inputs into one catalog")
    merge.add_argument(
        "--superdat",
        action="store_true",
        help="Prefix machine names with the path of their input",
    )

    diff = subparsers.add_parser(
        "diff",
        parents=[common],
        help="Diff inputs (all outputs when no mode flag is given)",
    )
    diff.add_argument("--no-dupes", action="store_true", help="Records in exactly one input")
    diff.add_argument("--dupes", action="store_true", help="Records in more than one input")
    diff.add_argument("--individuals", action="store_true", help="Per-input unique records")

    cascade = subparsers.add_parser(
        "cascade",
        parents=[common],
        help="Reduce each input to what it adds over the inputs before it",
    )
    cascade.add_argument("--skip-first", action="store_true", help="Do not write the first input")
    cascade.add_argument("--reverse", action="store_true", help="Cascade from last to first")

    against = subparsers.add_parser(
        "against",
        parents=[common],
        help="Remove from each input what the base catalogs already hold",
    )
    against.add_argument(
        "--base",
        dest="base_paths",
        nargs="+",
        type=Path,
        required=True,
        help="Base catalog files or directories",
    )

    subparsers.add_parser("update", parents=[common], help="Convert and filter each input")
    subparsers.add_parser("stats", parents=[common], help="Log statistics for each input")

    return parser.parse_args(list(argv))


def _criteria_from_args(args: argparse.Namespace) -> FilterCriteria | None:
    for option in ("size", "size_gte", "size_lte"):
        value = getattr(args, option)
        if value is not None and value < 0:
            raise ValueError(f"--{option.replace('_', '-')} must be non-negative")

    criteria = FilterCriteria(
        game_name_pattern=args.game_name,
        item_name_pattern=args.item_name,
        item_type=ItemType(args.item_type) if args.item_type else None,
        size_eq=args.size,
        size_gte=args.size_gte,
        size_lte=args.size_lte,
        crc_pattern=args.crc,
        md5_pattern=args.md5,
        sha1_pattern=args.sha1,
        nodump=args.nodump,
        not_game_name_pattern=args.not_game_name,
        not_item_name_pattern=args.not_item_name,
        not_item_type=ItemType(args.not_item_type) if args.not_item_type else None,
        not_crc_pattern=args.not_crc,
        not_md5_pattern=args.not_md5,
        not_sha1_pattern=args.not_sha1,
        single_game=args.single,
        trim_root=args.trim_root,
    )
    return None if criteria == FilterCriteria() else criteria


def _header_from_args(args: argparse.Namespace) -> CatalogHeader:
    return CatalogHeader(
        file_name=args.name or "",
        name=args.name or "",
        description=args.description or "",
        author=args.author,
        is_superdat=getattr(args, "superdat", False),
    )


def _run_config(args: argparse.Namespace) -> RunConfig:
    config = get_run_config()
    if args.workers is not None:
        if args.workers < 1:
            raise ValueError("--workers must be at least 1")
        config = replace(config, workers=args.workers)
    if args.output_dir is not None:
        config = replace(config, output_dir=args.output_dir)
    if args.output_format is not None:
        config = replace(config, output_format=validate_output_format(args.output_format))
    return config


def _diff_mode(args: argparse.Namespace) -> DiffMode:
    mode = DiffMode.NONE
    if args.no_dupes:
        mode |= DiffMode.NO_DUPES
    if args.dupes:
        mode |= DiffMode.DUPES
    if args.individuals:
        mode |= DiffMode.INDIVIDUALS
    return mode or DiffMode.ALL


def _dispatch(
    args: argparse.Namespace,
    *,
    config: RunConfig,
    criteria: FilterCriteria | None,
    header: CatalogHeader,
) -> RunReport:
    if args.command == "merge":
        return run_merge(
            args.inputs, config=config, criteria=criteria, header=header, dedupe=args.dedupe
        )
    if args.command == "diff":
        return run_diff(
            args.inputs,
            mode=_diff_mode(args),
            config=config,
            criteria=criteria,
            header=header,
            dedupe=args.dedupe,
        )
    if args.command == "cascade":
        return run_cascade(
            args.inputs,
            config=config,
            criteria=criteria,
            skip_first=args.skip_first,
            reverse=args.reverse,
            dedupe=args.dedupe,
        )
    if args.command == "against":
        return run_against(
            args.inputs,
            base_paths=args.base_paths,
            config=config,
            criteria=criteria,
            dedupe=args.dedupe,
        )
    if args.command == "update":
        return run_update(args.inputs, config=config, criteria=criteria, dedupe=args.dedupe)
    if args.command == "stats":
        return run_stats(args.inputs, config=config, criteria=criteria)
    raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.verbose:
            configure_logging(level=logging.DEBUG, force=True)
        config = _run_config(parsed_args)
        criteria = _criteria_from_args(parsed_args)
        header = _header_from_args(parsed_args)
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        report = _dispatch(parsed_args, config=config, criteria=criteria, header=header)
    except Exception:
        log.exception("Fatal error during run")
        sys.exit(1)

    if report.failures:
        for failure in report.failures:
            log.error("Could not %s %s: %s", failure.stage, failure.path, failure.error)
        sys.exit(1)
    if parsed_args.command != "stats" and not report.written:
        log.error("No output catalog had any records")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point: load `.env`, install the SIGINT handler, run."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
