"""CLI for working with stored article files and collections."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from article_store.collection import DEFAULT_DELIMITER, load_records, write_collection
from article_store.dedup import deduplicate
from article_store.validate import ERROR, validate_records
from article_store.writer import ArticleStorage
from common.cli_helpers import setup_logging
from common.local_io import save_jsonl_records_local

load_dotenv()

logger = logging.getLogger(__name__)


def _write_records(records, output: Path, delimiter: str) -> None:
    """Write to a collection file, or one file per record when output is a directory."""
    if output.suffix.lower() in (".md", ".txt"):
        write_collection(records, output, delimiter)
    else:
        ArticleStorage(output, skip_existing=False).save_batch(records)


def _validate(args: argparse.Namespace) -> int:
    records = load_records(args.path, args.delimiter)
    report = validate_records(records)
    for issue in report.issues:
        log = logger.error if issue.severity == ERROR else logger.warning
        log("%s [%s] %s", issue.record_id, issue.field, issue.message)
    logger.info(
        "Validated %d articles: %d errors, %d warnings",
        report.total,
        report.error_count,
        report.warning_count,
    )
    return 0 if report.is_valid else 1


def _dedup(args: argparse.Namespace) -> int:
    records = load_records(args.path, args.delimiter)
    unique, duplicates = deduplicate(records)
    for record, reason in duplicates:
        logger.info("Dropping %s (duplicate %s)", record.id, reason.value)
    _write_records(unique, Path(args.output), args.delimiter)
    logger.info("Kept %d of %d articles", len(unique), len(records))
    return 0


def _join(args: argparse.Namespace) -> int:
    records = load_records(args.path, args.delimiter)
    write_collection(records, Path(args.output), args.delimiter)
    return 0


def _split(args: argparse.Namespace) -> int:
    records = load_records(args.path, args.delimiter)
    result = ArticleStorage(Path(args.output), skip_existing=False).save_batch(records)
    return 0 if not result.failed else 1


def _export_jsonl(args: argparse.Namespace) -> int:
    records = load_records(args.path, args.delimiter)
    if not records:
        logger.warning("No articles to export")
        return 0
    save_jsonl_records_local([record.to_dict() for record in records], prefix="articles", output_dir=args.output_dir)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Validate, deduplicate and convert article archives.")
    parser.add_argument(
        "--delimiter",
        default=DEFAULT_DELIMITER,
        help=f"Collection delimiter line (default: {DEFAULT_DELIMITER}).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser("validate", help="Check records; exits 1 on errors.")
    validate.add_argument("path", help="Directory of .md files or a collection file.")
    validate.set_defaults(func=_validate)

    dedup = subparsers.add_parser("dedup", help="Drop duplicate articles.")
    dedup.add_argument("path")
    dedup.add_argument("-o", "--output", required=True, help="Collection file (.md) or directory.")
    dedup.set_defaults(func=_dedup)

    join = subparsers.add_parser("join", help="Concatenate article files into a collection.")
    join.add_argument("path")
    join.add_argument("-o", "--output", required=True)
    join.set_defaults(func=_join)

    split = subparsers.add_parser("split", help="Write each article of a collection to its own file.")
    split.add_argument("path")
    split.add_argument("-o", "--output", required=True)
    split.set_defaults(func=_split)

    export = subparsers.add_parser("export-jsonl", help="Export records as JSONL.")
    export.add_argument("path")
    export.add_argument("--output-dir", default="output")
    export.set_defaults(func=_export_jsonl)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    setup_logging()
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except FileNotFoundError as e:
        logger.error("%s", e)
        return 2


if __name__ == "__main__":
    sys.exit(main())
