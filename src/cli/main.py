"""Transit CLI entry points.
This module exposes commands for inspecting and parsing feed archives.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from archive.zip_reader import ZipContainerReader
from core.config import TransitConfig
from core.errors import TransitError
from core.types import IngestOptions, table_field_names
from ingest.archive_source import read_archive_bytes
from ingest.pipeline import ingest_archive
from ingest.source_catalog import SourceCatalog, load_source_catalog
from store.dataset_export import write_dataset_json, write_table_delimited


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="transit", description="Transit feed archive CLI")
    parser.add_argument("--catalog", help="Override TRANSIT_CATALOG_PATH for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_inspect_command(subparsers)
    _add_parse_command(subparsers)
    _add_export_table_command(subparsers)
    _add_sources_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the transit CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args.catalog)
        if args.command == "inspect":
            return _run_inspect_command(config, args)
        if args.command == "parse":
            return _run_parse_command(config, args)
        if args.command == "export-table":
            return _run_export_table_command(config, args)
        if args.command == "sources":
            return _run_sources_command(config)
    except TransitError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(catalog_path: str | None) -> TransitConfig:
    """Build config with optional catalogue override.

    Args:
        catalog_path: Optional override path.

    Returns:
        Runtime configuration.
    """
    config = TransitConfig.from_env()
    if catalog_path:
        config = replace(config, catalog_path=Path(catalog_path).expanduser())
    return config


def _load_catalog(config: TransitConfig) -> SourceCatalog:
    return load_source_catalog(config.catalog_path)


def _resolve_source_uri(config: TransitConfig, args: argparse.Namespace) -> str:
    """Return the archive location named on the command line.

    Args:
        config: Runtime configuration.
        args: Parsed CLI args.

    Returns:
        Source URI, looked up in the catalogue with ``--from-catalog``.
    """
    if not args.from_catalog:
        return args.source
    return _load_catalog(config).require(args.source).url


def _run_inspect_command(config: TransitConfig, args: argparse.Namespace) -> int:
    """Handle inspect command.

    Args:
        config: Runtime configuration.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    archive_bytes = read_archive_bytes(_resolve_source_uri(config, args), config)
    for entry in ZipContainerReader(archive_bytes).read_entries():
        print(
            f"{entry.name}\t"
            f"{entry.compression_method}\t"
            f"{entry.compressed_size}\t"
            f"{entry.uncompressed_size}"
        )
    return 0


def _run_parse_command(config: TransitConfig, args: argparse.Namespace) -> int:
    """Handle parse command.

    Args:
        config: Runtime configuration.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    options = IngestOptions(
        source_uri=_resolve_source_uri(config, args),
        require_identifiers=args.require_identifiers,
    )
    dataset = ingest_archive(options, config)
    for table_name, count in dataset.table_counts().items():
        print(f"{table_name}\t{count}")
    for issue in dataset.issues:
        print(f"issue\t{issue.member_name}\t{issue.reason}")
    if args.output_json:
        print(write_dataset_json(dataset, Path(args.output_json)))
    return 0


def _run_export_table_command(config: TransitConfig, args: argparse.Namespace) -> int:
    """Handle export-table command.

    Args:
        config: Runtime configuration.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    options = IngestOptions(
        source_uri=_resolve_source_uri(config, args),
        require_identifiers=args.require_identifiers,
    )
    dataset = ingest_archive(options, config)
    print(write_table_delimited(dataset, args.table, Path(args.output)))
    return 0


def _run_sources_command(config: TransitConfig) -> int:
    """Handle sources command.

    Args:
        config: Runtime configuration.

    Returns:
        Exit code.
    """
    for source in _load_catalog(config).list_sources():
        print(f"{source.source_id}\t{source.name}\t{source.region or '-'}\t{source.url}")
    return 0


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    """Register the archive source arguments shared by archive commands."""
    parser.add_argument("source", help="Archive path, s3://bucket/key, URL, or catalogue id")
    parser.add_argument(
        "--from-catalog",
        action="store_true",
        help="Treat SOURCE as a feed catalogue id",
    )


def _add_inspect_command(subparsers: Any) -> None:
    """Register inspect subcommand."""
    parser = subparsers.add_parser("inspect", help="List archive members")
    _add_source_arguments(parser)


def _add_parse_command(subparsers: Any) -> None:
    """Register parse subcommand."""
    parser = subparsers.add_parser("parse", help="Parse feed tables and print record counts")
    _add_source_arguments(parser)
    parser.add_argument(
        "--require-identifiers",
        action="store_true",
        help="Drop rows missing a table's identifying columns",
    )
    parser.add_argument("--output-json", help="Optional path for the dataset JSON payload")


def _add_export_table_command(subparsers: Any) -> None:
    """Register export-table subcommand."""
    parser = subparsers.add_parser("export-table", help="Write one parsed table as delimited text")
    _add_source_arguments(parser)
    parser.add_argument("--table", required=True, choices=table_field_names(), help="Table name")
    parser.add_argument("--output", required=True, help="Destination file path")
    parser.add_argument(
        "--require-identifiers",
        action="store_true",
        help="Drop rows missing a table's identifying columns",
    )


def _add_sources_command(subparsers: Any) -> None:
    """Register sources subcommand."""
    subparsers.add_parser("sources", help="List known feed sources")
