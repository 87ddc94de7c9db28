"""Public SDK surface for transit archive parsing.

This module provides a stable import path for library users.
It re-exports the pipeline entry points and typed models.
"""

from __future__ import annotations

from archive.decompression import decompress
from archive.zip_reader import ZipContainerReader
from core.config import TransitConfig
from core.errors import (
    DecompressionFailedError,
    InvalidTableError,
    MalformedArchiveError,
    TransitArchiveError,
    TransitError,
    TransitMemberError,
    TruncatedDataError,
    UnsupportedCompressionError,
)
from core.logging_config import LogSink
from core.types import ArchiveEntry, Dataset, FeedSource, IngestOptions, MemberIssue
from ingest.pipeline import build_dataset, ingest_archive
from ingest.source_catalog import SourceCatalog, load_source_catalog
from store.dataset_export import dataset_to_payload, write_dataset_json, write_table_delimited
from tables.delimited_parser import format_line, parse_line, parse_table

__all__ = [
    "ArchiveEntry",
    "Dataset",
    "DecompressionFailedError",
    "FeedSource",
    "IngestOptions",
    "InvalidTableError",
    "LogSink",
    "MalformedArchiveError",
    "MemberIssue",
    "SourceCatalog",
    "TransitArchiveError",
    "TransitConfig",
    "TransitError",
    "TransitMemberError",
    "TruncatedDataError",
    "UnsupportedCompressionError",
    "ZipContainerReader",
    "build_dataset",
    "dataset_to_payload",
    "decompress",
    "format_line",
    "ingest_archive",
    "load_source_catalog",
    "parse_line",
    "parse_table",
    "write_dataset_json",
    "write_table_delimited",
]
