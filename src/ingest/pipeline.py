"""Archive-to-dataset orchestration.

This module coordinates directory parsing, member extraction,
decompression, table parsing, and record mapping for the six feed
tables. Structural archive errors abort the run; member errors are
logged and leave that table empty.
"""

from __future__ import annotations

from typing import Mapping

from archive.decompression import decompress
from archive.zip_reader import ZipContainerReader
from core.config import TransitConfig
from core.constants import BYTE_ORDER_MARK, TEXT_ENCODING
from core.errors import (
    DecompressionFailedError,
    InvalidTableError,
    TransitMemberError,
    TruncatedDataError,
    UnsupportedCompressionError,
)
from core.logging_config import LogSink, resolve_sink
from core.types import ArchiveEntry, Dataset, IngestOptions, MemberIssue, RawMember, TypedRecord
from ingest.archive_source import read_archive_bytes
from tables.delimited_parser import parse_table
from tables.feed_tables import FEED_TABLES, FeedTable
from tables.record_mapper import map_rows

_MEMBER_ERROR_REASONS: Mapping[type[Exception], str] = {
    TruncatedDataError: "truncated",
    UnsupportedCompressionError: "unsupported_compression",
    DecompressionFailedError: "decompression_failed",
    InvalidTableError: "invalid_table",
}
_MEMBER_ERRORS = (TruncatedDataError, TransitMemberError)


class DatasetBuilder:
    """Single-use builder for the dataset of one archive buffer."""

    def __init__(
        self,
        archive_bytes: bytes,
        require_identifiers: bool = False,
        log_sink: LogSink | None = None,
    ) -> None:
        self._log = resolve_sink(log_sink, __name__)
        self._reader = ZipContainerReader(archive_bytes, self._log)
        self._require_identifiers = require_identifiers

    def build(self) -> Dataset:
        """Read all expected members into a dataset.

        Returns:
            Dataset with one tuple per table and any member issues.

        Raises:
            MalformedArchiveError: If the archive structure is unreadable.
            TruncatedDataError: If the central directory is missing.
        """
        entries = _index_entries(self._reader.read_entries())
        tables: dict[str, tuple[TypedRecord, ...]] = {}
        issues: list[MemberIssue] = []
        for feed_table in FEED_TABLES:
            entry = entries.get(feed_table.member_name)
            if entry is None:
                self._log.warning("member_missing", member=feed_table.member_name)
                issues.append(
                    MemberIssue(feed_table.member_name, "missing", "not found in archive")
                )
                continue
            try:
                tables[feed_table.field_name] = self._read_table(feed_table, entry)
            except _MEMBER_ERRORS as error:
                issue = _member_issue(feed_table.member_name, error)
                self._log.warning(
                    "member_failed",
                    member=issue.member_name,
                    reason=issue.reason,
                    error=issue.detail,
                )
                issues.append(issue)
        dataset = Dataset(**tables, issues=tuple(issues))
        self._log.info("dataset_built", issue_count=len(issues), **dataset.table_counts())
        return dataset

    def _read_table(self, feed_table: FeedTable, entry: ArchiveEntry) -> tuple[TypedRecord, ...]:
        member = self._read_member(entry)
        text = member.data.decode(TEXT_ENCODING, errors="replace")
        try:
            parsed_table = parse_table(text)
        except InvalidTableError:
            if not _is_header_only(text):
                raise
            self._log.info("table_without_rows", member=entry.name)
            return ()
        mapped_table = map_rows(
            parsed_table,
            feed_table.required_columns,
            self._require_identifiers,
        )
        self._log.info(
            "table_parsed",
            member=entry.name,
            record_count=len(mapped_table.records),
            dropped_rows=mapped_table.dropped_rows,
        )
        return mapped_table.records

    def _read_member(self, entry: ArchiveEntry) -> RawMember:
        payload = self._reader.extract(entry)
        data = decompress(
            payload,
            entry.compression_method,
            expected_size=entry.uncompressed_size,
            log_sink=self._log,
        )
        return RawMember(name=entry.name, data=data)


def build_dataset(
    archive_bytes: bytes,
    require_identifiers: bool = False,
    log_sink: LogSink | None = None,
) -> Dataset:
    """Parse an in-memory archive into a typed dataset.

    Args:
        archive_bytes: Complete ZIP container bytes.
        require_identifiers: Drop rows missing a table's identifying columns.
        log_sink: Optional structured event sink; defaults to structlog.

    Returns:
        Dataset of the six feed tables.

    Raises:
        MalformedArchiveError: If the archive structure is unreadable.
        TruncatedDataError: If the central directory is missing.
    """
    builder = DatasetBuilder(archive_bytes, require_identifiers, log_sink)
    return builder.build()


def ingest_archive(
    options: IngestOptions,
    config: TransitConfig,
    log_sink: LogSink | None = None,
) -> Dataset:
    """Load an archive from its source and parse it into a dataset.

    Args:
        options: Ingest request options.
        config: Runtime configuration.
        log_sink: Optional structured event sink.

    Returns:
        Dataset of the six feed tables.

    Raises:
        TransitSourceError: If the archive bytes cannot be read.
        TransitArchiveError: If the archive structure is unreadable.
    """
    archive_bytes = read_archive_bytes(options.source_uri, config)
    require_identifiers = options.require_identifiers or config.require_identifiers
    return build_dataset(archive_bytes, require_identifiers, log_sink)


def _index_entries(entries: list[ArchiveEntry]) -> dict[str, ArchiveEntry]:
    """Index entries by name; the first entry of a repeated name wins."""
    indexed: dict[str, ArchiveEntry] = {}
    for entry in entries:
        indexed.setdefault(entry.name, entry)
    return indexed


def _member_issue(member_name: str, error: Exception) -> MemberIssue:
    reason = _MEMBER_ERROR_REASONS.get(type(error), "member_error")
    return MemberIssue(member_name=member_name, reason=reason, detail=str(error))


def _is_header_only(text: str) -> bool:
    lines = text.removeprefix(BYTE_ORDER_MARK).split("\n")
    return sum(1 for line in lines if line.strip()) == 1
