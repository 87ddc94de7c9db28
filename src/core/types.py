"""Shared typed models.

This module defines immutable data models used by the archive reader,
table parser, ingest pipeline, and export layers to keep interfaces
explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Mapping, TypedDict

TableRow = tuple[str, ...]
TypedRecord = dict[str, str]


@dataclass(frozen=True)
class ArchiveEntry:
    """Central-directory view of one archive member.

    Attributes:
        name: Member file name as stored in the directory.
        local_offset: Byte offset of the member's local file header.
        uncompressed_size: Declared size after decompression.
        compressed_size: Declared size of the stored payload.
        compression_method: ZIP compression method code.
    """

    name: str
    local_offset: int
    uncompressed_size: int
    compressed_size: int
    compression_method: int


@dataclass(frozen=True)
class DirectoryLocation:
    """Location of the central directory read from the EOCD record.

    Attributes:
        eocd_offset: Byte offset of the end-of-central-directory record.
        directory_offset: Byte offset of the first central-directory entry.
        entry_count: Total number of entries declared by the archive.
    """

    eocd_offset: int
    directory_offset: int
    entry_count: int


@dataclass(frozen=True)
class RawMember:
    """Decompressed bytes of one archive member."""

    name: str
    data: bytes


@dataclass(frozen=True)
class ParsedTable:
    """Header and data rows of one delimited text table."""

    header: TableRow
    rows: tuple[TableRow, ...]


class StopRecord(TypedDict, total=False):
    stop_id: str
    stop_name: str
    stop_lat: str
    stop_lon: str
    location_type: str
    parent_station: str
    stop_code: str
    stop_desc: str
    zone_id: str
    stop_url: str
    stop_timezone: str
    wheelchair_boarding: str


class StopTimeRecord(TypedDict, total=False):
    trip_id: str
    arrival_time: str
    departure_time: str
    stop_id: str
    stop_sequence: str
    stop_headsign: str
    pickup_type: str
    drop_off_type: str
    shape_dist_traveled: str


class TripRecord(TypedDict, total=False):
    route_id: str
    service_id: str
    trip_id: str
    trip_headsign: str
    trip_short_name: str
    direction_id: str
    block_id: str
    shape_id: str


class RouteRecord(TypedDict, total=False):
    route_id: str
    agency_id: str
    route_short_name: str
    route_long_name: str
    route_desc: str
    route_type: str
    route_url: str
    route_color: str
    route_text_color: str


class CalendarRecord(TypedDict, total=False):
    service_id: str
    monday: str
    tuesday: str
    wednesday: str
    thursday: str
    friday: str
    saturday: str
    sunday: str
    start_date: str
    end_date: str


class CalendarDateRecord(TypedDict, total=False):
    service_id: str
    date: str
    # 1 = service added, 2 = service removed
    exception_type: str


@dataclass(frozen=True)
class MemberIssue:
    """Non-fatal problem observed while reading one member.

    Attributes:
        member_name: Archive member the issue refers to.
        reason: Short machine-readable reason, e.g. ``missing``.
        detail: Human-readable explanation.
    """

    member_name: str
    reason: str
    detail: str = ""


@dataclass(frozen=True)
class Dataset:
    """Typed records of one transit archive.

    Tables keep source row order. Foreign keys such as ``stop_id`` are
    opaque text; no cross-table integrity is enforced here.

    Attributes:
        stops: Records from ``stops.txt``.
        stop_times: Records from ``stop_times.txt``.
        trips: Records from ``trips.txt``.
        routes: Records from ``routes.txt``.
        calendar: Records from ``calendar.txt``.
        calendar_dates: Records from ``calendar_dates.txt``.
        issues: Missing or unreadable members that degraded the result.
    """

    stops: tuple[StopRecord, ...] = ()
    stop_times: tuple[StopTimeRecord, ...] = ()
    trips: tuple[TripRecord, ...] = ()
    routes: tuple[RouteRecord, ...] = ()
    calendar: tuple[CalendarRecord, ...] = ()
    calendar_dates: tuple[CalendarDateRecord, ...] = ()
    issues: tuple[MemberIssue, ...] = ()

    def table(self, table_name: str) -> tuple[Mapping[str, str], ...]:
        """Return one table by dataset field name.

        Raises:
            KeyError: If the name is not a table field.
        """
        if table_name not in table_field_names():
            raise KeyError(table_name)
        return getattr(self, table_name)

    def table_counts(self) -> dict[str, int]:
        """Return record counts keyed by table field name, in field order."""
        return {name: len(getattr(self, name)) for name in table_field_names()}


@dataclass(frozen=True)
class FeedSource:
    """Known public archive location.

    Attributes:
        source_id: Stable lookup key.
        name: Display name of the publisher.
        url: Download location of the archive.
        description: Optional free-text description.
        region: Optional region label.
    """

    source_id: str
    name: str
    url: str
    description: str | None = None
    region: str | None = None


@dataclass(frozen=True)
class IngestOptions:
    """Archive ingest request options.

    Attributes:
        source_uri: Local path, ``s3://`` URI, or HTTP(S) URL of the archive.
        require_identifiers: Drop rows missing a table's identifying columns.
    """

    source_uri: str
    require_identifiers: bool = False


def table_field_names() -> tuple[str, ...]:
    """Return dataset table field names in declaration order."""
    return tuple(item.name for item in fields(Dataset) if item.name != "issues")
