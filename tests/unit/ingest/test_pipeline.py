"""Unit tests for archive-to-dataset orchestration."""

from __future__ import annotations

import zipfile

import pytest

from core.errors import MalformedArchiveError
from ingest.pipeline import build_dataset
from tests.archive_fixtures import (
    FEED_MEMBERS,
    build_archive,
    feed_without,
    local_header_offset,
    patch_bytes,
    patch_central_field,
)
from tests.log_capture import RecordingSink


def test_build_dataset_reads_all_six_tables() -> None:
    """A complete archive should populate every table without issues."""
    dataset = build_dataset(build_archive(), log_sink=RecordingSink())

    assert dataset.table_counts() == {
        "stops": 2,
        "stop_times": 2,
        "trips": 1,
        "routes": 1,
        "calendar": 1,
        "calendar_dates": 1,
    } and dataset.issues == ()


def test_build_dataset_keeps_quoted_values_and_sparse_keys() -> None:
    """Quoted commas should survive and empty columns should be absent."""
    dataset = build_dataset(build_archive(), log_sink=RecordingSink())

    assert dataset.stops[0] == {
        "stop_id": "S1",
        "stop_name": "Central",
        "stop_lat": "35.6812",
        "stop_lon": "139.7671",
    } and dataset.stops[1]["stop_name"] == "North, Gate"


def test_build_dataset_reads_stored_members() -> None:
    """Uncompressed archives should parse the same as deflated ones."""
    archive_bytes = build_archive(compression=zipfile.ZIP_STORED)

    dataset = build_dataset(archive_bytes, log_sink=RecordingSink())

    assert dataset.routes == (
        {
            "route_id": "R1",
            "route_short_name": "1",
            "route_long_name": "Main Line",
            "route_type": "2",
        },
    )


def test_missing_member_leaves_only_that_table_empty() -> None:
    """An archive without calendar_dates.txt should still fill the rest."""
    sink = RecordingSink()

    dataset = build_dataset(build_archive(feed_without("calendar_dates.txt")), log_sink=sink)

    counts = dataset.table_counts()
    other_counts = [count for name, count in counts.items() if name != "calendar_dates"]
    assert (
        dataset.calendar_dates == ()
        and all(count > 0 for count in other_counts)
        and [(issue.member_name, issue.reason) for issue in dataset.issues]
        == [("calendar_dates.txt", "missing")]
        and sink.named("member_missing")[0].level == "warning"
    )


def test_header_only_member_yields_empty_table_without_issue() -> None:
    """A member holding just a header should be an empty table, not an error."""
    members = dict(FEED_MEMBERS, **{"trips.txt": "route_id,service_id,trip_id\n"})

    dataset = build_dataset(build_archive(members), log_sink=RecordingSink())

    assert dataset.trips == () and dataset.issues == () and len(dataset.stops) == 2


def test_truncated_payload_empties_only_its_table() -> None:
    """A payload running past the buffer should not abort the other tables."""
    archive_bytes = patch_central_field(build_archive(), "stops.txt", 20, 0x7FFFFFFF)
    sink = RecordingSink()

    dataset = build_dataset(archive_bytes, log_sink=sink)

    assert (
        dataset.stops == ()
        and len(dataset.stop_times) == 2
        and len(dataset.calendar_dates) == 1
        and [(issue.member_name, issue.reason) for issue in dataset.issues]
        == [("stops.txt", "truncated")]
        and sink.named("member_failed")
    )


def test_unsupported_compression_empties_only_its_table() -> None:
    """An unknown compression method should only affect its member."""
    archive_bytes = patch_central_field(build_archive(), "routes.txt", 10, 12, width=2)

    dataset = build_dataset(archive_bytes, log_sink=RecordingSink())

    assert dataset.routes == () and dataset.issues[0].reason == "unsupported_compression"


def test_undecodable_deflate_empties_only_its_table() -> None:
    """A deflate member whose data decodes under neither framing should be skipped."""
    members = dict(FEED_MEMBERS, **{"calendar.txt": b"\xff\xff\xff\xff"})
    archive_bytes = build_archive(members, compression=zipfile.ZIP_STORED)
    archive_bytes = patch_central_field(archive_bytes, "calendar.txt", 10, 8, width=2)

    dataset = build_dataset(archive_bytes, log_sink=RecordingSink())

    assert dataset.calendar == () and dataset.issues[0].reason == "decompression_failed"


def test_empty_member_is_reported_as_invalid_table() -> None:
    """A member without any lines should be reported and left empty."""
    members = dict(FEED_MEMBERS, **{"calendar_dates.txt": ""})

    dataset = build_dataset(build_archive(members), log_sink=RecordingSink())

    assert dataset.calendar_dates == () and dataset.issues[0].reason == "invalid_table"


def test_bad_local_header_aborts_the_dataset() -> None:
    """A wrong local header signature should fail the whole archive."""
    archive_bytes = build_archive()
    corrupted = patch_bytes(archive_bytes, local_header_offset(archive_bytes, "trips.txt"), b"XXXX")

    with pytest.raises(MalformedArchiveError):
        build_dataset(corrupted, log_sink=RecordingSink())


def test_non_archive_input_aborts_the_dataset() -> None:
    """Bytes without an EOCD record should fail the whole archive."""
    with pytest.raises(MalformedArchiveError):
        build_dataset(FEED_MEMBERS["stops.txt"].encode("utf-8"), log_sink=RecordingSink())


def test_require_identifiers_drops_incomplete_rows() -> None:
    """Strict mode should drop rows missing identifying columns."""
    members = dict(
        FEED_MEMBERS,
        **{"routes.txt": "route_id,route_short_name,route_type\nR1,1,2\n,2,3\n"},
    )

    archive_bytes = build_archive(members)

    lenient = build_dataset(archive_bytes, log_sink=RecordingSink())
    strict = build_dataset(archive_bytes, require_identifiers=True, log_sink=RecordingSink())

    assert len(lenient.routes) == 2 and strict.routes == (
        {"route_id": "R1", "route_short_name": "1", "route_type": "2"},
    )


def test_first_entry_wins_for_repeated_member_names() -> None:
    """When a name repeats in the directory the first entry should be read."""
    archive_bytes = build_archive(
        {"routes.txt": "route_id,route_type\nFIRST,3\n", "routes.TXT": "route_id,route_type\nX,3\n"}
    )
    renamed = archive_bytes.replace(b"routes.TXT", b"routes.txt")

    dataset = build_dataset(renamed, log_sink=RecordingSink())

    assert dataset.routes == ({"route_id": "FIRST", "route_type": "3"},)


def test_dataset_built_event_carries_counts() -> None:
    """Completion should be reported through the sink with table counts."""
    sink = RecordingSink()

    build_dataset(build_archive(), log_sink=sink)

    assert sink.named("dataset_built")[0].fields["stops"] == 2


def test_oversized_declared_length_still_parses_every_table() -> None:
    """A bogus uncompressed size should only produce a mismatch warning."""
    archive_bytes = patch_central_field(build_archive(), "stops.txt", 24, 0xFFFFFFFF)
    sink = RecordingSink()

    dataset = build_dataset(archive_bytes, log_sink=sink)

    mismatch = sink.named("decompressed_size_mismatch")
    assert (
        len(dataset.stops) == 2
        and dataset.issues == ()
        and mismatch[0].fields["expected_size"] == 0xFFFFFFFF
    )
