"""Unit tests for the ZIP container reader."""

from __future__ import annotations

import zipfile

import pytest

from archive.zip_reader import ZipContainerReader
from core.errors import MalformedArchiveError, TruncatedDataError
from tests.archive_fixtures import (
    FEED_MEMBERS,
    build_archive,
    central_entry_offset,
    directory_offset,
    local_header_offset,
    patch_bytes,
    patch_central_field,
)
from tests.log_capture import RecordingSink


def test_read_entries_returns_every_member_in_order() -> None:
    """A well-formed archive should yield one entry per member."""
    reader = ZipContainerReader(build_archive())

    entries = reader.read_entries()

    assert [entry.name for entry in entries] == list(FEED_MEMBERS)


def test_read_entries_reports_method_and_sizes() -> None:
    """Entries should carry the declared method and uncompressed size."""
    content = "stop_id,stop_name\nS1,Central\n"
    reader = ZipContainerReader(build_archive({"stops.txt": content}, zipfile.ZIP_STORED))

    entry = reader.read_entries()[0]

    assert (entry.compression_method, entry.uncompressed_size, entry.compressed_size) == (
        0,
        len(content),
        len(content),
    )


@pytest.mark.parametrize("comment_length", [0, 1, 21, 1024, 65535])
def test_locate_directory_skips_trailing_comment(comment_length: int) -> None:
    """The EOCD record should be found behind comments of any length."""
    archive_bytes = build_archive(comment=b"c" * comment_length)

    location = ZipContainerReader(archive_bytes).locate_directory()

    assert location.entry_count == len(FEED_MEMBERS) and location.eocd_offset == (
        len(archive_bytes) - 22 - comment_length
    )


def test_locate_directory_raises_without_signature() -> None:
    """A buffer without an EOCD signature should be rejected."""
    reader = ZipContainerReader(b"stop_id,stop_name\n" * 10)

    with pytest.raises(MalformedArchiveError):
        reader.locate_directory()


def test_locate_directory_raises_for_tiny_buffer() -> None:
    """Buffers shorter than an EOCD record should be rejected."""
    reader = ZipContainerReader(b"PK\x05\x06")

    with pytest.raises(MalformedArchiveError):
        reader.locate_directory()


def test_locate_directory_raises_for_directory_past_eocd() -> None:
    """A directory offset beyond the EOCD record means the directory is gone."""
    archive_bytes = build_archive()
    eocd_offset = archive_bytes.rfind(b"PK\x05\x06")
    corrupted = patch_bytes(archive_bytes, eocd_offset + 16, b"\xff\xff\xff\x7f")

    with pytest.raises(TruncatedDataError):
        ZipContainerReader(corrupted).locate_directory()


def test_parse_entries_stops_at_signature_mismatch() -> None:
    """A broken entry signature should end enumeration without raising."""
    archive_bytes = build_archive()
    third_entry = central_entry_offset(archive_bytes, "trips.txt")
    corrupted = patch_bytes(archive_bytes, third_entry, b"XXXX")
    sink = RecordingSink()

    entries = ZipContainerReader(corrupted, sink).read_entries()

    mismatch = sink.named("central_directory_signature_mismatch")
    assert len(entries) == 2 and mismatch[0].fields["signature"] == "0x58585858"


def test_parse_entries_stops_when_directory_is_truncated() -> None:
    """A buffer cut mid-directory should return the entries before the cut."""
    archive_bytes = build_archive()
    start = directory_offset(archive_bytes)
    second_entry = central_entry_offset(archive_bytes, "stop_times.txt")
    truncated = archive_bytes[: second_entry + 20]

    entries = ZipContainerReader(truncated).parse_entries(start, len(FEED_MEMBERS))

    assert [entry.name for entry in entries] == ["stops.txt"]


def test_parse_entries_honours_declared_count() -> None:
    """Enumeration should stop after the declared number of entries."""
    archive_bytes = build_archive()
    reader = ZipContainerReader(archive_bytes)

    entries = reader.parse_entries(directory_offset(archive_bytes), 2)

    assert len(entries) == 2


def test_extract_returns_stored_payload() -> None:
    """Stored members should extract to their exact content."""
    content = "route_id,route_type\nR1,3\n"
    reader = ZipContainerReader(build_archive({"routes.txt": content}, zipfile.ZIP_STORED))
    entry = reader.read_entries()[0]

    payload = reader.extract(entry)

    assert bytes(payload) == content.encode("utf-8")


def test_extract_raises_for_bad_local_signature() -> None:
    """A wrong local header signature should be a malformed archive."""
    archive_bytes = build_archive()
    corrupted = patch_bytes(archive_bytes, local_header_offset(archive_bytes, "stops.txt"), b"ZZZZ")
    reader = ZipContainerReader(corrupted)
    entry = reader.read_entries()[0]

    with pytest.raises(MalformedArchiveError):
        reader.extract(entry)


def test_extract_raises_when_payload_passes_buffer_end() -> None:
    """An oversized declared compressed size should be truncated data."""
    archive_bytes = patch_central_field(build_archive(), "stops.txt", 20, 0x7FFFFFFF)
    reader = ZipContainerReader(archive_bytes)
    entry = reader.read_entries()[0]

    with pytest.raises(TruncatedDataError):
        reader.extract(entry)


def test_extract_raises_when_local_header_is_out_of_range() -> None:
    """A local header offset past the buffer should be truncated data."""
    archive_bytes = patch_central_field(build_archive(), "stops.txt", 42, 0x7FFFFFFF)
    reader = ZipContainerReader(archive_bytes)
    entry = reader.read_entries()[0]

    with pytest.raises(TruncatedDataError):
        reader.extract(entry)
