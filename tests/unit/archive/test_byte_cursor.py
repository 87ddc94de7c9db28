"""Unit tests for bounds-checked byte reads."""

from __future__ import annotations

import pytest

from archive.byte_cursor import ByteCursor
from core.errors import OutOfBoundsError


def test_read_uint16_decodes_little_endian() -> None:
    """Two-byte reads should treat the first byte as least significant."""
    cursor = ByteCursor(b"\x34\x12\xff")

    assert cursor.read_uint16(0) == 0x1234


def test_read_uint32_decodes_little_endian() -> None:
    """Four-byte reads should decode the local header signature value."""
    cursor = ByteCursor(b"PK\x03\x04")

    assert cursor.read_uint32(0) == 0x04034B50


def test_read_uint32_reads_final_bytes_of_buffer() -> None:
    """A read ending exactly at the buffer end should succeed."""
    cursor = ByteCursor(b"\x00\x01\x00\x00\x00")

    assert cursor.read_uint32(1) == 1


def test_read_uint16_raises_past_buffer_end() -> None:
    """A read that would pass the end should raise out of bounds."""
    cursor = ByteCursor(b"\x01\x02\x03")

    with pytest.raises(OutOfBoundsError):
        cursor.read_uint16(2)


def test_read_uint32_raises_for_negative_offset() -> None:
    """Negative offsets should never wrap around to the buffer end."""
    cursor = ByteCursor(b"\x01\x02\x03\x04\x05")

    with pytest.raises(OutOfBoundsError):
        cursor.read_uint32(-1)


def test_view_is_zero_copy_slice() -> None:
    """Views should expose the requested bytes without copying the buffer."""
    buffer = b"header-payload"
    cursor = ByteCursor(buffer)

    view = cursor.view(7, 7)

    assert isinstance(view, memoryview) and bytes(view) == b"payload"


def test_matches_returns_false_past_end() -> None:
    """Signature checks near the end should report a mismatch, not raise."""
    cursor = ByteCursor(b"xxPK")

    assert cursor.matches(2, b"PK\x05\x06") is False


def test_matches_compares_raw_signature_bytes() -> None:
    """Signatures present at the offset should match."""
    cursor = ByteCursor(b"xxPK\x03\x04rest")

    assert cursor.matches(2, b"PK\x03\x04") is True
