"""Bounds-checked little-endian reads over a fixed byte buffer.

Every binary structure in the container reader is decoded through
this cursor so overruns surface as one error type.
"""

from __future__ import annotations

import struct

from core.errors import OutOfBoundsError

_UINT16 = struct.Struct("<H")
_UINT32 = struct.Struct("<I")


class ByteCursor:
    """Read-only accessor for an immutable archive buffer."""

    def __init__(self, buffer: bytes) -> None:
        self._buffer = buffer
        self._view = memoryview(buffer)

    def __len__(self) -> int:
        return len(self._buffer)

    @property
    def buffer(self) -> bytes:
        return self._buffer

    def read_uint16(self, offset: int) -> int:
        """Read an unsigned 16-bit little-endian integer.

        Args:
            offset: Byte offset of the first byte.

        Returns:
            Decoded integer.

        Raises:
            OutOfBoundsError: If two bytes are not available at offset.
        """
        self._check_span(offset, _UINT16.size)
        return _UINT16.unpack_from(self._buffer, offset)[0]

    def read_uint32(self, offset: int) -> int:
        """Read an unsigned 32-bit little-endian integer.

        Args:
            offset: Byte offset of the first byte.

        Returns:
            Decoded integer.

        Raises:
            OutOfBoundsError: If four bytes are not available at offset.
        """
        self._check_span(offset, _UINT32.size)
        return _UINT32.unpack_from(self._buffer, offset)[0]

    def view(self, offset: int, length: int) -> memoryview:
        """Return a zero-copy slice of the buffer.

        Raises:
            OutOfBoundsError: If the slice would pass the buffer end.
        """
        self._check_span(offset, length)
        return self._view[offset : offset + length]

    def matches(self, offset: int, signature: bytes) -> bool:
        """Return whether the bytes at offset equal signature."""
        if offset < 0 or offset + len(signature) > len(self._buffer):
            return False
        return self._buffer[offset : offset + len(signature)] == signature

    def has_span(self, offset: int, length: int) -> bool:
        """Return whether length bytes are available at offset."""
        return offset >= 0 and length >= 0 and offset + length <= len(self._buffer)

    def _check_span(self, offset: int, length: int) -> None:
        if not self.has_span(offset, length):
            raise OutOfBoundsError(
                f"Cannot read {length} bytes at offset {offset}: "
                f"buffer length is {len(self._buffer)}."
            )
