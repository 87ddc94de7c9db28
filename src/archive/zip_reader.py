"""ZIP container metadata reader.

This module locates the end-of-central-directory record, enumerates
central-directory entries, and resolves each member's local header
into a zero-copy payload slice. Only the classic (non-ZIP64) layout
is read; writing and encryption are not supported.
"""

from __future__ import annotations

from archive.byte_cursor import ByteCursor
from core.constants import (
    CENTRAL_COMMENT_LENGTH_OFFSET,
    CENTRAL_COMPRESSED_SIZE_OFFSET,
    CENTRAL_ENTRY_FIXED_SIZE,
    CENTRAL_ENTRY_SIGNATURE,
    CENTRAL_EXTRA_LENGTH_OFFSET,
    CENTRAL_LOCAL_OFFSET_OFFSET,
    CENTRAL_METHOD_OFFSET,
    CENTRAL_NAME_LENGTH_OFFSET,
    CENTRAL_UNCOMPRESSED_SIZE_OFFSET,
    EOCD_DIRECTORY_OFFSET_OFFSET,
    EOCD_ENTRY_COUNT_OFFSET,
    EOCD_MIN_SIZE,
    EOCD_SIGNATURE,
    LOCAL_EXTRA_LENGTH_OFFSET,
    LOCAL_HEADER_FIXED_SIZE,
    LOCAL_HEADER_SIGNATURE,
    LOCAL_NAME_LENGTH_OFFSET,
)
from core.errors import MalformedArchiveError, TruncatedDataError
from core.logging_config import LogSink, resolve_sink
from core.types import ArchiveEntry, DirectoryLocation


class ZipContainerReader:
    """Reader for member metadata and payloads of one archive buffer."""

    def __init__(self, buffer: bytes, log_sink: LogSink | None = None) -> None:
        self._cursor = ByteCursor(buffer)
        self._log = resolve_sink(log_sink, __name__)

    def read_entries(self) -> list[ArchiveEntry]:
        """Locate the central directory and parse all of its entries.

        Returns:
            Entries in directory order.

        Raises:
            MalformedArchiveError: If no EOCD record exists.
            TruncatedDataError: If the directory offset lies past the EOCD.
        """
        location = self.locate_directory()
        return self.parse_entries(location.directory_offset, location.entry_count)

    def locate_directory(self) -> DirectoryLocation:
        """Find the end-of-central-directory record.

        The record may be followed by a variable-length comment, so the
        search walks backward from the last position a record can start
        at down to offset zero.

        Returns:
            EOCD offset, central-directory offset, and entry count.

        Raises:
            MalformedArchiveError: If the EOCD signature is not present.
            TruncatedDataError: If the directory offset lies past the EOCD.
        """
        buffer_length = len(self._cursor)
        if buffer_length < EOCD_MIN_SIZE:
            raise MalformedArchiveError(
                f"Invalid ZIP archive: {buffer_length} bytes is smaller than "
                f"the {EOCD_MIN_SIZE}-byte end of central directory record."
            )
        last_start = buffer_length - EOCD_MIN_SIZE
        eocd_offset = self._cursor.buffer.rfind(EOCD_SIGNATURE, 0, last_start + len(EOCD_SIGNATURE))
        if eocd_offset < 0:
            raise MalformedArchiveError(
                "Invalid ZIP archive: end of central directory not found. "
                "Check that the source is a complete ZIP file."
            )
        entry_count = self._cursor.read_uint16(eocd_offset + EOCD_ENTRY_COUNT_OFFSET)
        directory_offset = self._cursor.read_uint32(eocd_offset + EOCD_DIRECTORY_OFFSET_OFFSET)
        if directory_offset > eocd_offset:
            raise TruncatedDataError(
                f"Central directory offset {directory_offset} lies past the "
                f"end of central directory record at {eocd_offset}."
            )
        self._log.debug(
            "central_directory_located",
            eocd_offset=eocd_offset,
            directory_offset=directory_offset,
            entry_count=entry_count,
        )
        return DirectoryLocation(
            eocd_offset=eocd_offset,
            directory_offset=directory_offset,
            entry_count=entry_count,
        )

    def parse_entries(self, directory_offset: int, count: int) -> list[ArchiveEntry]:
        """Parse up to ``count`` central-directory entries.

        A short buffer or a wrong signature stops enumeration early
        without raising; entries read before that point are returned.

        Args:
            directory_offset: Offset of the first directory entry.
            count: Number of entries declared by the EOCD record.

        Returns:
            Entries in directory order.
        """
        entries: list[ArchiveEntry] = []
        offset = directory_offset
        for index in range(count):
            entry = self._read_entry(offset, index)
            if entry is None:
                break
            parsed_entry, record_size = entry
            entries.append(parsed_entry)
            offset += record_size
        return entries

    def extract(self, entry: ArchiveEntry) -> memoryview:
        """Resolve a member's still-compressed payload.

        Args:
            entry: Directory entry of the member.

        Returns:
            Zero-copy view of the payload bytes, valid while the source
            buffer is alive.

        Raises:
            MalformedArchiveError: If the local header signature is wrong.
            TruncatedDataError: If the header or payload passes the buffer end.
        """
        local_offset = entry.local_offset
        if not self._cursor.has_span(local_offset, LOCAL_HEADER_FIXED_SIZE):
            raise TruncatedDataError(
                f"Local header of {entry.name} at offset {local_offset} "
                f"is beyond archive length {len(self._cursor)}."
            )
        if not self._cursor.matches(local_offset, LOCAL_HEADER_SIGNATURE):
            signature = self._cursor.read_uint32(local_offset)
            raise MalformedArchiveError(
                f"Invalid local file header signature 0x{signature:08x} for "
                f"{entry.name} at offset {local_offset} "
                f"(expected {LOCAL_HEADER_SIGNATURE!r})."
            )
        name_length = self._cursor.read_uint16(local_offset + LOCAL_NAME_LENGTH_OFFSET)
        extra_length = self._cursor.read_uint16(local_offset + LOCAL_EXTRA_LENGTH_OFFSET)
        data_offset = local_offset + LOCAL_HEADER_FIXED_SIZE + name_length + extra_length
        if not self._cursor.has_span(data_offset, entry.compressed_size):
            raise TruncatedDataError(
                f"Data of {entry.name} extends beyond archive: offset {data_offset} "
                f"+ size {entry.compressed_size} > {len(self._cursor)}."
            )
        return self._cursor.view(data_offset, entry.compressed_size)

    def _read_entry(self, offset: int, index: int) -> tuple[ArchiveEntry, int] | None:
        """Read one directory entry, or None when enumeration must stop."""
        if not self._cursor.has_span(offset, CENTRAL_ENTRY_FIXED_SIZE):
            self._log.warning("central_directory_truncated", offset=offset, entry_index=index)
            return None
        if not self._cursor.matches(offset, CENTRAL_ENTRY_SIGNATURE):
            self._log.warning(
                "central_directory_signature_mismatch",
                offset=offset,
                entry_index=index,
                signature=f"0x{self._cursor.read_uint32(offset):08x}",
            )
            return None
        name_length = self._cursor.read_uint16(offset + CENTRAL_NAME_LENGTH_OFFSET)
        extra_length = self._cursor.read_uint16(offset + CENTRAL_EXTRA_LENGTH_OFFSET)
        comment_length = self._cursor.read_uint16(offset + CENTRAL_COMMENT_LENGTH_OFFSET)
        name_offset = offset + CENTRAL_ENTRY_FIXED_SIZE
        if not self._cursor.has_span(name_offset, name_length):
            self._log.warning("central_entry_name_truncated", offset=offset, entry_index=index)
            return None
        name = bytes(self._cursor.view(name_offset, name_length)).decode("utf-8", errors="replace")
        entry = ArchiveEntry(
            name=name,
            local_offset=self._cursor.read_uint32(offset + CENTRAL_LOCAL_OFFSET_OFFSET),
            uncompressed_size=self._cursor.read_uint32(offset + CENTRAL_UNCOMPRESSED_SIZE_OFFSET),
            compressed_size=self._cursor.read_uint32(offset + CENTRAL_COMPRESSED_SIZE_OFFSET),
            compression_method=self._cursor.read_uint16(offset + CENTRAL_METHOD_OFFSET),
        )
        self._log.debug(
            "central_entry_parsed",
            name=entry.name,
            compression_method=entry.compression_method,
            uncompressed_size=entry.uncompressed_size,
        )
        record_size = CENTRAL_ENTRY_FIXED_SIZE + name_length + extra_length + comment_length
        return entry, record_size
