"""Core constants used across transit modules.

This module centralizes binary layout values and runtime defaults.
Keeping values here avoids magic literals in parsing logic.
"""

from __future__ import annotations

# 0x06054b50, 0x02014b50, 0x04034b50 in file byte order
EOCD_SIGNATURE = b"PK\x05\x06"
CENTRAL_ENTRY_SIGNATURE = b"PK\x01\x02"
LOCAL_HEADER_SIGNATURE = b"PK\x03\x04"

EOCD_MIN_SIZE = 22
EOCD_ENTRY_COUNT_OFFSET = 10
EOCD_DIRECTORY_OFFSET_OFFSET = 16

CENTRAL_ENTRY_FIXED_SIZE = 46
CENTRAL_METHOD_OFFSET = 10
CENTRAL_COMPRESSED_SIZE_OFFSET = 20
CENTRAL_UNCOMPRESSED_SIZE_OFFSET = 24
CENTRAL_NAME_LENGTH_OFFSET = 28
CENTRAL_EXTRA_LENGTH_OFFSET = 30
CENTRAL_COMMENT_LENGTH_OFFSET = 32
CENTRAL_LOCAL_OFFSET_OFFSET = 42

LOCAL_HEADER_FIXED_SIZE = 30
LOCAL_NAME_LENGTH_OFFSET = 26
LOCAL_EXTRA_LENGTH_OFFSET = 28

METHOD_STORED = 0
METHOD_DEFLATE = 8

TEXT_ENCODING = "utf-8"
BYTE_ORDER_MARK = "\ufeff"
FIELD_SEPARATOR = ","
QUOTE_CHAR = '"'

DEFAULT_MAX_ARCHIVE_BYTES = 256 * 1024 * 1024
DEFAULT_HTTP_TIMEOUT_SECONDS = 120.0
HTTP_CHUNK_SIZE = 8192
