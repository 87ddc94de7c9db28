"""Member payload decompression.

Supports the stored and deflate methods. Deflate payloads are tried as
raw streams first and then with zlib framing, since feed producers are
inconsistent about which convention they emit.
"""

from __future__ import annotations

import zlib

from core.constants import METHOD_DEFLATE, METHOD_STORED
from core.errors import DecompressionFailedError, UnsupportedCompressionError
from core.logging_config import LogSink, resolve_sink

_RAW_DEFLATE_WBITS = -zlib.MAX_WBITS
_ZLIB_FRAMED_WBITS = zlib.MAX_WBITS


def decompress(
    payload: bytes | memoryview,
    method: int,
    expected_size: int | None = None,
    log_sink: LogSink | None = None,
) -> bytes:
    """Decompress one member payload.

    Args:
        payload: Compressed member bytes.
        method: ZIP compression method code.
        expected_size: Declared uncompressed size, checked when given.
        log_sink: Optional structured event sink.

    Returns:
        Raw member bytes.

    Raises:
        UnsupportedCompressionError: If method is not stored or deflate.
        DecompressionFailedError: If neither deflate framing decodes.
    """
    log = resolve_sink(log_sink, __name__)
    if method == METHOD_STORED:
        data = bytes(payload)
    elif method == METHOD_DEFLATE:
        data = _inflate(payload, log)
    else:
        raise UnsupportedCompressionError(
            f"Unsupported compression method {method}: "
            f"only stored ({METHOD_STORED}) and deflate ({METHOD_DEFLATE}) are readable."
        )
    if expected_size is not None and len(data) != expected_size:
        log.warning(
            "decompressed_size_mismatch",
            method=method,
            expected_size=expected_size,
            actual_size=len(data),
        )
    return data


def _inflate(payload: bytes | memoryview, log: LogSink) -> bytes:
    """Inflate raw deflate data, falling back to zlib-framed deflate.

    The output buffer grows from the zlib default; declared member sizes
    come from the archive and are never used for allocation.
    """
    try:
        return zlib.decompress(payload, _RAW_DEFLATE_WBITS)
    except zlib.error as raw_error:
        log.debug("deflate_fallback", reason=str(raw_error))
        try:
            return zlib.decompress(payload, _ZLIB_FRAMED_WBITS)
        except zlib.error as framed_error:
            raise DecompressionFailedError(
                "Both raw and zlib-framed deflate decompression failed: "
                f"raw: {raw_error}; zlib: {framed_error}."
            ) from raw_error
