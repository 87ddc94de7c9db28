"""Transit exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Archive-level errors abort a run; member-level errors empty one table.
"""

from __future__ import annotations


class TransitError(Exception):
    """Base exception for all transit archive failures."""


class TransitConfigError(TransitError):
    """Raised for invalid runtime configuration."""


class TransitDependencyError(TransitError):
    """Raised when an optional runtime dependency is missing."""


class TransitSourceError(TransitError):
    """Raised when archive bytes or a feed catalogue cannot be read."""


class TransitExportError(TransitError):
    """Raised for dataset export failures."""


class TransitArchiveError(TransitError):
    """Raised for structural container failures."""


class MalformedArchiveError(TransitArchiveError):
    """Raised when a required record signature is absent or wrong."""


class TruncatedDataError(TransitArchiveError):
    """Raised when declared offsets or sizes run past the buffer end."""


class TransitMemberError(TransitError):
    """Raised for failures confined to a single archive member."""


class UnsupportedCompressionError(TransitMemberError):
    """Raised for compression methods other than stored and deflate."""


class DecompressionFailedError(TransitMemberError):
    """Raised when both deflate framings fail to decode a payload."""


class InvalidTableError(TransitMemberError):
    """Raised when decoded member text is not a usable table."""


class OutOfBoundsError(TransitError):
    """Raised when a fixed-width read would pass the buffer end."""
