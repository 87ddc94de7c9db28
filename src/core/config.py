"""Runtime configuration model for transit archive ingest.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import DEFAULT_HTTP_TIMEOUT_SECONDS, DEFAULT_MAX_ARCHIVE_BYTES
from core.errors import TransitConfigError

_TRUE_WORDS = frozenset({"1", "true", "yes", "on"})
_FALSE_WORDS = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True)
class TransitConfig:
    """Validated runtime configuration.

    Attributes:
        max_archive_bytes: Upper bound on archive size accepted for parsing.
        require_identifiers: Drop rows missing a table's identifying columns.
        http_timeout_seconds: Timeout for HTTP archive downloads.
        s3_region: Optional default AWS region for S3 reads.
        s3_profile: Optional AWS profile for boto3 session initialization.
        catalog_path: Optional YAML feed catalogue replacing the built-in one.
    """

    max_archive_bytes: int
    require_identifiers: bool
    http_timeout_seconds: float
    s3_region: str | None
    s3_profile: str | None
    catalog_path: Path | None

    @classmethod
    def from_env(cls) -> "TransitConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            TransitConfigError: If environment values are invalid.
        """
        max_bytes_value = os.getenv("TRANSIT_MAX_ARCHIVE_BYTES", str(DEFAULT_MAX_ARCHIVE_BYTES))
        require_value = os.getenv("TRANSIT_REQUIRE_IDENTIFIERS", "false")
        timeout_value = os.getenv("TRANSIT_HTTP_TIMEOUT", str(DEFAULT_HTTP_TIMEOUT_SECONDS))
        catalog_value = os.getenv("TRANSIT_CATALOG_PATH")
        return cls(
            max_archive_bytes=_parse_max_archive_bytes(max_bytes_value),
            require_identifiers=_parse_flag("TRANSIT_REQUIRE_IDENTIFIERS", require_value),
            http_timeout_seconds=_parse_timeout(timeout_value),
            s3_region=os.getenv("TRANSIT_S3_REGION"),
            s3_profile=os.getenv("TRANSIT_S3_PROFILE"),
            catalog_path=Path(catalog_value).expanduser() if catalog_value else None,
        )


def _parse_max_archive_bytes(raw_value: str) -> int:
    """Parse the archive size ceiling.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Positive byte count.

    Raises:
        TransitConfigError: If value is not a positive integer.
    """
    try:
        parsed = int(raw_value)
    except ValueError as error:
        raise TransitConfigError(
            "Invalid TRANSIT_MAX_ARCHIVE_BYTES value: "
            f"expected integer, got '{raw_value}'. "
            "Set TRANSIT_MAX_ARCHIVE_BYTES to a positive byte count."
        ) from error
    if parsed <= 0:
        raise TransitConfigError(
            f"Invalid TRANSIT_MAX_ARCHIVE_BYTES value {parsed}: must be greater than zero."
        )
    return parsed


def _parse_timeout(raw_value: str) -> float:
    """Parse the HTTP timeout in seconds.

    Raises:
        TransitConfigError: If value is not a positive number.
    """
    try:
        parsed = float(raw_value)
    except ValueError as error:
        raise TransitConfigError(
            "Invalid TRANSIT_HTTP_TIMEOUT value: "
            f"expected number of seconds, got '{raw_value}'."
        ) from error
    if parsed <= 0:
        raise TransitConfigError(
            f"Invalid TRANSIT_HTTP_TIMEOUT value {parsed}: must be greater than zero."
        )
    return parsed


def _parse_flag(variable_name: str, raw_value: str) -> bool:
    normalized = raw_value.strip().lower()
    if normalized in _TRUE_WORDS:
        return True
    if normalized in _FALSE_WORDS:
        return False
    raise TransitConfigError(
        f"Invalid {variable_name} value '{raw_value}': "
        f"expected one of {sorted(_TRUE_WORDS | _FALSE_WORDS)}."
    )
