"""Archive byte readers for ingestion.

This module loads complete archive buffers from local paths, S3
objects, or HTTP(S) URLs and enforces the configured size ceiling
before any parsing starts.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from core.config import TransitConfig
from core.constants import HTTP_CHUNK_SIZE
from core.errors import TransitDependencyError, TransitSourceError
from core.logging_config import get_logger
from core.s3_uri import parse_s3_uri

_HTTP_PREFIXES = ("http://", "https://")


def read_archive_bytes(source_uri: str, config: TransitConfig) -> bytes:
    """Load a complete archive from a local path, S3, or HTTP(S).

    Args:
        source_uri: Local file path, ``s3://bucket/key``, or HTTP(S) URL.
        config: Runtime configuration for size limit and remote access.

    Returns:
        Archive bytes.

    Raises:
        TransitSourceError: If the source cannot be read or is too large.
        TransitDependencyError: If a remote client library is missing.
    """
    if source_uri.startswith("s3://"):
        archive_bytes = _read_s3_archive(source_uri, config)
    elif source_uri.startswith(_HTTP_PREFIXES):
        archive_bytes = _read_http_archive(source_uri, config)
    else:
        archive_bytes = _read_local_archive(Path(source_uri).expanduser(), config)
    get_logger(__name__).info("archive_loaded", source_uri=source_uri, size=len(archive_bytes))
    return archive_bytes


def _read_local_archive(source_path: Path, config: TransitConfig) -> bytes:
    """Read an archive from the local file system.

    Args:
        source_path: Archive file path.
        config: Runtime configuration for the size limit.

    Returns:
        Archive bytes.

    Raises:
        TransitSourceError: If path is missing, not a file, or too large.
    """
    if not source_path.is_file():
        raise TransitSourceError(
            f"Failed to read archive at {source_path}: path is not an existing file. "
            "Provide the path of a .zip feed archive."
        )
    _check_size(str(source_path), source_path.stat().st_size, config)
    return source_path.read_bytes()


def _read_s3_archive(source_uri: str, config: TransitConfig) -> bytes:
    """Read an archive object from S3.

    Raises:
        TransitSourceError: If the object is too large or cannot be fetched.
    """
    location = parse_s3_uri(source_uri)
    s3_client = _create_s3_client(config)
    from botocore.exceptions import BotoCoreError, ClientError

    try:
        response = s3_client.get_object(Bucket=location.bucket, Key=location.key)
    except (BotoCoreError, ClientError) as error:
        raise TransitSourceError(f"Failed to fetch {source_uri} from S3: {error}") from error
    content_length = response.get("ContentLength")
    if content_length is not None:
        _check_size(source_uri, int(content_length), config)
    body = response["Body"].read()
    _check_size(source_uri, len(body), config)
    return body


def _create_s3_client(config: TransitConfig) -> Any:
    """Create a boto3 S3 client.

    Args:
        config: Runtime config containing optional profile/region.

    Returns:
        Boto3 S3 client.

    Raises:
        TransitDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise TransitDependencyError(
            "S3 support requires boto3, but it is not installed. "
            "Install boto3 to read s3:// archives."
        ) from error
    session_kwargs: dict[str, str] = {}
    if config.s3_profile:
        session_kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        session_kwargs["region_name"] = config.s3_region
    session = boto3.session.Session(**session_kwargs)
    return session.client("s3")


def _read_http_archive(source_url: str, config: TransitConfig) -> bytes:
    """Download an archive over HTTP(S) in chunks.

    Args:
        source_url: Archive URL.
        config: Runtime configuration for timeout and size limit.

    Returns:
        Archive bytes.

    Raises:
        TransitDependencyError: If requests is missing.
        TransitSourceError: If the download fails or exceeds the size limit.
    """
    try:
        import requests
    except ImportError as error:
        raise TransitDependencyError(
            "HTTP support requires requests, but it is not installed. "
            "Install requests to download archives from URLs."
        ) from error
    chunks: list[bytes] = []
    received = 0
    try:
        with requests.get(source_url, stream=True, timeout=config.http_timeout_seconds) as response:
            response.raise_for_status()
            for chunk in response.iter_content(chunk_size=HTTP_CHUNK_SIZE):
                received += len(chunk)
                _check_size(source_url, received, config)
                chunks.append(chunk)
    except requests.exceptions.RequestException as error:
        raise TransitSourceError(f"Failed to download {source_url}: {error}") from error
    return b"".join(chunks)


def _check_size(source: str, size: int, config: TransitConfig) -> None:
    """Raise when an archive exceeds the configured ceiling."""
    if size > config.max_archive_bytes:
        raise TransitSourceError(
            f"Archive {source} is {size} bytes, above the limit of "
            f"{config.max_archive_bytes}. Raise TRANSIT_MAX_ARCHIVE_BYTES to accept it."
        )
