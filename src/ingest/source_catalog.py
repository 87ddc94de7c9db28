"""Catalogue of known feed archive locations.

This module provides a read-only lookup of public feed sources.
The built-in catalogue can be replaced by a YAML file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping, cast

from core.errors import TransitDependencyError, TransitSourceError
from core.types import FeedSource

DEFAULT_FEED_SOURCES: tuple[FeedSource, ...] = (
    FeedSource(
        source_id="jr-east",
        name="JR East",
        url="https://www.jreast-timetable.jp/timetable_api/gtfs/Tohoku_GTFS.zip",
        description="JR East railway timetable feed",
        region="Japan",
    ),
    FeedSource(
        source_id="jr-west",
        name="JR West",
        url="https://www.jr-odekake.net/railroad/service/gtfs/gtfs.zip",
        description="JR West railway timetable feed",
        region="Japan",
    ),
    FeedSource(
        source_id="tokyo-metro",
        name="Tokyo Metro",
        url="https://api.tokyometroapp.jp/api/v2/gtfs/TokyoMetro_GTFS.zip",
        description="Tokyo Metro subway feed",
        region="Japan",
    ),
    FeedSource(
        source_id="odpt",
        name="Open Data Platform for Public Transportation",
        url="https://api.odpt.org/api/v4/gtfs/odpt_gtfs.zip",
        description="Public transportation open data centre feeds",
        region="Japan",
    ),
    FeedSource(
        source_id="sample",
        name="Sample GTFS",
        url="https://developers.google.com/transit/gtfs/examples/sample-feed.zip",
        description="Google Transit sample feed",
        region="Sample",
    ),
)
_REQUIRED_KEYS = ("id", "name", "url")
_OPTIONAL_KEYS = ("description", "region")


class SourceCatalog:
    """Immutable lookup table of feed sources."""

    def __init__(self, sources: Iterable[FeedSource]) -> None:
        self._sources = tuple(sources)
        self._by_id = {source.source_id: source for source in self._sources}

    def list_sources(self) -> tuple[FeedSource, ...]:
        """Return all sources in catalogue order."""
        return self._sources

    def get(self, source_id: str) -> FeedSource | None:
        """Return the source with this id, or None when unknown."""
        return self._by_id.get(source_id)

    def require(self, source_id: str) -> FeedSource:
        """Return the source with this id.

        Raises:
            TransitSourceError: If the id is not in the catalogue.
        """
        source = self.get(source_id)
        if source is None:
            raise TransitSourceError(
                f"Unknown feed source '{source_id}'. "
                f"Known sources: {', '.join(sorted(self._by_id))}."
            )
        return source


def load_source_catalog(catalog_path: Path | None = None) -> SourceCatalog:
    """Load the built-in catalogue or a YAML catalogue file.

    Args:
        catalog_path: Optional YAML file with a top-level ``sources`` list.

    Returns:
        Source catalogue.

    Raises:
        TransitDependencyError: If PyYAML is unavailable.
        TransitSourceError: If the file is missing or fails schema checks.
    """
    if catalog_path is None:
        return SourceCatalog(DEFAULT_FEED_SOURCES)
    payload = _load_yaml_payload(catalog_path)
    if not isinstance(payload, dict) or not isinstance(payload.get("sources"), list):
        raise TransitSourceError(
            f"Invalid feed catalogue {catalog_path}: expected a mapping with a 'sources' list."
        )
    raw_sources = cast(list[object], payload["sources"])
    sources = [_parse_source(catalog_path, index, item) for index, item in enumerate(raw_sources)]
    _check_unique_ids(catalog_path, sources)
    return SourceCatalog(sources)


def _load_yaml_payload(catalog_path: Path) -> object:
    try:
        import yaml  # type: ignore[import-untyped]
    except ImportError as error:
        raise TransitDependencyError(
            "YAML catalogue support requires PyYAML. Install with 'pip install pyyaml'."
        ) from error
    if not catalog_path.is_file():
        raise TransitSourceError(f"Feed catalogue not found: {catalog_path}.")
    try:
        return cast(object, yaml.safe_load(catalog_path.read_text(encoding="utf-8")))
    except yaml.YAMLError as error:
        raise TransitSourceError(
            f"Failed to parse feed catalogue {catalog_path}: {error}"
        ) from error


def _parse_source(catalog_path: Path, index: int, item: object) -> FeedSource:
    """Validate one catalogue entry.

    Raises:
        TransitSourceError: If required keys are missing or not strings.
    """
    if not isinstance(item, dict):
        raise TransitSourceError(
            f"Invalid feed catalogue {catalog_path}: sources[{index}] must be a mapping."
        )
    mapping = cast(Mapping[str, object], item)
    for key in _REQUIRED_KEYS:
        value = mapping.get(key)
        if not isinstance(value, str) or not value:
            raise TransitSourceError(
                f"Invalid feed catalogue {catalog_path}: sources[{index}].{key} "
                "must be a non-empty string."
            )
    optional_values = {key: mapping.get(key) for key in _OPTIONAL_KEYS}
    for key, value in optional_values.items():
        if value is not None and not isinstance(value, str):
            raise TransitSourceError(
                f"Invalid feed catalogue {catalog_path}: sources[{index}].{key} must be a string."
            )
    return FeedSource(
        source_id=cast(str, mapping["id"]),
        name=cast(str, mapping["name"]),
        url=cast(str, mapping["url"]),
        description=cast("str | None", optional_values["description"]),
        region=cast("str | None", optional_values["region"]),
    )


def _check_unique_ids(catalog_path: Path, sources: list[FeedSource]) -> None:
    seen: set[str] = set()
    for source in sources:
        if source.source_id in seen:
            raise TransitSourceError(
                f"Invalid feed catalogue {catalog_path}: duplicate source id '{source.source_id}'."
            )
        seen.add(source.source_id)
