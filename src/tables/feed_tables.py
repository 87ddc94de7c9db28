"""Feed table catalogue.

This module lists the six archive members read into a dataset,
the dataset field each one fills, and its identifying columns.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FeedTable:
    """One expected archive member.

    Attributes:
        member_name: Exact, case-sensitive member file name.
        field_name: Dataset field that receives the records.
        required_columns: Columns a row must carry in strict mode.
    """

    member_name: str
    field_name: str
    required_columns: tuple[str, ...]


FEED_TABLES: tuple[FeedTable, ...] = (
    FeedTable("stops.txt", "stops", ("stop_id", "stop_name", "stop_lat", "stop_lon")),
    FeedTable(
        "stop_times.txt",
        "stop_times",
        ("trip_id", "arrival_time", "departure_time", "stop_id", "stop_sequence"),
    ),
    FeedTable("trips.txt", "trips", ("route_id", "service_id", "trip_id")),
    FeedTable("routes.txt", "routes", ("route_id", "route_type")),
    FeedTable(
        "calendar.txt",
        "calendar",
        (
            "service_id",
            "monday",
            "tuesday",
            "wednesday",
            "thursday",
            "friday",
            "saturday",
            "sunday",
            "start_date",
            "end_date",
        ),
    ),
    FeedTable("calendar_dates.txt", "calendar_dates", ("service_id", "date", "exception_type")),
)
