from .responses import error_response
from .timezones import (
    UTC,
    parse_iso,
    resolve_timezone,
    start_of_day,
    timestamp_sort_key,
    to_storage_timestamp,
    utc_now,
)

__all__ = [
    "error_response",
    "UTC",
    "parse_iso",
    "resolve_timezone",
    "start_of_day",
    "timestamp_sort_key",
    "to_storage_timestamp",
    "utc_now",
]
