"""Timestamp helpers shared by the store and the persistence layer."""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import Optional

from dateutil import parser as date_parser
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..logging_config import logger

UTC = timezone.utc
_OLDEST = datetime.min.replace(tzinfo=UTC)


def utc_now() -> datetime:
    """Return the current time in UTC."""

    return datetime.now(UTC)


def to_storage_timestamp(moment: datetime) -> str:
    """Render *moment* as ``YYYY-MM-DDTHH:MM:SS.mmmZ``, the format clients expect."""

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(timestamp: str) -> datetime:
    """Parse an ISO timestamp, defaulting to UTC when timezone is absent."""

    dt = date_parser.isoparse(timestamp)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


def timestamp_sort_key(timestamp: str) -> datetime:
    """Parse *timestamp* for ordering; unparseable values sort as the oldest."""

    try:
        return parse_iso(timestamp)
    except (ValueError, OverflowError):
        return _OLDEST


def resolve_timezone(timezone_name: Optional[str]) -> tzinfo:
    """Return the named zone, or the system local zone when no name is given."""

    if timezone_name:
        try:
            return ZoneInfo(timezone_name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(
                "unknown timezone configured; using system local time",
                extra={"timezone": timezone_name},
            )
    local = datetime.now().astimezone().tzinfo
    return local if local is not None else UTC


def start_of_day(moment: datetime, timezone_name: Optional[str] = None) -> datetime:
    """Return local midnight of the day *moment* falls on, as an aware datetime."""

    tz = resolve_timezone(timezone_name)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=tz)
    local = moment.astimezone(tz)
    return local.replace(hour=0, minute=0, second=0, microsecond=0)


__all__ = [
    "UTC",
    "parse_iso",
    "resolve_timezone",
    "start_of_day",
    "timestamp_sort_key",
    "to_storage_timestamp",
    "utc_now",
]
