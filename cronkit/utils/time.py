"""Time utilities for cronkit."""

from datetime import datetime, tzinfo
from zoneinfo import ZoneInfo

# Unset reference time
ZERO_TIME = datetime.min


def utc_now() -> datetime:
    """
    Get current UTC time (timezone-aware).

    Returns:
        Current UTC datetime
    """
    return datetime.now(ZoneInfo("UTC"))


def get_timezone(tz_name: str) -> tzinfo:
    """
    Get timezone object from IANA timezone name.

    Args:
        tz_name: IANA timezone name (e.g., "Asia/Seoul", "America/New_York")

    Returns:
        Timezone object

    Raises:
        ValueError: Invalid timezone name
    """
    try:
        return ZoneInfo(tz_name)
    except Exception as e:
        raise ValueError(f"Invalid timezone '{tz_name}': {e}") from e


def is_zero_time(value: datetime | None) -> bool:
    """Check if *value* is unset (None or ``datetime.min``, tzinfo ignored)."""
    return value is None or value.replace(tzinfo=None) == ZERO_TIME


def seconds_between(start: datetime, end: datetime) -> float:
    """
    Elapsed seconds from *start* to *end*.

    Aware datetimes are compared as UTC instants, so a DST transition
    between them counts as real time. Naive datetimes are subtracted as is.
    """
    if start.tzinfo is None or end.tzinfo is None:
        return (end - start).total_seconds()

    utc = ZoneInfo("UTC")
    return (end.astimezone(utc) - start.astimezone(utc)).total_seconds()
