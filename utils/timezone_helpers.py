"""
Timezone utilities for deciding which local calendar day a UTC instant
belongs to. All stored timestamps are UTC; "today" is always evaluated
in the configured APP_TIMEZONE.
"""

from datetime import date, datetime
from datetime import time as datetime_time
from datetime import timedelta, timezone
from typing import List, Optional
from zoneinfo import ZoneInfo


def from_utc_to_local(utc_dt: datetime, tz: str) -> datetime:
    """
    Convert UTC datetime to local datetime in the specified timezone.

    Args:
        utc_dt: UTC datetime (naive values are treated as UTC)
        tz: IANA timezone string (e.g., 'America/New_York', 'Europe/London')

    Returns:
        datetime: Local datetime in the specified timezone
    """
    if utc_dt.tzinfo is None:
        utc_dt = utc_dt.replace(tzinfo=timezone.utc)

    return utc_dt.astimezone(ZoneInfo(tz))


def local_date_of(utc_dt: datetime, tz: str) -> date:
    """Calendar date of a UTC instant as seen in ``tz``."""
    return from_utc_to_local(utc_dt, tz).date()


def local_start_of_day(date_or_dt, tz: str) -> datetime:
    """
    Get the start of day (00:00:00) in the specified timezone.

    Args:
        date_or_dt: date or datetime object (datetimes are first converted to ``tz``)
        tz: IANA timezone string

    Returns:
        datetime: Start of day in UTC
    """
    if isinstance(date_or_dt, datetime):
        local_date = local_date_of(date_or_dt, tz)
    else:
        local_date = date_or_dt

    local_start = datetime.combine(local_date, datetime_time.min, tzinfo=ZoneInfo(tz))
    return local_start.astimezone(timezone.utc)


def last_n_local_dates(days: int, tz: str, now: Optional[datetime] = None) -> List[date]:
    """The last ``days`` local calendar dates, oldest first, ending today."""
    if now is None:
        now = datetime.now(timezone.utc)
    today = local_date_of(now, tz)
    return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


def validate_timezone(tz: str) -> bool:
    """
    Validate if the timezone string is a valid IANA timezone.

    Args:
        tz: IANA timezone string to validate

    Returns:
        bool: True if valid, False otherwise
    """
    try:
        ZoneInfo(tz)
        return True
    except (ValueError, KeyError):
        return False
