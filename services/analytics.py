"""Manager dashboard statistics.

Every function here is a pure function of a snapshot of clock records. The
caller supplies ``now`` and the timezone that defines a calendar day, so the
same snapshot always yields the same numbers. Empty input gives zeros and
empty or zero-filled series.
"""

from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel

from models.clock_record import ClockRecord
from services.shift_service import duration_hours
from utils.timezone_helpers import last_n_local_dates, local_date_of


class SeriesPoint(BaseModel):
    day: date
    value: float


class StaffHours(BaseModel):
    name: str
    hours: float


class RecordStatusFilter(str, Enum):
    ALL = "all"
    ACTIVE = "active"
    INACTIVE = "inactive"


def _now(now: Optional[datetime]) -> datetime:
    return now or datetime.now(timezone.utc)


def _closed_hours_on(records: Iterable[ClockRecord], day: date, tz: str) -> List[float]:
    return [
        duration_hours(record)
        for record in records
        if not record.is_open and local_date_of(record.clock_in_at, tz) == day
    ]


def active_count(records: Iterable[ClockRecord]) -> int:
    return sum(1 for record in records if record.is_open)


def total_hours_today(
    records: Iterable[ClockRecord], tz: str, now: Optional[datetime] = None
) -> float:
    today = local_date_of(_now(now), tz)
    return sum(_closed_hours_on(records, today, tz))


def avg_hours_per_shift(
    records: Iterable[ClockRecord], tz: str, now: Optional[datetime] = None
) -> float:
    today = local_date_of(_now(now), tz)
    hours = _closed_hours_on(records, today, tz)
    if not hours:
        return 0.0
    return sum(hours) / len(hours)


def daily_series(
    records: Iterable[ClockRecord], days: int, tz: str, now: Optional[datetime] = None
) -> List[SeriesPoint]:
    """Clock-ins per local day for the last ``days`` days, oldest first."""
    counts: Dict[date, int] = defaultdict(int)
    for record in records:
        counts[local_date_of(record.clock_in_at, tz)] += 1

    return [
        SeriesPoint(day=day, value=counts.get(day, 0))
        for day in last_n_local_dates(days, tz, _now(now))
    ]


def daily_avg_hours_series(
    records: Iterable[ClockRecord], days: int, tz: str, now: Optional[datetime] = None
) -> List[SeriesPoint]:
    """Mean closed-shift length per local day for the last ``days`` days."""
    hours_by_day: Dict[date, List[float]] = defaultdict(list)
    for record in records:
        if record.is_open:
            continue
        hours_by_day[local_date_of(record.clock_in_at, tz)].append(duration_hours(record))

    series = []
    for day in last_n_local_dates(days, tz, _now(now)):
        hours = hours_by_day.get(day, [])
        series.append(SeriesPoint(day=day, value=sum(hours) / len(hours) if hours else 0.0))
    return series


def top_staff_by_hours(
    records: Iterable[ClockRecord],
    window_days: int,
    top_n: int,
    now: Optional[datetime] = None,
) -> List[StaffHours]:
    """Total closed-shift hours per worker name over the trailing window."""
    window_start = _now(now) - timedelta(days=window_days)

    totals: Dict[str, float] = defaultdict(float)
    for record in records:
        if record.is_open or record.clock_in_at < window_start:
            continue
        totals[record.worker_display_name] += duration_hours(record)

    # Ties keep a stable, name-ordered result
    ranked = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    return [StaffHours(name=name, hours=hours) for name, hours in ranked[:top_n]]


def filter_records(
    records: Iterable[ClockRecord],
    tz: str,
    status: RecordStatusFilter = RecordStatusFilter.ALL,
    search: Optional[str] = None,
    on_date: Optional[date] = None,
) -> List[ClockRecord]:
    """Staff table filter: status tab, name search, and clock-in date."""
    needle = (search or "").strip().lower()

    filtered = []
    for record in records:
        if needle and needle not in record.worker_display_name.lower():
            continue
        if status == RecordStatusFilter.ACTIVE and not record.is_open:
            continue
        if status == RecordStatusFilter.INACTIVE and record.is_open:
            continue
        if on_date is not None and local_date_of(record.clock_in_at, tz) != on_date:
            continue
        filtered.append(record)
    return filtered


class DashboardSummary(BaseModel):
    active_staff: int
    total_hours_today: float
    avg_hours_per_shift: float


def summarize(
    records: Iterable[ClockRecord], tz: str, now: Optional[datetime] = None
) -> DashboardSummary:
    records = list(records)
    now = _now(now)
    return DashboardSummary(
        active_staff=active_count(records),
        total_hours_today=total_hours_today(records, tz, now),
        avg_hours_per_shift=avg_hours_per_shift(records, tz, now),
    )
