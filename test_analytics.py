#!/usr/bin/env python3
"""
Tests for the manager dashboard aggregations. These run on in-memory
ClockRecord snapshots; no database is involved.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from models.clock_record import ClockRecord
from services import analytics
from services.analytics import RecordStatusFilter

TZ = "UTC"
NOW = datetime(2026, 10, 19, 18, 0, tzinfo=timezone.utc)


def make_record(name, clock_in, hours=None, worker_id=None):
    return ClockRecord(
        id=f"{name}-{clock_in.isoformat()}",
        worker_id=worker_id or name.lower(),
        worker_display_name=name,
        clock_in_timestamp=clock_in,
        clock_in_lat=51.51,
        clock_in_lng=-0.13,
        clock_out_timestamp=clock_in + timedelta(hours=hours) if hours is not None else None,
    )


def today_at(hour, days_ago=0):
    return NOW.replace(hour=hour) - timedelta(days=days_ago)


def test_empty_snapshot_gives_zeros():
    assert analytics.active_count([]) == 0
    assert analytics.total_hours_today([], TZ, NOW) == 0
    assert analytics.avg_hours_per_shift([], TZ, NOW) == 0
    assert analytics.top_staff_by_hours([], 7, 10, NOW) == []
    assert analytics.filter_records([], TZ) == []

    series = analytics.daily_series([], 7, TZ, NOW)
    assert len(series) == 7
    assert all(point.value == 0 for point in series)
    assert all(point.value == 0 for point in analytics.daily_avg_hours_series([], 7, TZ, NOW))

    summary = analytics.summarize([], TZ, NOW)
    assert summary.active_staff == 0
    assert summary.total_hours_today == 0
    assert summary.avg_hours_per_shift == 0


def test_totals_and_average_for_today():
    records = [
        make_record("Ada", today_at(8), hours=3.5),
        make_record("Grace", today_at(9), hours=4.0),
        # Open shift: counted as active, not in hours
        make_record("Alan", today_at(10)),
        # Yesterday: not today
        make_record("Ada", today_at(8, days_ago=1), hours=6),
    ]

    assert analytics.total_hours_today(records, TZ, NOW) == pytest.approx(7.5)
    assert analytics.avg_hours_per_shift(records, TZ, NOW) == pytest.approx(3.75)
    assert analytics.active_count(records) == 1


def test_today_follows_the_configured_timezone():
    # 02:00 UTC on the 19th is still the 18th in New York
    late_shift = make_record("Ada", datetime(2026, 10, 19, 2, 0, tzinfo=timezone.utc), hours=1)

    assert analytics.total_hours_today([late_shift], "UTC", NOW) == pytest.approx(1)
    assert analytics.total_hours_today([late_shift], "America/New_York", NOW) == 0


def test_daily_series_oldest_to_newest():
    records = [
        make_record("Ada", today_at(8), hours=2),
        make_record("Grace", today_at(9)),
        make_record("Ada", today_at(8, days_ago=2), hours=4),
        # Outside the 3-day window
        make_record("Ada", today_at(8, days_ago=5), hours=4),
    ]

    series = analytics.daily_series(records, 3, TZ, NOW)

    assert [point.day for point in series] == [date(2026, 10, 17), date(2026, 10, 18), date(2026, 10, 19)]
    assert [point.value for point in series] == [1, 0, 2]


def test_daily_avg_hours_ignores_open_shifts():
    records = [
        make_record("Ada", today_at(8), hours=2),
        make_record("Grace", today_at(9), hours=4),
        make_record("Alan", today_at(10)),
        make_record("Ada", today_at(8, days_ago=1), hours=5),
    ]

    series = analytics.daily_avg_hours_series(records, 2, TZ, NOW)

    assert [point.value for point in series] == [pytest.approx(5), pytest.approx(3)]


def test_top_staff_by_hours():
    records = [
        make_record("Ada", today_at(8), hours=2),
        make_record("Ada", today_at(8, days_ago=1), hours=3),
        make_record("Grace", today_at(9), hours=4),
        make_record("Alan", today_at(9), hours=1),
        make_record("Alan", today_at(10)),
        # Before the trailing window
        make_record("Grace", today_at(8, days_ago=10), hours=12),
    ]

    ranking = analytics.top_staff_by_hours(records, 7, 2, NOW)

    assert [(staff.name, staff.hours) for staff in ranking] == [
        ("Ada", pytest.approx(5)),
        ("Grace", pytest.approx(4)),
    ]


def test_aggregations_are_pure():
    records = [make_record("Ada", today_at(8), hours=2), make_record("Grace", today_at(9))]

    first = analytics.summarize(records, TZ, NOW)
    second = analytics.summarize(records, TZ, NOW)

    assert first == second
    assert records[1].is_open


def test_filter_records_for_staff_table():
    records = [
        make_record("Ada Lovelace", today_at(8), hours=2),
        make_record("Grace Hopper", today_at(9)),
        make_record("Ada Lovelace", today_at(8, days_ago=1), hours=3),
    ]

    assert len(analytics.filter_records(records, TZ, search="ada")) == 2
    assert [r.worker_display_name for r in analytics.filter_records(records, TZ, status=RecordStatusFilter.ACTIVE)] == [
        "Grace Hopper"
    ]
    assert len(analytics.filter_records(records, TZ, status=RecordStatusFilter.INACTIVE)) == 2
    assert len(analytics.filter_records(records, TZ, on_date=date(2026, 10, 18))) == 1


def test_timezone_names_are_validated():
    from utils.timezone_helpers import validate_timezone

    assert validate_timezone("America/New_York")
    assert validate_timezone("UTC")
    assert not validate_timezone("Mars/Olympus_Mons")
