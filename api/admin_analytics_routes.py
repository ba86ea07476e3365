import logging
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from core import config
from core.deps import require_manager_role
from core.errors import StoreFailure
from db.session import get_session
from models.clock_record import ClockRecord, ClockRecordRead
from models.user import SessionContext
from services import analytics
from services.analytics import DashboardSummary, RecordStatusFilter, SeriesPoint, StaffHours
from services.shift_service import format_duration
from utils.timezone_helpers import local_start_of_day

logger = logging.getLogger(__name__)

router = APIRouter()

# --- Pydantic Models for Responses ---


class SeriesResponse(BaseModel):
    days: int
    points: List[SeriesPoint]


class TopStaffResponse(BaseModel):
    window_days: int
    staff: List[StaffHours]


# --- Helpers ---


def fetch_records_since(session: Session, days: int, now: Optional[datetime] = None) -> List[ClockRecord]:
    """All clock records clocked in on or after local midnight ``days - 1`` days ago."""
    now = now or datetime.now(timezone.utc)
    start = local_start_of_day(now, config.APP_TIMEZONE) - timedelta(days=days - 1)
    try:
        return list(
            session.exec(
                select(ClockRecord)
                .where(ClockRecord.clock_in_timestamp >= start)
                .order_by(ClockRecord.clock_in_timestamp.desc())
            ).all()
        )
    except SQLAlchemyError as e:
        logger.error(f"Error fetching clock-in data: {e}")
        raise StoreFailure(detail="Could not retrieve clock records.")


# --- API Endpoints ---


@router.get("/summary", response_model=DashboardSummary)
def get_summary(
    session: Session = Depends(get_session),
    manager: SessionContext = Depends(require_manager_role),
):
    """Active staff, total hours logged today and average hours per shift."""
    records = fetch_records_since(session, days=1)
    return analytics.summarize(records, config.APP_TIMEZONE)


@router.get("/daily-clock-ins", response_model=SeriesResponse)
def get_daily_clock_ins(
    days: int = Query(default=config.DEFAULT_RANGE_DAYS, ge=1, le=config.MAX_RANGE_DAYS),
    session: Session = Depends(get_session),
    manager: SessionContext = Depends(require_manager_role),
):
    records = fetch_records_since(session, days=days)
    return SeriesResponse(
        days=days,
        points=analytics.daily_series(records, days, config.APP_TIMEZONE),
    )


@router.get("/daily-avg-hours", response_model=SeriesResponse)
def get_daily_avg_hours(
    days: int = Query(default=config.DEFAULT_RANGE_DAYS, ge=1, le=config.MAX_RANGE_DAYS),
    session: Session = Depends(get_session),
    manager: SessionContext = Depends(require_manager_role),
):
    records = fetch_records_since(session, days=days)
    return SeriesResponse(
        days=days,
        points=analytics.daily_avg_hours_series(records, days, config.APP_TIMEZONE),
    )


@router.get("/top-staff", response_model=TopStaffResponse)
def get_top_staff(
    window_days: int = Query(default=config.DEFAULT_RANGE_DAYS, ge=1, le=config.MAX_RANGE_DAYS),
    top_n: int = Query(default=config.TOP_STAFF_DEFAULT, ge=1, le=100),
    session: Session = Depends(get_session),
    manager: SessionContext = Depends(require_manager_role),
):
    # One extra day so the trailing window is fully covered by the fetch
    records = fetch_records_since(session, days=window_days + 1)
    return TopStaffResponse(
        window_days=window_days,
        staff=analytics.top_staff_by_hours(records, window_days, top_n),
    )


@router.get("/records", response_model=List[ClockRecordRead])
def get_staff_records(
    status: RecordStatusFilter = RecordStatusFilter.ALL,
    search: Optional[str] = None,
    on_date: Optional[date] = None,
    session: Session = Depends(get_session),
    manager: SessionContext = Depends(require_manager_role),
):
    """Today's clock records for the staff table, newest first."""
    records = fetch_records_since(session, days=1)
    filtered = analytics.filter_records(
        records,
        config.APP_TIMEZONE,
        status=status,
        search=search,
        on_date=on_date,
    )
    return [ClockRecordRead.from_record(record, duration=format_duration(record)) for record in filtered]
