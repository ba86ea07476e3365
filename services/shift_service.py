import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from core import config
from core.errors import (
    LocationUnavailable,
    MissingRecordId,
    PerimeterViolation,
    RecordNotFound,
    RoleForbidden,
    SessionAlreadyClosed,
    SessionAlreadyOpen,
    StoreFailure,
)
from models.clock_record import ClockRecord
from models.location import GeoPoint, LocationSample
from models.perimeter import Perimeter
from models.user import SessionContext
from utils.datetime_helpers import ensure_utc
from utils.geofence import PerimeterStatus, classify
from utils.timezone_helpers import local_start_of_day

logger = logging.getLogger(__name__)


def load_perimeters(session: Session) -> List[Perimeter]:
    try:
        return list(session.exec(select(Perimeter).order_by(Perimeter.name)).all())
    except SQLAlchemyError as e:
        logger.error(f"Error loading perimeters: {e}")
        raise StoreFailure(detail="Failed to load location perimeters.")


def duration(record: ClockRecord) -> Optional[timedelta]:
    """Shift length for a closed record, None while the session is open."""
    if record.is_open:
        return None
    return record.clock_out_at - record.clock_in_at


def duration_hours(record: ClockRecord) -> Optional[float]:
    delta = duration(record)
    if delta is None:
        return None
    return delta.total_seconds() / 3600.0


def format_duration(record: ClockRecord) -> str:
    """Format as "{h}h {m}m" (seconds truncated), or "-" for an open session."""
    delta = duration(record)
    if delta is None:
        return "-"
    total_seconds = int(delta.total_seconds())
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    return f"{hours}h {minutes}m"


class ShiftService:

    @staticmethod
    def find_open_session(
        session: Session,
        worker_id: str,
        now: Optional[datetime] = None,
        tz: Optional[str] = None,
        fetch_limit: Optional[int] = None,
    ) -> Optional[ClockRecord]:
        """Return the worker's open session, if one started since local midnight.

        Only the first ``fetch_limit`` same-day records are fetched and the
        open filter is applied to that window, so an open record beyond the
        bound (or opened before midnight) is not found.
        """
        now = ensure_utc(now or datetime.now(timezone.utc))
        start_of_day = local_start_of_day(now, tz or config.APP_TIMEZONE)
        limit = fetch_limit or config.OPEN_SESSION_FETCH_LIMIT

        try:
            todays_records = session.exec(
                select(ClockRecord)
                .where(ClockRecord.worker_id == worker_id)
                .where(ClockRecord.clock_in_timestamp >= start_of_day)
                .order_by(ClockRecord.clock_in_timestamp)
                .limit(limit)
            ).all()
        except SQLAlchemyError as e:
            logger.error(f"Error checking clock-in status for {worker_id}: {e}")
            raise StoreFailure(detail="Error checking clock-in status. Please refresh the page.")

        return next((record for record in todays_records if record.is_open), None)

    @staticmethod
    def history(
        session: Session,
        worker_id: str,
        limit: Optional[int] = None,
    ) -> List[ClockRecord]:
        limit = limit or config.HISTORY_DEFAULT_LIMIT
        limit = max(1, min(limit, config.HISTORY_MAX_LIMIT))

        try:
            return list(
                session.exec(
                    select(ClockRecord)
                    .where(ClockRecord.worker_id == worker_id)
                    .order_by(ClockRecord.clock_in_timestamp.desc())
                    .limit(limit)
                ).all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Error fetching history for {worker_id}: {e}")
            raise StoreFailure(detail="Failed to load clock history.")

    @staticmethod
    def clock_in(
        session: Session,
        user: SessionContext,
        sample: LocationSample,
        note: Optional[str] = None,
        perimeters: Optional[Sequence[Perimeter]] = None,
        now: Optional[datetime] = None,
    ) -> ClockRecord:
        now = ensure_utc(now or datetime.now(timezone.utc))

        if perimeters is None:
            perimeters = load_perimeters(session)

        # 1) Location must be known and inside one of the perimeters
        check = classify(sample, perimeters)
        if check.status == PerimeterStatus.UNAVAILABLE:
            logger.warning(f"Clock-in rejected for {user.uid}: location unavailable ({check.reason})")
            raise LocationUnavailable()
        if check.status == PerimeterStatus.INDETERMINATE:
            logger.warning(f"Clock-in rejected for {user.uid}: no perimeters configured")
            raise PerimeterViolation(
                detail="No clock-in perimeters are configured. Please contact your manager."
            )
        if not check.allows_clock_in:
            logger.warning(
                f"Clock-in rejected for {user.uid}: outside all perimeters "
                f"({sample.lat},{sample.lng}), nearest {check.distance_km:.2f} km"
            )
            raise PerimeterViolation()

        # 2) Best-effort check for an existing open session
        if ShiftService.find_open_session(session, user.uid, now=now) is not None:
            raise SessionAlreadyOpen()

        record = ClockRecord(
            worker_id=user.uid,
            worker_display_name=user.label,
            clock_in_timestamp=now,
            clock_in_lat=sample.lat,
            clock_in_lng=sample.lng,
            clock_in_note=note or None,
        )

        # 3) The partial unique index rejects a second open session atomically
        session.add(record)
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            logger.warning(f"Duplicate clock-in blocked for {user.uid}")
            raise SessionAlreadyOpen()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Error clocking in {user.uid}: {e}")
            raise StoreFailure(detail="Failed to clock in. Please try again.")

        session.refresh(record)
        logger.info(
            f"{user.label} clocked in at perimeter '{check.matched.name}' (record {record.id})"
        )
        return record

    @staticmethod
    def clock_out(
        session: Session,
        user: SessionContext,
        record_id: Optional[str],
        location: Optional[GeoPoint] = None,
        note: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ClockRecord:
        if not record_id:
            raise MissingRecordId()

        try:
            record = session.get(ClockRecord, record_id)
        except SQLAlchemyError as e:
            logger.error(f"Error loading clock record {record_id}: {e}")
            raise StoreFailure()

        if record is None:
            raise RecordNotFound(record_id)
        if record.worker_id != user.uid:
            raise RoleForbidden(detail="You can only clock out of your own shift.")
        if not record.is_open:
            raise SessionAlreadyClosed()

        now = ensure_utc(now or datetime.now(timezone.utc))

        # Partial update: only the clock-out fields that were supplied change
        record.clock_out_timestamp = max(now, record.clock_in_at)
        if location is not None:
            record.clock_out_lat = location.lat
            record.clock_out_lng = location.lng
        if note is not None:
            record.clock_out_note = note

        session.add(record)
        try:
            session.commit()
        except SQLAlchemyError as e:
            # Rolled back: the session stays open
            session.rollback()
            logger.error(f"Error updating clock record {record_id}: {e}")
            raise StoreFailure()

        session.refresh(record)
        logger.info(f"{user.label} clocked out (record {record.id}, {format_duration(record)})")
        return record
