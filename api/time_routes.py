from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlmodel import Session

from core.deps import require_worker_role
from db.session import get_session
from models.clock_record import ClockInRequest, ClockRecordRead
from models.location import LocationSample
from models.perimeter import PerimeterRead
from models.user import SessionContext
from services.shift_service import ShiftService, format_duration, load_perimeters
from utils.geofence import PerimeterStatus, classify

# --- Pydantic Models for Responses ---


class LocationCheckResponse(BaseModel):
    status: PerimeterStatus
    within_any: bool
    matched: Optional[PerimeterRead] = None
    distance_km: Optional[float] = None
    message: Optional[str] = None


class OpenSessionResponse(BaseModel):
    is_clocked_in: bool
    data: Optional[ClockRecordRead] = None


# Defines API Endpoints
router = APIRouter()


# Classify One Location Sample (Polled by the Worker View)
@router.get("/location-check", response_model=LocationCheckResponse)
def location_check(
    lat: Optional[float] = Query(default=None, ge=-90, le=90),
    lng: Optional[float] = Query(default=None, ge=-180, le=180),
    error: Optional[str] = None,
    session: Session = Depends(get_session),
    user: SessionContext = Depends(require_worker_role),
):
    check = classify(LocationSample(lat=lat, lng=lng, error=error), load_perimeters(session))

    matched = None
    if check.matched is not None:
        matched = PerimeterRead.model_validate(check.matched, from_attributes=True)

    return LocationCheckResponse(
        status=check.status,
        within_any=check.within_any,
        matched=matched,
        distance_km=check.distance_km,
        message=check.reason,
    )


# Clock In Endpoint
@router.post("/clock-in", response_model=ClockRecordRead)
def clock_in(
    data: ClockInRequest,
    session: Session = Depends(get_session),
    user: SessionContext = Depends(require_worker_role),
):
    sample = LocationSample(lat=data.latitude, lng=data.longitude, error=data.location_error)

    record = ShiftService.clock_in(session=session, user=user, sample=sample, note=data.note)
    return ClockRecordRead.from_record(record, duration=format_duration(record))


# Get Current Open Session
@router.get("/open-session", response_model=OpenSessionResponse)
def get_open_session(
    session: Session = Depends(get_session),
    user: SessionContext = Depends(require_worker_role),
):
    record = ShiftService.find_open_session(session, user.uid)
    if record is None:
        return OpenSessionResponse(is_clocked_in=False)
    return OpenSessionResponse(
        is_clocked_in=True,
        data=ClockRecordRead.from_record(record),
    )


# Get Recent Shifts, Newest First
@router.get("/history", response_model=List[ClockRecordRead])
def get_history(
    limit: Optional[int] = Query(default=None, ge=1, le=100),
    session: Session = Depends(get_session),
    user: SessionContext = Depends(require_worker_role),
):
    records = ShiftService.history(session, user.uid, limit=limit)
    return [ClockRecordRead.from_record(record, duration=format_duration(record)) for record in records]
