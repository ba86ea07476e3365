from typing import Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from core.deps import require_worker_role
from db.session import get_session
from models.clock_record import ClockOutRequest
from models.user import SessionContext
from services.shift_service import ShiftService

router = APIRouter()


# Clock Out Endpoint: POST /clock-out?id=<record id>
# Body carries only the clock-out fields; the timestamp is set server-side
@router.post("/clock-out")
def clock_out(
    id: Optional[str] = None,
    data: Optional[ClockOutRequest] = None,
    session: Session = Depends(get_session),
    user: SessionContext = Depends(require_worker_role),
):
    data = data or ClockOutRequest()
    ShiftService.clock_out(
        session=session,
        user=user,
        record_id=id,
        location=data.clock_out_location,
        note=data.clock_out_note,
    )
    return {"success": True}
