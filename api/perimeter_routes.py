from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from core.deps import get_current_user
from db.session import get_session
from models.perimeter import PerimeterRead
from models.user import SessionContext
from services.shift_service import load_perimeters

router = APIRouter()


@router.get("", response_model=List[PerimeterRead])
def list_perimeters(
    session: Session = Depends(get_session),
    current_user: SessionContext = Depends(get_current_user),
):
    """
    Retrieve every configured clock-in perimeter (center and radius in km).
    """
    return load_perimeters(session)
