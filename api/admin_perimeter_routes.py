import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from core.deps import require_manager_role
from core.errors import StoreFailure
from db.session import get_session
from models.perimeter import Perimeter, PerimeterCreate, PerimeterRead
from models.user import SessionContext

logger = logging.getLogger(__name__)

# --- Router Definition ---
router = APIRouter()


# --- API Endpoints ---
# Perimeters are immutable once created: there is no update endpoint.


# Endpoint: Create a New Perimeter
@router.post("", response_model=PerimeterRead, status_code=status.HTTP_201_CREATED)
def create_perimeter(
    perimeter_in: PerimeterCreate,  # Expects request body matching PerimeterCreate model
    session: Annotated[Session, Depends(get_session)],  # DB session dependency
    manager: Annotated[SessionContext, Depends(require_manager_role)],  # Manager auth dependency
):
    # Store assigns the id
    db_perimeter = Perimeter(**perimeter_in.model_dump())

    try:
        session.add(db_perimeter)
        session.commit()
        session.refresh(db_perimeter)
    except SQLAlchemyError as e:
        # If any error occurs during DB operations, rollback changes
        session.rollback()
        logger.error(f"Error creating perimeter {perimeter_in.name!r}: {e}")
        raise StoreFailure(detail="Failed to add perimeter.")

    # Log manager action for auditing
    logger.info(f"Manager {manager.email or manager.uid} created perimeter {db_perimeter.id} ({db_perimeter.name})")

    return db_perimeter


# Endpoint: Delete a Perimeter by ID
@router.delete("/{perimeter_id}", status_code=status.HTTP_200_OK)
def delete_perimeter(
    perimeter_id: str,  # Perimeter ID from the URL path
    session: Annotated[Session, Depends(get_session)],  # DB session dependency
    manager: Annotated[SessionContext, Depends(require_manager_role)],  # Manager auth dependency
):
    # First, get the existing perimeter to ensure it exists
    db_perimeter = session.get(Perimeter, perimeter_id)
    if not db_perimeter:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Perimeter with ID '{perimeter_id}' not found.",
        )

    try:
        session.delete(db_perimeter)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Error deleting perimeter {perimeter_id}: {e}")
        raise StoreFailure(detail="Failed to delete perimeter.")

    logger.info(f"Manager {manager.email or manager.uid} deleted perimeter {perimeter_id}")

    return {
        "status": "success",
        "message": f"Perimeter '{perimeter_id}' deleted successfully.",
    }
