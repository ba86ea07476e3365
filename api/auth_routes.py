import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from core.deps import get_current_user, get_verified_claims
from core.errors import StoreFailure
from core.firebase import revoke_refresh_tokens
from models.user import ProfileCreate, SessionContext, UserRole
from services.profile_service import create_profile

logger = logging.getLogger(__name__)

router = APIRouter()


# Sign-Up: Attach a Role to a Freshly Authenticated Account
@router.post("/profile", response_model=SessionContext, status_code=status.HTTP_201_CREATED)
def create_user_profile(
    payload: ProfileCreate,
    claims: Annotated[dict, Depends(get_verified_claims)],
):
    display_name = payload.display_name or claims.get("name")
    create_profile(
        uid=claims["uid"],
        email=claims.get("email"),
        role=payload.role,
        display_name=display_name,
        photo_url=claims.get("picture"),
    )
    return SessionContext(
        uid=claims["uid"],
        email=claims.get("email"),
        display_name=display_name,
        role=UserRole(payload.role),
    )


# Who Am I
@router.get("/me", response_model=SessionContext)
def read_current_user(
    current_user: Annotated[SessionContext, Depends(get_current_user)],
):
    return current_user


# Sign-Out: Revoke Refresh Tokens So the Session Cannot Be Renewed
@router.post("/sign-out")
def sign_out(
    current_user: Annotated[SessionContext, Depends(get_current_user)],
):
    try:
        revoke_refresh_tokens(current_user.uid)
    except Exception as e:
        logger.error(f"Error revoking tokens for {current_user.uid}: {e}")
        raise StoreFailure(detail="Could not sign out. Please try again.", status_code=503)

    logger.info(f"{current_user.label} signed out")
    return {"status": "success"}
