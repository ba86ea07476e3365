import logging
from typing import Annotated

from fastapi import Depends, Request

from core.errors import AuthRequired, RoleForbidden
from core.firebase import verify_id_token
from models.user import SessionContext, UserRole
from services.profile_service import get_profile

logger = logging.getLogger(__name__)


def _bearer_token(request: Request) -> str:
    auth_header = request.headers.get("Authorization", "")

    # Make Sure Formatting Valid
    if not auth_header.startswith("Bearer "):
        raise AuthRequired(detail="Missing or invalid Authorization header")

    return auth_header.split(" ", 1)[1]


# Basic Check Matches Firebase Auth Token (no profile required yet)
def get_verified_claims(request: Request) -> dict:
    token = _bearer_token(request)

    try:
        decoded = verify_id_token(token)
    except Exception:
        raise AuthRequired(detail="Invalid or expired token")

    if not decoded.get("uid"):
        raise AuthRequired(detail="Token did not contain uid")
    return decoded


# Full Check: Token + Firestore Profile -> SessionContext
def get_current_user(
    claims: Annotated[dict, Depends(get_verified_claims)],
) -> SessionContext:
    uid = claims["uid"]

    profile = get_profile(uid)
    if profile is None:
        # Authenticated but no profile document: invalid session, client signs out
        logger.warning(f"No profile document for authenticated user {uid}")
        raise AuthRequired(detail="User profile not found. Please sign in again.")

    try:
        role = UserRole(profile.get("role", ""))
    except ValueError:
        logger.warning(f"User {uid} has unknown role {profile.get('role')!r}")
        raise AuthRequired(detail="User profile has no valid role. Please sign in again.")

    return SessionContext(
        uid=uid,
        email=profile.get("email") or claims.get("email"),
        display_name=profile.get("displayName") or claims.get("name"),
        role=role,
    )


def require_role(*allowed: UserRole):
    """Dependency factory gating a route to the given roles."""

    def checker(
        current_user: Annotated[SessionContext, Depends(get_current_user)],
    ) -> SessionContext:
        if current_user.role not in allowed:
            raise RoleForbidden()
        return current_user

    return checker


require_manager_role = require_role(UserRole.MANAGER)
require_worker_role = require_role(UserRole.WORKER)
