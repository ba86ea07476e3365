import logging
from datetime import datetime, timezone
from typing import Optional

from core.errors import ProfileExists, StoreFailure
from core.firebase import get_firestore_client
from models.user import UserRole

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"


def get_profile(uid: str) -> Optional[dict]:
    """Fetch ``users/{uid}`` from Firestore; None when the document is missing."""
    try:
        snapshot = get_firestore_client().collection(USERS_COLLECTION).document(uid).get()
    except Exception as e:
        logger.error(f"Firestore error fetching profile for {uid}: {e}")
        raise StoreFailure(detail="Could not fetch user profile.", status_code=503)

    if not snapshot.exists:
        return None
    return snapshot.to_dict()


def create_profile(
    uid: str,
    email: Optional[str],
    role: UserRole,
    display_name: Optional[str],
    photo_url: Optional[str] = None,
) -> dict:
    doc_ref = get_firestore_client().collection(USERS_COLLECTION).document(uid)

    if get_profile(uid) is not None:
        raise ProfileExists()

    profile = {
        "email": email,
        "role": role.value,
        "displayName": display_name,
        "photoURL": photo_url,
        "createdAt": datetime.now(timezone.utc).isoformat(),
    }
    try:
        doc_ref.set(profile)
    except Exception as e:
        logger.error(f"Firestore error creating profile for {uid}: {e}")
        raise StoreFailure(detail="Could not create user profile.", status_code=503)

    logger.info(f"Created {role.value} profile for {uid}")
    return profile
