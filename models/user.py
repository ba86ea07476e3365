from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class UserRole(str, Enum):
    MANAGER = "manager"
    WORKER = "worker"


# Identity resolved for one request; passed explicitly into every operation
class SessionContext(BaseModel):
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    role: UserRole

    @property
    def label(self) -> str:
        """Name shown on shift records: display name, else email, else uid."""
        return self.display_name or self.email or self.uid


class ProfileCreate(BaseModel):
    role: UserRole
    display_name: Optional[str] = Field(default=None, max_length=120)
