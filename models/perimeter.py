from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field as PydanticField
from sqlmodel import Field, SQLModel

# Defines the Structure of Data for Comparing a Worker Clock In to an Allowed Location


# Named Circular Geofence (no update path: delete and recreate instead)
class Perimeter(SQLModel, table=True):
    __tablename__ = "perimeters"

    id: str = Field(
        default_factory=lambda: uuid4().hex,
        primary_key=True,
        description="Store-assigned perimeter identifier",
    )
    name: str = Field(..., description="Human-friendly perimeter name")
    center_lat: float = Field(..., description="Latitude of perimeter center")
    center_lng: float = Field(..., description="Longitude of perimeter center")
    radius_km: float = Field(..., description="Allowed clock-in radius in kilometers")


class PerimeterCreate(BaseModel):
    name: str = PydanticField(..., min_length=1, max_length=120)
    center_lat: float = PydanticField(..., ge=-90, le=90)
    center_lng: float = PydanticField(..., ge=-180, le=180)
    radius_km: float = PydanticField(..., gt=0)  # Ensures radius is positive


class PerimeterRead(BaseModel):
    id: str
    name: Optional[str]
    center_lat: float
    center_lng: float
    radius_km: float
