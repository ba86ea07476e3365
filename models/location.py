from typing import Optional

from pydantic import BaseModel, Field


class GeoPoint(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


# One reading from the device sensor; never persisted.
# A failed reading (permission denied, no fix) carries `error` instead of coordinates.
class LocationSample(BaseModel):
    lat: Optional[float] = Field(default=None, ge=-90, le=90)
    lng: Optional[float] = Field(default=None, ge=-180, le=180)
    error: Optional[str] = None

    @classmethod
    def failure(cls, reason: str) -> "LocationSample":
        return cls(error=reason)

    @property
    def available(self) -> bool:
        return self.error is None and self.lat is not None and self.lng is not None

    def point(self) -> Optional[GeoPoint]:
        if not self.available:
            return None
        return GeoPoint(lat=self.lat, lng=self.lng)
