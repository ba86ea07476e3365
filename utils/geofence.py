# app/utils/geofence.py

from dataclasses import dataclass
from enum import Enum
from math import atan2, cos, radians, sin, sqrt
from typing import Iterable, Optional

from models.location import LocationSample
from models.perimeter import Perimeter

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    φ1, φ2 = radians(lat1), radians(lat2)
    Δφ = radians(lat2 - lat1)
    Δλ = radians(lng2 - lng1)

    a = sin(Δφ / 2) ** 2 + cos(φ1) * cos(φ2) * sin(Δλ / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def is_within_radius(
    lat: float,
    lng: float,
    center_lat: float,
    center_lng: float,
    radius_km: float,
) -> bool:

    return haversine_km(lat, lng, center_lat, center_lng) <= radius_km


class PerimeterStatus(str, Enum):
    WITHIN = "within"
    OUTSIDE = "outside"
    # No perimeters configured: a warning state, not a definite "outside"
    INDETERMINATE = "indeterminate"
    # Sensor failed or permission denied
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class PerimeterCheck:
    status: PerimeterStatus
    matched: Optional[Perimeter] = None
    distance_km: Optional[float] = None
    reason: Optional[str] = None

    @property
    def within_any(self) -> bool:
        return self.status == PerimeterStatus.WITHIN

    @property
    def allows_clock_in(self) -> bool:
        return self.within_any


def classify(sample: LocationSample, perimeters: Iterable[Perimeter]) -> PerimeterCheck:
    """Classify a location sample against a set of circular perimeters.

    The first perimeter (in iteration order) containing the point wins.
    When outside all of them, ``distance_km`` is the distance to the
    nearest center, for display only.
    """
    if not sample.available:
        return PerimeterCheck(
            status=PerimeterStatus.UNAVAILABLE,
            reason=sample.error or "Location not provided.",
        )

    perimeters = list(perimeters)
    if not perimeters:
        return PerimeterCheck(
            status=PerimeterStatus.INDETERMINATE,
            reason="No perimeters have been configured.",
        )

    nearest_km = None
    for perimeter in perimeters:
        distance = haversine_km(sample.lat, sample.lng, perimeter.center_lat, perimeter.center_lng)
        if distance <= perimeter.radius_km:
            return PerimeterCheck(
                status=PerimeterStatus.WITHIN,
                matched=perimeter,
                distance_km=distance,
            )
        if nearest_km is None or distance < nearest_km:
            nearest_km = distance

    return PerimeterCheck(status=PerimeterStatus.OUTSIDE, distance_km=nearest_km)
