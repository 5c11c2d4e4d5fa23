"""GPS check-in validation against the primary office location."""

from __future__ import annotations

import logging
import math
from typing import Optional, Tuple

from ..core.exceptions import LocationRequiredError, OutsideCheckInRadiusError, ValidationError
from .model import GeofenceMatch
from .repository import OfficeLocationRepository

logger = logging.getLogger(__name__)

EARTH_RADIUS_METERS = 6371000
MAX_LOCATION_ACCURACY_METERS = 9999.99


def distance_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points (haversine)."""
    if lat1 == lat2 and lon1 == lon2:
        return 0.0

    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_METERS * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def _as_number(value, field_name: str) -> float:
    # JSON true/false would otherwise pass as 1/0.
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not math.isfinite(number):
        raise ValidationError(f"{field_name} must be a number")
    return number


def parse_coordinates(latitude, longitude) -> Optional[Tuple[float, float]]:
    """Validate a (latitude, longitude) pair; None when neither is given."""
    if latitude is None and longitude is None:
        return None
    if latitude is None or longitude is None:
        raise ValidationError("Both latitude and longitude are required")

    lat = _as_number(latitude, "Latitude")
    lon = _as_number(longitude, "Longitude")
    if not -90 <= lat <= 90 or not -180 <= lon <= 180:
        raise ValidationError("Invalid location coordinates")
    return lat, lon


def parse_accuracy(value) -> Optional[float]:
    if value is None:
        return None
    accuracy = _as_number(value, "Location accuracy")
    if accuracy < 0 or accuracy > MAX_LOCATION_ACCURACY_METERS:
        raise ValidationError("Location accuracy is out of range")
    return round(accuracy, 2)


class Geofence:
    def __init__(self, locations: OfficeLocationRepository):
        self._locations = locations

    def check(self, coordinates: Optional[Tuple[float, float]]) -> GeofenceMatch:
        """Raise unless ``coordinates`` fall inside the primary office radius."""
        if coordinates is None:
            raise LocationRequiredError()

        office = self._locations.get_primary()
        if office is None:
            logger.error("Check-in geofence is enabled but no primary office location is configured")
            raise ValidationError("No check-in location is configured")

        lat, lon = coordinates
        distance = distance_meters(lat, lon, office.latitude, office.longitude)
        if distance > office.radius_meters:
            raise OutsideCheckInRadiusError(distance, office.radius_meters)
        return GeofenceMatch(location=office, distance_meters=distance)
