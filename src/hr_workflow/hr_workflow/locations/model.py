from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import DEFAULT_CHECK_IN_RADIUS_METERS


@dataclass(frozen=True)
class OfficeLocation:
    """A place employees may check in from, within ``radius_meters`` of its coordinates."""

    location_id: int
    name: str
    latitude: float
    longitude: float
    radius_meters: int = DEFAULT_CHECK_IN_RADIUS_METERS
    is_active: bool = True
    is_primary: bool = False


@dataclass(frozen=True)
class GeofenceMatch:
    location: OfficeLocation
    distance_meters: float
