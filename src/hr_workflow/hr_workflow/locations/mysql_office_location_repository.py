from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import OfficeLocation
from .repository import OfficeLocationRepository


def _row_to_location(r: dict) -> OfficeLocation:
    return OfficeLocation(
        location_id=int(r["location_id"]),
        name=r["name"],
        latitude=float(r["latitude"]),
        longitude=float(r["longitude"]),
        radius_meters=int(r["radius_meters"]),
        is_active=bool(r.get("is_active", True)),
        is_primary=bool(r.get("is_primary", False)),
    )


class MySQLOfficeLocationRepository(OfficeLocationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_primary(self) -> Optional[OfficeLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT location_id, name, latitude, longitude, radius_meters, is_active, is_primary
                FROM check_in_locations
                WHERE is_active=1 AND is_primary=1
                ORDER BY location_id ASC
                LIMIT 1
                """
            )
            r = fetchone(cur)
            return _row_to_location(r) if r else None
