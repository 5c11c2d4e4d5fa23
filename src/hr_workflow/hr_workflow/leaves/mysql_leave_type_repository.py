from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveType
from .repository import LeaveTypeRepository


def _row_to_type(r: dict) -> LeaveType:
    max_days = r.get("max_days_per_year")
    return LeaveType(
        leave_type_id=int(r["leave_type_id"]),
        name=r["name"],
        max_days_per_year=int(max_days) if max_days is not None else None,
        requires_attachment=bool(r.get("requires_attachment")),
        is_active=bool(r.get("is_active", True)),
    )


class MySQLLeaveTypeRepository(LeaveTypeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, leave_type_id: int) -> Optional[LeaveType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT leave_type_id, name, max_days_per_year, requires_attachment, is_active
                FROM leave_types
                WHERE leave_type_id=%s
                """,
                (int(leave_type_id),),
            )
            r = fetchone(cur)
            return _row_to_type(r) if r else None

    def list_active(self) -> Sequence[LeaveType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT leave_type_id, name, max_days_per_year, requires_attachment, is_active
                FROM leave_types
                WHERE is_active=1
                ORDER BY name
                """
            )
            return [_row_to_type(r) for r in fetchall(cur)]
