from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import CheckInStatus, CheckOutStatus
from ..core.exceptions import AlreadyCheckedInError, PersistenceError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    as_decimal,
    as_utc,
    db_cursor,
    fetchall,
    fetchone,
    is_duplicate_key,
    to_db_datetime,
)
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, employee_id, work_date,
    check_in_time, check_in_status,
    check_out_time, check_out_status,
    total_hours, overtime_hours,
    check_in_latitude, check_in_longitude, check_in_location_accuracy, check_in_location_id
"""


def _as_float(value) -> Optional[float]:
    return float(value) if value is not None else None


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        check_in_time=as_utc(r.get("check_in_time")),
        check_in_status=CheckInStatus(r["check_in_status"]) if r.get("check_in_status") else None,
        check_out_time=as_utc(r.get("check_out_time")),
        check_out_status=CheckOutStatus(r["check_out_status"]) if r.get("check_out_status") else None,
        total_hours=as_decimal(r.get("total_hours")),
        overtime_hours=as_decimal(r.get("overtime_hours")),
        check_in_latitude=_as_float(r.get("check_in_latitude")),
        check_in_longitude=_as_float(r.get("check_in_longitude")),
        check_in_location_accuracy=_as_float(r.get("check_in_location_accuracy")),
        check_in_location_id=int(r["check_in_location_id"]) if r.get("check_in_location_id") is not None else None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s
                ORDER BY work_date DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def create_checkin(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in_time: datetime,
        status: CheckInStatus,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        accuracy: Optional[float] = None,
        location_id: Optional[int] = None,
    ) -> AttendanceRecord:
        # UNIQUE(employee_id, work_date) settles concurrent check-ins.
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        employee_id, work_date, check_in_time, check_in_status,
                        check_in_latitude, check_in_longitude, check_in_location_accuracy, check_in_location_id
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(employee_id),
                        work_date,
                        to_db_datetime(check_in_time),
                        status.value,
                        latitude,
                        longitude,
                        accuracy,
                        location_id,
                    ),
                )
                attendance_id = int(cur.lastrowid)
        except PersistenceError as e:
            if is_duplicate_key(e):
                raise AlreadyCheckedInError() from e
            raise

        return AttendanceRecord(
            attendance_id=attendance_id,
            employee_id=int(employee_id),
            work_date=work_date,
            check_in_time=check_in_time,
            check_in_status=status,
            check_in_latitude=latitude,
            check_in_longitude=longitude,
            check_in_location_accuracy=accuracy,
            check_in_location_id=location_id,
        )

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        status: CheckOutStatus,
        total_hours: Decimal,
        overtime_hours: Decimal,
    ) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, check_out_status=%s, total_hours=%s, overtime_hours=%s
                WHERE attendance_id=%s AND check_in_time IS NOT NULL AND check_out_time IS NULL
                """,
                (
                    to_db_datetime(check_out_time),
                    status.value,
                    total_hours,
                    overtime_hours,
                    int(attendance_id),
                ),
            )
            if cur.rowcount == 0:
                return None

            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE attendance_id=%s
                """,
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def list_open_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE work_date=%s AND check_in_time IS NOT NULL AND check_out_time IS NULL
                ORDER BY check_in_time ASC
                """,
                (work_date,),
            )
            return [_row_to_record(r) for r in fetchall(cur)]
