from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import DayType, LeaveStatus
from ..core.exceptions import ActiveRequestExistsError, NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, as_utc, db_cursor, fetchall, fetchone, to_db_datetime
from .model import LeaveRequest
from .repository import LeaveRequestRepository

_SELECT = """
    SELECT r.request_id, r.employee_id, r.leave_type_id,
           r.start_date, r.end_date, r.day_type, r.total_days, r.reason,
           r.status, r.created_at, r.approved_by, r.approved_at, r.rejection_reason,
           e.full_name AS employee_name, t.name AS leave_type_name
    FROM leave_requests r
    JOIN employees e ON e.employee_id = r.employee_id
    JOIN leave_types t ON t.leave_type_id = r.leave_type_id
"""


def _row_to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        leave_type_id=int(r["leave_type_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        day_type=DayType(r["day_type"]),
        total_days=as_decimal(r["total_days"]),
        reason=r.get("reason"),
        status=LeaveStatus(r["status"]),
        created_at=as_utc(r["created_at"]),
        approved_by=r.get("approved_by"),
        approved_at=as_utc(r.get("approved_at")),
        rejection_reason=r.get("rejection_reason"),
        employee_name=r.get("employee_name"),
        leave_type_name=r.get("leave_type_name"),
    )


class MySQLLeaveRequestRepository(LeaveRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_if_no_active(
        self,
        *,
        employee_id: int,
        leave_type_id: int,
        start_date: date,
        end_date: date,
        day_type: DayType,
        total_days: Decimal,
        reason: Optional[str],
        today: date,
    ) -> LeaveRequest:
        with db_cursor(self._conn_factory) as (_, cur):
            # Locking the employee row serializes submissions by the same employee.
            cur.execute(
                "SELECT employee_id FROM employees WHERE employee_id=%s FOR UPDATE",
                (int(employee_id),),
            )
            if not fetchone(cur):
                raise NotFoundError("Employee not found")

            cur.execute(
                """
                SELECT request_id, status
                FROM leave_requests
                WHERE employee_id=%s AND status IN (%s,%s) AND end_date >= %s
                ORDER BY created_at DESC
                LIMIT 1
                """,
                (int(employee_id), LeaveStatus.PENDING.value, LeaveStatus.APPROVED.value, today),
            )
            active = fetchone(cur)
            if active:
                raise ActiveRequestExistsError(int(active["request_id"]), active["status"])

            cur.execute(
                """
                INSERT INTO leave_requests(
                    employee_id, leave_type_id, start_date, end_date, day_type, total_days, reason, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    int(leave_type_id),
                    start_date,
                    end_date,
                    day_type.value,
                    total_days,
                    reason,
                    LeaveStatus.PENDING.value,
                ),
            )
            request_id = int(cur.lastrowid)

            cur.execute(_SELECT + " WHERE r.request_id=%s", (request_id,))
            return _row_to_request(fetchone(cur))

    def get(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE r.request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _row_to_request(r) if r else None

    def get_active_for_employee(self, employee_id: int, today: date) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + """
                WHERE r.employee_id=%s AND r.status IN (%s,%s) AND r.end_date >= %s
                ORDER BY r.created_at DESC
                LIMIT 1
                """,
                (int(employee_id), LeaveStatus.PENDING.value, LeaveStatus.APPROVED.value, today),
            )
            r = fetchone(cur)
            return _row_to_request(r) if r else None

    def decide(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        decided_by: int,
        decided_at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, approved_by=%s, approved_at=%s, rejection_reason=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(decided_by),
                    to_db_datetime(decided_at),
                    rejection_reason,
                    int(request_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def cancel(self, *, request_id: int, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s
                WHERE request_id=%s AND employee_id=%s AND status=%s
                """,
                (LeaveStatus.CANCELLED.value, int(request_id), int(employee_id), LeaveStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def list_pending(self, *, limit: int = 200) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + """
                WHERE r.status=%s
                ORDER BY r.created_at ASC
                LIMIT %s
                """,
                (LeaveStatus.PENDING.value, int(limit)),
            )
            return [_row_to_request(r) for r in fetchall(cur)]

    def count_pending(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS cnt FROM leave_requests WHERE status=%s",
                (LeaveStatus.PENDING.value,),
            )
            r = fetchone(cur)
            return int(r["cnt"]) if r else 0

    def list_for_employee(self, employee_id: int, *, limit: int = 50) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + """
                WHERE r.employee_id=%s
                ORDER BY r.created_at DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return [_row_to_request(r) for r in fetchall(cur)]
