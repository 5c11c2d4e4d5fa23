from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..core.exceptions import PersistenceError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone, is_duplicate_key
from .model import LeaveBalance
from .repository import LeaveBalanceRepository


def _row_to_balance(r: dict) -> LeaveBalance:
    return LeaveBalance(
        employee_id=int(r["employee_id"]),
        leave_type_id=int(r["leave_type_id"]),
        year=int(r["year"]),
        allocated=as_decimal(r["allocated"]),
        used=as_decimal(r["used"]),
        balance=as_decimal(r["balance"]),
    )


class MySQLLeaveBalanceRepository(LeaveBalanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, employee_id: int, leave_type_id: int, year: int) -> Optional[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, leave_type_id, year, allocated, used, balance
                FROM leave_balances
                WHERE employee_id=%s AND leave_type_id=%s AND year=%s
                """,
                (int(employee_id), int(leave_type_id), int(year)),
            )
            r = fetchone(cur)
            return _row_to_balance(r) if r else None

    def list_for_employee(self, employee_id: int, year: int) -> Sequence[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, leave_type_id, year, allocated, used, balance
                FROM leave_balances
                WHERE employee_id=%s AND year=%s
                ORDER BY leave_type_id
                """,
                (int(employee_id), int(year)),
            )
            return [_row_to_balance(r) for r in fetchall(cur)]

    def increment_used(self, *, employee_id: int, leave_type_id: int, year: int, days: Decimal) -> bool:
        # Single statement so concurrent approvals cannot lose an update.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_balances
                SET used = used + %s, balance = balance - %s
                WHERE employee_id=%s AND leave_type_id=%s AND year=%s
                """,
                (days, days, int(employee_id), int(leave_type_id), int(year)),
            )
            return cur.rowcount > 0

    def create(self, *, employee_id: int, leave_type_id: int, year: int, allocated: Decimal) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO leave_balances(employee_id, leave_type_id, year, allocated, used, balance)
                    VALUES(%s,%s,%s,%s,0,%s)
                    """,
                    (int(employee_id), int(leave_type_id), int(year), allocated, allocated),
                )
                return True
        except PersistenceError as e:
            if is_duplicate_key(e):
                return False
            raise
