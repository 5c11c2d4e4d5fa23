from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import DayType, LeaveStatus
from .model import LeaveBalance, LeaveRequest, LeaveType


class LeaveTypeRepository(Protocol):
    def get(self, leave_type_id: int) -> Optional[LeaveType]:
        raise NotImplementedError

    def list_active(self) -> Sequence[LeaveType]:
        raise NotImplementedError


class LeaveBalanceRepository(Protocol):
    def get(self, employee_id: int, leave_type_id: int, year: int) -> Optional[LeaveBalance]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int, year: int) -> Sequence[LeaveBalance]:
        raise NotImplementedError

    def increment_used(self, *, employee_id: int, leave_type_id: int, year: int, days: Decimal) -> bool:
        """Atomically add ``days`` to used and subtract them from balance.

        Returns False when no balance row exists.
        """

        raise NotImplementedError

    def create(self, *, employee_id: int, leave_type_id: int, year: int, allocated: Decimal) -> bool:
        """Insert a fresh row; returns False if one already exists."""

        raise NotImplementedError


class LeaveRequestRepository(Protocol):
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
        """Insert a pending request unless the employee already has an active one.

        Must raise ActiveRequestExistsError naming the conflicting request. The
        check and the insert have to be atomic with respect to other submissions
        by the same employee.
        """

        raise NotImplementedError

    def get(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def get_active_for_employee(self, employee_id: int, today: date) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        decided_by: int,
        decided_at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        """Move a pending request to approved/rejected; False if it is no longer pending."""

        raise NotImplementedError

    def cancel(self, *, request_id: int, employee_id: int) -> bool:
        raise NotImplementedError

    def list_pending(self, *, limit: int = 200) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def count_pending(self) -> int:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int, *, limit: int = 50) -> Sequence[LeaveRequest]:
        raise NotImplementedError
