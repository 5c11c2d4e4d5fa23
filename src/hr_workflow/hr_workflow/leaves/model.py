from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import ACTIVE_LEAVE_STATUSES, DayType, LeaveStatus


@dataclass(frozen=True)
class LeaveType:
    leave_type_id: int
    name: str
    max_days_per_year: Optional[int] = None
    requires_attachment: bool = False
    is_active: bool = True

    @property
    def is_unlimited(self) -> bool:
        return self.max_days_per_year is None


@dataclass(frozen=True)
class LeaveBalance:
    """Stored counters for (employee, leave type, year).

    ``balance`` is kept equal to ``allocated - used`` by the repository.
    """

    employee_id: int
    leave_type_id: int
    year: int
    allocated: Decimal
    used: Decimal
    balance: Decimal


@dataclass(frozen=True)
class BalanceView:
    leave_type_id: int
    leave_type_name: str
    year: int
    allocated: Decimal
    used: Decimal
    remaining: Decimal
    is_unlimited: bool = False

    def to_dict(self) -> dict:
        return {
            "leave_type_id": self.leave_type_id,
            "leave_type_name": self.leave_type_name,
            "year": self.year,
            "allocated": float(self.allocated),
            "used": float(self.used),
            "remaining": float(self.remaining),
            "is_unlimited": self.is_unlimited,
        }


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    employee_id: int
    leave_type_id: int
    start_date: date
    end_date: date
    day_type: DayType
    total_days: Decimal
    reason: Optional[str]
    status: LeaveStatus
    created_at: datetime
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    # Filled in by list queries that join employees / leave types.
    employee_name: Optional[str] = None
    leave_type_name: Optional[str] = None

    def is_active_on(self, today: date) -> bool:
        return self.status in ACTIVE_LEAVE_STATUSES and self.end_date >= today

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "leave_type_id": self.leave_type_id,
            "leave_type_name": self.leave_type_name,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "day_type": self.day_type.value,
            "total_days": float(self.total_days),
            "reason": self.reason,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "approved_by": self.approved_by,
            "approved_at": self.approved_at.isoformat() if self.approved_at else None,
            "rejection_reason": self.rejection_reason,
        }
