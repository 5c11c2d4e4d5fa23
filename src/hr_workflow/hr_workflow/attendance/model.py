from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import CheckInStatus, CheckOutStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one local calendar day.

    check_in_time/check_out_time are UTC instants. Each is written once and the
    statuses are fixed at the moment of the event.
    """

    attendance_id: int
    employee_id: int
    work_date: date
    check_in_time: Optional[datetime]
    check_in_status: Optional[CheckInStatus]
    check_out_time: Optional[datetime] = None
    check_out_status: Optional[CheckOutStatus] = None
    total_hours: Optional[Decimal] = None
    overtime_hours: Optional[Decimal] = None
    check_in_latitude: Optional[float] = None
    check_in_longitude: Optional[float] = None
    check_in_location_accuracy: Optional[float] = None
    check_in_location_id: Optional[int] = None

    @property
    def is_checked_in(self) -> bool:
        return self.check_in_time is not None

    @property
    def is_checked_out(self) -> bool:
        return self.check_out_time is not None

    def to_dict(self) -> dict:
        return {
            "attendance_id": self.attendance_id,
            "employee_id": self.employee_id,
            "date": self.work_date.isoformat(),
            "check_in_time": self.check_in_time.isoformat() if self.check_in_time else None,
            "check_in_status": self.check_in_status.value if self.check_in_status else None,
            "check_out_time": self.check_out_time.isoformat() if self.check_out_time else None,
            "check_out_status": self.check_out_status.value if self.check_out_status else None,
            "total_hours": float(self.total_hours) if self.total_hours is not None else None,
            "overtime_hours": float(self.overtime_hours) if self.overtime_hours is not None else None,
            "check_in_latitude": self.check_in_latitude,
            "check_in_longitude": self.check_in_longitude,
            "check_in_location_accuracy": self.check_in_location_accuracy,
            "check_in_location_id": self.check_in_location_id,
        }


@dataclass
class AutoCheckoutSummary:
    """Result of one auto check-out run."""

    work_date: date
    processed_count: int = 0
    employee_ids: list[int] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
