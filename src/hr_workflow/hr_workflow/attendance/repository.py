from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import CheckInStatus, CheckOutStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

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
        """Insert the day's record, with the GPS position it was made from when known.

        Must raise AlreadyCheckedInError when a record for (employee_id, work_date)
        already exists, including when a concurrent insert won the race.
        """

        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        status: CheckOutStatus,
        total_hours: Decimal,
        overtime_hours: Decimal,
    ) -> Optional[AttendanceRecord]:
        """Set the check-out fields only while check_out_time is still NULL.

        Returns the updated record, or None if the precondition did not hold.
        """

        raise NotImplementedError

    def list_open_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        """Records of ``work_date`` with a check-in and no check-out."""

        raise NotImplementedError
