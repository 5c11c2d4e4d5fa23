from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import ensure_utc
from ..core.constants import AUTO_CHECKOUT_GRACE_HOURS, DEFAULT_HISTORY_LIMIT
from ..core.enums import CheckOutStatus
from ..core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    DomainError,
    NoCheckInFoundError,
    NotFoundError,
    PersistenceError,
)
from ..employees.model import Employee
from ..employees.repository import EmployeeDirectory
from ..locations.geofence import Geofence, parse_accuracy, parse_coordinates
from ..time_engine import TimeEngine
from .model import AttendanceRecord, AutoCheckoutSummary
from .policy import AttendancePolicy
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeDirectory,
        time_engine: TimeEngine,
        *,
        policy: AttendancePolicy | None = None,
        geofence: Geofence | None = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._time = time_engine
        self._policy = policy or AttendancePolicy()
        self._geofence = geofence

    def _get_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def check_in(
        self,
        employee_id: int,
        *,
        instant: datetime | None = None,
        latitude=None,
        longitude=None,
        accuracy=None,
    ) -> AttendanceRecord:
        """Record today's check-in.

        With a geofence configured the coordinates are mandatory and must lie
        within the primary office radius; without one they are stored if given.
        """
        instant = ensure_utc(instant) if instant else self._time.now_utc()
        coordinates = parse_coordinates(latitude, longitude)
        location_accuracy = parse_accuracy(accuracy)
        location_id = None
        if self._geofence is not None:
            match = self._geofence.check(coordinates)
            location_id = match.location.location_id

        today = self._time.local_calendar_date(instant)
        employee = self._get_employee(employee_id)

        existing = self._attendance.get_for_employee_and_date(employee.employee_id, today)
        if existing and existing.is_checked_in:
            raise AlreadyCheckedInError()

        position = self._time.compare_to_shift_boundary(
            instant, employee.shift.start_hour, self._policy.tolerance_minutes
        )
        status = self._policy.check_in_status(position)

        record = self._attendance.create_checkin(
            employee_id=employee.employee_id,
            work_date=today,
            check_in_time=instant,
            status=status,
            latitude=coordinates[0] if coordinates else None,
            longitude=coordinates[1] if coordinates else None,
            accuracy=location_accuracy,
            location_id=location_id,
        )
        logger.info("Check-in employee=%s date=%s status=%s", employee.employee_id, today, status.value)
        return record

    def check_out(self, employee_id: int, *, instant: datetime | None = None) -> AttendanceRecord:
        instant = ensure_utc(instant) if instant else self._time.now_utc()
        today = self._time.local_calendar_date(instant)

        record = self._attendance.get_for_employee_and_date(int(employee_id), today)
        if not record or not record.is_checked_in:
            raise NoCheckInFoundError()
        if record.is_checked_out:
            raise AlreadyCheckedOutError()

        shift = self._get_employee(employee_id).shift
        position = self._time.compare_to_shift_boundary(instant, shift.end_hour, self._policy.tolerance_minutes)
        status = self._policy.check_out_status(position)
        hours = self._policy.worked_hours(record.check_in_time, instant, shift)

        updated = self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out_time=instant,
            status=status,
            total_hours=hours.total_hours,
            overtime_hours=hours.overtime_hours,
        )
        if updated is None:
            # A concurrent check-out (or the auto check-out job) got there first.
            raise AlreadyCheckedOutError()

        logger.info(
            "Check-out employee=%s date=%s status=%s total=%s overtime=%s",
            record.employee_id,
            today,
            status.value,
            hours.total_hours,
            hours.overtime_hours,
        )
        return updated

    def get_todays_attendance(self, employee_id: int) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_employee_and_date(int(employee_id), self._time.today())

    def get_history(self, employee_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.get_recent_for_employee(int(employee_id), int(limit))

    def auto_checkout_forgotten(self, *, now: datetime | None = None) -> AutoCheckoutSummary:
        """Close today's open records once shift end + grace has passed.

        The check-out instant is the local shift end + grace, not the time the job
        runs, and the status is always overtime.
        """
        now = ensure_utc(now) if now else self._time.now_utc()
        today = self._time.local_calendar_date(now)
        summary = AutoCheckoutSummary(work_date=today)

        for record in self._attendance.list_open_for_date(today):
            try:
                employee = self._employees.get_by_id(record.employee_id)
                if not employee or not employee.is_active:
                    continue

                shift = employee.shift
                checkout_time = self._time.local_instant(today, shift.end_hour) + timedelta(
                    hours=AUTO_CHECKOUT_GRACE_HOURS
                )
                if now < checkout_time:
                    continue

                hours = self._policy.worked_hours(record.check_in_time, checkout_time, shift)
                updated = self._attendance.update_checkout(
                    attendance_id=record.attendance_id,
                    check_out_time=checkout_time,
                    status=CheckOutStatus.OVERTIME,
                    total_hours=hours.total_hours,
                    overtime_hours=hours.overtime_hours,
                )
                if updated is None:
                    continue

                summary.processed_count += 1
                summary.employee_ids.append(record.employee_id)
                logger.info(
                    "Auto check-out employee=%s date=%s total=%s overtime=%s",
                    record.employee_id,
                    today,
                    hours.total_hours,
                    hours.overtime_hours,
                )
            except (DomainError, PersistenceError) as e:
                logger.error("Auto check-out failed employee=%s date=%s: %s", record.employee_id, today, e)
                summary.errors.append(f"employee_id={record.employee_id}, date={today}, error={e}")

        logger.info("Auto check-out completed: processed=%s errors=%s", summary.processed_count, len(summary.errors))
        return summary
