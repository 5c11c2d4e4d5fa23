from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization checks."""

    EMPLOYEE = "employee"
    HR_ADMIN = "hr_admin"


class ShiftPosition(str, Enum):
    """Where an instant falls relative to a shift boundary."""

    BEFORE = "BEFORE"
    WITHIN_TOLERANCE = "WITHIN_TOLERANCE"
    AFTER = "AFTER"


class CheckInStatus(str, Enum):
    ON_TIME = "ontime"
    LATE = "late"


class CheckOutStatus(str, Enum):
    LEFT_EARLY = "leftearly"
    ON_TIME = "ontime"
    OVERTIME = "overtime"


class DayType(str, Enum):
    FULL = "full"
    HALF = "half"


class LeaveStatus(str, Enum):
    """Leave request lifecycle. Everything except PENDING is terminal."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not LeaveStatus.PENDING


ACTIVE_LEAVE_STATUSES = frozenset({LeaveStatus.PENDING, LeaveStatus.APPROVED})


class NotificationKind(str, Enum):
    LEAVE_APPROVED = "leave_approved"
    LEAVE_REJECTED = "leave_rejected"
    LEAVE_SENT = "leave_sent"
    PAYSLIP_READY = "payslip_ready"
    ANNOUNCEMENT = "announcement"
    ATTENDANCE_REMINDER = "attendance_reminder"
