from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import DEFAULT_SHIFT_END_HOUR, DEFAULT_SHIFT_START_HOUR
from ..core.enums import Role
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class ShiftSchedule:
    """Local-time shift boundaries (whole hours) in the application timezone."""

    start_hour: int = DEFAULT_SHIFT_START_HOUR
    end_hour: int = DEFAULT_SHIFT_END_HOUR

    def __post_init__(self):
        if not (0 <= self.start_hour <= 23 and 0 <= self.end_hour <= 23):
            raise ValidationError("Shift hours must be between 0 and 23")
        if self.end_hour <= self.start_hour:
            raise ValidationError("Shift end hour must be after shift start hour")

    @property
    def length_hours(self) -> int:
        return self.end_hour - self.start_hour


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee as seen by the attendance/leave engine.

    Note: Read-only here; profile management lives outside this package.
    """

    employee_id: int
    full_name: str
    role: Role = Role.EMPLOYEE
    shift_start_hour: Optional[int] = None
    shift_end_hour: Optional[int] = None
    is_active: bool = True

    @property
    def shift(self) -> ShiftSchedule:
        # Only a missing value falls back to the default; hour 0 is a real shift start.
        start = DEFAULT_SHIFT_START_HOUR if self.shift_start_hour is None else int(self.shift_start_hour)
        end = DEFAULT_SHIFT_END_HOUR if self.shift_end_hour is None else int(self.shift_end_hour)
        return ShiftSchedule(start_hour=start, end_hour=end)

    @property
    def is_hr_admin(self) -> bool:
        return self.role == Role.HR_ADMIN
