from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping

from ..common.datetime_utils import ensure_utc
from ..core.constants import DEFAULT_TOLERANCE_MINUTES
from ..core.enums import CheckInStatus, CheckOutStatus, ShiftPosition
from ..employees.model import ShiftSchedule

CHECK_IN_TABLE: Mapping[ShiftPosition, CheckInStatus] = {
    ShiftPosition.BEFORE: CheckInStatus.ON_TIME,
    ShiftPosition.WITHIN_TOLERANCE: CheckInStatus.ON_TIME,
    ShiftPosition.AFTER: CheckInStatus.LATE,
}

CHECK_OUT_TABLE: Mapping[ShiftPosition, CheckOutStatus] = {
    ShiftPosition.BEFORE: CheckOutStatus.LEFT_EARLY,
    ShiftPosition.WITHIN_TOLERANCE: CheckOutStatus.ON_TIME,
    ShiftPosition.AFTER: CheckOutStatus.OVERTIME,
}

_HOURS_QUANTUM = Decimal("0.01")


@dataclass(frozen=True)
class WorkedHours:
    total_hours: Decimal
    overtime_hours: Decimal


@dataclass(frozen=True)
class AttendancePolicy:
    """Maps boundary comparisons to status labels and computes durations."""

    tolerance_minutes: int = DEFAULT_TOLERANCE_MINUTES

    def check_in_status(self, position: ShiftPosition) -> CheckInStatus:
        return CHECK_IN_TABLE[position]

    def check_out_status(self, position: ShiftPosition) -> CheckOutStatus:
        return CHECK_OUT_TABLE[position]

    @staticmethod
    def worked_hours(check_in: datetime, check_out: datetime, shift: ShiftSchedule) -> WorkedHours:
        # Overtime is total duration minus nominal shift length. It is not derived
        # from the check-out status, so the two can disagree inside the tolerance window.
        seconds = Decimal(str((ensure_utc(check_out) - ensure_utc(check_in)).total_seconds()))
        total = seconds / Decimal(3600)
        overtime = max(Decimal(0), total - Decimal(shift.length_hours))
        return WorkedHours(
            total_hours=total.quantize(_HOURS_QUANTUM, rounding=ROUND_HALF_UP),
            overtime_hours=overtime.quantize(_HOURS_QUANTUM, rounding=ROUND_HALF_UP),
        )
