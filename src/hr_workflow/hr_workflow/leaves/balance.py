from __future__ import annotations

import logging
from decimal import Decimal
from typing import List

from ..core.constants import UNLIMITED_BALANCE_SENTINEL
from ..core.exceptions import NotFoundError
from .model import BalanceView, LeaveType
from .repository import LeaveBalanceRepository, LeaveTypeRepository

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")


class LeaveBalanceLedger:
    """Per (employee, leave type, year) allocated/used/remaining counters.

    Counters only move through ``apply_approval``; there is no reversal.
    """

    def __init__(self, balances: LeaveBalanceRepository, leave_types: LeaveTypeRepository):
        self._balances = balances
        self._leave_types = leave_types

    def _view(self, leave_type: LeaveType, employee_id: int, year: int) -> BalanceView:
        row = self._balances.get(employee_id, leave_type.leave_type_id, year)
        allocated = row.allocated if row else _ZERO
        used = row.used if row else _ZERO

        if leave_type.is_unlimited:
            remaining = Decimal(UNLIMITED_BALANCE_SENTINEL)
        else:
            remaining = allocated - used

        return BalanceView(
            leave_type_id=leave_type.leave_type_id,
            leave_type_name=leave_type.name,
            year=int(year),
            allocated=allocated,
            used=used,
            remaining=remaining,
            is_unlimited=leave_type.is_unlimited,
        )

    def get_balance(self, employee_id: int, leave_type_id: int, year: int) -> BalanceView:
        leave_type = self._leave_types.get(int(leave_type_id))
        if not leave_type:
            raise NotFoundError("Leave type not found")
        return self._view(leave_type, int(employee_id), int(year))

    def list_balances(self, employee_id: int, year: int) -> List[BalanceView]:
        return [self._view(t, int(employee_id), int(year)) for t in self._leave_types.list_active()]

    def apply_approval(self, employee_id: int, leave_type_id: int, year: int, days: Decimal) -> bool:
        """Consume ``days`` from the balance row; False if the row does not exist."""
        applied = self._balances.increment_used(
            employee_id=int(employee_id),
            leave_type_id=int(leave_type_id),
            year=int(year),
            days=Decimal(str(days)),
        )
        if not applied:
            logger.warning(
                "No leave balance row for employee=%s leave_type=%s year=%s; balance not updated",
                employee_id,
                leave_type_id,
                year,
            )
        return applied

    def allocate_year(self, employee_id: int, year: int) -> int:
        created = 0
        for leave_type in self._leave_types.list_active():
            if leave_type.is_unlimited:
                continue
            if self._balances.create(
                employee_id=int(employee_id),
                leave_type_id=leave_type.leave_type_id,
                year=int(year),
                allocated=Decimal(leave_type.max_days_per_year),
            ):
                created += 1

        logger.info("Allocated %s leave balance rows for employee=%s year=%s", created, employee_id, year)
        return created
