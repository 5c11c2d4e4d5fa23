"""Leave request lifecycle.

pending -> approved | rejected | cancelled, and nothing leaves those three.
The state change is committed first; the balance update and the notification
that follow are best-effort and come back as warnings on the Outcome.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Sequence

from ..common.datetime_utils import ensure_utc, format_date_range, format_short_date
from ..common.validators import optional_text, require_positive
from ..core.constants import LEAVE_REQUEST_ENTITY
from ..core.enums import DayType, LeaveStatus, NotificationKind, Role
from ..core.exceptions import (
    AuthorizationError,
    InvalidTransitionError,
    MissingReasonError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from ..core.results import Outcome, SideEffectWarning
from ..notifications.service import NotificationHook
from ..time_engine import TimeEngine
from .balance import LeaveBalanceLedger
from .model import LeaveRequest
from .repository import LeaveRequestRepository, LeaveTypeRepository

logger = logging.getLogger(__name__)


class LeaveRequestWorkflow:
    def __init__(
        self,
        requests: LeaveRequestRepository,
        leave_types: LeaveTypeRepository,
        ledger: LeaveBalanceLedger,
        time_engine: TimeEngine,
        notifier: NotificationHook,
    ):
        self._requests = requests
        self._leave_types = leave_types
        self._ledger = ledger
        self._time = time_engine
        self._notifier = notifier

    def _get(self, request_id: int) -> LeaveRequest:
        req = self._requests.get(int(request_id))
        if not req:
            raise NotFoundError("Leave request not found")
        return req

    def _notify(self, req: LeaveRequest, kind: NotificationKind, title: str, description: str) -> List[SideEffectWarning]:
        try:
            self._notifier.notify(
                req.employee_id,
                kind,
                title,
                description,
                LEAVE_REQUEST_ENTITY,
                req.request_id,
            )
        except Exception as e:
            # The transition is already committed; report instead of failing it.
            logger.exception("Failed to send %s notification for leave request %s", kind.value, req.request_id)
            return [SideEffectWarning(effect="notification", message=str(e) or type(e).__name__)]
        return []

    @staticmethod
    def _parse_days(value) -> Decimal:
        try:
            days = Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise ValidationError("Total days must be a number")
        if not days.is_finite():
            raise ValidationError("Total days must be a number")
        return require_positive(days, "Total days")

    def submit(
        self,
        employee_id: int,
        *,
        leave_type_id: int,
        start_date,
        end_date,
        day_type=DayType.FULL,
        total_days,
        reason: Optional[str] = None,
    ) -> Outcome[LeaveRequest]:
        start = TimeEngine.parse_local_date(start_date)
        end = TimeEngine.parse_local_date(end_date)
        if start > end:
            raise ValidationError("End date must be on or after the start date")

        try:
            day_type = DayType(day_type)
        except ValueError:
            raise ValidationError(f"Invalid day type: {day_type!r}")

        days = self._parse_days(total_days)

        leave_type = self._leave_types.get(int(leave_type_id))
        if not leave_type:
            raise NotFoundError("Leave type not found")
        if not leave_type.is_active:
            raise ValidationError(f"Leave type '{leave_type.name}' is not available")

        req = self._requests.create_if_no_active(
            employee_id=int(employee_id),
            leave_type_id=leave_type.leave_type_id,
            start_date=start,
            end_date=end,
            day_type=day_type,
            total_days=days,
            reason=optional_text(reason, "Reason"),
            today=self._time.today(),
        )
        logger.info(
            "Leave request %s submitted by employee=%s (%s to %s, %s days)",
            req.request_id,
            req.employee_id,
            start,
            end,
            days,
        )

        warnings = self._notify(
            req,
            NotificationKind.LEAVE_SENT,
            "Leave request sent",
            f"Your leave request for {format_date_range(start, end)} is awaiting review.",
        )
        return Outcome(req, tuple(warnings))

    def cancel(self, request_id: int, employee_id: int) -> LeaveRequest:
        req = self._get(request_id)
        if req.employee_id != int(employee_id):
            raise InvalidTransitionError("You can only cancel your own leave requests")
        if req.status != LeaveStatus.PENDING:
            raise InvalidTransitionError(
                f"Only pending requests can be cancelled (current status: {req.status.value})",
                current_status=req.status.value,
            )

        if not self._requests.cancel(request_id=req.request_id, employee_id=req.employee_id):
            raise InvalidTransitionError("This request may have already been processed")

        logger.info("Leave request %s cancelled by employee=%s", req.request_id, req.employee_id)
        return replace(req, status=LeaveStatus.CANCELLED)

    def approve(self, request_id: int, approver_id: int, *, now: Optional[datetime] = None) -> Outcome[LeaveRequest]:
        now = ensure_utc(now) if now else self._time.now_utc()
        req = self._get(request_id)
        if req.status != LeaveStatus.PENDING:
            raise InvalidTransitionError(
                "This request may have already been processed", current_status=req.status.value
            )

        if not self._requests.decide(
            request_id=req.request_id,
            status=LeaveStatus.APPROVED,
            decided_by=int(approver_id),
            decided_at=now,
        ):
            raise InvalidTransitionError("This request may have already been processed")

        approved = replace(req, status=LeaveStatus.APPROVED, approved_by=int(approver_id), approved_at=now)
        logger.info("Leave request %s approved by %s", req.request_id, approver_id)

        warnings: List[SideEffectWarning] = []
        year = self._time.current_year(now)
        try:
            if not self._ledger.apply_approval(req.employee_id, req.leave_type_id, year, req.total_days):
                warnings.append(
                    SideEffectWarning(
                        effect="leave_balance",
                        message=f"No {year} balance for leave type {req.leave_type_id}; balance not updated",
                    )
                )
        except PersistenceError as e:
            logger.error("Balance update failed for approved leave request %s: %s", req.request_id, e)
            warnings.append(SideEffectWarning(effect="leave_balance", message=str(e)))

        warnings += self._notify(
            approved,
            NotificationKind.LEAVE_APPROVED,
            "Leave request approved",
            f"Your leave on {format_date_range(req.start_date, req.end_date)} has been approved.",
        )
        return Outcome(approved, tuple(warnings))

    def reject(
        self,
        request_id: int,
        approver_id: int,
        reason: Optional[str],
        *,
        now: Optional[datetime] = None,
    ) -> Outcome[LeaveRequest]:
        reason = optional_text(reason, "Rejection reason")
        if not reason:
            raise MissingReasonError()

        now = ensure_utc(now) if now else self._time.now_utc()
        req = self._get(request_id)
        if req.status != LeaveStatus.PENDING:
            raise InvalidTransitionError(
                "This request may have already been processed", current_status=req.status.value
            )

        if not self._requests.decide(
            request_id=req.request_id,
            status=LeaveStatus.REJECTED,
            decided_by=int(approver_id),
            decided_at=now,
            rejection_reason=reason,
        ):
            raise InvalidTransitionError("This request may have already been processed")

        rejected = replace(
            req,
            status=LeaveStatus.REJECTED,
            approved_by=int(approver_id),
            approved_at=now,
            rejection_reason=reason,
        )
        logger.info("Leave request %s rejected by %s", req.request_id, approver_id)

        warnings = self._notify(
            rejected,
            NotificationKind.LEAVE_REJECTED,
            "Leave request rejected",
            f"Your leave from {format_short_date(req.start_date)} to {format_short_date(req.end_date)} "
            f"was rejected. Reason: {reason}",
        )
        return Outcome(rejected, tuple(warnings))

    def get_active_request(self, employee_id: int) -> Optional[LeaveRequest]:
        return self._requests.get_active_for_employee(int(employee_id), self._time.today())

    def get_request(self, request_id: int, viewer_id: int, viewer_role: Role) -> LeaveRequest:
        req = self._get(request_id)
        if Role(viewer_role) != Role.HR_ADMIN and req.employee_id != int(viewer_id):
            raise AuthorizationError("You do not have access to this leave request")
        return req

    def list_pending(self, *, limit: int = 200) -> Sequence[LeaveRequest]:
        return self._requests.list_pending(limit=int(limit))

    def count_pending(self) -> int:
        return self._requests.count_pending()

    def list_for_employee(self, employee_id: int, *, limit: int = 50) -> Sequence[LeaveRequest]:
        return self._requests.list_for_employee(int(employee_id), limit=int(limit))

