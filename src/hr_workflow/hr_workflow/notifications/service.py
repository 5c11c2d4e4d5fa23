from __future__ import annotations

import calendar
import logging
from typing import Iterable, Optional, Protocol, Sequence

from ..common.datetime_utils import utc_now
from ..common.validators import require_non_empty
from ..core.constants import ANNOUNCEMENT_ENTITY, PAYSLIP_ENTITY
from ..core.enums import NotificationKind
from ..core.exceptions import NotFoundError, PersistenceError, ValidationError
from ..core.results import Outcome, SideEffectWarning
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationHook(Protocol):
    """What the leave workflow needs to tell an employee something happened."""

    def notify(
        self,
        user_id: int,
        kind: NotificationKind,
        title: str,
        description: str,
        related_entity_type: Optional[str] = None,
        related_entity_id: Optional[int] = None,
    ) -> Notification:
        raise NotImplementedError


class NotificationService(NotificationHook):
    def __init__(self, notifications: NotificationRepository, *, clock=utc_now):
        self._notifications = notifications
        self._clock = clock

    def notify(
        self,
        user_id: int,
        kind: NotificationKind,
        title: str,
        description: str,
        related_entity_type: Optional[str] = None,
        related_entity_id: Optional[int] = None,
    ) -> Notification:
        notification = self._notifications.create(
            user_id=int(user_id),
            kind=NotificationKind(kind),
            title=require_non_empty(title, "Title"),
            description=(description or "").strip(),
            related_entity_type=related_entity_type,
            related_entity_id=int(related_entity_id) if related_entity_id is not None else None,
        )
        logger.debug("Notification %s (%s) created for user=%s", notification.notification_id, kind, user_id)
        return notification

    def _notify_each(
        self,
        user_ids: Iterable[int],
        kind: NotificationKind,
        title: str,
        description: str,
        related_entity_type: str,
        related_entity_id: int,
    ) -> Outcome[int]:
        sent = 0
        warnings = []
        for user_id in user_ids:
            try:
                self.notify(user_id, kind, title, description, related_entity_type, related_entity_id)
                sent += 1
            except (PersistenceError, ValidationError) as e:
                logger.warning("Could not notify user=%s about %s %s: %s", user_id, related_entity_type, related_entity_id, e)
                warnings.append(SideEffectWarning(effect=f"notify:{user_id}", message=str(e)))
        return Outcome(sent, tuple(warnings))

    def notify_payslip_ready(self, user_id: int, payslip_id: int, month: int, year: int) -> Outcome[int]:
        if not 1 <= int(month) <= 12:
            raise ValidationError("Month must be between 1 and 12")
        month_name = calendar.month_name[int(month)]
        return self._notify_each(
            [user_id],
            NotificationKind.PAYSLIP_READY,
            "Your payslip is ready",
            f"Your {month_name} {int(year)} payslip is now available to view.",
            PAYSLIP_ENTITY,
            payslip_id,
        )

    def notify_announcement(self, user_ids: Sequence[int], announcement_id: int, title: str) -> Outcome[int]:
        outcome = self._notify_each(
            user_ids,
            NotificationKind.ANNOUNCEMENT,
            "New announcement",
            title,
            ANNOUNCEMENT_ENTITY,
            announcement_id,
        )
        logger.info("Announcement %s sent to %s of %s users", announcement_id, outcome.value, len(user_ids))
        return outcome

    def list_for_user(self, user_id: int, *, limit: int = 50, unread_only: bool = False) -> Sequence[Notification]:
        return self._notifications.list_for_user(int(user_id), limit=int(limit), unread_only=unread_only)

    def unread_count(self, user_id: int) -> int:
        return self._notifications.count_unread(int(user_id))

    def mark_read(self, notification_id: int, user_id: int) -> None:
        # Scoped to the owner, so another user's id reads as not found.
        if not self._notifications.mark_read(
            notification_id=int(notification_id), user_id=int(user_id), read_at=self._clock()
        ):
            raise NotFoundError("Notification not found")

    def mark_all_read(self, user_id: int) -> int:
        return self._notifications.mark_all_read(user_id=int(user_id), read_at=self._clock())

    def delete(self, notification_id: int, user_id: int) -> None:
        if not self._notifications.delete(notification_id=int(notification_id), user_id=int(user_id)):
            raise NotFoundError("Notification not found")
