from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import NotificationKind
from .model import Notification


class NotificationRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        kind: NotificationKind,
        title: str,
        description: str,
        related_entity_type: Optional[str],
        related_entity_id: Optional[int],
    ) -> Notification:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, limit: int = 50, unread_only: bool = False) -> Sequence[Notification]:
        raise NotImplementedError

    def count_unread(self, user_id: int) -> int:
        raise NotImplementedError

    def mark_read(self, *, notification_id: int, user_id: int, read_at: datetime) -> bool:
        raise NotImplementedError

    def mark_all_read(self, *, user_id: int, read_at: datetime) -> int:
        raise NotImplementedError

    def delete(self, *, notification_id: int, user_id: int) -> bool:
        raise NotImplementedError
