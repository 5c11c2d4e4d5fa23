from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import NotificationKind


@dataclass(frozen=True)
class Notification:
    notification_id: int
    user_id: int
    kind: NotificationKind
    title: str
    description: str
    created_at: datetime
    related_entity_type: Optional[str] = None
    related_entity_id: Optional[int] = None
    is_read: bool = False
    read_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "notification_id": self.notification_id,
            "kind": self.kind.value,
            "title": self.title,
            "description": self.description,
            "related_entity_type": self.related_entity_type,
            "related_entity_id": self.related_entity_id,
            "is_read": self.is_read,
            "read_at": self.read_at.isoformat() if self.read_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
