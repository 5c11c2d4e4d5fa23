from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import NotificationKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_utc, db_cursor, fetchall, fetchone, to_db_datetime
from .model import Notification
from .repository import NotificationRepository

_COLUMNS = """
    notification_id, user_id, kind, title, description,
    related_entity_type, related_entity_id, is_read, read_at, created_at
"""


def _row_to_notification(r: dict) -> Notification:
    return Notification(
        notification_id=int(r["notification_id"]),
        user_id=int(r["user_id"]),
        kind=NotificationKind(r["kind"]),
        title=r["title"],
        description=r["description"],
        created_at=as_utc(r["created_at"]),
        related_entity_type=r.get("related_entity_type"),
        related_entity_id=r.get("related_entity_id"),
        is_read=bool(r.get("is_read")),
        read_at=as_utc(r.get("read_at")),
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(user_id, kind, title, description, related_entity_type, related_entity_id)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), kind.value, title, description, related_entity_type, related_entity_id),
            )
            notification_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM notifications WHERE notification_id=%s", (notification_id,))
            return _row_to_notification(fetchone(cur))

    def list_for_user(self, user_id: int, *, limit: int = 50, unread_only: bool = False) -> Sequence[Notification]:
        clauses = ["user_id=%s"]
        params: list[object] = [int(user_id)]
        if unread_only:
            clauses.append("is_read=0")

        where = " AND ".join(clauses)
        params.append(int(limit))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM notifications
                WHERE {where}
                ORDER BY created_at DESC, notification_id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_row_to_notification(r) for r in fetchall(cur)]

    def count_unread(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS cnt FROM notifications WHERE user_id=%s AND is_read=0",
                (int(user_id),),
            )
            r = fetchone(cur)
            return int(r["cnt"]) if r else 0

    def mark_read(self, *, notification_id: int, user_id: int, read_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # rowcount is 0 for an already-read row, so check ownership separately.
            cur.execute(
                "SELECT notification_id FROM notifications WHERE notification_id=%s AND user_id=%s",
                (int(notification_id), int(user_id)),
            )
            if not fetchone(cur):
                return False
            cur.execute(
                """
                UPDATE notifications
                SET is_read=1, read_at=COALESCE(read_at, %s)
                WHERE notification_id=%s AND user_id=%s
                """,
                (to_db_datetime(read_at), int(notification_id), int(user_id)),
            )
            return True

    def mark_all_read(self, *, user_id: int, read_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET is_read=1, read_at=%s WHERE user_id=%s AND is_read=0",
                (to_db_datetime(read_at), int(user_id)),
            )
            return int(cur.rowcount)

    def delete(self, *, notification_id: int, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM notifications WHERE notification_id=%s AND user_id=%s",
                (int(notification_id), int(user_id)),
            )
            return cur.rowcount > 0
