from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import Notification
from .repository import NotificationRepository

_SELECT = """
    SELECT n.notification_id, n.sender_id, n.receiver_id, n.message, n.is_read, n.created_at,
           n.related_checkin_id, s.name AS sender_name, s.role AS sender_role,
           ec.emotion_level AS related_checkin_level
    FROM notifications n
    JOIN users s ON s.user_id = n.sender_id
    LEFT JOIN emotion_checkins ec ON ec.checkin_id = n.related_checkin_id
"""


def _row_to_notification(r: dict) -> Notification:
    level = r.get("related_checkin_level")
    return Notification(
        notification_id=int(r["notification_id"]),
        sender_id=int(r["sender_id"]),
        receiver_id=int(r["receiver_id"]),
        message=r["message"],
        created_at=r["created_at"],
        is_read=as_bool(r.get("is_read")),
        related_checkin_id=int(r["related_checkin_id"]) if r.get("related_checkin_id") is not None else None,
        sender_name=r.get("sender_name"),
        sender_role=Role(r["sender_role"]) if r.get("sender_role") else None,
        related_checkin_level=int(level) if level is not None else None,
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        sender_id: int,
        receiver_id: int,
        message: str,
        created_at: datetime,
        related_checkin_id: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(sender_id, receiver_id, message, is_read, created_at, related_checkin_id)
                VALUES(%s,%s,%s,0,%s,%s)
                """,
                (int(sender_id), int(receiver_id), message, created_at, related_checkin_id),
            )
            return int(cur.lastrowid)

    def get_by_id(self, notification_id: int) -> Optional[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE n.notification_id=%s", (int(notification_id),))
            r = fetchone(cur)
            return _row_to_notification(r) if r else None

    def list_for_receiver(self, receiver_id: int, *, unread_only: bool = False) -> Sequence[Notification]:
        where = "n.receiver_id=%s AND n.is_read=0" if unread_only else "n.receiver_id=%s"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE {where} ORDER BY n.created_at DESC, n.notification_id DESC",
                (int(receiver_id),),
            )
            return [_row_to_notification(r) for r in fetchall(cur)]

    def count_unread(self, receiver_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS total FROM notifications WHERE receiver_id=%s AND is_read=0",
                (int(receiver_id),),
            )
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def mark_as_read(self, notification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE notifications SET is_read=1 WHERE notification_id=%s", (int(notification_id),))
            return cur.rowcount > 0

    def mark_all_as_read(self, receiver_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET is_read=1 WHERE receiver_id=%s AND is_read=0",
                (int(receiver_id),),
            )
            return int(cur.rowcount)

    def delete_read_before(self, cutoff: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM notifications WHERE is_read=1 AND created_at < %s", (cutoff,))
            return int(cur.rowcount)
