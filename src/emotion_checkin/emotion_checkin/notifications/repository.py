from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Notification


class NotificationRepository(Protocol):
    def create(
        self,
        *,
        sender_id: int,
        receiver_id: int,
        message: str,
        created_at: datetime,
        related_checkin_id: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, notification_id: int) -> Optional[Notification]:
        raise NotImplementedError

    def list_for_receiver(self, receiver_id: int, *, unread_only: bool = False) -> Sequence[Notification]:
        """Newest first."""
        raise NotImplementedError

    def count_unread(self, receiver_id: int) -> int:
        raise NotImplementedError

    def mark_as_read(self, notification_id: int) -> bool:
        raise NotImplementedError

    def mark_all_as_read(self, receiver_id: int) -> int:
        raise NotImplementedError

    def delete_read_before(self, cutoff: datetime) -> int:
        raise NotImplementedError
