from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from ..audit.service import AuditLogService
from ..checkins.repository import CheckinRepository
from ..common.datetime_utils import iso_or_none, now_local, time_ago
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_NOTIFICATION_RETENTION_DAYS, DEFAULT_TIMEZONE
from ..core.enums import AuditAction
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Bad-mood alerts to HR, manual HR messages and the receiver's inbox."""

    def __init__(
        self,
        notifications: NotificationRepository,
        users: UserRepository,
        checkins: CheckinRepository,
        audit: AuditLogService,
        *,
        timezone: str = DEFAULT_TIMEZONE,
    ):
        self._notifications = notifications
        self._users = users
        self._checkins = checkins
        self._audit = audit
        self._tz = timezone

    def _now(self, now: Optional[datetime]) -> datetime:
        return now or now_local(self._tz)

    def _require_user(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def notify_hr_bad_mood(self, employee: User, checkin_id: int, *, now: Optional[datetime] = None) -> int:
        """Create one alert per active HR user. Returns how many were sent."""
        logger.warning("Employee %s (id=%s) reported a negative mood", employee.name, employee.user_id)
        hrs = list(self._users.list_active_hr())
        if not hrs:
            logger.warning("No active HR user to notify about check-in %s", checkin_id)
            return 0

        message = f"Employee {employee.name} reported a negative mood. Please follow up."
        created_at = self._now(now)
        for hr in hrs:
            self._notifications.create(
                sender_id=employee.user_id,
                receiver_id=hr.user_id,
                message=message,
                created_at=created_at,
                related_checkin_id=checkin_id,
            )
            logger.info("Bad-mood alert sent to HR %s", hr.user_id)
        return len(hrs)

    def notify_department_assigned(
        self, actor: User, employee: User, department: str, *, now: Optional[datetime] = None
    ) -> int:
        return self._notifications.create(
            sender_id=actor.user_id,
            receiver_id=employee.user_id,
            message=f"You have been assigned to department {department}.",
            created_at=self._now(now),
        )

    def send_notification(
        self,
        sender_id: int,
        *,
        receiver_id: int,
        message: str,
        related_checkin_id: Optional[int] = None,
        ip_address: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> int:
        sender = self._users.get_by_id(sender_id)
        if not sender:
            raise NotFoundError("Sender not found")
        if not sender.can_manage_employees:
            raise AuthorizationError("Only HR/Admin can send notifications")

        receiver = self._users.get_by_id(receiver_id)
        if not receiver:
            raise NotFoundError("Receiver not found")

        message = require_non_empty(message, "Message")

        if related_checkin_id is not None:
            checkin = self._checkins.get_by_id(related_checkin_id)
            if not checkin:
                raise NotFoundError("Related check-in not found")
            if checkin.employee_id != receiver.user_id:
                raise ValidationError("Related check-in does not belong to the receiver")

        notification_id = self._notifications.create(
            sender_id=sender.user_id,
            receiver_id=receiver.user_id,
            message=message,
            created_at=self._now(now),
            related_checkin_id=related_checkin_id,
        )
        self._audit.record(
            sender.user_id,
            AuditAction.SEND_NOTIFICATION,
            target_user_id=receiver.user_id,
            ip_address=ip_address,
            now=now,
        )
        logger.info("Notification %s sent from user %s to user %s", notification_id, sender_id, receiver_id)
        return notification_id

    def list_notifications(self, user_id: int, *, now: Optional[datetime] = None) -> list[dict]:
        self._require_user(user_id)
        now = self._now(now)
        return [self.to_dict(n, now=now) for n in self._notifications.list_for_receiver(user_id)]

    def list_unread(self, user_id: int, *, now: Optional[datetime] = None) -> list[dict]:
        self._require_user(user_id)
        now = self._now(now)
        return [self.to_dict(n, now=now) for n in self._notifications.list_for_receiver(user_id, unread_only=True)]

    def count_unread(self, user_id: int) -> int:
        self._require_user(user_id)
        return self._notifications.count_unread(user_id)

    def mark_as_read(self, user_id: int, notification_id: int) -> None:
        notification = self._notifications.get_by_id(notification_id)
        if not notification:
            raise NotFoundError("Notification not found")
        if notification.receiver_id != user_id:
            raise AuthorizationError("You can only mark your own notifications as read")
        self._notifications.mark_as_read(notification_id)

    def mark_all_as_read(self, user_id: int) -> int:
        self._require_user(user_id)
        updated = self._notifications.mark_all_as_read(user_id)
        logger.info("Marked %s notifications as read for user %s", updated, user_id)
        return updated

    def cleanup_old_notifications(
        self, days_old: int = DEFAULT_NOTIFICATION_RETENTION_DAYS, *, now: Optional[datetime] = None
    ) -> int:
        if days_old < 1:
            raise ValidationError("days_old must be >= 1")
        cutoff = self._now(now) - timedelta(days=days_old)
        deleted = self._notifications.delete_read_before(cutoff)
        logger.info("Deleted %s read notifications older than %s days", deleted, days_old)
        return deleted

    @staticmethod
    def to_dict(n: Notification, *, now: datetime) -> dict:
        return {
            "id": n.notification_id,
            "message": n.message,
            "sender_id": n.sender_id,
            "sender_name": n.sender_name,
            "sender_role": n.sender_role.value if n.sender_role else None,
            "read_status": n.is_read,
            "created_at": iso_or_none(n.created_at),
            "time_ago": time_ago(n.created_at, now=now),
            "related_checkin_id": n.related_checkin_id,
            "type": n.type,
            "priority": n.priority,
        }
