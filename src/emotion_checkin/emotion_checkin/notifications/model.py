from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import EmotionLevel, Role


@dataclass(frozen=True)
class Notification:
    """Message from a sender (system/HR/employee) to one receiver.

    sender_name/sender_role and related_checkin_level are read-side joins.
    """

    notification_id: int
    sender_id: int
    receiver_id: int
    message: str
    created_at: datetime
    is_read: bool = False
    related_checkin_id: Optional[int] = None
    sender_name: Optional[str] = None
    sender_role: Optional[Role] = None
    related_checkin_level: Optional[int] = None

    @property
    def is_bad_mood_alert(self) -> bool:
        return self.related_checkin_id is not None and self.related_checkin_level == EmotionLevel.NEGATIVE

    @property
    def type(self) -> str:
        if self.is_bad_mood_alert:
            return "ALERT"
        if self.sender_role == Role.HR:
            return "MESSAGE"
        return "SYSTEM"

    @property
    def priority(self) -> str:
        return "HIGH" if self.is_bad_mood_alert else "NORMAL"
