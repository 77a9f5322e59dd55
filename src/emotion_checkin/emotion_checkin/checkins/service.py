from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..audit.service import AuditLogService
from ..common.datetime_utils import iso_or_none, now_local
from ..common.validators import optional_text
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_TIMEZONE
from ..core.enums import AuditAction, EmotionLevel
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..emotions.model import EmotionType, emoji_for_level
from ..emotions.repository import EmotionCatalogRepository
from ..notifications.service import NotificationService
from ..sentiment.model import EmotionAIResult, classify_emotion, is_high_risk
from ..sentiment.service import SentimentService
from ..users.model import User
from ..users.repository import UserRepository
from .model import EmotionCheckin
from .repository import CheckinRepository

logger = logging.getLogger(__name__)

ALREADY_CHECKED_IN = "You have already checked-in today"
MAX_HISTORY_LIMIT = 365


class CheckinService:
    """Use case: daily emotion check-in for employees."""

    def __init__(
        self,
        checkins: CheckinRepository,
        emotions: EmotionCatalogRepository,
        users: UserRepository,
        sentiment: SentimentService,
        notifications: NotificationService,
        audit: AuditLogService,
        *,
        timezone: str = DEFAULT_TIMEZONE,
    ):
        self._checkins = checkins
        self._emotions = emotions
        self._users = users
        self._sentiment = sentiment
        self._notifications = notifications
        self._audit = audit
        self._tz = timezone

    def _now(self, now: Optional[datetime]) -> datetime:
        return now or now_local(self._tz)

    def _require_employee(self, employee_id: int) -> User:
        employee = self._users.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        if not employee.is_employee:
            raise AuthorizationError("Only employees can check in")
        return employee

    def _follow_up(self, what: str, checkin_id: int, fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except Exception:
            logger.exception("Check-in %s saved but %s failed", checkin_id, what)
            return None

    def check_in(
        self,
        employee_id: int,
        *,
        emotion_type_id: int,
        emotion_level: int,
        comment: Optional[str] = None,
        ip_address: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> dict:
        employee = self._require_employee(employee_id)
        now = self._now(now)
        today = now.date()

        if self._checkins.exists_for_employee_on(employee.user_id, today):
            raise ConflictError(ALREADY_CHECKED_IN)

        if emotion_level not in (EmotionLevel.NEGATIVE, EmotionLevel.NEUTRAL, EmotionLevel.POSITIVE):
            raise ValidationError("Emotion level must be between 1 and 3")
        emotion = self._emotions.get_by_id(emotion_type_id)
        if not emotion:
            raise NotFoundError("Emotion type not found")
        if emotion.level != emotion_level:
            raise ValidationError("Emotion level does not match the selected emotion type")

        comment = optional_text(comment, "Comment")
        checkin_id = self._checkins.create_checkin(
            employee_id=employee.user_id,
            emotion_level=emotion_level,
            emotion_type_id=emotion.emotion_id,
            comment=comment,
            checkin_time=now,
            checkin_date=today,
        )
        logger.info("Check-in %s saved for employee %s (level=%s)", checkin_id, employee.user_id, emotion_level)

        # The row is committed; later writes are logged on failure, never raised.
        ai_result = None
        if comment:
            ai_result = self._follow_up(
                "sentiment analysis", checkin_id, self._sentiment.analyze_checkin, checkin_id, comment, now=now
            )

        if emotion_level == EmotionLevel.NEGATIVE:
            self._follow_up(
                "bad mood alert", checkin_id, self._notifications.notify_hr_bad_mood, employee, checkin_id, now=now
            )

        self._follow_up(
            "audit",
            checkin_id,
            self._audit.record,
            employee.user_id,
            AuditAction.CHECK_IN,
            details={"emotionLevel": int(emotion_level), "hasComment": comment is not None},
            ip_address=ip_address,
            now=now,
        )

        checkin = EmotionCheckin(
            checkin_id=checkin_id,
            employee_id=employee.user_id,
            emotion_level=int(emotion_level),
            emotion_type_id=emotion.emotion_id,
            checkin_time=now,
            checkin_date=today,
            comment=comment,
            emotion_name=emotion.name,
            color_code=emotion.color_code,
        )
        return self.to_response(checkin, employee=employee, ai_result=ai_result)

    def get_today_checkin(self, employee_id: int, *, now: Optional[datetime] = None) -> Optional[dict]:
        employee = self._require_employee(employee_id)
        checkin = self._checkins.get_for_employee_and_date(employee.user_id, self._now(now).date())
        return self.to_response(checkin, employee=employee) if checkin else None

    def can_check_in_today(self, employee_id: int, *, now: Optional[datetime] = None) -> bool:
        employee = self._require_employee(employee_id)
        return not self._checkins.exists_for_employee_on(employee.user_id, self._now(now).date())

    def get_history(self, employee_id: int, limit: int = DEFAULT_HISTORY_LIMIT) -> list[dict]:
        employee = self._require_employee(employee_id)
        if limit < 1 or limit > MAX_HISTORY_LIMIT:
            raise ValidationError(f"limit must be between 1 and {MAX_HISTORY_LIMIT}")
        checkins = self._checkins.list_recent_for_employee(employee.user_id, limit)
        return [self.to_response(c, employee=employee) for c in checkins]

    def list_emotion_catalog(self) -> Sequence[EmotionType]:
        return self._emotions.list_all()

    def delete_checkin(self, admin_id: int, checkin_id: int) -> None:
        admin = self._users.get_by_id(admin_id)
        if not admin:
            raise NotFoundError("Admin not found")
        if not admin.is_superadmin:
            raise AuthorizationError("Access denied: SuperAdmin role required")
        if not self._checkins.get_by_id(checkin_id):
            raise NotFoundError("Check-in not found")
        self._checkins.soft_delete(checkin_id)
        logger.info("Check-in %s soft-deleted by admin %s", checkin_id, admin.user_id)

    @staticmethod
    def to_response(
        checkin: EmotionCheckin, *, employee: User, ai_result: Optional[EmotionAIResult] = None
    ) -> dict:
        if ai_result is not None:
            score, magnitude, label = ai_result.sentiment_score, ai_result.magnitude, ai_result.sentiment_label
        else:
            score, magnitude, label = checkin.sentiment_score, checkin.sentiment_magnitude, checkin.sentiment_label

        return {
            "id": checkin.checkin_id,
            "employee_id": checkin.employee_id,
            "employee_name": employee.name,
            "emotion_level": checkin.emotion_level,
            "emotion_type_id": checkin.emotion_type_id,
            "mood_name": checkin.emotion_name,
            "color_code": checkin.color_code,
            "emoji": emoji_for_level(checkin.emotion_level),
            "comment": checkin.comment,
            "checkin_time": iso_or_none(checkin.checkin_time),
            "checkin_date": iso_or_none(checkin.checkin_date),
            "sentiment_score": score,
            "sentiment_magnitude": magnitude,
            "sentiment_label": label.value if label else None,
            "nlp_emotion": classify_emotion(score),
            "is_high_risk": is_high_risk(score, magnitude) if score is not None and magnitude is not None else False,
        }
