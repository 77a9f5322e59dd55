from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import Optional

from ..audit.service import AuditLogService
from ..checkins.model import EmotionCheckin
from ..checkins.repository import CheckinRepository
from ..common.datetime_utils import iso_or_none, now_local, time_ago
from ..common.validators import optional_text
from ..core.constants import (
    CONSECUTIVE_BAD_DAYS_ALERT,
    DEFAULT_TIMEZONE,
    HIGH_RISK_WEEKLY_NEGATIVES,
    MONTHLY_WINDOW_DAYS,
    WEEKLY_WINDOW_DAYS,
)
from ..core.enums import AuditAction, DashboardView, EmotionLevel
from ..core.exceptions import AuthorizationError, NotFoundError
from ..emotions.model import emoji_for_level
from ..notifications.service import NotificationService
from ..sentiment.service import SentimentService
from ..users.model import User
from ..users.repository import UserRepository
from .factory import CommentVisibilityFactory
from .model import (
    DepartmentStats,
    EmotionStats,
    EmployeeInsight,
    average_sentiment,
    checkin_streak,
    consecutive_bad_days,
    count_levels,
)
from .visibility.base import CommentVisibility

logger = logging.getLogger(__name__)


class DashboardService:
    """Employee, HR and admin dashboards.

    The three views share `_employee_insight`; what differs is the comment
    policy picked by `CommentVisibilityFactory` and who may ask.
    """

    def __init__(
        self,
        users: UserRepository,
        checkins: CheckinRepository,
        notifications: NotificationService,
        sentiment: SentimentService,
        audit: AuditLogService,
        *,
        visibility_factory: Optional[CommentVisibilityFactory] = None,
        timezone: str = DEFAULT_TIMEZONE,
    ):
        self._users = users
        self._checkins = checkins
        self._notifications = notifications
        self._sentiment = sentiment
        self._audit = audit
        self._visibility = visibility_factory or CommentVisibilityFactory()
        self._tz = timezone

    def _require_user(self, user_id: int, label: str) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError(f"{label} not found")
        return user

    # ---------------- Views ----------------

    def employee_dashboard(
        self, employee_id: int, *, ip_address: Optional[str] = None, now: Optional[datetime] = None
    ) -> dict:
        employee = self._require_user(employee_id, "Employee")
        now = now or now_local(self._tz)
        today = now.date()
        self._audit.record(employee.user_id, AuditAction.VIEW_DASHBOARD, ip_address=ip_address, now=now)

        policy = self._visibility.for_view(DashboardView.EMPLOYEE)
        recent = list(
            self._checkins.list_for_employee(
                employee.user_id, start_date=today - timedelta(days=WEEKLY_WINDOW_DAYS), end_date=today
            )
        )
        monthly = self._checkins.list_for_employee(
            employee.user_id, start_date=today - timedelta(days=MONTHLY_WINDOW_DAYS), end_date=today
        )

        return {
            "user_name": employee.name,
            "user_role": employee.role.value,
            "department": employee.department,
            "stats": EmotionStats.from_checkins(recent).to_dict(),
            "recent_checkins": [self._history_item(c, policy, now=now) for c in recent],
            "checkin_streak": checkin_streak((c.checkin_date for c in monthly), today),
            "last_checkin_date": iso_or_none(recent[0].checkin_date) if recent else None,
            "can_checkin_today": not self._checkins.exists_for_employee_on(employee.user_id, today),
            "unread_notifications": self._notifications.count_unread(employee.user_id),
        }

    def hr_dashboard(
        self,
        requester_id: int,
        department: Optional[str] = None,
        *,
        ip_address: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> dict:
        requester = self._require_user(requester_id, "HR")
        if not requester.can_manage_employees:
            raise AuthorizationError("Access denied: HR role required")
        now = now or now_local(self._tz)
        today = now.date()
        self._audit.record(requester.user_id, AuditAction.VIEW_DASHBOARD, ip_address=ip_address, now=now)

        department = optional_text(department)
        departments = [department] if department else list(self._users.list_departments())
        employees = (
            self._users.list_employees_by_department(department) if department else self._users.list_active_employees()
        )
        policy = self._visibility.for_view(DashboardView.HR)
        insights = [self._employee_insight(e, policy, today=today) for e in employees]

        return {
            "user_name": requester.name,
            "user_role": requester.role.value,
            "departments": departments,
            "department_stats": [self._department_stats(d, today=today).to_dict() for d in departments],
            "employee_insights": [i.to_dict() for i in insights],
            "high_risk_employees": sum(1 for i in insights if i.is_high_risk),
        }

    def admin_dashboard(
        self, admin_id: int, *, ip_address: Optional[str] = None, now: Optional[datetime] = None
    ) -> dict:
        admin = self._require_user(admin_id, "Admin")
        if not admin.is_superadmin:
            raise AuthorizationError("Access denied: SuperAdmin role required")
        now = now or now_local(self._tz)
        today = now.date()
        self._audit.record(admin.user_id, AuditAction.VIEW_DASHBOARD, ip_address=ip_address, now=now)

        departments = list(self._users.list_departments())
        policy = self._visibility.for_view(DashboardView.ADMIN)
        insights = [self._employee_insight(e, policy, today=today) for e in self._users.list_active_employees()]
        window_start = datetime.combine(today - timedelta(days=MONTHLY_WINDOW_DAYS), time.min)

        return {
            "user_name": admin.name,
            "user_role": admin.role.value,
            "departments": departments,
            "department_stats": [self._department_stats(d, today=today).to_dict() for d in departments],
            "employee_insights": [i.to_dict() for i in insights],
            "total_employees": self._users.count_active_employees(),
            "today_checkins": self._checkins.count_for_date(today),
            "high_risk_employees": sum(1 for i in insights if i.is_high_risk),
            "consecutive_bad_mood_count": sum(
                1 for i in insights if i.consecutive_bad_days >= CONSECUTIVE_BAD_DAYS_ALERT
            ),
            "high_risk_ai_results": self._sentiment.count_high_risk(start=window_start, end=now),
        }

    # ---------------- Aggregation ----------------

    def _department_stats(self, department: str, *, today: date) -> DepartmentStats:
        employees = self._users.list_employees_by_department(department)
        checkins = self._checkins.list_for_department(
            department, start_date=today - timedelta(days=MONTHLY_WINDOW_DAYS), end_date=today
        )
        week_start = today - timedelta(days=WEEKLY_WINDOW_DAYS)
        levels = count_levels(checkins)
        avg_mood = round(sum(c.emotion_level for c in checkins) / len(checkins), 2) if checkins else 0.0

        return DepartmentStats(
            department=department,
            total_employees=len(employees),
            active_employees=sum(1 for e in employees if e.is_active),
            today_checkins=sum(1 for c in checkins if c.checkin_date == today),
            weekly_checkins=sum(1 for c in checkins if c.checkin_date >= week_start),
            monthly_checkins=len(checkins),
            positive_count=levels[EmotionLevel.POSITIVE.value],
            neutral_count=levels[EmotionLevel.NEUTRAL.value],
            negative_count=levels[EmotionLevel.NEGATIVE.value],
            average_mood_score=avg_mood,
        )

    def _employee_insight(self, employee: User, policy: CommentVisibility, *, today: date) -> EmployeeInsight:
        monthly = list(
            self._checkins.list_for_employee(
                employee.user_id, start_date=today - timedelta(days=MONTHLY_WINDOW_DAYS), end_date=today
            )
        )
        week_start = today - timedelta(days=WEEKLY_WINDOW_DAYS)
        weekly = [c for c in monthly if c.checkin_date >= week_start]
        weekly_levels = count_levels(weekly)
        monthly_levels = count_levels(monthly)
        last = self._checkins.get_latest_for_employee(employee.user_id)

        recent_comment = policy.apply(last.comment) if last else None
        return EmployeeInsight(
            employee_id=employee.user_id,
            name=employee.name,
            email=employee.email,
            department=employee.department,
            position=employee.position,
            is_active=employee.is_active,
            last_checkin=last.checkin_date if last else None,
            last_mood=last.emotion_name if last else None,
            last_mood_level=last.emotion_level if last else None,
            last_mood_emoji=emoji_for_level(last.emotion_level) if last else None,
            checkin_streak=checkin_streak((c.checkin_date for c in monthly), today),
            checkin_rate=round(len(monthly) * 100.0 / MONTHLY_WINDOW_DAYS, 2),
            weekly_positive=weekly_levels[EmotionLevel.POSITIVE.value],
            weekly_neutral=weekly_levels[EmotionLevel.NEUTRAL.value],
            weekly_negative=weekly_levels[EmotionLevel.NEGATIVE.value],
            monthly_positive=monthly_levels[EmotionLevel.POSITIVE.value],
            monthly_neutral=monthly_levels[EmotionLevel.NEUTRAL.value],
            monthly_negative=monthly_levels[EmotionLevel.NEGATIVE.value],
            average_sentiment=average_sentiment(monthly),
            consecutive_bad_days=consecutive_bad_days(monthly, today),
            is_high_risk=weekly_levels[EmotionLevel.NEGATIVE.value] >= HIGH_RISK_WEEKLY_NEGATIVES,
            recent_comment=recent_comment,
            has_comment=bool(recent_comment and recent_comment.strip()),
        )

    @staticmethod
    def _history_item(checkin: EmotionCheckin, policy: CommentVisibility, *, now: datetime) -> dict:
        comment = policy.apply(checkin.comment)
        return {
            "id": checkin.checkin_id,
            "date": iso_or_none(checkin.checkin_date),
            "emoji": emoji_for_level(checkin.emotion_level),
            "mood": checkin.emotion_name,
            "level": checkin.emotion_level,
            "color_code": checkin.color_code,
            "has_comment": bool(comment and comment.strip()),
            "comment": comment,
            "checkin_time": iso_or_none(checkin.checkin_time),
            "time_ago": time_ago(checkin.checkin_time, now=now),
        }
