from __future__ import annotations

from dataclasses import dataclass

from .audit.mysql_audit_repository import MySQLAuditLogRepository
from .audit.repository import AuditLogRepository
from .audit.service import AuditLogService
from .checkins.mysql_checkin_repository import MySQLCheckinRepository
from .checkins.repository import CheckinRepository
from .checkins.service import CheckinService
from .core.constants import DEFAULT_TIMEZONE
from .dashboard.factory import CommentVisibilityFactory
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .emotions.mysql_emotion_repository import MySQLEmotionCatalogRepository
from .emotions.repository import EmotionCatalogRepository
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .sentiment.analyzer import DEFAULT_ENDPOINT, GoogleNlpClient, SentimentAnalyzer
from .sentiment.mysql_ai_result_repository import MySQLAIResultRepository
from .sentiment.repository import AIResultRepository
from .sentiment.service import SentimentService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    emotions_repo: EmotionCatalogRepository
    checkins_repo: CheckinRepository
    ai_results_repo: AIResultRepository
    notifications_repo: NotificationRepository
    audit_repo: AuditLogRepository

    audit_service: AuditLogService
    sentiment_service: SentimentService
    notification_service: NotificationService
    auth_service: AuthService
    user_service: UserService
    checkin_service: CheckinService
    dashboard_service: DashboardService


def wire_services(
    *,
    users_repo: UserRepository,
    emotions_repo: EmotionCatalogRepository,
    checkins_repo: CheckinRepository,
    ai_results_repo: AIResultRepository,
    notifications_repo: NotificationRepository,
    audit_repo: AuditLogRepository,
    analyzer: SentimentAnalyzer,
    timezone: str = DEFAULT_TIMEZONE,
) -> Container:
    """Build every service on top of the given repositories.

    Tests pass in-memory repositories here; `build_container` passes MySQL ones.
    """
    audit_service = AuditLogService(audit_repo, users_repo, timezone=timezone)
    sentiment_service = SentimentService(analyzer, ai_results_repo, timezone=timezone)
    notification_service = NotificationService(
        notifications_repo, users_repo, checkins_repo, audit_service, timezone=timezone
    )
    auth_service = AuthService(users_repo, audit_service)
    user_service = UserService(users_repo, audit_service, notification_service)
    checkin_service = CheckinService(
        checkins_repo,
        emotions_repo,
        users_repo,
        sentiment_service,
        notification_service,
        audit_service,
        timezone=timezone,
    )
    dashboard_service = DashboardService(
        users_repo,
        checkins_repo,
        notification_service,
        sentiment_service,
        audit_service,
        visibility_factory=CommentVisibilityFactory(),
        timezone=timezone,
    )

    return Container(
        users_repo=users_repo,
        emotions_repo=emotions_repo,
        checkins_repo=checkins_repo,
        ai_results_repo=ai_results_repo,
        notifications_repo=notifications_repo,
        audit_repo=audit_repo,
        audit_service=audit_service,
        sentiment_service=sentiment_service,
        notification_service=notification_service,
        auth_service=auth_service,
        user_service=user_service,
        checkin_service=checkin_service,
        dashboard_service=dashboard_service,
    )


def build_container(
    *,
    db_config: dict,
    nlp_api_key: str = "",
    nlp_endpoint: str = DEFAULT_ENDPOINT,
    nlp_timeout: float = 10.0,
    timezone: str = DEFAULT_TIMEZONE,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_services(
        users_repo=MySQLUserRepository(conn),
        emotions_repo=MySQLEmotionCatalogRepository(conn),
        checkins_repo=MySQLCheckinRepository(conn),
        ai_results_repo=MySQLAIResultRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        audit_repo=MySQLAuditLogRepository(conn),
        analyzer=GoogleNlpClient(nlp_api_key, endpoint=nlp_endpoint, timeout=nlp_timeout),
        timezone=timezone,
    )
