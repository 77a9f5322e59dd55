from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import iso_or_none, now_local, time_ago
from ..core.constants import DEFAULT_PAGE_SIZE, DEFAULT_TIMEZONE, UNKNOWN_IP
from ..core.enums import CRITICAL_ACTIONS, AuditAction, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from .model import AuditLog, AuditQuery
from .repository import AuditLogRepository

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 200


@dataclass(frozen=True)
class AuditPage:
    items: list[dict]
    page: int
    size: int
    total: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.size - 1) // self.size if self.size else 0

    def to_dict(self) -> dict:
        return {
            "items": self.items,
            "page": self.page,
            "size": self.size,
            "total": self.total,
            "total_pages": self.total_pages,
        }


class AuditLogService:
    """Records sensitive actions and lets SUPERADMIN browse them."""

    def __init__(self, audit_logs: AuditLogRepository, users: UserRepository, *, timezone: str = DEFAULT_TIMEZONE):
        self._audit_logs = audit_logs
        self._users = users
        self._tz = timezone

    def record(
        self,
        actor_id: int,
        action: AuditAction,
        *,
        target_user_id: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> int:
        audit_id = self._audit_logs.create(
            user_id=int(actor_id),
            action=action,
            target_user_id=target_user_id,
            details=json.dumps(details, ensure_ascii=False) if details else None,
            ip_address=ip_address or UNKNOWN_IP,
            created_at=now or now_local(self._tz),
        )
        logger.debug("Audit %s by user %s (target=%s)", action.value, actor_id, target_user_id)
        return audit_id

    def _require_admin(self, admin_id: int) -> User:
        admin = self._users.get_by_id(admin_id)
        if not admin:
            raise NotFoundError("Admin not found")
        if not admin.is_superadmin:
            raise AuthorizationError("Access denied: SuperAdmin role required")
        return admin

    @staticmethod
    def _page_bounds(page: int, size: int) -> tuple[int, int]:
        if page < 0:
            raise ValidationError("page must be >= 0")
        if size < 1 or size > MAX_PAGE_SIZE:
            raise ValidationError(f"size must be between 1 and {MAX_PAGE_SIZE}")
        return page * size, size

    def _query(
        self,
        admin: User,
        query: AuditQuery,
        *,
        page: int,
        size: int,
        ip_address: Optional[str],
        now: Optional[datetime],
    ) -> AuditPage:
        offset, limit = self._page_bounds(page, size)
        items, total = self._audit_logs.search(query, offset=offset, limit=limit)
        now = now or now_local(self._tz)
        # the read itself is recorded after the page is fetched
        self.record(admin.user_id, AuditAction.VIEW_AUDIT_LOG, ip_address=ip_address, now=now)
        return AuditPage(items=[self.to_dict(a, now=now) for a in items], page=page, size=size, total=total)

    def list_logs(
        self,
        admin_id: int,
        *,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE,
        ip_address: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AuditPage:
        admin = self._require_admin(admin_id)
        return self._query(admin, AuditQuery(), page=page, size=size, ip_address=ip_address, now=now)

    def search_logs(
        self,
        admin_id: int,
        *,
        role: Optional[Role] = None,
        action: Optional[AuditAction] = None,
        keyword: Optional[str] = None,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE,
        ip_address: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AuditPage:
        admin = self._require_admin(admin_id)
        keyword = keyword.strip() if keyword else None
        query = AuditQuery(role=role, action=action, keyword=keyword or None)
        return self._query(admin, query, page=page, size=size, ip_address=ip_address, now=now)

    def critical_actions(
        self,
        admin_id: int,
        *,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE,
        ip_address: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AuditPage:
        admin = self._require_admin(admin_id)
        query = AuditQuery(actions=CRITICAL_ACTIONS)
        return self._query(admin, query, page=page, size=size, ip_address=ip_address, now=now)

    def user_logs(
        self,
        admin_id: int,
        user_id: int,
        *,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE,
        ip_address: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AuditPage:
        admin = self._require_admin(admin_id)
        if not self._users.get_by_id(user_id):
            raise NotFoundError("User not found")
        query = AuditQuery(user_id=user_id)
        return self._query(admin, query, page=page, size=size, ip_address=ip_address, now=now)

    @staticmethod
    def to_dict(log: AuditLog, *, now: datetime) -> dict:
        description = log.action.description
        if log.target_user_name:
            description = f"{description} ({log.target_user_name})"

        return {
            "id": log.audit_id,
            "user_id": log.user_id,
            "user_name": log.user_name,
            "user_role": log.user_role.value if log.user_role else None,
            "action": log.action.value,
            "action_description": description,
            "target_user_id": log.target_user_id,
            "target_user_name": log.target_user_name,
            "target_user_role": log.target_user_role.value if log.target_user_role else None,
            "details": log.details,
            "ip_address": log.ip_address,
            "timestamp": iso_or_none(log.created_at),
            "time_ago": time_ago(log.created_at, now=now),
            "is_critical": log.action.is_critical,
            "is_auth_action": log.action.is_auth,
        }
