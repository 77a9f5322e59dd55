from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AuditAction, Role


@dataclass(frozen=True)
class AuditLog:
    """Audit entry joined with actor/target names (read-model)."""

    audit_id: int
    user_id: int
    action: AuditAction
    created_at: datetime
    target_user_id: Optional[int] = None
    details: Optional[str] = None
    ip_address: str = "unknown"
    user_name: Optional[str] = None
    user_role: Optional[Role] = None
    target_user_name: Optional[str] = None
    target_user_role: Optional[Role] = None


@dataclass(frozen=True)
class AuditQuery:
    role: Optional[Role] = None
    action: Optional[AuditAction] = None
    keyword: Optional[str] = None
    actions: Optional[frozenset] = None
    user_id: Optional[int] = None
