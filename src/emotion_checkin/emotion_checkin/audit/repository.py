from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence, Tuple

from ..core.enums import AuditAction
from .model import AuditLog, AuditQuery


class AuditLogRepository(Protocol):
    """Append-only store: there is no update or delete."""

    def create(
        self,
        *,
        user_id: int,
        action: AuditAction,
        target_user_id: Optional[int],
        details: Optional[str],
        ip_address: str,
        created_at: datetime,
    ) -> int:
        raise NotImplementedError

    def search(self, query: AuditQuery, *, offset: int, limit: int) -> Tuple[Sequence[AuditLog], int]:
        """Newest first; returns (page items, total matching rows)."""
        raise NotImplementedError
