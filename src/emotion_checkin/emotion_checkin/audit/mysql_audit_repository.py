from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence, Tuple

from ..core.enums import AuditAction, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AuditLog, AuditQuery
from .repository import AuditLogRepository


def _where(query: AuditQuery) -> tuple[str, list[object]]:
    clauses = ["1=1"]
    params: list[object] = []

    if query.role is not None:
        clauses.append("u.role=%s")
        params.append(query.role.value)
    if query.action is not None:
        clauses.append("al.action=%s")
        params.append(query.action.value)
    if query.actions:
        placeholders = ",".join(["%s"] * len(query.actions))
        clauses.append(f"al.action IN ({placeholders})")
        params.extend(sorted(a.value for a in query.actions))
    if query.user_id is not None:
        clauses.append("(al.user_id=%s OR al.target_user_id=%s)")
        params.extend([int(query.user_id), int(query.user_id)])
    if query.keyword:
        clauses.append("(LOWER(u.name) LIKE %s OR LOWER(t.name) LIKE %s OR LOWER(al.details) LIKE %s)")
        like = f"%{query.keyword.lower()}%"
        params.extend([like, like, like])

    return " AND ".join(clauses), params


class MySQLAuditLogRepository(AuditLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO audit_logs(user_id, action, target_user_id, details, ip_address, created_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), action.value, target_user_id, details, ip_address, created_at),
            )
            return int(cur.lastrowid)

    def search(self, query: AuditQuery, *, offset: int, limit: int) -> Tuple[Sequence[AuditLog], int]:
        where, params = _where(query)
        joins = """
            FROM audit_logs al
            JOIN users u ON u.user_id = al.user_id
            LEFT JOIN users t ON t.user_id = al.target_user_id
        """

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total {joins} WHERE {where}", tuple(params))
            row = fetchone(cur)
            total = int(row["total"]) if row else 0

            cur.execute(
                f"""
                SELECT al.audit_id, al.user_id, al.action, al.target_user_id, al.details,
                       al.ip_address, al.created_at,
                       u.name AS user_name, u.role AS user_role,
                       t.name AS target_user_name, t.role AS target_user_role
                {joins}
                WHERE {where}
                ORDER BY al.created_at DESC, al.audit_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params) + (int(limit), int(offset)),
            )
            items = [
                AuditLog(
                    audit_id=int(r["audit_id"]),
                    user_id=int(r["user_id"]),
                    action=AuditAction(r["action"]),
                    created_at=r["created_at"],
                    target_user_id=r.get("target_user_id"),
                    details=r.get("details"),
                    ip_address=r.get("ip_address") or "unknown",
                    user_name=r.get("user_name"),
                    user_role=Role(r["user_role"]) if r.get("user_role") else None,
                    target_user_name=r.get("target_user_name"),
                    target_user_role=Role(r["target_user_role"]) if r.get("target_user_role") else None,
                )
                for r in fetchall(cur)
            ]
            return items, total
