from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_USER_COLUMNS = """
    user_id, name, email, password_hash, role, department, position, is_active, created_at, updated_at
"""


def _row_to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        department=row.get("department"),
        position=row.get("position"),
        is_active=as_bool(row.get("is_active", 1)),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select_one(self, where: str, params: tuple) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE {where}", params)
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def _select_many(self, where: str = "1=1", params: tuple = (), order_by: str = "name") -> list[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE {where} ORDER BY {order_by}", params)
            return [_row_to_user(r) for r in fetchall(cur)]

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._select_one("user_id=%s", (int(user_id),))

    def get_by_email(self, email: str) -> Optional[User]:
        return self._select_one("email=%s", (email,))

    def exists_by_email(self, email: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM users WHERE email=%s LIMIT 1", (email,))
            return fetchone(cur) is not None

    def create_user(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: Role,
        department: Optional[str],
        position: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(name, email, password_hash, role, department, position, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,1)
                """,
                (name, email, password_hash, role.value, department, position),
            )
            return int(cur.lastrowid)

    def update_profile(self, user_id: int, *, name: str, email: str, position: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET name=%s, email=%s, position=%s WHERE user_id=%s",
                (name, email, position, int(user_id)),
            )
            return cur.rowcount > 0

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET password_hash=%s WHERE user_id=%s", (password_hash, int(user_id)))
            return cur.rowcount > 0

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET is_active=%s WHERE user_id=%s", (1 if is_active else 0, int(user_id)))
            return cur.rowcount > 0

    def set_department(self, user_id: int, *, department: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET department=%s WHERE user_id=%s", (department, int(user_id)))
            return cur.rowcount > 0

    def list_all(self) -> Sequence[User]:
        return self._select_many(order_by="user_id DESC")

    def search_by_name(self, keyword: str) -> Sequence[User]:
        return self._select_many("LOWER(name) LIKE %s", (f"%{keyword.lower()}%",))

    def list_employees_by_department(self, department: str) -> Sequence[User]:
        return self._select_many("role=%s AND department=%s", (Role.EMPLOYEE.value, department))

    def list_active_employees(self) -> Sequence[User]:
        return self._select_many("role=%s AND is_active=1", (Role.EMPLOYEE.value,))

    def list_active_hr(self) -> Sequence[User]:
        return self._select_many("role=%s AND is_active=1", (Role.HR.value,))

    def list_employees_without_department(self) -> Sequence[User]:
        return self._select_many("role=%s AND (department IS NULL OR department='')", (Role.EMPLOYEE.value,))

    def list_departments(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DISTINCT department FROM users
                WHERE role=%s AND department IS NOT NULL AND department <> ''
                ORDER BY department
                """,
                (Role.EMPLOYEE.value,),
            )
            return [r["department"] for r in fetchall(cur)]

    def count_active_employees(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM users WHERE role=%s AND is_active=1", (Role.EMPLOYEE.value,))
            row = fetchone(cur)
            return int(row["total"]) if row else 0
