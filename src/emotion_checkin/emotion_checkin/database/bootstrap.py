"""Schema/seed helpers used by create_app (AUTO_INIT_DB / AUTO_SEED_DB) and scripts."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Iterator

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

DEMO_USERS = (
    # name, email, password, role, department, position
    ("System Admin", "admin@example.com", "admin123", "SUPERADMIN", None, None),
    ("HR Officer", "hr@example.com", "hr1234", "HR", None, "HR Officer"),
    ("Demo Employee", "employee@example.com", "employee123", "EMPLOYEE", "IT", "Developer"),
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql usable whatever DB name is configured.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a script on ';' outside quoted strings."""
    buf: list[str] = []
    quote: str | None = None
    escaped = False

    for ch in sql:
        buf.append(ch)
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            buf.pop()
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_statements(conn_factory: DatabaseConnection, statements: Iterable[str]) -> None:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(target).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))
    _exec_statements(DatabaseConnection(DBConfig.from_dict(db_config)), iter_sql_statements(sql))
    logger.info("Schema applied from %s", schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    sql = _strip_create_db_and_use(Path(seed_path).read_text(encoding="utf-8"))
    _exec_statements(DatabaseConnection(DBConfig.from_dict(db_config)), iter_sql_statements(sql))
    logger.info("Seed applied from %s", seed_path)


def ensure_demo_users(db_config: dict) -> None:
    """Upsert one account per role so a fresh database can be explored."""
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True)
        for name, email, password, role, department, position in DEMO_USERS:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            if cur.fetchone():
                cur.execute(
                    """
                    UPDATE users
                    SET name=%s, password_hash=%s, role=%s, department=%s, position=%s, is_active=1
                    WHERE email=%s
                    """,
                    (name, password_hash, role, department, position, email),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO users (name, email, password_hash, role, department, position, is_active)
                    VALUES (%s, %s, %s, %s, %s, %s, 1)
                    """,
                    (name, email, password_hash, role, department, position),
                )
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
