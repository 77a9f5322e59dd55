from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import SentimentLabel
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_float, db_cursor, fetchall, fetchone, is_duplicate_key
from .model import EmotionCheckin
from .repository import CheckinRepository

logger = logging.getLogger(__name__)

_SELECT = """
    SELECT ec.checkin_id, ec.employee_id, ec.emotion_level, ec.emotion_type_id, ec.comment,
           ec.checkin_time, ec.checkin_date, ec.is_deleted,
           cat.name AS emotion_name, cat.color_code,
           ai.sentiment_score, ai.magnitude AS sentiment_magnitude, ai.sentiment_label
    FROM emotion_checkins ec
    JOIN emotion_catalog cat ON cat.emotion_id = ec.emotion_type_id
    LEFT JOIN emotion_ai_results ai ON ai.checkin_id = ec.checkin_id
"""


def _row_to_checkin(r: dict) -> EmotionCheckin:
    return EmotionCheckin(
        checkin_id=int(r["checkin_id"]),
        employee_id=int(r["employee_id"]),
        emotion_level=int(r["emotion_level"]),
        emotion_type_id=int(r["emotion_type_id"]),
        checkin_time=r["checkin_time"],
        checkin_date=r["checkin_date"],
        comment=r.get("comment"),
        emotion_name=r.get("emotion_name"),
        color_code=r.get("color_code"),
        sentiment_score=as_float(r.get("sentiment_score")),
        sentiment_magnitude=as_float(r.get("sentiment_magnitude")),
        sentiment_label=SentimentLabel(r["sentiment_label"]) if r.get("sentiment_label") else None,
        is_deleted=as_bool(r.get("is_deleted", 0)),
    )


class MySQLCheckinRepository(CheckinRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select(self, where: str, params: tuple, *, suffix: str = "") -> list[EmotionCheckin]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where} {suffix}", params)
            return [_row_to_checkin(r) for r in fetchall(cur)]

    def exists_for_employee_on(self, employee_id: int, checkin_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS found FROM emotion_checkins WHERE employee_id=%s AND checkin_date=%s LIMIT 1",
                (int(employee_id), checkin_date),
            )
            return fetchone(cur) is not None

    def get_by_id(self, checkin_id: int) -> Optional[EmotionCheckin]:
        rows = self._select("ec.checkin_id=%s AND ec.is_deleted=0", (int(checkin_id),))
        return rows[0] if rows else None

    def get_for_employee_and_date(self, employee_id: int, checkin_date: date) -> Optional[EmotionCheckin]:
        rows = self._select(
            "ec.employee_id=%s AND ec.checkin_date=%s AND ec.is_deleted=0",
            (int(employee_id), checkin_date),
        )
        return rows[0] if rows else None

    def create_checkin(
        self,
        *,
        employee_id: int,
        emotion_level: int,
        emotion_type_id: int,
        comment: Optional[str],
        checkin_time: datetime,
        checkin_date: date,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO emotion_checkins(employee_id, emotion_level, emotion_type_id, comment,
                                                 checkin_time, checkin_date)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (int(employee_id), int(emotion_level), int(emotion_type_id), comment, checkin_time, checkin_date),
                )
                return int(cur.lastrowid)
        except Exception as e:
            if is_duplicate_key(e):
                logger.warning("Duplicate check-in rejected by unique key: employee=%s date=%s", employee_id, checkin_date)
                raise ConflictError("You have already checked-in today") from e
            raise

    def list_for_employee(self, employee_id: int, *, start_date: date, end_date: date) -> Sequence[EmotionCheckin]:
        return self._select(
            "ec.employee_id=%s AND ec.checkin_date BETWEEN %s AND %s AND ec.is_deleted=0",
            (int(employee_id), start_date, end_date),
            suffix="ORDER BY ec.checkin_date DESC",
        )

    def list_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[EmotionCheckin]:
        return self._select(
            "ec.employee_id=%s AND ec.is_deleted=0",
            (int(employee_id),),
            suffix=f"ORDER BY ec.checkin_date DESC LIMIT {int(limit)}",
        )

    def get_latest_for_employee(self, employee_id: int) -> Optional[EmotionCheckin]:
        rows = self.list_recent_for_employee(employee_id, 1)
        return rows[0] if rows else None

    def list_for_department(self, department: str, *, start_date: date, end_date: date) -> Sequence[EmotionCheckin]:
        return self._select(
            """
            ec.employee_id IN (SELECT user_id FROM users WHERE department=%s)
            AND ec.checkin_date BETWEEN %s AND %s AND ec.is_deleted=0
            """,
            (department, start_date, end_date),
            suffix="ORDER BY ec.checkin_date DESC",
        )

    def count_for_date(self, checkin_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS total FROM emotion_checkins WHERE checkin_date=%s AND is_deleted=0",
                (checkin_date,),
            )
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def soft_delete(self, checkin_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE emotion_checkins SET is_deleted=1 WHERE checkin_id=%s AND is_deleted=0",
                (int(checkin_id),),
            )
            return cur.rowcount > 0
