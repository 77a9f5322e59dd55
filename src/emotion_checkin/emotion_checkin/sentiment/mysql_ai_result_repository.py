from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.constants import HIGH_RISK_MAGNITUDE, HIGH_RISK_SCORE
from ..core.enums import SentimentLabel
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import EmotionAIResult
from .repository import AIResultRepository


class MySQLAIResultRepository(AIResultRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def save(
        self,
        *,
        checkin_id: int,
        sentiment_score: float,
        magnitude: float,
        sentiment_label: SentimentLabel,
        language: str,
        analyzed_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO emotion_ai_results(checkin_id, sentiment_score, magnitude, sentiment_label,
                                               language, analyzed_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(checkin_id), float(sentiment_score), float(magnitude), sentiment_label.value, language, analyzed_at),
            )
            return int(cur.lastrowid)

    def get_by_checkin(self, checkin_id: int) -> Optional[EmotionAIResult]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT result_id, checkin_id, sentiment_score, magnitude, sentiment_label, language, analyzed_at
                FROM emotion_ai_results
                WHERE checkin_id=%s
                """,
                (int(checkin_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return EmotionAIResult(
                result_id=int(r["result_id"]),
                checkin_id=int(r["checkin_id"]),
                sentiment_score=float(r["sentiment_score"]),
                magnitude=float(r["magnitude"]),
                sentiment_label=SentimentLabel(r["sentiment_label"]),
                language=r.get("language") or "unknown",
                analyzed_at=r["analyzed_at"],
            )

    def count_high_risk(self, *, start: datetime, end: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS total
                FROM emotion_ai_results
                WHERE sentiment_score < %s AND magnitude > %s AND analyzed_at BETWEEN %s AND %s
                """,
                (HIGH_RISK_SCORE, HIGH_RISK_MAGNITUDE, start, end),
            )
            row = fetchone(cur)
            return int(row["total"]) if row else 0
