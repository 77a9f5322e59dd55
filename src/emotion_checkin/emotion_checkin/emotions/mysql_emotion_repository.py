from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import EmotionType
from .repository import EmotionCatalogRepository


def _row_to_emotion(row: dict) -> EmotionType:
    return EmotionType(
        emotion_id=int(row["emotion_id"]),
        name=row["name"],
        level=int(row["level"]),
        description=row.get("description"),
        color_code=row.get("color_code"),
    )


class MySQLEmotionCatalogRepository(EmotionCatalogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, emotion_id: int) -> Optional[EmotionType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT emotion_id, name, level, description, color_code FROM emotion_catalog WHERE emotion_id=%s",
                (int(emotion_id),),
            )
            row = fetchone(cur)
            return _row_to_emotion(row) if row else None

    def list_all(self) -> Sequence[EmotionType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT emotion_id, name, level, description, color_code FROM emotion_catalog ORDER BY level, name"
            )
            return [_row_to_emotion(r) for r in fetchall(cur)]
