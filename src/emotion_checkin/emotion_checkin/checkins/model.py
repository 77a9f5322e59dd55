from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import EmotionLevel, SentimentLabel


@dataclass(frozen=True)
class EmotionCheckin:
    """Domain entity: one employee's mood submission for one calendar day.

    Joined with its catalog entry and, when analysed, its AI sentiment result.
    """

    checkin_id: int
    employee_id: int
    emotion_level: int
    emotion_type_id: int
    checkin_time: datetime
    checkin_date: date
    comment: Optional[str] = None
    emotion_name: Optional[str] = None
    color_code: Optional[str] = None
    sentiment_score: Optional[float] = None
    sentiment_magnitude: Optional[float] = None
    sentiment_label: Optional[SentimentLabel] = None
    is_deleted: bool = False

    @property
    def is_bad_mood(self) -> bool:
        return self.emotion_level == EmotionLevel.NEGATIVE

    @property
    def has_comment(self) -> bool:
        return bool(self.comment and self.comment.strip())
