from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ..core.enums import SentimentLabel
from .model import EmotionAIResult


class AIResultRepository(Protocol):
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
        raise NotImplementedError

    def get_by_checkin(self, checkin_id: int) -> Optional[EmotionAIResult]:
        raise NotImplementedError

    def count_high_risk(self, *, start: datetime, end: datetime) -> int:
        """Results with score < -0.5 and magnitude > 2.0 analysed in [start, end]."""
        raise NotImplementedError
