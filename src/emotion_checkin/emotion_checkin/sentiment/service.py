from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_TIMEZONE, UNKNOWN_LANGUAGE
from ..core.enums import SentimentLabel
from .analyzer import SentimentAnalysisError, SentimentAnalyzer
from .model import EmotionAIResult, SentimentScore, determine_sentiment_label
from .repository import AIResultRepository

logger = logging.getLogger(__name__)


class SentimentService:
    """Analyse a check-in comment and persist the AI result.

    Provider failures never propagate: a NEUTRAL result (score 0, magnitude 0,
    language "unknown") is stored instead.
    """

    def __init__(self, analyzer: SentimentAnalyzer, results: AIResultRepository, *, timezone: str = DEFAULT_TIMEZONE):
        self._analyzer = analyzer
        self._results = results
        self._tz = timezone

    def analyze_checkin(self, checkin_id: int, text: str, *, now: Optional[datetime] = None) -> EmotionAIResult:
        analyzed_at = now or now_local(self._tz)
        fallback = False

        try:
            sentiment = self._analyzer.analyze(text)
            label = determine_sentiment_label(sentiment.score)
        except SentimentAnalysisError as e:
            logger.warning("Sentiment analysis failed for check-in %s, using NEUTRAL fallback: %s", checkin_id, e)
            sentiment = SentimentScore(score=0.0, magnitude=0.0, language=UNKNOWN_LANGUAGE)
            label = SentimentLabel.NEUTRAL
            fallback = True

        language = sentiment.language or UNKNOWN_LANGUAGE
        result_id = self._results.save(
            checkin_id=checkin_id,
            sentiment_score=sentiment.score,
            magnitude=sentiment.magnitude,
            sentiment_label=label,
            language=language,
            analyzed_at=analyzed_at,
        )
        return EmotionAIResult(
            result_id=result_id,
            checkin_id=checkin_id,
            sentiment_score=sentiment.score,
            magnitude=sentiment.magnitude,
            sentiment_label=label,
            language=language,
            analyzed_at=analyzed_at,
            is_fallback=fallback,
        )

    def count_high_risk(self, *, start: datetime, end: datetime) -> int:
        return self._results.count_high_risk(start=start, end=end)
