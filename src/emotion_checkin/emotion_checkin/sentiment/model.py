from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import (
    HIGH_RISK_MAGNITUDE,
    HIGH_RISK_SCORE,
    NEGATIVE_LABEL_THRESHOLD,
    POSITIVE_LABEL_THRESHOLD,
)
from ..core.enums import SentimentLabel


def determine_sentiment_label(score: float) -> SentimentLabel:
    if score > POSITIVE_LABEL_THRESHOLD:
        return SentimentLabel.POSITIVE
    if score < NEGATIVE_LABEL_THRESHOLD:
        return SentimentLabel.NEGATIVE
    return SentimentLabel.NEUTRAL


def classify_emotion(score: Optional[float]) -> Optional[str]:
    """Finer five-step category shown next to the check-in."""
    if score is None:
        return None
    if score >= 0.6:
        return "Very Positive"
    if score >= 0.2:
        return "Positive"
    if score > -0.2:
        return "Neutral"
    if score > -0.6:
        return "Negative"
    return "Very Negative"


def is_high_risk(score: float, magnitude: float) -> bool:
    return score < HIGH_RISK_SCORE and magnitude > HIGH_RISK_MAGNITUDE


@dataclass(frozen=True)
class SentimentScore:
    """Raw document sentiment as returned by the NLP provider."""

    score: float
    magnitude: float
    language: Optional[str] = None


@dataclass(frozen=True)
class EmotionAIResult:
    result_id: int
    checkin_id: int
    sentiment_score: float
    magnitude: float
    sentiment_label: SentimentLabel
    language: str
    analyzed_at: datetime
    is_fallback: bool = False

    @property
    def is_high_risk(self) -> bool:
        return is_high_risk(self.sentiment_score, self.magnitude)
