from __future__ import annotations

from datetime import datetime

import pytest
import requests

from src.emotion_checkin.emotion_checkin.core.enums import SentimentLabel
from src.emotion_checkin.emotion_checkin.sentiment.analyzer import GoogleNlpClient, SentimentAnalysisError
from src.emotion_checkin.emotion_checkin.sentiment.model import (
    EmotionAIResult,
    classify_emotion,
    determine_sentiment_label,
    is_high_risk,
)


@pytest.mark.parametrize(
    "score, label",
    [
        (0.9, SentimentLabel.POSITIVE),
        (0.26, SentimentLabel.POSITIVE),
        (0.25, SentimentLabel.NEUTRAL),
        (0.0, SentimentLabel.NEUTRAL),
        (-0.25, SentimentLabel.NEUTRAL),
        (-0.26, SentimentLabel.NEGATIVE),
    ],
)
def test_sentiment_label_thresholds(score, label):
    assert determine_sentiment_label(score) == label


@pytest.mark.parametrize(
    "score, category",
    [
        (0.6, "Very Positive"),
        (0.2, "Positive"),
        (0.0, "Neutral"),
        (-0.2, "Negative"),
        (-0.6, "Very Negative"),
    ],
)
def test_five_tier_emotion_category(score, category):
    assert classify_emotion(score) == category


def test_high_risk_needs_strong_negative_and_high_magnitude():
    assert is_high_risk(-0.6, 2.5) is True
    assert is_high_risk(-0.5, 2.5) is False
    assert is_high_risk(-0.9, 2.0) is False

    result = EmotionAIResult(1, 1, -0.8, 3.0, SentimentLabel.NEGATIVE, "en", datetime(2026, 3, 10))
    assert result.is_high_risk is True


class FakeResponse:
    def __init__(self, payload, status=200):
        self._payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response


def test_google_client_posts_document_and_parses_sentiment():
    session = FakeSession(FakeResponse({"documentSentiment": {"score": -0.4, "magnitude": 1.2}, "language": "th"}))
    client = GoogleNlpClient("key-123", endpoint="https://nlp.test/v1/documents:analyzeSentiment", timeout=3, session=session)

    result = client.analyze("งานเยอะมาก")

    assert result.score == -0.4
    assert result.magnitude == 1.2
    assert result.language == "th"
    url, kwargs = session.calls[0]
    assert url == "https://nlp.test/v1/documents:analyzeSentiment"
    assert kwargs["params"] == {"key": "key-123"}
    assert kwargs["json"] == {"document": {"type": "PLAIN_TEXT", "content": "งานเยอะมาก"}, "encodingType": "UTF8"}
    assert kwargs["timeout"] == 3.0


def test_google_client_without_key_fails_fast():
    session = FakeSession()
    with pytest.raises(SentimentAnalysisError):
        GoogleNlpClient("", session=session).analyze("hello")
    assert session.calls == []


@pytest.mark.parametrize(
    "session",
    [
        FakeSession(error=requests.exceptions.ConnectionError("down")),
        FakeSession(error=requests.exceptions.Timeout("slow")),
        FakeSession(FakeResponse({"error": {"code": 403}}, status=403)),
        FakeSession(FakeResponse({"unexpected": True})),
    ],
)
def test_google_client_wraps_provider_failures(session):
    with pytest.raises(SentimentAnalysisError):
        GoogleNlpClient("key", session=session).analyze("hello")


def test_service_fallback_is_neutral_and_flagged(failing_world, fixed_now):
    result = failing_world.container.sentiment_service.analyze_checkin(7, "text", now=fixed_now)

    assert result.is_fallback is True
    assert result.sentiment_label == SentimentLabel.NEUTRAL
    assert (result.sentiment_score, result.magnitude, result.language) == (0.0, 0.0, "unknown")
    assert failing_world.ai_results.get_by_checkin(7).analyzed_at == fixed_now


def test_service_stores_provider_result(world, fixed_now):
    result = world.container.sentiment_service.analyze_checkin(3, "nice", now=fixed_now)

    assert result.is_fallback is False
    assert result.sentiment_label == SentimentLabel.POSITIVE
    assert world.ai_results.get_by_checkin(3).language == "en"
