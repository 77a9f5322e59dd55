"""Client for the Google Cloud Natural Language sentiment endpoint."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import requests

from .model import SentimentScore

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://language.googleapis.com/v1/documents:analyzeSentiment"


class SentimentAnalysisError(Exception):
    """Raised when the provider cannot be reached or answers garbage."""


class SentimentAnalyzer(Protocol):
    def analyze(self, text: str) -> SentimentScore:
        raise NotImplementedError


class GoogleNlpClient(SentimentAnalyzer):
    def __init__(
        self,
        api_key: Optional[str],
        *,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self._api_key = api_key
        self._endpoint = endpoint
        self._timeout = float(timeout)
        self._session = session or requests.Session()

    def analyze(self, text: str) -> SentimentScore:
        if not self._api_key:
            raise SentimentAnalysisError("GOOGLE_NLP_API_KEY is not configured")

        payload = {
            "document": {"type": "PLAIN_TEXT", "content": text},
            "encodingType": "UTF8",
        }
        try:
            response = self._session.post(
                self._endpoint,
                params={"key": self._api_key},
                json=payload,
                timeout=self._timeout,
            )
            response.raise_for_status()
            body = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            raise SentimentAnalysisError(f"Sentiment request failed: {e}") from e

        document = body.get("documentSentiment") if isinstance(body, dict) else None
        if not isinstance(document, dict):
            raise SentimentAnalysisError(f"Unexpected sentiment response: {body!r}")

        try:
            result = SentimentScore(
                score=float(document.get("score", 0.0)),
                magnitude=float(document.get("magnitude", 0.0)),
                language=body.get("language"),
            )
        except (TypeError, ValueError) as e:
            raise SentimentAnalysisError(f"Unexpected sentiment values: {document!r}") from e

        logger.info(
            "Sentiment analysed: score=%.3f magnitude=%.3f language=%s",
            result.score,
            result.magnitude,
            result.language,
        )
        return result
