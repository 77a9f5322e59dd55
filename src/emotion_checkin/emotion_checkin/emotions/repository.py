from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import EmotionType


class EmotionCatalogRepository(Protocol):
    def get_by_id(self, emotion_id: int) -> Optional[EmotionType]:
        raise NotImplementedError

    def list_all(self) -> Sequence[EmotionType]:
        """Ordered by level then name."""
        raise NotImplementedError
