from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

EMOJI_BY_LEVEL = {1: "😢", 2: "😐", 3: "😊"}
UNKNOWN_EMOJI = "❓"


def emoji_for_level(level: Optional[int]) -> str:
    return EMOJI_BY_LEVEL.get(level, UNKNOWN_EMOJI) if level is not None else UNKNOWN_EMOJI


@dataclass(frozen=True)
class EmotionType:
    """Static catalog entry an employee picks when checking in."""

    emotion_id: int
    name: str
    level: int
    description: Optional[str] = None
    color_code: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.emotion_id,
            "name": self.name,
            "level": self.level,
            "description": self.description,
            "color_code": self.color_code,
            "emoji": emoji_for_level(self.level),
        }
