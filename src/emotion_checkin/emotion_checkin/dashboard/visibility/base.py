from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class CommentVisibility(ABC):
    """Strategy Pattern: decide whether free-text comments leave the service."""

    @property
    @abstractmethod
    def include_comments(self) -> bool:
        raise NotImplementedError

    def apply(self, comment: Optional[str]) -> Optional[str]:
        return comment if self.include_comments else None
