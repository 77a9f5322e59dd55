from __future__ import annotations

from .base import CommentVisibility


class HideComments(CommentVisibility):
    """HR sees aggregates and moods, never what the employee wrote."""

    @property
    def include_comments(self) -> bool:
        return False
