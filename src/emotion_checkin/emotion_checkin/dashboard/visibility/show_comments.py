from __future__ import annotations

from .base import CommentVisibility


class ShowComments(CommentVisibility):
    """The employee's own view and the SUPERADMIN view."""

    @property
    def include_comments(self) -> bool:
        return True
