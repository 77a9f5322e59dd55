from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import DashboardView
from .visibility.base import CommentVisibility
from .visibility.hide_comments import HideComments
from .visibility.show_comments import ShowComments


@dataclass
class CommentVisibilityFactory:
    """Factory Pattern: choose the comment policy for a dashboard view."""

    def for_view(self, view: DashboardView) -> CommentVisibility:
        if view == DashboardView.HR:
            return HideComments()
        return ShowComments()
