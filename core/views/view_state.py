# Path: core/views/view_state.py
# Purpose: Track how the source/result pair is displayed.
# Layer: core/views.
# Details: Before is always reachable; After and Overlay only while a result exists.

from __future__ import annotations

from core.models.domain import ViewMode


class ViewState:
    """Small state machine over Before / After / Overlay."""

    def __init__(self) -> None:
        self.mode = ViewMode.BEFORE
        self.has_result = False

    def can_select(self, mode: ViewMode) -> bool:
        return mode is ViewMode.BEFORE or self.has_result

    def select(self, mode: ViewMode) -> bool:
        """Switch to ``mode``; returns False and keeps the state when no result exists."""

        if not self.can_select(mode):
            return False
        self.mode = mode
        return True

    def show_result(self) -> None:
        """A result became available (new correction or history replay)."""

        self.has_result = True
        self.mode = ViewMode.AFTER

    def reset(self) -> None:
        """New upload: back to Before, previous result discarded."""

        self.has_result = False
        self.mode = ViewMode.BEFORE

    def promote(self) -> None:
        """The result became the new source; the cycle starts over."""

        self.reset()
