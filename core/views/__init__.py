# Path: core/views/__init__.py
# Purpose: Package initializer for comparison view state.
# Layer: core/views.
# Details: Exposes the Before/After/Overlay state machine.

from .view_state import ViewState

__all__ = ["ViewState"]
