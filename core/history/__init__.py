# Path: core/history/__init__.py
# Purpose: Package initializer for the refinement log.
# Layer: core/history.
# Details: Exposes the bounded session history.

from .session_history import DEFAULT_CAPACITY, SessionHistory

__all__ = ["DEFAULT_CAPACITY", "SessionHistory"]
