# Path: core/history/session_history.py
# Purpose: Keep a bounded, newest-first log of completed correction sessions.
# Layer: core/history.
# Details: Entries are immutable; clear() and capacity eviction are the only removals.

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from core.models.domain import EditSession

DEFAULT_CAPACITY = 20


class SessionHistory:
    """Ordered refinement log supporting replay and iteration."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("History capacity must be at least 1.")
        self.capacity = capacity
        self._sessions: List[EditSession] = []

    def append(self, session: EditSession) -> Tuple[EditSession, ...]:
        """Insert ``session`` as the newest entry, evicting the oldest beyond capacity."""

        self._sessions.insert(0, session)
        del self._sessions[self.capacity :]
        return self.entries

    @property
    def entries(self) -> Tuple[EditSession, ...]:
        return tuple(self._sessions)

    @property
    def latest(self) -> Optional[EditSession]:
        return self._sessions[0] if self._sessions else None

    def get(self, session_id: str) -> EditSession:
        for session in self._sessions:
            if session.id == session_id:
                return session
        raise KeyError(f"Session {session_id} not found")

    def replay(self, session_id: str) -> Tuple[bytes, bytes]:
        """Return the (original, result) image pair of a past session."""

        session = self.get(session_id)
        return session.original_image, session.result_image

    def clear(self) -> None:
        """Empty the log. Callers must confirm with the user first."""

        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[EditSession]:
        return iter(tuple(self._sessions))
