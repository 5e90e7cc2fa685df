"""In-memory registry of live timer sessions."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from uuid import UUID, uuid4

from pose_timer.services.session import SessionController

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL_SECONDS = 4 * 60 * 60
DEFAULT_COMPLETED_TTL_SECONDS = 10 * 60


@dataclass
class _SessionEntry:
    controller: SessionController
    last_access: float


@dataclass
class SessionRegistry:
    """Holds session controllers until they are removed or go idle.

    A session expires once it has not been accessed for ``ttl_seconds``, or
    for ``completed_ttl_seconds`` after it has completed. Expired sessions are
    closed and dropped whenever a session is added or looked up.
    """

    _sessions: dict[UUID, _SessionEntry]

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_SESSION_TTL_SECONDS,
        completed_ttl_seconds: float = DEFAULT_COMPLETED_TTL_SECONDS,
        now: Callable[[], float] = time.monotonic,
    ) -> None:
        self._sessions = {}
        self._ttl_seconds = ttl_seconds
        self._completed_ttl_seconds = completed_ttl_seconds
        self._now = now

    def add(self, controller: SessionController) -> UUID:
        self.evict_expired()
        session_id = uuid4()
        self._sessions[session_id] = _SessionEntry(controller, self._now())
        return session_id

    def get(self, session_id: UUID) -> SessionController | None:
        """Return a live session and mark it as accessed."""
        self.evict_expired()
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        entry.last_access = self._now()
        return entry.controller

    def remove(self, session_id: UUID) -> bool:
        """Close and forget a session, returning whether it existed."""
        entry = self._sessions.pop(session_id, None)
        if entry is None:
            return False
        entry.controller.close()
        return True

    def evict_expired(self) -> int:
        """Close and drop expired sessions, returning how many were dropped."""
        current = self._now()
        expired = [
            session_id
            for session_id, entry in self._sessions.items()
            if self._is_expired(entry, current)
        ]
        for session_id in expired:
            self.remove(session_id)
        if expired:
            logger.info("Evicted %d idle sessions", len(expired))
        return len(expired)

    def close_all(self) -> None:
        for entry in self._sessions.values():
            entry.controller.close()
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)

    def _is_expired(self, entry: _SessionEntry, current: float) -> bool:
        idle = current - entry.last_access
        if entry.controller.is_completed:
            return idle >= self._completed_ttl_seconds
        return idle >= self._ttl_seconds
