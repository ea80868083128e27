"""In-memory session store with idle expiry.

Sessions live only in process memory. A session untouched for longer
than the TTL is dropped, together with its booking and chat log, the
next time the store is used.
"""

from datetime import datetime, timedelta
from typing import Callable, Optional

from salon_booking.conversation.session import SalonSession
from salon_booking.logging_context import get_session_logger

logger = get_session_logger(__name__)


class SessionNotFoundError(KeyError):
    """Raised when a session ID is unknown, expired or already closed."""


class SessionStore:
    """Maps session IDs to live SalonSession objects."""

    def __init__(
        self,
        factory: Callable[[], SalonSession] = SalonSession,
        ttl: timedelta = timedelta(minutes=60),
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._factory = factory
        self._ttl = ttl
        self._clock = clock
        self._sessions: dict[str, SalonSession] = {}
        self._last_activity: dict[str, datetime] = {}

    def create(self) -> SalonSession:
        self.cleanup_expired_sessions()
        session = self._factory()
        self._sessions[session.session_id] = session
        self._last_activity[session.session_id] = self._clock()
        logger.info("Session created: %s", session.session_id)
        return session

    def get(self, session_id: str) -> SalonSession:
        """Fetch a session and mark it active.

        Raises:
            SessionNotFoundError: If the ID is unknown or has expired.
        """
        self.cleanup_expired_sessions()
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        self._last_activity[session_id] = self._clock()
        return session

    def discard(self, session_id: str) -> Optional[SalonSession]:
        session = self._sessions.pop(session_id, None)
        self._last_activity.pop(session_id, None)
        if session is not None:
            logger.info("Session discarded: %s", session_id)
        return session

    def cleanup_expired_sessions(self) -> int:
        """
        Drop sessions idle for longer than the TTL.

        A session with a chat reply in flight is kept until the reply lands.

        Returns:
            Number of sessions removed.
        """
        cutoff = self._clock() - self._ttl
        expired = [
            sid for sid, seen in self._last_activity.items()
            if seen < cutoff and not self._sessions[sid].is_busy
        ]
        for sid in expired:
            del self._sessions[sid]
            del self._last_activity[sid]
        if expired:
            logger.info("Expired %d idle session(s)", len(expired))
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)
