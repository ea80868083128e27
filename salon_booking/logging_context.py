"""Session ID logging context.

Every log line written while serving a booking session carries that
session's ID, so one customer's path through the flow, the chat
assistant and the session store can be pulled out of a shared log.

The API sets the ID once per request in its session dependency; the
console sets it once at start-up. Records logged outside any session
show ``NO_SESSION``.

Usage:
    from salon_booking.logging_context import get_session_logger, set_session_id

    set_session_id("a1b2c3")
    logger = get_session_logger(__name__)
    logger.info("Slot confirmed")  # -> ... [a1b2c3] INFO: Slot confirmed
"""

import logging
from contextvars import ContextVar
from typing import Iterable

NO_SESSION = "NO_SESSION"

LOG_FORMAT = "%(asctime)s [%(name)s] [%(session_id)s] %(levelname)s: %(message)s"

_session_id: ContextVar[str] = ContextVar("session_id", default=NO_SESSION)


def set_session_id(session_id: str) -> None:
    """Bind a session ID to the current context (request task or console)."""
    _session_id.set(session_id)


def get_session_id() -> str:
    return _session_id.get()


class SessionIdFilter(logging.Filter):
    """Stamps ``session_id`` onto records that do not carry one yet."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session_id"):
            record.session_id = _session_id.get()  # type: ignore[attr-defined]
        return True


def _attach(target: logging.Filterer) -> None:
    if not any(isinstance(f, SessionIdFilter) for f in target.filters):
        target.addFilter(SessionIdFilter())


def install_session_filter(handlers: Iterable[logging.Handler]) -> None:
    """Attach the filter to output handlers so ``LOG_FORMAT`` always resolves."""
    for handler in handlers:
        _attach(handler)


def get_session_logger(name: str) -> logging.Logger:
    """Return a module logger whose records carry the current session ID.

    Stamping at the logger means handlers added later (test capture,
    uvicorn) still see the ID that was bound when the line was logged.
    """
    logger = logging.getLogger(name)
    _attach(logger)
    return logger
