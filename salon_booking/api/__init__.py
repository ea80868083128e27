from salon_booking.api.app import app, create_app
from salon_booking.api.store import SessionNotFoundError, SessionStore

__all__ = ["app", "create_app", "SessionNotFoundError", "SessionStore"]
