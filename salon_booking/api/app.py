"""FastAPI application serving the booking flow and chat assistant.

Features:
- Static catalogue, slot and quick-prompt endpoints
- Per-session booking flow actions
- Chat endpoint with single in-flight request per session
- Consistent ErrorResponse bodies for every rejected action
"""

from datetime import date, datetime, timedelta
from typing import Callable, Optional

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from salon_booking.api.models import (
    CategoryRequest,
    CategoryView,
    ContactRequest,
    ContactValidationResponse,
    DayRequest,
    ErrorResponse,
    MessageRequest,
    MessageResponse,
    ModeRequest,
    QuickPromptGroup,
    ServiceRequest,
    SessionView,
    SlotRequest,
    SlotView,
    TermsRequest,
)
from salon_booking.api.store import SessionNotFoundError, SessionStore
from salon_booking.config import settings
from salon_booking.conversation.booking_flow import (
    BookingFlow,
    TermsNotAcceptedError,
    UnknownSelectionError,
)
from salon_booking.conversation.session import SalonSession, SessionBusyError
from salon_booking.conversation.state_machine import InvalidTransitionError
from salon_booking.logging_context import get_session_logger, set_session_id
from salon_booking.schemas.booking_schema import BookingMode, Service
from salon_booking.tools.availability import generate_slots
from salon_booking.tools.customer import validate_contact_details
from salon_booking.tools.services import QUICK_PROMPTS, get_categories, get_category

logger = get_session_logger(__name__)


def _error(status_code: int, error: str, detail: str, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, detail=detail, code=code).model_dump(),
    )


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning("Validation error: %s", exc.errors())
        return _error(
            422,
            "Validation Error", str(exc.errors()), "VALIDATION_ERROR",
        )

    @app.exception_handler(SessionNotFoundError)
    async def session_not_found_handler(request: Request, exc: SessionNotFoundError):
        return _error(
            status.HTTP_404_NOT_FOUND,
            "Session not found", f"No session with id {exc.args[0]}", "SESSION_NOT_FOUND",
        )

    @app.exception_handler(UnknownSelectionError)
    async def unknown_selection_handler(request: Request, exc: UnknownSelectionError):
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid selection", str(exc), "UNKNOWN_SELECTION")

    @app.exception_handler(TermsNotAcceptedError)
    async def terms_handler(request: Request, exc: TermsNotAcceptedError):
        return _error(status.HTTP_409_CONFLICT, "Terms not accepted", str(exc), "TERMS_NOT_ACCEPTED")

    @app.exception_handler(InvalidTransitionError)
    async def transition_handler(request: Request, exc: InvalidTransitionError):
        return _error(status.HTTP_409_CONFLICT, "Action not allowed", str(exc), "INVALID_TRANSITION")

    @app.exception_handler(SessionBusyError)
    async def busy_handler(request: Request, exc: SessionBusyError):
        return _error(status.HTTP_409_CONFLICT, "Session busy", str(exc), "SESSION_BUSY")


def create_app(
    store: Optional[SessionStore] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> FastAPI:
    """Build the API. Tests pass their own store and clock."""
    app = FastAPI(
        title="Salon Booking API",
        description="Service booking flow and chat assistant for a hair & beauty salon",
        version="1.0.0",
    )
    if store is None:
        store = SessionStore(
            factory=lambda: SalonSession(flow=BookingFlow(clock=clock)),
            ttl=timedelta(minutes=settings.server.session_ttl_minutes),
            clock=clock,
        )
    app.state.store = store
    app.state.clock = clock

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.server.cors_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )
    _register_exception_handlers(app)

    # Async so the session ID is bound in the request task, not a worker thread.
    async def get_session(session_id: str, request: Request) -> SalonSession:
        set_session_id(session_id)
        return request.app.state.store.get(session_id)

    # ------------------------------------------------------------------ #
    # Static data
    # ------------------------------------------------------------------ #

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "salon": settings.salon.name}

    @app.get("/api/catalog/categories", response_model=list[CategoryView])
    async def list_categories(mode: BookingMode = BookingMode.SCHEDULED):
        return [CategoryView.build(c, mode) for c in get_categories()]

    @app.get("/api/catalog/categories/{category_id}/services", response_model=list[Service])
    async def list_services(category_id: str, mode: BookingMode = BookingMode.SCHEDULED):
        category = get_category(category_id)
        if category is None:
            raise UnknownSelectionError(f"Unknown category '{category_id}'")
        return category.services_for(mode)

    @app.get("/api/slots", response_model=list[SlotView])
    async def list_slots(
        request: Request,
        mode: BookingMode = BookingMode.SCHEDULED,
        day: Optional[date] = Query(None),
    ):
        now = request.app.state.clock()
        if mode == BookingMode.IMMEDIATE:
            day = now.date()
        return [SlotView.build(s) for s in generate_slots(day, mode, now)]

    @app.get("/api/quick-prompts", response_model=list[QuickPromptGroup])
    async def quick_prompts():
        return [QuickPromptGroup(category=c, prompts=list(p)) for c, p in QUICK_PROMPTS]

    @app.post("/api/contact/validate", response_model=ContactValidationResponse)
    async def validate_contact(body: ContactRequest):
        errors = validate_contact_details(body.name, body.email, body.phone)
        return ContactValidationResponse(valid=not errors, errors=errors)

    # ------------------------------------------------------------------ #
    # Sessions
    # ------------------------------------------------------------------ #

    @app.post("/api/sessions", response_model=SessionView, status_code=status.HTTP_201_CREATED)
    async def create_session(request: Request):
        session = request.app.state.store.create()
        set_session_id(session.session_id)
        return SessionView.from_session(session)

    @app.get("/api/sessions/{session_id}", response_model=SessionView)
    async def read_session(session: SalonSession = Depends(get_session)):
        return SessionView.from_session(session)

    @app.delete("/api/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_session(session_id: str, request: Request):
        if request.app.state.store.discard(session_id) is None:
            raise SessionNotFoundError(session_id)

    @app.post("/api/sessions/{session_id}/mode", response_model=SessionView)
    async def set_mode(body: ModeRequest, session: SalonSession = Depends(get_session)):
        session.flow.set_mode(body.mode)
        return SessionView.from_session(session)

    @app.post("/api/sessions/{session_id}/category", response_model=SessionView)
    async def select_category(body: CategoryRequest, session: SalonSession = Depends(get_session)):
        session.flow.select_category(body.category_id)
        return SessionView.from_session(session)

    @app.post("/api/sessions/{session_id}/service", response_model=SessionView)
    async def select_service(body: ServiceRequest, session: SalonSession = Depends(get_session)):
        session.flow.select_service(body.service_id)
        return SessionView.from_session(session)

    @app.post("/api/sessions/{session_id}/day", response_model=SessionView)
    async def select_day(body: DayRequest, session: SalonSession = Depends(get_session)):
        session.flow.select_day(body.day)
        return SessionView.from_session(session)

    @app.post("/api/sessions/{session_id}/slot", response_model=SessionView)
    async def select_slot(body: SlotRequest, session: SalonSession = Depends(get_session)):
        session.flow.select_slot(body.slot)
        return SessionView.from_session(session)

    @app.post("/api/sessions/{session_id}/slot/confirm", response_model=SessionView)
    async def confirm_slot(session: SalonSession = Depends(get_session)):
        session.confirm_slot()
        return SessionView.from_session(session)

    @app.post("/api/sessions/{session_id}/contact", response_model=SessionView)
    async def submit_contact(body: ContactRequest, session: SalonSession = Depends(get_session)):
        errors = session.flow.submit_contact(body.name, body.email, body.phone)
        if errors:
            logger.warning("Contact details rejected: %s", sorted(errors))
        return SessionView.from_session(session)

    @app.post("/api/sessions/{session_id}/terms", response_model=SessionView)
    async def accept_terms(body: TermsRequest, session: SalonSession = Depends(get_session)):
        session.flow.set_terms_accepted(body.accepted)
        return SessionView.from_session(session)

    @app.post("/api/sessions/{session_id}/confirm", response_model=SessionView)
    async def confirm_booking(session: SalonSession = Depends(get_session)):
        session.confirm_booking()
        return SessionView.from_session(session)

    @app.post("/api/sessions/{session_id}/cancel", response_model=SessionView)
    async def cancel(session: SalonSession = Depends(get_session)):
        session.flow.cancel()
        return SessionView.from_session(session)

    @app.post("/api/sessions/{session_id}/new", response_model=SessionView)
    async def new_booking(session: SalonSession = Depends(get_session)):
        session.flow.new_booking()
        return SessionView.from_session(session)

    @app.post("/api/sessions/{session_id}/messages", response_model=MessageResponse)
    async def send_message(body: MessageRequest, session: SalonSession = Depends(get_session)):
        reply = await session.send_message(body.message)
        return MessageResponse(reply=reply, messages=session.messages)

    return app


app = create_app()
