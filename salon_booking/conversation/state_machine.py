"""
Finite state machine for the booking selection flow.

Defines the six booking stages and the explicit transitions between
them. The flow moves forward one stage at a time, can step back one
stage on cancel, and restarts only from the completed stage.

Usage:
    sm = BookingStateMachine()
    sm.transition(TransitionTrigger.CATEGORY_SELECTED)
    assert sm.current_state == BookingState.SERVICE_SELECTION
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class BookingState(str, Enum):
    """All stages of a booking."""
    CATEGORY_SELECTION = "category_selection"
    SERVICE_SELECTION = "service_selection"
    SLOT_SELECTION = "slot_selection"
    CONTACT_DETAILS = "contact_details"
    CONFIRMATION = "confirmation"
    COMPLETED = "completed"


class TransitionTrigger(str, Enum):
    """Events that cause stage transitions."""
    MODE_CHANGED = "mode_changed"
    CATEGORY_SELECTED = "category_selected"
    SERVICE_SELECTED = "service_selected"
    SLOT_CONFIRMED = "slot_confirmed"
    CONTACT_SUBMITTED = "contact_submitted"
    BOOKING_CONFIRMED = "booking_confirmed"
    CANCELLED = "cancelled"
    NEW_BOOKING = "new_booking"


@dataclass(frozen=True)
class Transition:
    """A single valid state transition."""
    from_state: BookingState
    to_state: BookingState
    trigger: TransitionTrigger


@dataclass
class StateEntry:
    """Recorded history entry for a state visit."""
    state: BookingState
    entered_at: datetime
    trigger: Optional[TransitionTrigger] = None


class BookingFlowError(Exception):
    """Base class for rejected booking flow operations."""


class InvalidTransitionError(BookingFlowError):
    """Raised when a transition is not valid from the current state."""


class BookingStateMachine:
    """
    Deterministic state machine controlling the booking stages.

    Every transition must be explicitly defined. An operation with no
    matching transition is rejected with the triggers that are allowed.
    """

    TRANSITIONS: list[Transition] = [
        # --- Category ---
        Transition(BookingState.CATEGORY_SELECTION, BookingState.CATEGORY_SELECTION,
                   TransitionTrigger.MODE_CHANGED),
        Transition(BookingState.CATEGORY_SELECTION, BookingState.SERVICE_SELECTION,
                   TransitionTrigger.CATEGORY_SELECTED),

        # --- Service ---
        Transition(BookingState.SERVICE_SELECTION, BookingState.SERVICE_SELECTION,
                   TransitionTrigger.MODE_CHANGED),
        Transition(BookingState.SERVICE_SELECTION, BookingState.SLOT_SELECTION,
                   TransitionTrigger.SERVICE_SELECTED),
        Transition(BookingState.SERVICE_SELECTION, BookingState.CATEGORY_SELECTION,
                   TransitionTrigger.CANCELLED),

        # --- Date & time ---
        Transition(BookingState.SLOT_SELECTION, BookingState.SERVICE_SELECTION,
                   TransitionTrigger.MODE_CHANGED),
        Transition(BookingState.SLOT_SELECTION, BookingState.CONTACT_DETAILS,
                   TransitionTrigger.SLOT_CONFIRMED),
        Transition(BookingState.SLOT_SELECTION, BookingState.SERVICE_SELECTION,
                   TransitionTrigger.CANCELLED),

        # --- Contact details ---
        Transition(BookingState.CONTACT_DETAILS, BookingState.CONFIRMATION,
                   TransitionTrigger.CONTACT_SUBMITTED),
        Transition(BookingState.CONTACT_DETAILS, BookingState.SLOT_SELECTION,
                   TransitionTrigger.CANCELLED),

        # --- Confirmation gate ---
        Transition(BookingState.CONFIRMATION, BookingState.COMPLETED,
                   TransitionTrigger.BOOKING_CONFIRMED),
        Transition(BookingState.CONFIRMATION, BookingState.CONTACT_DETAILS,
                   TransitionTrigger.CANCELLED),

        # --- Terminal ---
        Transition(BookingState.COMPLETED, BookingState.CATEGORY_SELECTION,
                   TransitionTrigger.NEW_BOOKING),
    ]

    def __init__(self) -> None:
        self._current_state = BookingState.CATEGORY_SELECTION
        self._history: list[StateEntry] = [
            StateEntry(state=self._current_state, entered_at=datetime.now(timezone.utc))
        ]

    @property
    def current_state(self) -> BookingState:
        return self._current_state

    def can_transition(self, trigger: TransitionTrigger) -> bool:
        return trigger in self.get_valid_triggers()

    def transition(self, trigger: TransitionTrigger) -> BookingState:
        """
        Execute a state transition.

        Args:
            trigger: The event triggering the transition.

        Returns:
            The new booking state.

        Raises:
            InvalidTransitionError: If no valid transition exists.
        """
        for t in self.TRANSITIONS:
            if t.from_state == self._current_state and t.trigger == trigger:
                old_state = self._current_state
                self._current_state = t.to_state

                self._history.append(StateEntry(
                    state=self._current_state,
                    entered_at=datetime.now(timezone.utc),
                    trigger=trigger,
                ))

                logger.debug(
                    "State transition: %s -> %s (trigger: %s)",
                    old_state.value, self._current_state.value, trigger.value,
                )
                return self._current_state

        valid = [t.value for t in self.get_valid_triggers()]
        raise InvalidTransitionError(
            f"No valid transition from '{self._current_state.value}' "
            f"with trigger '{trigger.value}'. Valid triggers: {valid}"
        )

    def get_valid_triggers(self) -> list[TransitionTrigger]:
        """Return all triggers valid from the current state."""
        return [t.trigger for t in self.TRANSITIONS if t.from_state == self._current_state]

    def get_history(self) -> list[StateEntry]:
        """Return the full state transition history."""
        return list(self._history)

    def get_state_trace(self) -> list[str]:
        """Return ordered list of state names visited."""
        return [entry.state.value for entry in self._history]

    def is_terminal(self) -> bool:
        """Check if the booking has been completed."""
        return self._current_state == BookingState.COMPLETED
