"""
Offline console demo - walks through a salon booking in the terminal.

Drives the real booking flow, slot generator, contact validation and
session chat log. Chat lines ("ask ...") go to the assistant; without an
OPENAI_API_KEY they come back as the fallback apology.

Usage:
    python console_demo.py
    python console_demo.py --scenario scheduled
    python console_demo.py --scenario immediate
"""

import argparse
import asyncio
from datetime import date, timedelta

from salon_booking.config import settings
from salon_booking.conversation.booking_flow import (
    CategorySelection,
    Completed,
    Confirmation,
    ContactCollection,
    ServiceSelection,
    SlotSelection,
)
from salon_booking.conversation.session import SalonSession
from salon_booking.conversation.state_machine import BookingFlowError
from salon_booking.logging_context import set_session_id
from salon_booking.prompts.prompt_templates import TERMS_AND_CONDITIONS
from salon_booking.schemas.booking_schema import BookingMode
from salon_booking.tools.availability import format_slot
from salon_booking.tools.booking import summarize_selection
from salon_booking.tools.customer import PHONE_FORMAT_HINT
from salon_booking.tools.services import QUICK_PROMPTS

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"


class ConsoleSession:
    """Renders one SalonSession as a text menu."""

    def __init__(self) -> None:
        self.session = SalonSession()
        set_session_id(self.session.session_id)
        self._shown_messages = 0

    @property
    def flow(self):
        return self.session.flow

    def say(self, text: str) -> None:
        print(f"{GREEN}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    # Pre-scripted scenarios for --scenario flag
    SCENARIOS: dict[str, list[str]] = {
        "scheduled": [
            "hair",
            "haircut",
            (date.today() + timedelta(days=1)).isoformat(),
            "1",
            "confirm",
            "Jane Doe | jane@example.com | 07123 456 789",
            "agree",
            "confirm",
            "ask What should I bring to my appointment?",
        ],
        "immediate": [
            "mode immediate",
            "hair",
            "treatment",
            "1",
            "confirm",
            "Sam Lee | sam@example.co.uk | +447123456789",
            "agree",
            "confirm",
        ],
    }

    def run_scenario(self, scenario: str) -> None:
        """Auto-play a pre-scripted scenario for demo purposes."""
        steps = self.SCENARIOS.get(scenario)
        if not steps:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return

        self._banner(f"Scenario: {scenario}")
        self.render()
        for step in steps:
            print(f"\n{BLUE}[You] {RESET}{step}")
            self._process_input(step)
            self.render()
        self._footer()

    def run(self) -> None:
        self._banner("Type 'help' for commands, 'quit' to exit")
        self.render()
        while True:
            user_input = input(f"\n{BLUE}[You] {RESET}").strip()
            if not user_input:
                continue
            if user_input.lower() in ("quit", "exit", "q"):
                print(f"\n{DIM}Session ended.{RESET}")
                break
            self._process_input(user_input)
            self.render()
        self._footer()

    def _banner(self, subtitle: str) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  {settings.salon.name.upper()} - Booking Console{RESET}")
        print(f"{BOLD}  {subtitle}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    def _footer(self) -> None:
        print(f"\n{BOLD}{'=' * 60}{RESET}")
        print(f"{DIM}  State trace: {' -> '.join(self.flow.get_state_trace())}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    # ------------------------------------------------------------------ #
    # Rendering
    # ------------------------------------------------------------------ #

    def render(self) -> None:
        self._render_new_messages()
        stage = self.flow.stage
        self.system_log(f"State: {self.flow.state.value} | mode: {self.flow.mode.value}")

        if isinstance(stage, CategorySelection):
            self.say("Which service would you like to book?")
            for category, count in self.flow.categories():
                print(f"  {category.icon} {category.id:<8} {category.name} ({count} services available)")
        elif isinstance(stage, ServiceSelection):
            services = self.flow.available_services()
            if not services:
                self.say(f"No services available for {self.flow.mode.value} booking type.")
            for service in services:
                print(f"  {service.id:<11} {service.name} - {service.duration} - {service.price}")
            print(f"{DIM}  'back' to return to categories{RESET}")
        elif isinstance(stage, SlotSelection):
            self._render_slots(stage)
        elif isinstance(stage, ContactCollection):
            self.say("Enter: name | email | phone")
            print(f"{DIM}  {PHONE_FORMAT_HINT}{RESET}")
            for field_name, message in stage.errors.items():
                print(f"  {RED}{field_name}: {message}{RESET}")
        elif isinstance(stage, Confirmation):
            self._render_summary(summarize_selection(stage.service, stage.slot, stage.contact))
            for term in TERMS_AND_CONDITIONS:
                print(f"  - {term}")
            mark = "x" if stage.terms_accepted else " "
            print(f"  [{mark}] I agree to the terms and conditions ('agree')")
            state = "enabled" if stage.can_confirm else "disabled"
            print(f"{DIM}  'confirm' is {state}{RESET}")
        elif isinstance(stage, Completed):
            print(f"{DIM}  'new' to book again, 'ask <question>' to chat{RESET}")

    def _render_slots(self, stage: SlotSelection) -> None:
        if stage.day is None:
            self.say("Please select a date first (YYYY-MM-DD)")
            return
        self.say(f"Available times for {stage.day.strftime('%A %d %B')}:")
        slots = self.flow.available_slots()
        if not slots:
            print("  No available time slots")
        for i, slot in enumerate(slots, 1):
            marker = "*" if slot == stage.slot else " "
            print(f" {marker}{i:>2}. {format_slot(slot)}")
        if stage.slot is not None:
            self._render_summary(summarize_selection(stage.service, stage.slot))
        print(f"{DIM}  pick a number, then 'confirm'; 'cancel' to go back{RESET}")

    def _render_summary(self, rows: dict[str, str]) -> None:
        print(f"{BOLD}  Appointment Summary{RESET}")
        for label, value in rows.items():
            print(f"    {label}: {value}")

    def _render_new_messages(self) -> None:
        for message in self.session.messages[self._shown_messages:]:
            colour = YELLOW if message.role.value == "assistant" else BLUE
            stamp = message.timestamp.strftime("%H:%M")
            print(f"{colour}[{stamp} {message.role.value}] {message.content}{RESET}")
        self._shown_messages = len(self.session.messages)

    # ------------------------------------------------------------------ #
    # Input handling
    # ------------------------------------------------------------------ #

    def _process_input(self, text: str) -> None:
        try:
            self._dispatch(text)
        except BookingFlowError as exc:
            print(f"{RED}{exc}{RESET}")

    def _dispatch(self, text: str) -> None:
        lower = text.lower()
        stage = self.flow.stage

        if lower == "help":
            self._show_help()
            return
        if lower.startswith("ask "):
            asyncio.run(self.session.send_message(text[4:]))
            return
        if lower.startswith("mode "):
            self.flow.set_mode(BookingMode(lower[5:].strip()))
            return
        if lower in ("cancel", "back"):
            self.flow.cancel()
            return

        if isinstance(stage, CategorySelection):
            self.flow.select_category(lower)
        elif isinstance(stage, ServiceSelection):
            self.flow.select_service(lower)
        elif isinstance(stage, SlotSelection):
            self._handle_slot_input(lower)
        elif isinstance(stage, ContactCollection):
            parts = [p.strip() for p in text.split("|")]
            parts += [""] * (3 - len(parts))
            self.flow.submit_contact(*parts[:3])
        elif isinstance(stage, Confirmation):
            if lower == "agree":
                self.flow.set_terms_accepted(not stage.terms_accepted)
            elif lower == "confirm":
                self.session.confirm_booking()
        elif isinstance(stage, Completed) and lower == "new":
            self.flow.new_booking()

    def _handle_slot_input(self, lower: str) -> None:
        if lower == "confirm":
            self.session.confirm_slot()
        elif lower.isdigit():
            slots = self.flow.available_slots()
            index = int(lower) - 1
            if not 0 <= index < len(slots):
                print(f"{RED}Pick a number between 1 and {len(slots)}{RESET}")
                return
            self.flow.select_slot(slots[index])
        else:
            try:
                day = date.fromisoformat(lower)
            except ValueError:
                print(f"{RED}Dates look like 2026-10-20{RESET}")
                return
            self.flow.select_day(day)

    def _show_help(self) -> None:
        print("  mode scheduled|immediate, back/cancel, ask <question>, quit")
        for category, prompts in QUICK_PROMPTS:
            print(f"  {category}: {' / '.join(prompts[:2])} ...")


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline booking console")
    parser.add_argument(
        "--scenario",
        choices=["scheduled", "immediate"],
        default=None,
        help="Auto-play a pre-scripted scenario instead of interactive mode",
    )
    args = parser.parse_args()

    session = ConsoleSession()
    if args.scenario:
        session.run_scenario(args.scenario)
    else:
        session.run()


if __name__ == "__main__":
    main()
