"""Shared utilities used across the salon booking app."""

import re
from datetime import datetime


def normalize_phone(value: str) -> str:
    """Remove all whitespace from a phone number.

    Punctuation is kept, so "0712-345-6789" stays invalid for UK matching.

    Examples:
        >>> normalize_phone(" 07123 456 789 ")
        '07123456789'
        >>> normalize_phone("+44 7123 456789")
        '+447123456789'
    """
    return re.sub(r"\s", "", value)


def format_time(moment: datetime) -> str:
    """en-GB 12-hour clock label, e.g. '9:00 am' or '12:30 pm'."""
    hour = moment.hour % 12 or 12
    suffix = "am" if moment.hour < 12 else "pm"
    return f"{hour}:{moment.minute:02d} {suffix}"


def format_date(moment: datetime) -> str:
    """Long en-GB date, e.g. 'Tuesday 20 October 2026'."""
    return f"{moment.strftime('%A')} {moment.day} {moment.strftime('%B %Y')}"


def format_datetime(moment: datetime) -> str:
    """Long en-GB date and time, e.g. 'Tuesday 20 October 2026 at 10:30 am'."""
    return f"{format_date(moment)} at {format_time(moment)}"
