"""
Contact-details validation for the booking form.

Each field is checked independently so the form can show every error
next to its input in one pass.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional

from salon_booking.schemas.customer_schema import ContactDetails
from salon_booking.utils import normalize_phone

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
UK_PHONE_PATTERN = re.compile(r"^(\+44|0)\d{10}$")

PHONE_FORMAT_HINT = "Format: 07123456789 or +447123456789"


def _check_name(value: str) -> Optional[str]:
    if not value.strip():
        return "Name is required"
    return None


def _check_email(value: str) -> Optional[str]:
    if not value.strip():
        return "Email is required"
    if not EMAIL_PATTERN.match(value.strip()):
        return "Please enter a valid email address"
    return None


def _check_phone(value: str) -> Optional[str]:
    if not value.strip():
        return "Phone number is required"
    if not UK_PHONE_PATTERN.match(normalize_phone(value)):
        return "Please enter a valid UK phone number"
    return None


@dataclass(frozen=True)
class ContactField:
    """Schema for a single contact form field."""

    name: str
    label: str
    check: Callable[[str], Optional[str]]


CONTACT_FIELDS: tuple[ContactField, ...] = (
    ContactField(name="name", label="Full Name", check=_check_name),
    ContactField(name="email", label="Email Address", check=_check_email),
    ContactField(name="phone", label="Phone Number", check=_check_phone),
)


def validate_contact_details(name: str, email: str, phone: str) -> dict[str, str]:
    """Return a field -> message map. An empty map means the details are valid."""
    values = {"name": name, "email": email, "phone": phone}
    errors: dict[str, str] = {}
    for field_def in CONTACT_FIELDS:
        message = field_def.check(values[field_def.name] or "")
        if message:
            errors[field_def.name] = message
    if errors:
        logger.debug("Contact details rejected: %s", sorted(errors))
    return errors


def build_contact_details(name: str, email: str, phone: str) -> ContactDetails:
    """Build trimmed ContactDetails.

    Raises:
        ValueError: If any field fails validation.
    """
    errors = validate_contact_details(name, email, phone)
    if errors:
        raise ValueError(f"Invalid contact details: {', '.join(sorted(errors))}")
    return ContactDetails(name=name.strip(), email=email.strip(), phone=phone.strip())
