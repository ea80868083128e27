"""Tests for contact-details validation."""

import pytest

from salon_booking.tools.customer import build_contact_details, validate_contact_details

VALID = {"name": "Jane Doe", "email": "jane@example.com", "phone": "07123456789"}


def _errors(**overrides) -> dict[str, str]:
    values = {**VALID, **overrides}
    return validate_contact_details(values["name"], values["email"], values["phone"])


class TestValidContact:
    def test_all_valid(self):
        assert _errors() == {}

    @pytest.mark.parametrize("phone", [
        "07123456789",
        "+447123456789",
        "07123 456 789",
        " +44 7123 456789 ",
    ])
    def test_accepted_phone_formats(self, phone):
        assert _errors(phone=phone) == {}

    def test_short_email(self):
        assert _errors(email="a@b.co") == {}

    def test_subdomain_email(self):
        assert _errors(email="jane@mail.example.co.uk") == {}


class TestRequiredFields:
    def test_name_required(self):
        assert _errors(name="   ") == {"name": "Name is required"}

    def test_email_required(self):
        assert _errors(email="") == {"email": "Email is required"}

    def test_phone_required(self):
        assert _errors(phone=" ") == {"phone": "Phone number is required"}

    def test_every_field_reported_at_once(self):
        errors = validate_contact_details("", "", "")
        assert set(errors) == {"name", "email", "phone"}


class TestFormats:
    @pytest.mark.parametrize("email", ["not-an-email", "jane", "jane@example", "jane doe@example.com", "@example.com"])
    def test_bad_email(self, email):
        assert _errors(email=email) == {"email": "Please enter a valid email address"}

    @pytest.mark.parametrize("phone", [
        "0712345678",      # one digit short
        "071234567890",    # one digit long
        "+4407123456789",  # trunk zero after country code
        "0712-345-6789",   # punctuation is not stripped
        "+61412345678",    # not a UK number
        "abc",
    ])
    def test_bad_phone(self, phone):
        assert _errors(phone=phone) == {"phone": "Please enter a valid UK phone number"}


class TestBuildContactDetails:
    def test_values_are_trimmed(self):
        contact = build_contact_details("  Jane Doe ", " jane@example.com", "07123 456 789 ")
        assert contact.name == "Jane Doe"
        assert contact.email == "jane@example.com"
        assert contact.phone == "07123 456 789"

    def test_invalid_raises(self):
        with pytest.raises(ValueError, match="email"):
            build_contact_details("Jane", "nope", "07123456789")
