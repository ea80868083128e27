"""Integration tests for the HTTP API."""

import logging
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from openai import OpenAIError

from salon_booking.agents.assistant import ERROR_FALLBACK
from salon_booking.api.app import create_app
from salon_booking.api.store import SessionStore
from tests.conftest import TOMORROW, frozen_clock


def _new_session(api_client) -> str:
    response = api_client.post("/api/sessions")
    assert response.status_code == 201
    return response.json()["session_id"]


def _post(api_client, session_id: str, action: str, body=None):
    return api_client.post(f"/api/sessions/{session_id}/{action}", json=body)


class TestStaticEndpoints:
    def test_health(self, api_client):
        data = api_client.get("/health").json()
        assert data["status"] == "ok"
        assert data["salon"]

    def test_categories_scheduled(self, api_client):
        data = api_client.get("/api/catalog/categories").json()
        assert [(c["id"], c["service_count"]) for c in data] == [
            ("hair", 4), ("nails", 4), ("facial", 4), ("makeup", 4),
        ]

    def test_categories_immediate(self, api_client):
        data = api_client.get("/api/catalog/categories", params={"mode": "immediate"}).json()
        assert {c["id"]: c["service_count"] for c in data}["hair"] == 1
        assert {c["id"]: c["service_count"] for c in data}["nails"] == 0

    def test_services(self, api_client):
        data = api_client.get("/api/catalog/categories/hair/services").json()
        assert [s["id"] for s in data] == ["haircut", "color", "highlights", "treatment"]
        assert data[0]["price"] == "£45"

    def test_unknown_category(self, api_client):
        response = api_client.get("/api/catalog/categories/spa/services")
        assert response.status_code == 400
        assert response.json()["code"] == "UNKNOWN_SELECTION"

    def test_bad_mode_is_validation_error(self, api_client):
        response = api_client.get("/api/catalog/categories", params={"mode": "whenever"})
        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_scheduled_slots(self, api_client):
        data = api_client.get("/api/slots", params={"day": TOMORROW.isoformat()}).json()
        assert len(data) == 17
        assert data[0] == {"start": "2026-10-21T09:00:00", "label": "9:00 am"}

    def test_scheduled_slots_need_day(self, api_client):
        assert api_client.get("/api/slots").json() == []

    def test_immediate_slots_use_clock(self, api_client):
        data = api_client.get("/api/slots", params={"mode": "immediate"}).json()
        assert data[0]["start"] == "2026-10-20T10:30:00"
        assert len(data) == 14

    def test_quick_prompts(self, api_client):
        data = api_client.get("/api/quick-prompts").json()
        assert [g["category"] for g in data] == ["Hair", "Nails", "Face & Skin"]

    def test_contact_validation(self, api_client):
        data = api_client.post(
            "/api/contact/validate",
            json={"name": "Jane", "email": "jane@", "phone": "07123456789"},
        ).json()
        assert data == {"valid": False, "errors": {"email": "Please enter a valid email address"}}


class TestSessionLifecycle:
    def test_create_and_read(self, api_client):
        session_id = _new_session(api_client)
        data = api_client.get(f"/api/sessions/{session_id}").json()
        assert data["state"] == "category_selection"
        assert data["mode"] == "scheduled"
        assert data["busy"] is False
        assert data["messages"] == []

    def test_delete(self, api_client):
        session_id = _new_session(api_client)
        assert api_client.delete(f"/api/sessions/{session_id}").status_code == 204
        response = api_client.get(f"/api/sessions/{session_id}")
        assert response.status_code == 404
        assert response.json()["code"] == "SESSION_NOT_FOUND"

    def test_delete_unknown(self, api_client):
        assert api_client.delete("/api/sessions/nope").status_code == 404

    def test_action_on_unknown_session(self, api_client):
        response = _post(api_client, "nope", "category", {"category_id": "hair"})
        assert response.status_code == 404


class TestBookingThroughApi:
    def test_full_scheduled_booking(self, api_client):
        sid = _new_session(api_client)

        data = _post(api_client, sid, "category", {"category_id": "hair"}).json()
        assert data["state"] == "service_selection"
        assert len(data["services"]) == 4

        data = _post(api_client, sid, "service", {"service_id": "haircut"}).json()
        assert data["state"] == "slot_selection"
        assert data["slots"] == []

        data = _post(api_client, sid, "day", {"day": TOMORROW.isoformat()}).json()
        assert len(data["slots"]) == 17

        data = _post(api_client, sid, "slot", {"slot": "2026-10-21T14:30:00"}).json()
        assert data["summary"]["Time"] == "2:30 pm"

        data = _post(api_client, sid, "slot/confirm").json()
        assert data["state"] == "contact_details"
        assert data["messages"][-1]["content"].startswith("Great! You've selected Haircut & Styling")

        data = _post(api_client, sid, "contact", {
            "name": "Jane Doe", "email": "jane@example.com", "phone": "07123456789",
        }).json()
        assert data["state"] == "confirmation"
        assert data["can_confirm"] is False

        response = _post(api_client, sid, "confirm")
        assert response.status_code == 409
        assert response.json()["code"] == "TERMS_NOT_ACCEPTED"

        data = _post(api_client, sid, "terms", {"accepted": True}).json()
        assert data["can_confirm"] is True

        data = _post(api_client, sid, "confirm").json()
        assert data["state"] == "completed"
        assert data["summary"]["Name"] == "Jane Doe"
        assert data["messages"][-1]["content"].startswith("Booking confirmed!")

        data = _post(api_client, sid, "new").json()
        assert data["state"] == "category_selection"

    def test_immediate_booking_fixed_to_today(self, api_client):
        sid = _new_session(api_client)
        _post(api_client, sid, "mode", {"mode": "immediate"})
        _post(api_client, sid, "category", {"category_id": "hair"})
        data = _post(api_client, sid, "service", {"service_id": "treatment"}).json()
        assert data["day"] == "2026-10-20"
        assert data["slots"][0]["label"] == "10:30 am"

        response = _post(api_client, sid, "day", {"day": TOMORROW.isoformat()})
        assert response.status_code == 400

    def test_incompatible_service(self, api_client):
        sid = _new_session(api_client)
        _post(api_client, sid, "mode", {"mode": "immediate"})
        _post(api_client, sid, "category", {"category_id": "hair"})
        response = _post(api_client, sid, "service", {"service_id": "haircut"})
        assert response.status_code == 400

    def test_contact_errors_keep_stage(self, api_client):
        sid = _new_session(api_client)
        _post(api_client, sid, "category", {"category_id": "nails"})
        _post(api_client, sid, "service", {"service_id": "gel"})
        _post(api_client, sid, "day", {"day": TOMORROW.isoformat()})
        _post(api_client, sid, "slot", {"slot": "2026-10-21T09:30:00"})
        _post(api_client, sid, "slot/confirm")
        data = _post(api_client, sid, "contact", {"name": "", "email": "x", "phone": ""}).json()
        assert data["state"] == "contact_details"
        assert set(data["errors"]) == {"name", "email", "phone"}

    def test_out_of_order_action(self, api_client):
        sid = _new_session(api_client)
        response = _post(api_client, sid, "slot/confirm")
        assert response.status_code == 409
        assert response.json()["code"] == "INVALID_TRANSITION"

    def test_cancel_steps_back(self, api_client):
        sid = _new_session(api_client)
        _post(api_client, sid, "category", {"category_id": "facial"})
        data = _post(api_client, sid, "cancel").json()
        assert data["state"] == "category_selection"


class TestChatEndpoint:
    def test_send_message(self, api_client, fake_client):
        sid = _new_session(api_client)
        data = _post(api_client, sid, "messages", {"message": "Do you do eyebrows?"}).json()
        assert data["reply"]["content"] == "Happy to help!"
        assert [m["role"] for m in data["messages"]] == ["user", "assistant"]
        assert fake_client.completions.calls[0]["messages"][-1]["content"] == "Do you do eyebrows?"

    def test_empty_message_rejected(self, api_client):
        sid = _new_session(api_client)
        response = _post(api_client, sid, "messages", {"message": ""})
        assert response.status_code == 422

    @pytest.mark.parametrize("reply, expected", [
        (None, "Sorry, please try again."),
        ("", "Sorry, please try again."),
    ])
    def test_empty_reply_fallback(self, api_client, fake_client, reply, expected):
        fake_client.completions.reply = reply
        sid = _new_session(api_client)
        data = _post(api_client, sid, "messages", {"message": "Hi"}).json()
        assert data["reply"]["content"] == expected

    def test_provider_failure_fallback(self, api_client, fake_client):
        fake_client.completions.error = OpenAIError("unavailable")
        sid = _new_session(api_client)
        data = _post(api_client, sid, "messages", {"message": "Hi"}).json()
        assert data["reply"]["content"] == ERROR_FALLBACK


class TestSessionLogging:
    def test_chat_failure_logged_with_session_id(self, api_client, fake_client, caplog):
        fake_client.completions.error = OpenAIError("boom")
        sid = _new_session(api_client)
        with caplog.at_level(logging.ERROR, logger="salon_booking.agents.assistant"):
            _post(api_client, sid, "messages", {"message": "Hi"})
        records = [r for r in caplog.records if r.name == "salon_booking.agents.assistant"]
        assert records
        assert records[-1].session_id == sid

    def test_rejected_contact_logged_with_session_id(self, api_client, caplog):
        sid = _new_session(api_client)
        _post(api_client, sid, "category", {"category_id": "hair"})
        _post(api_client, sid, "service", {"service_id": "haircut"})
        _post(api_client, sid, "day", {"day": TOMORROW.isoformat()})
        _post(api_client, sid, "slot", {"slot": "2026-10-21T09:00:00"})
        _post(api_client, sid, "slot/confirm")
        with caplog.at_level(logging.WARNING, logger="salon_booking.api.app"):
            _post(api_client, sid, "contact", {"name": "", "email": "", "phone": ""})
        record = next(r for r in caplog.records if "Contact details rejected" in r.getMessage())
        assert record.session_id == sid


class TestDefaultStore:
    def test_default_sessions_follow_injected_clock(self):
        client = TestClient(create_app(clock=frozen_clock))
        sid = _new_session(client)
        _post(client, sid, "mode", {"mode": "immediate"})
        _post(client, sid, "category", {"category_id": "hair"})
        data = _post(client, sid, "service", {"service_id": "treatment"}).json()
        assert data["day"] == "2026-10-20"
        assert data["slots"][0]["start"] == "2026-10-20T10:30:00"

        response = _post(client, sid, "slot", {"slot": "2026-10-20T10:30:00"})
        assert response.status_code == 200
        assert response.json()["slot"] == "2026-10-20T10:30:00"

    def test_expired_session_is_not_found(self):
        now = [frozen_clock()]
        store = SessionStore(ttl=timedelta(minutes=30), clock=lambda: now[0])
        client = TestClient(create_app(store=store, clock=frozen_clock))
        sid = _new_session(client)
        now[0] += timedelta(minutes=31)
        response = client.get(f"/api/sessions/{sid}")
        assert response.status_code == 404
        assert response.json()["code"] == "SESSION_NOT_FOUND"
