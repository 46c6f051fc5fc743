from __future__ import annotations

from typing import Any, Dict
from urllib.parse import parse_qs

import httpx
import pytest
import respx
from fastapi.testclient import TestClient

from main import app
from server.config import get_settings
from smsdispatch.services import Dispatcher, get_dispatcher
from smsdispatch.types import DispatchRequest, ProviderError
from tests.conftest import DEFAULT_SENDER, TWILIO_API_BASE, override_dispatcher
from tests.fixtures.adapters import FakeAdapter

SEND_URL = "/api/send-sms"
MESSAGES_URL = f"{TWILIO_API_BASE}/2010-04-01/Accounts/ACtest/Messages.json"
REQUIRED_ERROR = {"error": "Numbers (array) and message are required."}


def fake_dispatcher(adapter: FakeAdapter) -> Dispatcher:
    return Dispatcher(adapter=adapter, default_sender=DEFAULT_SENDER)


def test_all_recipients_succeed(client: TestClient, fake_adapter: FakeAdapter) -> None:
    payload = {"numbers": ["+16813217557", "+15551234567"], "message": "Hello"}

    with override_dispatcher(fake_dispatcher(fake_adapter)):
        r = client.post(SEND_URL, json=payload)

    assert r.status_code == 200
    assert r.json() == {
        "success": True,
        "message": "Messages sent successfully!",
        "succeeded": 2,
        "failed": 0,
        "errors": [],
    }
    assert sorted(fake_adapter.calls) == [
        (DEFAULT_SENDER, "+15551234567", "Hello"),
        (DEFAULT_SENDER, "+16813217557", "Hello"),
    ]


def test_partial_failure_is_reported_inside_200(client: TestClient) -> None:
    adapter = FakeAdapter(failures={"+15551234567": ProviderError("Permission to send an SMS has not been enabled")})
    payload = {"numbers": ["+16813217557", "bad", "+15551234567"], "message": "hi"}

    with override_dispatcher(fake_dispatcher(adapter)):
        r = client.post(SEND_URL, json=payload)

    assert r.status_code == 200
    data = r.json()
    assert data["success"] is True
    assert data["message"] == "Messages processed with 2 failure(s)."
    assert data["succeeded"] == 1
    assert data["failed"] == 2
    assert data["errors"] == [
        {"recipient": "bad", "reason": "invalid phone number format"},
        {"recipient": "+15551234567", "reason": "Permission to send an SMS has not been enabled"},
    ]
    assert len(adapter.calls) == 2


def test_sender_number_overrides_default(client: TestClient, fake_adapter: FakeAdapter) -> None:
    payload = {"senderNumber": "+15559998888", "numbers": ["+16813217557"], "message": "hi"}

    with override_dispatcher(fake_dispatcher(fake_adapter)):
        r = client.post(SEND_URL, json=payload)

    assert r.status_code == 200
    assert fake_adapter.calls == [("+15559998888", "+16813217557", "hi")]


def test_blank_sender_number_uses_default(client: TestClient, fake_adapter: FakeAdapter) -> None:
    payload = {"senderNumber": "  ", "numbers": ["+16813217557"], "message": "hi"}

    with override_dispatcher(fake_dispatcher(fake_adapter)):
        client.post(SEND_URL, json=payload)

    assert fake_adapter.calls == [(DEFAULT_SENDER, "+16813217557", "hi")]


@pytest.mark.parametrize(
    "payload",
    [
        {"message": "hi"},
        {"numbers": [], "message": "hi"},
        {"numbers": None, "message": "hi"},
        {"numbers": ["+16813217557"]},
        {"numbers": ["+16813217557"], "message": ""},
        {"numbers": ["+16813217557"], "message": "   "},
        {"numbers": "+16813217557", "message": "hi"},
        {"numbers": [16813217557], "message": "hi"},
        {},
    ],
)
def test_invalid_request_returns_400_without_sending(
    client: TestClient, fake_adapter: FakeAdapter, payload: Dict[str, Any]
) -> None:
    with override_dispatcher(fake_dispatcher(fake_adapter)):
        r = client.post(SEND_URL, json=payload)

    assert r.status_code == 400
    assert r.json() == REQUIRED_ERROR
    assert fake_adapter.calls == []


def test_non_json_body_returns_400(client: TestClient, fake_adapter: FakeAdapter) -> None:
    with override_dispatcher(fake_dispatcher(fake_adapter)):
        r = client.post(SEND_URL, content=b"not json", headers={"Content-Type": "application/json"})

    assert r.status_code == 400
    assert "error" in r.json()


@pytest.mark.parametrize(
    "variable", ["TWILIO_ACCOUNT_SID", "TWILIO_AUTH_TOKEN", "TWILIO_PHONE_NUMBER"]
)
@respx.mock
def test_missing_configuration_returns_500(
    client: TestClient, monkeypatch: pytest.MonkeyPatch, variable: str
) -> None:
    monkeypatch.delenv(variable, raising=False)
    get_settings.cache_clear()
    get_dispatcher.cache_clear()

    r = client.post(SEND_URL, json={"numbers": ["+16813217557"], "message": "hi"})

    assert r.status_code == 500
    assert r.json() == {"error": "Server misconfiguration. Contact support."}


class ExplodingDispatcher(Dispatcher):
    async def dispatch(self, request: DispatchRequest):  # type: ignore[override]
        raise RuntimeError("database on fire")


def test_unexpected_error_returns_generic_500(fake_adapter: FakeAdapter) -> None:
    client = TestClient(app, raise_server_exceptions=False)

    with override_dispatcher(ExplodingDispatcher(adapter=fake_adapter, default_sender=DEFAULT_SENDER)):
        r = client.post(SEND_URL, json={"numbers": ["+16813217557"], "message": "hi"})

    assert r.status_code == 500
    assert r.json() == {"error": "Internal Server Error"}


@respx.mock
def test_end_to_end_through_twilio(client: TestClient) -> None:
    def _twilio(request: httpx.Request) -> httpx.Response:
        form = parse_qs(request.content.decode())
        to = form["To"][0]
        if to == "+15551234567":
            return httpx.Response(
                400,
                json={"code": 21610, "message": "Attempt to send to unsubscribed recipient", "status": 400},
            )
        return httpx.Response(201, json={"sid": f"SM{to[-4:]}", "status": "queued"})

    route = respx.post(MESSAGES_URL).mock(side_effect=_twilio)

    r = client.post(
        SEND_URL,
        json={"numbers": ["+16813217557", "+15551234567", "+0123"], "message": "Doors open at 6"},
    )

    assert r.status_code == 200
    assert route.call_count == 2
    sent_from = {parse_qs(call.request.content.decode())["From"][0] for call in route.calls}
    assert sent_from == {DEFAULT_SENDER}
    data = r.json()
    assert data["succeeded"] == 1
    assert data["failed"] == 2
    assert data["errors"] == [
        {"recipient": "+15551234567", "reason": "Attempt to send to unsubscribed recipient"},
        {"recipient": "+0123", "reason": "invalid phone number format"},
    ]
