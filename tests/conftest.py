from contextlib import contextmanager
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from main import app
from server.config import get_settings
from smsdispatch.services import Dispatcher, get_dispatcher
from tests.fixtures.adapters import FakeAdapter

TWILIO_API_BASE = "https://api.twilio.test"
DEFAULT_SENDER = "+15550001111"


@pytest.fixture(autouse=True)
def test_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    monkeypatch.setenv("ENV", "test")
    # Safe defaults for the Twilio adapter; no real requests leave the process
    monkeypatch.setenv("TWILIO_ACCOUNT_SID", "ACtest")
    monkeypatch.setenv("TWILIO_AUTH_TOKEN", "test-token")
    monkeypatch.setenv("TWILIO_PHONE_NUMBER", DEFAULT_SENDER)
    monkeypatch.setenv("TWILIO_API_BASE", TWILIO_API_BASE)
    monkeypatch.delenv("DISPATCH_TIMEOUT_SECONDS", raising=False)
    monkeypatch.delenv("DISPATCH_MAX_CONCURRENCY", raising=False)
    get_settings.cache_clear()
    get_dispatcher.cache_clear()
    yield
    get_settings.cache_clear()
    get_dispatcher.cache_clear()


@pytest.fixture()
def client() -> TestClient:
    return TestClient(app)


@contextmanager
def override_dispatcher(dispatcher: Dispatcher) -> Generator[Dispatcher, None, None]:
    """Serve `dispatcher` from the `get_dispatcher` dependency for the block."""
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    try:
        yield dispatcher
    finally:
        app.dependency_overrides.pop(get_dispatcher, None)


@pytest.fixture()
def fake_adapter() -> FakeAdapter:
    return FakeAdapter()
