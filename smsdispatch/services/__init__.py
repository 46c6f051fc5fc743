"""Services package for the SMS dispatch service."""

from __future__ import annotations

from functools import lru_cache

from server.config import get_settings
from smsdispatch.adapters.registry import AdapterRegistry

from .dispatcher import Dispatcher


@lru_cache(maxsize=1)
def get_dispatcher() -> Dispatcher:
    """Build the process-wide Dispatcher from settings on first use."""
    settings = get_settings()
    return Dispatcher(
        adapter=AdapterRegistry.get(settings.sms_provider),
        default_sender=settings.twilio_phone_number,
        max_concurrency=settings.dispatch_max_concurrency,
        timeout=settings.dispatch_timeout_seconds,
    )


__all__ = [
    "Dispatcher",
    "get_dispatcher",
]
