from __future__ import annotations

from typing import Dict

from smsdispatch.types import MessagingAdapter
from smsdispatch.adapters.twilio import TwilioClient


class AdapterRegistry:
    """Registry for messaging adapters by name.

    Enables plugging in alternative SMS gateways later without changing the
    Dispatcher or router logic.
    """

    _registry: Dict[str, type[MessagingAdapter]] = {
        "twilio": TwilioClient,
    }

    @classmethod
    def get(cls, name: str) -> MessagingAdapter:
        provider_cls = cls._registry.get(name)
        if provider_cls is None:
            raise KeyError(f"Unknown messaging adapter: {name}")
        return provider_cls()

    @classmethod
    def register(cls, name: str, adapter_cls: type[MessagingAdapter]) -> None:
        cls._registry[name] = adapter_cls

    @classmethod
    def names(cls) -> list[str]:
        return sorted(cls._registry)
