from __future__ import annotations

from typing import Protocol

from .results import SendResult


class MessagingAdapter(Protocol):
    """Protocol for SMS providers.

    Concrete implementations encapsulate provider-specific HTTP calls so the
    Dispatcher remains provider-agnostic. One adapter instance is shared by
    every concurrent send of a dispatch, so implementations must not keep
    mutable per-call state.

    Responsibilities:
        - Report whether credentials are present before anything is sent
        - Send one text message to one recipient and return the provider id

    Minimal example:
        >>> from smsdispatch.types import MessagingAdapter, SendResult
        >>> class EchoAdapter(MessagingAdapter):
        ...     def ensure_configured(self) -> None:
        ...         return None
        ...     async def send(self, sender: str, recipient: str, body: str) -> SendResult:
        ...         return SendResult(message_id=f"echo-{recipient}", ok=True)
    """

    def ensure_configured(self) -> None:
        """Raise `ConfigurationError` if provider credentials are missing."""
        ...

    async def send(self, sender: str, recipient: str, body: str) -> SendResult:
        """Send `body` from `sender` to `recipient`.

        Implementations raise `ProviderError` when the provider rejects the
        message or cannot be reached; the Dispatcher records it as that
        recipient's failure.
        """
        ...
