from __future__ import annotations

from typing import Optional


class DispatchError(Exception):
    """Base class for every error raised by the dispatch core."""


class ValidationError(DispatchError):
    """A request-level field (`numbers`, `message`) is missing or malformed.

    Raised before any provider call; the HTTP layer maps it to 400.
    """


class ConfigurationError(DispatchError):
    """Provider credentials or the default sender are not configured.

    Raised before any provider call; the HTTP layer maps it to 500 and logs
    the missing variables for the operator.
    """

    def __init__(self, message: str, missing: Optional[list[str]] = None) -> None:
        super().__init__(message)
        self.missing = list(missing or [])


class RecipientFormatError(DispatchError):
    """A single recipient does not look like a phone number.

    Recovered into that recipient's outcome; never aborts the batch.
    """

    def __init__(self, recipient: str, message: str = "invalid phone number format") -> None:
        super().__init__(message)
        self.recipient = recipient


class ProviderError(DispatchError):
    """The messaging provider failed to accept a message for one recipient.

    Attributes:
        status_code: HTTP status returned by the provider, when there was one.
        code: Provider-specific error code (Twilio's numeric `code`).
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class UnexpectedError(DispatchError):
    """Anything not classified above; surfaced to callers as a generic 500."""
