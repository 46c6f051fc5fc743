from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from pydantic import BaseModel, ConfigDict

from .enums import OutcomeStatus


class SendResult(BaseModel):
    """Standardized result returned by adapters after a successful send.

    Attributes:
        message_id: Provider-assigned identifier for the outbound message.
        ok: True when the provider reports the message as accepted.
        data: Raw provider response payload for debugging or advanced consumers.

    Example:
        >>> from smsdispatch.types import SendResult
        >>> SendResult(message_id="SM1", ok=True)
    """

    message_id: Optional[str] = None
    ok: Optional[bool] = None
    data: Optional[Dict[str, Any]] = None


class SendOutcome(BaseModel):
    """What happened to one recipient during one dispatch.

    Success outcomes carry the provider's `message_id`; failure outcomes carry
    a human-readable `reason`.
    """

    model_config = ConfigDict(frozen=True)

    recipient: str
    status: OutcomeStatus
    message_id: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def success(cls, recipient: str, message_id: Optional[str]) -> "SendOutcome":
        return cls(recipient=recipient, status=OutcomeStatus.SUCCESS, message_id=message_id)

    @classmethod
    def failure(cls, recipient: str, reason: str) -> "SendOutcome":
        return cls(recipient=recipient, status=OutcomeStatus.FAILURE, reason=reason)

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS


class RecipientError(BaseModel):
    """A failed recipient as reported back to the caller."""

    model_config = ConfigDict(frozen=True)

    recipient: str
    reason: str


class DispatchResult(BaseModel):
    """Aggregate of every outcome produced by one dispatch.

    `errors` and `outcomes` follow the input order of the recipients, and
    `succeeded + failed` always equals the number of recipients.
    """

    model_config = ConfigDict(frozen=True)

    succeeded: int = 0
    failed: int = 0
    errors: tuple[RecipientError, ...] = ()
    outcomes: tuple[SendOutcome, ...] = ()

    @classmethod
    def from_outcomes(cls, outcomes: Iterable[SendOutcome]) -> "DispatchResult":
        ordered = tuple(outcomes)
        errors = tuple(
            RecipientError(recipient=o.recipient, reason=o.reason or "unknown error")
            for o in ordered
            if not o.ok
        )
        return cls(
            succeeded=len(ordered) - len(errors),
            failed=len(errors),
            errors=errors,
            outcomes=ordered,
        )

    @property
    def total(self) -> int:
        return self.succeeded + self.failed
