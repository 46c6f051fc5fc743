from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .messages import DispatchRequest
from .results import DispatchResult, RecipientError


class SendSmsRequest(BaseModel):
    """Body accepted by `POST /api/send-sms`.

    `numbers` and `message` are optional at the schema level so that missing
    values reach the Dispatcher and come back as a 400 with a readable error.

    Example:
        {
          "senderNumber": "+15550001111",
          "numbers": ["+16813217557", "+15551234567"],
          "message": "Meeting moved to 3pm"
        }
    """

    model_config = ConfigDict(populate_by_name=True)

    sender_number: Optional[str] = Field(default=None, alias="senderNumber")
    numbers: Optional[list[str]] = None
    message: Optional[str] = None

    def to_dispatch_request(self) -> DispatchRequest:
        sender = (self.sender_number or "").strip() or None
        return DispatchRequest(
            sender=sender,
            recipients=tuple(self.numbers or ()),
            body=self.message or "",
        )


class SendSmsResponse(BaseModel):
    """Response for a batch that passed request-level checks.

    `success` means the request was accepted and processed. Per-recipient
    failures are reported in `failed` and `errors`, never as a non-2xx status.
    """

    success: bool = True
    message: str
    succeeded: int
    failed: int
    errors: list[RecipientError] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: DispatchResult) -> "SendSmsResponse":
        if result.failed:
            message = f"Messages processed with {result.failed} failure(s)."
        else:
            message = "Messages sent successfully!"
        return cls(
            message=message,
            succeeded=result.succeeded,
            failed=result.failed,
            errors=list(result.errors),
        )


class ErrorResponse(BaseModel):
    """Body returned with every non-2xx response."""

    error: str
