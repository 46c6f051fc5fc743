from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class DispatchRequest(BaseModel):
    """One outbound message addressed to a batch of recipients.

    Anatomy:
    - sender: number to send from; falls back to the configured default
    - recipients: phone numbers in the order the caller supplied them.
      Duplicates are kept and each occurrence is sent to.
    - body: message text shared by every recipient

    The model is frozen. Request-level checks (non-empty recipients and body)
    are enforced by the Dispatcher so that it can fail before any send.

    Example:
        >>> from smsdispatch.types import DispatchRequest
        >>> DispatchRequest(recipients=("+16813217557",), body="Hello")
    """

    model_config = ConfigDict(frozen=True)

    sender: Optional[str] = None
    recipients: tuple[str, ...] = ()
    body: str = ""
