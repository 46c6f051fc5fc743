from __future__ import annotations

from enum import Enum


class OutcomeStatus(str, Enum):
    """Terminal state of a single recipient within one dispatch.

    - SUCCESS: the provider accepted the message and returned an identifier
    - FAILURE: the recipient was rejected locally or by the provider

    Example:
        >>> from smsdispatch.types import SendOutcome
        >>> SendOutcome.success("+15551234567", "SM123").status
        <OutcomeStatus.SUCCESS: 'success'>
    """

    SUCCESS = "success"
    FAILURE = "failure"
