"""Core types for the SMS dispatch service.

This package centralizes enums, request/outcome/result models, the adapter
protocol and the error taxonomy in one place. Most modules should import
types from here rather than directly from submodules.

Usage:
    from smsdispatch.types import DispatchRequest, MessagingAdapter, ProviderError
"""

from .enums import OutcomeStatus
from .errors import (
    ConfigurationError,
    DispatchError,
    ProviderError,
    RecipientFormatError,
    UnexpectedError,
    ValidationError,
)
from .messages import DispatchRequest
from .protocols import MessagingAdapter
from .results import DispatchResult, RecipientError, SendOutcome, SendResult
from .api import ErrorResponse, SendSmsRequest, SendSmsResponse

__all__ = [
    "OutcomeStatus",
    "DispatchError",
    "ValidationError",
    "ConfigurationError",
    "RecipientFormatError",
    "ProviderError",
    "UnexpectedError",
    "DispatchRequest",
    "MessagingAdapter",
    "SendResult",
    "SendOutcome",
    "RecipientError",
    "DispatchResult",
    "SendSmsRequest",
    "SendSmsResponse",
    "ErrorResponse",
]
