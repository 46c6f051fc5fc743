from __future__ import annotations

import re
from typing import Optional

from smsdispatch.types import RecipientFormatError

# Optional "+", a nonzero leading digit, 2-15 ASCII digits in total (E.164-like).
# Always applied with fullmatch so a trailing newline is rejected.
PHONE_PATTERN = re.compile(r"\+?[1-9]\d{1,14}", re.ASCII)

INVALID_PHONE_REASON = "invalid phone number format"


def is_valid_phone(phone: Optional[str]) -> bool:
    if not phone or not isinstance(phone, str):
        return False
    return bool(PHONE_PATTERN.fullmatch(phone))


def validate_recipient(phone: str) -> str:
    """Return `phone` unchanged if it is a dialable number.

    Raises:
        RecipientFormatError: the value does not match `PHONE_PATTERN`.
    """
    if not is_valid_phone(phone):
        raise RecipientFormatError(phone, INVALID_PHONE_REASON)
    return phone


def mask_phone(phone: Optional[str]) -> str:
    """Hide all but the last four digits, for log lines."""
    if not phone:
        return "****"
    if len(phone) <= 4:
        return "*" * len(phone)
    return f"{'*' * (len(phone) - 4)}{phone[-4:]}"
