"""Utility functions for the SMS dispatch service."""

from .phone import INVALID_PHONE_REASON, PHONE_PATTERN, is_valid_phone, mask_phone, validate_recipient

__all__ = [
    "INVALID_PHONE_REASON",
    "PHONE_PATTERN",
    "is_valid_phone",
    "mask_phone",
    "validate_recipient",
]
