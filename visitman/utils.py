"""Phone normalization helpers."""

from visitman.exceptions import InvalidPhoneFormat

PHONE_DIGITS = 10


def phone_digits(raw: str) -> str:
    """Strip everything but digits."""
    return "".join(filter(str.isdigit, raw or ""))


def normalize_phone(raw: str) -> str:
    """
    Normalize a phone number to the canonical display form ``(DDD) DDD-DDDD``.

    All non-digit characters are discarded first, so "555.123.4567",
    "(555) 123-4567" and "555 123 4567" normalize identically.

    Raises:
        InvalidPhoneFormat: If the digits are not exactly 10
    """
    digits = phone_digits(raw)
    if len(digits) != PHONE_DIGITS:
        raise InvalidPhoneFormat(phone=raw, digits=len(digits))
    return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"

