"""Receiver number rules for MTN Rwanda.

A receiver "number" is either a local MTN mobile number (``07[2389]XXXXXXX``),
the same number with the ``250`` country code, or a 5-6 digit merchant code.
"""

from __future__ import annotations

import re

from .models import NumberKind

BUSINESS_CODE_RE = re.compile(r"^\d{5,6}$")
PHONE_RE = re.compile(r"^07[2389]\d{7}$")
PHONE_INTL_RE = re.compile(r"^2507[2389]\d{7}$")

_NON_DIGITS_RE = re.compile(r"\D")


def classify_number(number: str) -> NumberKind | None:
    """Return the kind of ``number``, or ``None`` when it fits no known shape."""

    if BUSINESS_CODE_RE.fullmatch(number):
        return NumberKind.BUSINESS_CODE
    if PHONE_RE.fullmatch(number):
        return NumberKind.PHONE
    if PHONE_INTL_RE.fullmatch(number):
        return NumberKind.PHONE_INTERNATIONAL
    return None


def normalize_number_input(text: str) -> str:
    """Clean a typed or pasted number.

    Non-digits are dropped; an 11+ digit value starting with ``25`` loses
    those two digits (``250788123456`` -> ``0788123456``).
    """

    digits = _NON_DIGITS_RE.sub("", text)
    if len(digits) > 10 and digits.startswith("25"):
        return digits[2:]
    return digits


def display_number(number: str) -> str:
    if PHONE_INTL_RE.fullmatch(number):
        return number[2:]
    return number


def is_phone_number(number: str) -> bool:
    return classify_number(number) in (NumberKind.PHONE, NumberKind.PHONE_INTERNATIONAL)


__all__ = [
    "BUSINESS_CODE_RE",
    "PHONE_RE",
    "PHONE_INTL_RE",
    "classify_number",
    "display_number",
    "is_phone_number",
    "normalize_number_input",
]
