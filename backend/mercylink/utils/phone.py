"""Phone number formatting helpers shared by staff and client records."""

from __future__ import annotations

import re
from typing import Optional

_NON_DIGITS = re.compile(r"\D")


def _digits(value: str) -> str:
    return _NON_DIGITS.sub("", value)


def format_phone_number(phone: Optional[str]) -> str:
    """
    Render a stored phone number as ``###-###-####``.

    Ten digits are formatted directly; eleven digits with a leading US
    country code ``1`` drop the prefix first. Anything else (international
    numbers, extensions, partial input) is returned exactly as given.
    ``None`` and empty strings yield ``""``.
    """
    if not phone:
        return ""

    digits = _digits(phone)

    if len(digits) == 11 and digits.startswith("1"):
        digits = digits[1:]
    elif len(digits) != 10:
        return phone

    return f"{digits[:3]}-{digits[3:6]}-{digits[6:]}"


def format_phone_input(value: Optional[str]) -> str:
    """Format a phone field as the user types, capped at ten digits."""
    digits = _digits(value or "")[:10]

    if len(digits) <= 3:
        return digits
    if len(digits) <= 6:
        return f"{digits[:3]}-{digits[3:]}"
    return f"{digits[:3]}-{digits[3:6]}-{digits[6:]}"
