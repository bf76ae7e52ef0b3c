"""Shared utilities used across the tool server."""

import re
from datetime import datetime, timezone
from typing import Union


def normalize_phone(value: str) -> str:
    """Normalize a phone number by stripping everything except digits and a leading +.

    Examples:
        >>> normalize_phone("(973) 666-1635")
        '9736661635'
        >>> normalize_phone("+1 973 666 1635")
        '+19736661635'
    """
    value = value.strip()
    if value.startswith("+"):
        return "+" + re.sub(r"[^\d]", "", value[1:])
    return re.sub(r"[^\d]", "", value)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def epoch_millis() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def format_amount(amount: Union[int, float]) -> str:
    """Render a charge amount the way it is shown to clients.

    Examples:
        >>> format_amount(500.0)
        '500'
        >>> format_amount(49.5)
        '49.50'
    """
    if float(amount).is_integer():
        return str(int(amount))
    return f"{amount:.2f}"
