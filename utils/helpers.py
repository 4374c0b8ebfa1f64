"""Utility helpers.

This module contains small, side-effect-free helpers used across the data layer.
"""

from __future__ import annotations

import re
import uuid


_SANITIZE_ALLOWED = re.compile(r"[^\w\s\-+@().,/:#%&*'\"!?$]", re.UNICODE)


def sanitize_user_text(text: str, max_len: int = 1000) -> str:
    """Sanitize user input to a safe subset.

    Args:
        text: Raw user-provided text.
        max_len: Max length of the resulting string.

    Returns:
        Sanitized string.
    """
    if text is None:
        return ""

    cleaned = text.strip()
    cleaned = _SANITIZE_ALLOWED.sub(" ", cleaned)
    cleaned = re.sub(r"\s+", " ", cleaned)
    return cleaned[:max_len]


def normalize_enum_value(value: object, upper: bool = True) -> object:
    """Normalise enum-like strings ("house", "Super-Admin") to one casing."""
    if not isinstance(value, str):
        return value

    token = re.sub(r"[\s\-]+", "_", value.strip())
    return token.upper() if upper else token.lower()


def format_price(price: object) -> str:
    """Format a price as whole US dollars; preformatted strings pass through."""
    if isinstance(price, str) and "$" in price:
        return price

    try:
        return f"${float(price):,.0f}"
    except (TypeError, ValueError):
        return str(price)


def generate_id() -> str:
    """Identifier for records created while the remote API is unreachable."""
    return uuid.uuid4().hex


__all__ = [
    "sanitize_user_text",
    "normalize_enum_value",
    "format_price",
    "generate_id",
]
