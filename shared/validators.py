"""
Input validators and normalizers, framework-agnostic and pure.
"""

from __future__ import annotations

import re
from typing import Any

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_PASSWORD_LENGTH = 6
MIN_NAME_LENGTH = 2
MIN_RESET_CODE_LENGTH = 4


def as_text(value: Any) -> str:
    """Coerce an optional request value to a string (``None`` becomes ``""``)."""
    if value is None:
        return ""
    return str(value)


def normalize_email(email: Any) -> str:
    """Return *email* trimmed and lowercased, the form used for storage and lookups."""
    return as_text(email).strip().lower()


def is_valid_email(email: str) -> bool:
    """Return True if *email* looks like ``local@domain.tld`` with no whitespace."""
    return bool(EMAIL_PATTERN.match(email))


def is_valid_password(password: str) -> bool:
    return len(password) >= MIN_PASSWORD_LENGTH
