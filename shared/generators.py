"""
Reset code generation backed by the ``secrets`` module.
"""

from __future__ import annotations

import secrets
from datetime import timedelta

RESET_CODE_MIN = 100000
RESET_CODE_MAX = 999999

# How long an issued reset code stays valid
RESET_CODE_TTL = timedelta(minutes=10)


def generate_reset_code() -> str:
    """Generate a 6-digit numeric reset code, uniform over 100000–999999."""
    return str(RESET_CODE_MIN + secrets.randbelow(RESET_CODE_MAX - RESET_CODE_MIN + 1))
