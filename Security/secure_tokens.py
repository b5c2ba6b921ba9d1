"""
Secure random tokens and numeric verification codes.
"""

from __future__ import annotations

import secrets


def generate_token(length: int = 32) -> str:
    """Hex token from `length` random bytes."""
    return secrets.token_hex(length)


def generate_numeric_code(length: int = 6) -> str:
    """Numeric code with exactly `length` digits (no leading zero)."""
    if length < 1:
        raise ValueError("length must be at least 1")
    low = 10 ** (length - 1)
    high = 10 ** length - 1
    return str(low + secrets.randbelow(high - low + 1))
