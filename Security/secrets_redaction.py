"""
SECRETS REDACTION
=================
Utilities to mask secrets and PII in logs.
"""

# FLOW:
# - mask_data() keeps a few edge characters of a value, stars the rest.
# - redact() masks common secret patterns in free text before logging.
# WHY:
# - Prevents leaking credentials or customer data in logs.
# HOW:
# - Replaces sensitive values with *.

from __future__ import annotations

import re

from Security.security_config import feature_enabled


_SECRET_PATTERNS = [
    re.compile(r"(password=)([^&\s]+)", re.IGNORECASE),
    re.compile(r"(token=)([^&\s]+)", re.IGNORECASE),
    re.compile(r"(key=)([^&\s]+)", re.IGNORECASE),
    re.compile(r"(signature=)([^&\s]+)", re.IGNORECASE),
]


def mask_data(data: str, visible_chars: int = 4) -> str:
    if len(data) <= visible_chars * 2:
        return "*" * len(data)
    start = data[:visible_chars]
    end = data[len(data) - visible_chars:]
    middle = "*" * (len(data) - visible_chars * 2)
    return f"{start}{middle}{end}"


def redact(value: str) -> str:
    if not feature_enabled("secrets-redaction", True):
        return value
    for pattern in _SECRET_PATTERNS:
        value = pattern.sub(r"\1***", value)
    return value
