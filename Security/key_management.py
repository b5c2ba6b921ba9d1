"""
SECURE KEY MANAGEMENT
=====================
Load the master key from environment and derive per-call AES keys.
"""

# FLOW:
# - load_master_key() validates ENCRYPTION_MASTER_KEY (64 hex chars).
# - derive_key() stretches master key (or override material) with a salt.
# WHY:
# - Prevents hard-coded keys and keeps one AES key per salt.
# HOW:
# - PBKDF2-HMAC-SHA512, 100k iterations, 32-byte output.

from __future__ import annotations

import hashlib
import re
import secrets

from Security.errors import InvalidMasterKeyError, MissingMasterKeyError
from Security.security_config import EncryptionSettings
from Security.security_logging import get_security_logger


KEY_LENGTH = 32
KDF_ITERATIONS = 100_000
KDF_DIGEST = "sha512"

_HEX_KEY = re.compile(r"^[0-9a-fA-F]{64}$")

logger = get_security_logger("keys")


def generate_key() -> str:
    """New random master key (64 hex chars)."""
    return secrets.token_hex(KEY_LENGTH)


def validate_master_key(hex_key: str) -> str:
    if not _HEX_KEY.match(hex_key or ""):
        raise InvalidMasterKeyError()
    return hex_key


def load_master_key(settings: EncryptionSettings | None = None) -> str:
    """Return the configured master key, or an ephemeral one outside production."""
    settings = settings or EncryptionSettings.from_env()
    if settings.master_key:
        return validate_master_key(settings.master_key)

    if settings.is_production or not settings.allow_ephemeral_master_key:
        logger.error("ENCRYPTION_MASTER_KEY not set; refusing to start (app_env=%s)", settings.app_env)
        raise MissingMasterKeyError()

    logger.warning(
        "ENCRYPTION_MASTER_KEY not set. Using an ephemeral generated key; "
        "data encrypted now cannot be decrypted after restart. Set this in production!"
    )
    return generate_key()


def derive_key(salt: bytes, key_material: str) -> bytes:
    """Derive a 32-byte AES key from key material and salt."""
    return hashlib.pbkdf2_hmac(
        KDF_DIGEST, key_material.encode("utf-8"), salt, KDF_ITERATIONS, KEY_LENGTH
    )
