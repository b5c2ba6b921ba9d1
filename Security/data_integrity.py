"""
DATA INTEGRITY
==============
Hashing and signature helpers for integrity checks.

FLOW:
- sha256_hex() returns a stable hash for lookups/uniqueness.
- create_signature()/verify_signature() sign payloads with HMAC-SHA256.
- hash_value()/verify_hash() store compare-only values (PBKDF2-SHA512).

WHY:
- Detects tampering and keeps verification codes non-reversible.

HOW:
- hmac.compare_digest for every comparison.
"""

from __future__ import annotations

import hashlib
import hmac
import os
from typing import NamedTuple


HASH_ITERATIONS = 100_000
HASH_LENGTH = 64
HASH_SALT_LENGTH = 64


class HashResult(NamedTuple):
    hash: str
    salt: str


def sha256_hex(data: str | bytes) -> str:
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def create_signature(data: str | bytes, secret: str) -> str:
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hmac.new(secret.encode("utf-8"), data, hashlib.sha256).hexdigest()


def verify_signature(data: str | bytes, signature: str, secret: str) -> bool:
    expected = create_signature(data, secret)
    return hmac.compare_digest(signature.encode("utf-8"), expected.encode("utf-8"))


def _pbkdf2_hex(data: str, salt: bytes) -> str:
    return hashlib.pbkdf2_hmac(
        "sha512", data.encode("utf-8"), salt, HASH_ITERATIONS, HASH_LENGTH
    ).hex()


def hash_value(data: str, salt: str | None = None) -> HashResult:
    """One-way hash; pass the returned salt back to verify_hash()."""
    salt_bytes = bytes.fromhex(salt) if salt else os.urandom(HASH_SALT_LENGTH)
    return HashResult(hash=_pbkdf2_hex(data, salt_bytes), salt=salt_bytes.hex())


def verify_hash(data: str, hash: str, salt: str) -> bool:
    computed = _pbkdf2_hex(data, bytes.fromhex(salt))
    return hmac.compare_digest(computed, hash)
