"""
DATA ENCRYPTION AT REST
=======================
AES-256-GCM helpers for encrypting strings and file blobs before storage.

FLOW:
- encrypt_text() -> EncryptedPayload (hex fields, JSON friendly).
- decrypt_text() verifies the GCM tag and returns the plaintext.
- encrypt_file()/decrypt_file() use a self-describing binary layout.

WHY:
- Protects data if the database or object store is compromised.

HOW:
- Fresh 64-byte salt and 16-byte IV per call. The salt feeds PBKDF2 and is
  also bound as AAD, so a swapped salt fails authentication.
- Blob layout: [len][salt][len][iv][len][tag][ciphertext], one-byte lengths.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from Security.errors import DecryptionError, EncryptionError
from Security.key_management import derive_key
from Security.metrics import record_crypto_event
from Security.security_logging import get_security_logger


IV_LENGTH = 16
SALT_LENGTH = 64
TAG_LENGTH = 16

logger = get_security_logger("cipher")


@dataclass(frozen=True)
class EncryptedPayload:
    encrypted: str
    iv: str
    salt: str
    tag: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> EncryptedPayload:
        return cls(
            encrypted=data["encrypted"],
            iv=data["iv"],
            salt=data["salt"],
            tag=data["tag"],
        )


def _seal(plaintext: bytes, key_material: str) -> tuple[bytes, bytes, bytes, bytes]:
    salt = os.urandom(SALT_LENGTH)
    iv = os.urandom(IV_LENGTH)
    key = derive_key(salt, key_material)
    sealed = AESGCM(key).encrypt(iv, plaintext, salt)
    return salt, iv, sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]


def _open(ciphertext: bytes, salt: bytes, iv: bytes, tag: bytes, key_material: str) -> bytes:
    if len(tag) != TAG_LENGTH or len(iv) != IV_LENGTH or not salt:
        raise ValueError("malformed payload")
    key = derive_key(salt, key_material)
    return AESGCM(key).decrypt(iv, ciphertext + tag, salt)


def encrypt_text(plaintext: str, key_material: str) -> EncryptedPayload:
    """Encrypt a string with AES-256-GCM under a key derived from key_material."""
    try:
        salt, iv, ciphertext, tag = _seal(plaintext.encode("utf-8"), key_material)
    except Exception as exc:
        logger.error("Encryption error: %s", exc.__class__.__name__)
        record_crypto_event("encrypt", success=False)
        raise EncryptionError() from exc

    record_crypto_event("encrypt")
    return EncryptedPayload(
        encrypted=ciphertext.hex(),
        iv=iv.hex(),
        salt=salt.hex(),
        tag=tag.hex(),
    )


def decrypt_text(payload: EncryptedPayload, key_material: str) -> str:
    """Decrypt an EncryptedPayload. Tag mismatch raises DecryptionError."""
    try:
        plaintext = _open(
            bytes.fromhex(payload.encrypted),
            bytes.fromhex(payload.salt),
            bytes.fromhex(payload.iv),
            bytes.fromhex(payload.tag),
            key_material,
        ).decode("utf-8")
    except Exception as exc:
        logger.error("Decryption error: %s", exc.__class__.__name__)
        record_crypto_event("decrypt", success=False)
        raise DecryptionError() from exc

    record_crypto_event("decrypt")
    return plaintext


def encrypt_file(data: bytes, key_material: str) -> bytes:
    """Encrypt raw bytes into a self-contained blob."""
    try:
        salt, iv, ciphertext, tag = _seal(bytes(data), key_material)
    except Exception as exc:
        logger.error("File encryption error: %s", exc.__class__.__name__)
        record_crypto_event("encrypt_file", success=False)
        raise EncryptionError() from exc

    record_crypto_event("encrypt_file")
    return b"".join([
        bytes([SALT_LENGTH]), salt,
        bytes([IV_LENGTH]), iv,
        bytes([TAG_LENGTH]), tag,
        ciphertext,
    ])


def _read_field(blob: bytes, offset: int) -> tuple[bytes, int]:
    if offset >= len(blob):
        raise ValueError("truncated blob")
    length = blob[offset]
    offset += 1
    value = blob[offset:offset + length]
    if len(value) != length:
        raise ValueError("truncated blob")
    return value, offset + length


def decrypt_file(blob: bytes, key_material: str) -> bytes:
    """Decrypt a blob produced by encrypt_file()."""
    try:
        salt, offset = _read_field(blob, 0)
        iv, offset = _read_field(blob, offset)
        tag, offset = _read_field(blob, offset)
        plaintext = _open(bytes(blob[offset:]), salt, iv, tag, key_material)
    except Exception as exc:
        logger.error("File decryption error: %s", exc.__class__.__name__)
        record_crypto_event("decrypt_file", success=False)
        raise DecryptionError() from exc

    record_crypto_event("decrypt_file")
    return plaintext
