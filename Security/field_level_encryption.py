"""
SENSITIVE DATA PROTECTION
=========================
Field-level AES-256-GCM encryption for customer PII.
"""

# FLOW:
# - field_salt() hashes "<field_type>:<user_id>" into a stable salt.
# - encrypt_pii()/decrypt_pii() derive key material from master key + salt,
#   then call the AES helpers and (de)serialize the payload as JSON.
# - encrypt_email()/decrypt_email() etc. fix the field type and use the
#   default EncryptionService.
# WHY:
# - Each (field, customer) pair gets its own key; a leaked key for one
#   customer's email does not open another customer's email.
# HOW:
# - HMAC-SHA256(master_key, field_salt) is the PBKDF2 input.

from __future__ import annotations

import json

from Security.data_encryption_at_rest import EncryptedPayload, decrypt_text, encrypt_text
from Security.data_integrity import create_signature, sha256_hex
from Security.errors import DecryptionError


ANONYMOUS_USER = "anonymous"

EMAIL = "email"
PHONE = "phone"
ADDRESS = "address"
NAME = "name"


def field_salt(field_type: str, user_id: str | None = None) -> str:
    return sha256_hex(f"{field_type}:{user_id or ANONYMOUS_USER}")


def field_key_material(master_key: str, field_type: str, user_id: str | None = None) -> str:
    return create_signature(field_salt(field_type, user_id), master_key)


def encrypt_pii(value: str, field_type: str, master_key: str, user_id: str | None = None) -> str:
    payload = encrypt_text(value, field_key_material(master_key, field_type, user_id))
    return json.dumps(payload.to_dict())


def decrypt_pii(encrypted_json: str, field_type: str, master_key: str, user_id: str | None = None) -> str:
    data = json.loads(encrypted_json)
    try:
        payload = EncryptedPayload.from_dict(data)
    except (KeyError, TypeError) as exc:
        raise DecryptionError() from exc
    return decrypt_text(payload, field_key_material(master_key, field_type, user_id))


def _service():
    from Security.encryption_service import get_encryption_service

    return get_encryption_service()


def encrypt_email(email: str, user_id: str | None = None) -> str:
    return _service().encrypt_pii(email, EMAIL, user_id)


def decrypt_email(encrypted_email: str, user_id: str | None = None) -> str:
    return _service().decrypt_pii(encrypted_email, EMAIL, user_id)


def encrypt_phone(phone: str, user_id: str | None = None) -> str:
    return _service().encrypt_pii(phone, PHONE, user_id)


def decrypt_phone(encrypted_phone: str, user_id: str | None = None) -> str:
    return _service().decrypt_pii(encrypted_phone, PHONE, user_id)


def encrypt_address(address: str, user_id: str | None = None) -> str:
    return _service().encrypt_pii(address, ADDRESS, user_id)


def decrypt_address(encrypted_address: str, user_id: str | None = None) -> str:
    return _service().decrypt_pii(encrypted_address, ADDRESS, user_id)


def encrypt_name(name: str, user_id: str | None = None) -> str:
    return _service().encrypt_pii(name, NAME, user_id)


def decrypt_name(encrypted_name: str, user_id: str | None = None) -> str:
    return _service().decrypt_pii(encrypted_name, NAME, user_id)
