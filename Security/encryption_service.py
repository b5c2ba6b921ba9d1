"""
ENCRYPTION SERVICE
==================
One object bundling the crypto helpers around a single master key.

FLOW:
- Build EncryptionService(settings) at startup (or via get_encryption_service()).
- Request handlers call encrypt_pii()/decrypt_pii(), hash_value(), etc.

WHY:
- The master key is loaded and validated once, then passed explicitly.
- Tests and tools can build their own service with a known key.

HOW:
- Stateless methods; the only state is the immutable master key string.
"""

from __future__ import annotations

from functools import lru_cache

from Security import data_encryption_at_rest, data_integrity, field_level_encryption
from Security.data_encryption_at_rest import EncryptedPayload
from Security.data_integrity import HashResult
from Security.key_management import derive_key, generate_key, load_master_key, validate_master_key
from Security.secrets_redaction import mask_data
from Security.secure_tokens import generate_numeric_code, generate_token
from Security.security_config import EncryptionSettings


class EncryptionService:
    def __init__(self, settings: EncryptionSettings | None = None, master_key: str | None = None):
        self.settings = settings or EncryptionSettings.from_env()
        if master_key is not None:
            self._master_key = validate_master_key(master_key)
        else:
            self._master_key = load_master_key(self.settings)

    def derive_key(self, salt: bytes, key_material: str | None = None) -> bytes:
        return derive_key(salt, key_material or self._master_key)

    def encrypt(self, plaintext: str, key_material: str | None = None) -> EncryptedPayload:
        return data_encryption_at_rest.encrypt_text(plaintext, key_material or self._master_key)

    def decrypt(self, payload: EncryptedPayload, key_material: str | None = None) -> str:
        return data_encryption_at_rest.decrypt_text(payload, key_material or self._master_key)

    def encrypt_file(self, data: bytes, key_material: str | None = None) -> bytes:
        return data_encryption_at_rest.encrypt_file(data, key_material or self._master_key)

    def decrypt_file(self, blob: bytes, key_material: str | None = None) -> bytes:
        return data_encryption_at_rest.decrypt_file(blob, key_material or self._master_key)

    def encrypt_pii(self, value: str, field_type: str, user_id: str | None = None) -> str:
        return field_level_encryption.encrypt_pii(value, field_type, self._master_key, user_id)

    def decrypt_pii(self, encrypted_json: str, field_type: str, user_id: str | None = None) -> str:
        return field_level_encryption.decrypt_pii(encrypted_json, field_type, self._master_key, user_id)

    def hash(self, data: str, salt: str | None = None) -> HashResult:
        return data_integrity.hash_value(data, salt)

    def verify_hash(self, data: str, hash: str, salt: str) -> bool:
        return data_integrity.verify_hash(data, hash, salt)

    def create_signature(self, data: str | bytes, secret: str | None = None) -> str:
        return data_integrity.create_signature(data, secret or self._master_key)

    def verify_signature(self, data: str | bytes, signature: str, secret: str | None = None) -> bool:
        return data_integrity.verify_signature(data, signature, secret or self._master_key)

    @staticmethod
    def generate_key() -> str:
        return generate_key()

    @staticmethod
    def generate_token(length: int = 32) -> str:
        return generate_token(length)

    @staticmethod
    def generate_numeric_code(length: int = 6) -> str:
        return generate_numeric_code(length)

    @staticmethod
    def mask_data(data: str, visible_chars: int = 4) -> str:
        return mask_data(data, visible_chars)


@lru_cache(maxsize=1)
def get_encryption_service() -> EncryptionService:
    """Process-wide default service, built on first use."""
    return EncryptionService()


def reset_encryption_service() -> None:
    get_encryption_service.cache_clear()
