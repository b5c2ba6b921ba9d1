"""
SECURITY ERRORS
===============
Exception types raised by the encryption helpers.
"""

# FLOW:
# - Crypto helpers catch low-level failures and raise these instead.
# WHY:
# - Callers see one generic message, never internal crypto detail.
# HOW:
# - Small exception hierarchy rooted at SecurityError.

from __future__ import annotations


class SecurityError(Exception):
    """Base class for errors raised by the Security package."""


class EncryptionError(SecurityError):
    def __init__(self, message: str = "Failed to encrypt data"):
        super().__init__(message)


class DecryptionError(SecurityError):
    def __init__(self, message: str = "Failed to decrypt data"):
        super().__init__(message)


class MasterKeyError(SecurityError):
    """Master key is missing or malformed."""


class MissingMasterKeyError(MasterKeyError):
    def __init__(self, message: str = "ENCRYPTION_MASTER_KEY is not set"):
        super().__init__(message)


class InvalidMasterKeyError(MasterKeyError):
    def __init__(self, message: str = "ENCRYPTION_MASTER_KEY must be a 64 character hex string"):
        super().__init__(message)
