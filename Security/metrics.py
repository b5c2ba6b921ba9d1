"""
SECURITY METRICS
================
Prometheus-backed counters for encryption operations.
"""

from __future__ import annotations

from prometheus_client import REGISTRY, Counter

from Security.security_config import EncryptionSettings


_CRYPTO_OPERATIONS = None


def _enabled() -> bool:
    return EncryptionSettings.from_env().prometheus_enabled


def _init_metrics() -> None:
    global _CRYPTO_OPERATIONS
    if _CRYPTO_OPERATIONS or not _enabled():
        return
    _CRYPTO_OPERATIONS = Counter(
        "pii_crypto_operations_total",
        "Count of encryption/decryption operations",
        ["operation", "outcome"],
    )


def record_crypto_event(operation: str, success: bool = True) -> None:
    _init_metrics()
    if not _CRYPTO_OPERATIONS:
        return
    outcome = "success" if success else "failure"
    _CRYPTO_OPERATIONS.labels(operation=operation, outcome=outcome).inc()


def get_crypto_event_count(operation: str, outcome: str = "success") -> int:
    value = REGISTRY.get_sample_value(
        "pii_crypto_operations_total",
        {"operation": operation, "outcome": outcome},
    )
    return int(value or 0)
