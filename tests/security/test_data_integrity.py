"""Unit Tests for hashing, HMAC signatures, masking and secure codes."""
import pytest

from Security.data_integrity import (
    HashResult,
    create_signature,
    hash_value,
    sha256_hex,
    verify_hash,
    verify_signature,
)
from Security.secrets_redaction import mask_data, redact
from Security.secure_tokens import generate_numeric_code, generate_token


def test_hash_verifies():
    result = hash_value("482913")
    assert isinstance(result, HashResult)
    assert verify_hash("482913", *result)
    assert not verify_hash("482914", *result)


def test_hash_with_explicit_salt_is_repeatable():
    first = hash_value("482913")
    second = hash_value("482913", first.salt)
    assert second == first
    assert len(bytes.fromhex(first.hash)) == 64
    assert len(bytes.fromhex(first.salt)) == 64


def test_hash_random_salt_per_call():
    assert hash_value("same").hash != hash_value("same").hash


def test_signature_round_trip():
    sig = create_signature("order=1042&total=890.00", "webhook-secret")
    assert verify_signature("order=1042&total=890.00", sig, "webhook-secret")


def test_signature_rejects_changes():
    sig = create_signature("order=1042", "webhook-secret")
    assert not verify_signature("order=1043", sig, "webhook-secret")
    assert not verify_signature("order=1042", sig, "other-secret")
    assert not verify_signature("order=1042", sig[:-1], "webhook-secret")
    assert not verify_signature("order=1042", "", "webhook-secret")


def test_signature_over_raw_bytes():
    body = b"\x7b\xff\x7d"
    sig = create_signature(body, "webhook-secret")
    assert verify_signature(body, sig, "webhook-secret")
    assert not verify_signature(b"\x7b\xfe\x7d", sig, "webhook-secret")
    # both non-UTF-8 bytes decode to the same replacement text
    assert b"\xff".decode("utf-8", errors="replace") == b"\xfe".decode("utf-8", errors="replace")


def test_service_signature_defaults_to_master_key(service, master_key):
    sig = service.create_signature("payload")
    assert sig == create_signature("payload", master_key)
    assert service.verify_signature("payload", sig)
    assert not service.verify_signature("payload", sig, "explicit-secret")


def test_sha256_hex_accepts_text_and_bytes():
    assert sha256_hex("abc") == sha256_hex(b"abc")
    assert len(sha256_hex("abc")) == 64


@pytest.mark.parametrize(
    "value, visible, expected",
    [
        ("12345678", 2, "12****78"),
        ("ab", 2, "**"),
        ("abcd", 2, "****"),
        ("4111111111111111", 4, "4111********1111"),
        ("", 4, ""),
        ("secret", 0, "******"),
    ],
)
def test_mask_data(value, visible, expected):
    assert mask_data(value, visible) == expected


def test_mask_data_default_visible_chars(service):
    assert service.mask_data("123456789") == "1234*6789"


def test_redact_masks_secret_params():
    text = "token=abc123&page=2&signature=deadbeef"
    assert redact(text) == "token=***&page=2&signature=***"


def test_redact_can_be_disabled(monkeypatch):
    monkeypatch.setenv("FEATURE_SECRETS_REDACTION", "false")
    assert redact("token=abc") == "token=abc"


def test_generate_token_length():
    assert len(generate_token()) == 64
    assert len(generate_token(8)) == 16


@pytest.mark.parametrize("length", [1, 4, 6, 8])
def test_numeric_code_digits(length):
    for _ in range(20):
        code = generate_numeric_code(length)
        assert code.isdigit()
        assert len(code) == length


def test_numeric_code_rejects_zero_length():
    with pytest.raises(ValueError):
        generate_numeric_code(0)
