"""Unit Tests for master key loading and PBKDF2 key derivation."""
import logging
import os

import pytest

from Security.encryption_service import EncryptionService, get_encryption_service
from Security.errors import InvalidMasterKeyError, MissingMasterKeyError
from Security.key_management import KEY_LENGTH, derive_key, generate_key, load_master_key
from Security.security_config import EncryptionSettings


def test_derive_key_is_deterministic(master_key):
    salt = os.urandom(64)
    assert derive_key(salt, master_key) == derive_key(salt, master_key)
    assert len(derive_key(salt, master_key)) == KEY_LENGTH


def test_derive_key_differs_per_salt_and_material(master_key):
    salt_a, salt_b = os.urandom(64), os.urandom(64)
    assert derive_key(salt_a, master_key) != derive_key(salt_b, master_key)
    assert derive_key(salt_a, master_key) != derive_key(salt_a, generate_key())


def test_derive_key_rejects_text_salt(master_key):
    with pytest.raises(TypeError):
        derive_key("not-bytes", master_key)


def test_service_derive_key_defaults_to_master_key(service, master_key):
    salt = os.urandom(64)
    assert service.derive_key(salt) == derive_key(salt, master_key)
    assert service.derive_key(salt, "override") == derive_key(salt, "override")


def test_generate_key_format():
    key = generate_key()
    assert len(key) == 64
    int(key, 16)
    assert key != generate_key()


def test_load_configured_key(master_key):
    assert load_master_key(EncryptionSettings(master_key=master_key)) == master_key


@pytest.mark.parametrize("bad", ["abc", "zz" * 32, "4f" * 31])
def test_invalid_key_rejected(bad):
    with pytest.raises(InvalidMasterKeyError):
        load_master_key(EncryptionSettings(master_key=bad))


def test_ephemeral_key_in_development(caplog):
    caplog.set_level(logging.WARNING, logger="security.keys")
    key = load_master_key(EncryptionSettings(master_key="", app_env="development"))
    assert len(key) == 64
    assert "ENCRYPTION_MASTER_KEY not set" in caplog.text


@pytest.mark.parametrize("app_env", ["production", "prod"])
def test_missing_key_fails_in_production(app_env):
    with pytest.raises(MissingMasterKeyError):
        load_master_key(EncryptionSettings(master_key="", app_env=app_env))


def test_missing_key_fails_when_ephemeral_disabled():
    settings = EncryptionSettings(master_key="", allow_ephemeral_master_key=False)
    with pytest.raises(MissingMasterKeyError):
        EncryptionService(settings=settings)


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("ENCRYPTION_MASTER_KEY", "aa" * 32)
    monkeypatch.setenv("APP_ENV", "Production")
    monkeypatch.setenv("ALLOW_EPHEMERAL_MASTER_KEY", "false")
    settings = EncryptionSettings.from_env()
    assert settings.master_key == "aa" * 32
    assert settings.is_production
    assert settings.allow_ephemeral_master_key is False


def test_default_service_is_cached(master_key):
    first = get_encryption_service()
    assert first is get_encryption_service()
    stored = first.encrypt_pii("v", "name", "u")
    assert EncryptionService(master_key=master_key).decrypt_pii(stored, "name", "u") == "v"


def test_generate_master_key_cli(capsys):
    from Security.generate_master_key import main

    main()
    printed = capsys.readouterr().out.strip()
    assert load_master_key(EncryptionSettings(master_key=printed)) == printed
