"""
SECURITY CONFIG
===============
Centralized encryption settings loaded from environment.
"""

# FLOW:
# - Load the active .env file once, then build EncryptionSettings from env vars.
# WHY:
# - One place to tune key handling, logging and metrics per environment.
# HOW:
# - python-dotenv for the env file, a frozen dataclass for the values.

from __future__ import annotations

import os
from dataclasses import dataclass

import dotenv


PRODUCTION_ENVS = {"prod", "production"}
LOCAL_ENVS = {"local", "localhost", "dev", "development"}


def get_bool(name: str, default: bool = False) -> bool:
    return os.getenv(name, str(default)).strip().lower() == "true"


def get_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def get_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if not raw:
        return default
    return [item.strip() for item in raw.split(",") if item.strip()]


def feature_enabled(feature: str, default: bool = True) -> bool:
    """Read a FEATURE_<NAME> toggle, e.g. feature_enabled("secrets-redaction")."""
    env_name = "FEATURE_" + feature.upper().replace("-", "_")
    return get_bool(env_name, default)


def _root_dir() -> str:
    return os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _env_name() -> str:
    env = os.getenv("APP_ENV", "").strip().lower()
    if env in PRODUCTION_ENVS:
        return ".env.production"
    if env in LOCAL_ENVS:
        return ".env.localhost"

    # Auto-select based on ENV_ACTIVE flag if APP_ENV is not set
    prod_path = os.path.join(_root_dir(), ".env.production")

    def _is_active(path: str) -> bool:
        if not os.path.exists(path):
            return False
        with open(path, "r", encoding="utf-8") as f:
            for line in f:
                if line.strip().startswith("ENV_ACTIVE="):
                    return line.split("=", 1)[1].strip().strip('"').lower() == "true"
        return False

    if _is_active(prod_path):
        return ".env.production"
    return ".env.localhost"


def env_path() -> str:
    return os.path.join(_root_dir(), _env_name())


dotenv.load_dotenv(env_path())


@dataclass(frozen=True)
class EncryptionSettings:
    """Settings for the PII encryption service (loaded from environment)."""

    master_key: str = ""
    app_env: str = "development"
    allow_ephemeral_master_key: bool = True
    log_dir: str = "logs"
    prometheus_enabled: bool = True

    @classmethod
    def from_env(cls) -> EncryptionSettings:
        return cls(
            master_key=os.getenv("ENCRYPTION_MASTER_KEY", "").strip(),
            app_env=os.getenv("APP_ENV", "development").strip().lower() or "development",
            allow_ephemeral_master_key=get_bool("ALLOW_EPHEMERAL_MASTER_KEY", True),
            log_dir=os.getenv("SECURITY_LOG_DIR", "logs"),
            prometheus_enabled=get_bool("PROMETHEUS_ENABLED", True),
        )

    @property
    def is_production(self) -> bool:
        return self.app_env in PRODUCTION_ENVS
