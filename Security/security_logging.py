"""
SECURITY LOGGING
================
Rotating file loggers for the encryption helpers and the storefront.

FLOW:
- get_security_logger() returns a "security.*" logger with a file handler.
- get_security_logger(name, root="storefront") returns a "storefront.*" logger.

WHY:
- Crypto warnings (ephemeral keys, failed decrypts) need a durable trail.

HOW:
- One RotatingFileHandler per root logger (<root>.log), shared by children.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

from Security.security_config import EncryptionSettings


ROOT_LOGGER_NAME = "security"


def _configure_root(root_name: str, log_dir: str) -> logging.Logger:
    root = logging.getLogger(root_name)
    if root.handlers:
        return root

    os.makedirs(log_dir, exist_ok=True)
    handler = RotatingFileHandler(
        os.path.join(log_dir, f"{root_name}.log"), maxBytes=2_000_000, backupCount=3
    )
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    handler.setFormatter(formatter)

    root.setLevel(logging.INFO)
    root.addHandler(handler)
    return root


def get_security_logger(
    name: str = "",
    log_dir: str | None = None,
    root: str = ROOT_LOGGER_NAME,
) -> logging.Logger:
    if log_dir is None:
        log_dir = EncryptionSettings.from_env().log_dir
    _configure_root(root, log_dir)
    if not name:
        return logging.getLogger(root)
    return logging.getLogger(f"{root}.{name}")
