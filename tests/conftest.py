import os
import tempfile

# Must be set before any Security/storefront module reads the environment.
TEST_MASTER_KEY = "4f" * 32
os.environ["ENCRYPTION_MASTER_KEY"] = TEST_MASTER_KEY
os.environ["APP_ENV"] = "development"
os.environ["SECURITY_LOG_DIR"] = tempfile.mkdtemp(prefix="security-logs-")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.pop("PAYMENT_WEBHOOK_SECRET", None)

import pytest

from Security.encryption_service import EncryptionService, reset_encryption_service


@pytest.fixture
def master_key():
    return TEST_MASTER_KEY


@pytest.fixture
def service(master_key):
    return EncryptionService(master_key=master_key)


@pytest.fixture(autouse=True)
def _fresh_default_service():
    reset_encryption_service()
    yield
    reset_encryption_service()
