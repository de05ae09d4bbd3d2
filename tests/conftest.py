"""Root test fixtures shared across all test types.

This conftest contains fixtures that can be used by both unit and integration tests.
Database-specific fixtures are in tests/integration/conftest.py.
"""

import os
import tempfile

# Settings are read at import time (password hasher, rate limiter), so the
# environment must be in place before any app import.
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{os.path.join(tempfile.mkdtemp(prefix='taskgate-'), 'test.db')}",
)
# Cheap hashing keeps the suite fast
os.environ.setdefault("ARGON2_TIME_COST", "1")
os.environ.setdefault("ARGON2_MEMORY_COST", "1024")

# ruff: noqa: E402 - Imports must be after env var setup
from uuid import uuid4

import pytest

from src.app.core.config import get_settings
from src.app.core.context import CallerContext
from src.app.models.enums import Role

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()


@pytest.fixture
def make_caller():
    """Build a CallerContext without touching the database."""

    def _make(role: Role = Role.USER, tenant_id=None, user_id=None) -> CallerContext:
        return CallerContext(
            user_id=user_id or uuid4(),
            tenant_id=tenant_id if tenant_id is not None or role is Role.SUPER_ADMIN else uuid4(),
            role=role,
            ip_address="127.0.0.1",
            user_agent="pytest",
            request_id="test-request-id",
        )

    return _make
