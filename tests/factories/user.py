"""User factory for test data generation."""

from uuid import uuid4

from polyfactory import Use

from src.app.core.security import hash_password
from src.app.models import User
from src.app.models.enums import Role
from tests.factories.base import BaseFactory, short_id, utc_now

# Default test password - strong enough for zxcvbn, stored for convenience in tests
DEFAULT_TEST_PASSWORD = "Qz8!mV3#tLp9@wXr"


class UserFactory(BaseFactory):
    """Factory for generating User test data.

    ``tenant_id`` must be set explicitly, except for super admins.
    """

    __model__ = User

    id = Use(uuid4)
    tenant_id = None
    email = Use(lambda: f"user_{short_id()}@example.com")
    hashed_password = Use(lambda: hash_password(DEFAULT_TEST_PASSWORD))
    full_name = "Test User"
    role = Role.USER.value
    is_active = True
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def tenant_admin(cls, **kwargs):
        """Create a tenant admin."""
        return cls.build(role=Role.TENANT_ADMIN.value, **kwargs)

    @classmethod
    def super_admin(cls, **kwargs):
        """Create a tenant-less platform super admin."""
        return cls.build(
            role=Role.SUPER_ADMIN.value,
            tenant_id=None,
            full_name=kwargs.pop("full_name", "Super Admin"),
            **kwargs,
        )

    @classmethod
    def inactive(cls, **kwargs):
        """Create an inactive user."""
        return cls.build(is_active=False, **kwargs)
