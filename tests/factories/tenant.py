"""Tenant factory for test data generation."""

from uuid import uuid4

from polyfactory import Use

from src.app.models import Tenant
from src.app.models.enums import SubscriptionType, TenantStatus
from tests.factories.base import BaseFactory, short_id, utc_now


class TenantFactory(BaseFactory):
    """Factory for generating Tenant test data."""

    __model__ = Tenant

    id = Use(uuid4)
    name = Use(lambda: f"Test Tenant {short_id()}")
    subdomain = Use(lambda: f"test-{short_id()}")
    status = TenantStatus.ACTIVE.value
    subscription_type = SubscriptionType.FREE.value
    max_users = 25
    max_projects = 15
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def suspended(cls, **kwargs):
        """Create a suspended tenant."""
        return cls.build(status=TenantStatus.SUSPENDED.value, **kwargs)
