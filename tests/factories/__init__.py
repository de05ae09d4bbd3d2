"""Test data factories using polyfactory."""

from tests.factories.project import ProjectFactory, TaskFactory
from tests.factories.tenant import TenantFactory
from tests.factories.user import DEFAULT_TEST_PASSWORD, UserFactory

__all__ = [
    "DEFAULT_TEST_PASSWORD",
    "ProjectFactory",
    "TaskFactory",
    "TenantFactory",
    "UserFactory",
]
