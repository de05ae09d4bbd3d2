"""Tenant model - the isolation boundary for users, projects and tasks."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.app.models.base import utc_now
from src.app.models.enums import SubscriptionType, TenantStatus


class Tenant(SQLModel, table=True):
    """Tenant registry.

    ``subdomain`` is unique and immutable once registered.
    """

    __tablename__ = "tenants"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=100)
    subdomain: str = Field(max_length=63, unique=True, index=True)
    status: str = Field(default=TenantStatus.ACTIVE.value, max_length=20)
    subscription_type: str = Field(default=SubscriptionType.FREE.value, max_length=20)
    max_users: int = Field(default=25)
    max_projects: int = Field(default=15)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_active(self) -> bool:
        return self.status == TenantStatus.ACTIVE.value
