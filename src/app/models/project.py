"""Project model - tenant-scoped entity."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Index, UniqueConstraint
from sqlmodel import Field, SQLModel

from src.app.models.base import utc_now
from src.app.models.enums import Priority, ProjectStatus


class Project(SQLModel, table=True):
    """Project owned by a tenant.

    ``tenant_id`` is set from the creator's tenant and never changes. It is the
    authoritative tenant for every task beneath the project.
    """

    __tablename__ = "projects"
    __table_args__ = (
        UniqueConstraint("tenant_id", "name", name="uq_projects_tenant_name"),
        Index("ix_projects_tenant_created", "tenant_id", "created_at"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)
    name: str = Field(max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    priority: str = Field(default=Priority.MEDIUM.value, max_length=20)
    status: str = Field(default=ProjectStatus.ACTIVE.value, max_length=20)
    created_by: UUID = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
