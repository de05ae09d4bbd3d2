"""Task model - lives under a project."""

from datetime import date, datetime
from uuid import UUID, uuid4

from sqlalchemy import Index
from sqlmodel import Field, SQLModel

from src.app.models.base import utc_now
from src.app.models.enums import Priority, TaskStatus


class Task(SQLModel, table=True):
    """Task belonging to a project.

    ``tenant_id`` is a denormalized copy of the owning project's tenant, written
    once at creation. Authorization always reads the project's tenant.
    """

    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_project_created", "project_id", "created_at"),
        Index("ix_tasks_tenant", "tenant_id"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", index=True)
    tenant_id: UUID = Field(foreign_key="tenants.id")
    title: str = Field(max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    priority: str = Field(default=Priority.MEDIUM.value, max_length=20)
    status: str = Field(default=TaskStatus.TODO.value, max_length=20)
    assigned_to: UUID | None = Field(default=None, foreign_key="users.id", index=True)
    created_by: UUID = Field(foreign_key="users.id")
    due_date: date | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
