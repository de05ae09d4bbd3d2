"""Task schemas for API request/response."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.app.models.enums import Priority, TaskStatus


class TaskCreate(BaseModel):
    """Schema for creating a task. Project and tenant come from the path."""

    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    priority: Priority = Priority.MEDIUM
    status: TaskStatus = TaskStatus.TODO
    assigned_to: UUID | None = None
    due_date: date | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Task title cannot be empty or whitespace only")
        return v


class TaskUpdate(BaseModel):
    """Partial task update.

    An explicit ``null`` for ``assigned_to``, ``description`` or ``due_date``
    clears the field; omitting it leaves the field unchanged.
    """

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    priority: Priority | None = None
    status: TaskStatus | None = None
    assigned_to: UUID | None = None
    due_date: date | None = None

    @field_validator("title", "priority", "status")
    @classmethod
    def reject_null(cls, v: object) -> object:
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Task title cannot be empty or whitespace only")
        return v


class TaskStatusUpdate(BaseModel):
    status: TaskStatus


class TaskRead(BaseModel):
    id: UUID
    project_id: UUID
    tenant_id: UUID
    title: str
    description: str | None
    priority: str
    status: str
    assigned_to: UUID | None
    created_by: UUID
    due_date: date | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
