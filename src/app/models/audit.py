"""Audit log model for tracking tenant-scoped actions."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.app.models.base import utc_now


class AuditAction(str, Enum):
    """Audit action types for type-safe logging."""

    # Auth
    USER_LOGIN = "user.login"

    # Tenant
    TENANT_REGISTER = "tenant.register"
    TENANT_READ = "tenant.read"
    TENANT_LIST = "tenant.list"
    TENANT_UPDATE = "tenant.update"

    # User
    USER_CREATE = "user.create"
    USER_LIST = "user.list"
    USER_UPDATE = "user.update"
    USER_DEACTIVATE = "user.deactivate"

    # Project
    PROJECT_CREATE = "project.create"
    PROJECT_LIST = "project.list"
    PROJECT_READ = "project.read"
    PROJECT_UPDATE = "project.update"
    PROJECT_DELETE = "project.delete"

    # Task
    TASK_CREATE = "task.create"
    TASK_LIST = "task.list"
    TASK_READ = "task.read"
    TASK_UPDATE = "task.update"
    TASK_STATUS_CHANGE = "task.status_change"
    TASK_DELETE = "task.delete"


class AuditStatus(str, Enum):
    """Audit log status."""

    SUCCESS = "success"
    FAILURE = "failure"


class AuditLog(SQLModel, table=True):
    """Append-only audit trail.

    ``tenant_id`` is the resolved tenant of the affected entity, or None for
    platform-wide reads by a super admin.
    """

    __tablename__ = "audit_logs"
    __table_args__ = (
        Index("ix_audit_logs_tenant_created", "tenant_id", "created_at"),
        Index("ix_audit_logs_user_created", "user_id", "created_at"),
        Index("ix_audit_logs_entity", "entity_type", "entity_id"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    # Context
    tenant_id: UUID | None = Field(default=None, foreign_key="tenants.id")
    user_id: UUID | None = Field(default=None, foreign_key="users.id")

    # Action details
    action: str = Field(max_length=50)  # AuditAction value
    entity_type: str = Field(max_length=50)  # "tenant", "user", "project", "task"
    entity_id: UUID | None = Field(default=None)

    # Change tracking (for update operations)
    changes: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(JSON().with_variant(JSONB(), "postgresql"), nullable=True),
    )

    # Request metadata
    ip_address: str | None = Field(max_length=45, default=None)  # IPv4/IPv6
    user_agent: str | None = Field(max_length=500, default=None)
    request_id: str | None = Field(max_length=36, default=None)

    status: str = Field(default=AuditStatus.SUCCESS.value, max_length=20)

    created_at: datetime = Field(default_factory=utc_now)
