"""Model exports.

Import from here: `from src.app.models import User, Tenant`
"""

from src.app.models.audit import AuditAction, AuditLog, AuditStatus
from src.app.models.enums import (
    Priority,
    ProjectStatus,
    Role,
    SubscriptionType,
    TaskStatus,
    TenantStatus,
)
from src.app.models.project import Project
from src.app.models.task import Task
from src.app.models.tenant import Tenant
from src.app.models.user import User

__all__ = [
    # Enums
    "AuditAction",
    "AuditStatus",
    "Priority",
    "ProjectStatus",
    "Role",
    "SubscriptionType",
    "TaskStatus",
    "TenantStatus",
    # Tables
    "AuditLog",
    "Project",
    "Task",
    "Tenant",
    "User",
]
