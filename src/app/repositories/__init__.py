"""Repository layer - data access abstraction."""

from src.app.repositories.audit_repository import AuditLogRepository
from src.app.repositories.base import BaseRepository
from src.app.repositories.project_repository import ProjectRepository
from src.app.repositories.task_repository import TaskRepository
from src.app.repositories.tenant_repository import TenantRepository
from src.app.repositories.user_repository import UserRepository

__all__ = [
    "AuditLogRepository",
    "BaseRepository",
    "ProjectRepository",
    "TaskRepository",
    "TenantRepository",
    "UserRepository",
]
