from src.app.services.audit_service import AuditService
from src.app.services.auth_service import AuthService
from src.app.services.project_service import ProjectService
from src.app.services.task_service import TaskService
from src.app.services.tenant_resolver import TenantResolver
from src.app.services.tenant_service import TenantService
from src.app.services.user_service import UserService

__all__ = [
    "AuditService",
    "AuthService",
    "ProjectService",
    "TaskService",
    "TenantResolver",
    "TenantService",
    "UserService",
]
