"""FastAPI dependency injection definitions."""

from src.app.api.dependencies.auth import Caller, RequestMeta, get_caller, request_metadata
from src.app.api.dependencies.db import DBSession, get_db_session
from src.app.api.dependencies.repositories import (
    AuditRepo,
    ProjectRepo,
    TaskRepo,
    TenantRepo,
    UserRepo,
)
from src.app.api.dependencies.services import (
    AuditServiceDep,
    AuthServiceDep,
    ProjectServiceDep,
    TaskServiceDep,
    TenantServiceDep,
    UserServiceDep,
    get_audit_service,
    get_auth_service,
    get_project_service,
    get_task_service,
    get_tenant_service,
    get_user_service,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Auth
    "Caller",
    "RequestMeta",
    "get_caller",
    "request_metadata",
    # Repositories
    "AuditRepo",
    "ProjectRepo",
    "TaskRepo",
    "TenantRepo",
    "UserRepo",
    # Services
    "AuditServiceDep",
    "AuthServiceDep",
    "ProjectServiceDep",
    "TaskServiceDep",
    "TenantServiceDep",
    "UserServiceDep",
    "get_audit_service",
    "get_auth_service",
    "get_project_service",
    "get_task_service",
    "get_tenant_service",
    "get_user_service",
]
