"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.app.api.dependencies.db import DBSession
from src.app.api.dependencies.repositories import (
    AuditRepo,
    ProjectRepo,
    TaskRepo,
    TenantRepo,
    UserRepo,
)
from src.app.services.audit_service import AuditService
from src.app.services.auth_service import AuthService
from src.app.services.project_service import ProjectService
from src.app.services.task_service import TaskService
from src.app.services.tenant_service import TenantService
from src.app.services.user_service import UserService


def get_audit_service(audit_repo: AuditRepo, session: DBSession) -> AuditService:
    """Audit service bound to the request session so writes share its transaction."""
    return AuditService(audit_repo, session)


AuditServiceDep = Annotated[AuditService, Depends(get_audit_service)]


def get_auth_service(
    user_repo: UserRepo,
    tenant_repo: TenantRepo,
    audit: AuditServiceDep,
    session: DBSession,
) -> AuthService:
    return AuthService(user_repo, tenant_repo, audit, session)


def get_tenant_service(
    tenant_repo: TenantRepo,
    user_repo: UserRepo,
    audit: AuditServiceDep,
    session: DBSession,
) -> TenantService:
    return TenantService(tenant_repo, user_repo, audit, session)


def get_user_service(
    user_repo: UserRepo, audit: AuditServiceDep, session: DBSession
) -> UserService:
    return UserService(user_repo, audit, session)


def get_project_service(
    project_repo: ProjectRepo, audit: AuditServiceDep, session: DBSession
) -> ProjectService:
    return ProjectService(project_repo, audit, session)


def get_task_service(
    task_repo: TaskRepo, audit: AuditServiceDep, session: DBSession
) -> TaskService:
    return TaskService(task_repo, audit, session)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
TenantServiceDep = Annotated[TenantService, Depends(get_tenant_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
TaskServiceDep = Annotated[TaskService, Depends(get_task_service)]
