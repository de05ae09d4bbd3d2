"""Tenant resolution by ownership chain.

Every resource addressed by id is resolved to its authoritative tenant here:
task -> project -> tenant, user -> tenant, and a tenant id from the path is
its own authority. The caller's token tenant is never used as a filter.
"""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.app.core.exceptions import AppError, NotFoundError
from src.app.core.logging import get_logger
from src.app.models import Project, Role, Task, Tenant, User
from src.app.repositories import (
    ProjectRepository,
    TaskRepository,
    TenantRepository,
    UserRepository,
)
from src.app.services.access_policy import ResourceFacts

logger = get_logger(__name__)


def tenant_facts(tenant: Tenant, changed_fields: frozenset[str] = frozenset()) -> ResourceFacts:
    return ResourceFacts(
        tenant_id=tenant.id,
        tenant_status=tenant.status,
        changed_fields=changed_fields,
    )


@dataclass(frozen=True)
class ResolvedProject:
    project: Project
    tenant: Tenant

    def facts(self) -> ResourceFacts:
        return ResourceFacts(
            tenant_id=self.tenant.id,
            tenant_status=self.tenant.status,
            created_by=self.project.created_by,
        )


@dataclass(frozen=True)
class ResolvedTask:
    task: Task
    project: Project
    tenant: Tenant

    def facts(self, changed_fields: frozenset[str] = frozenset()) -> ResourceFacts:
        # The project's tenant is authoritative; task.tenant_id is a copy.
        return ResourceFacts(
            tenant_id=self.project.tenant_id,
            tenant_status=self.tenant.status,
            created_by=self.task.created_by,
            assigned_to=self.task.assigned_to,
            changed_fields=changed_fields,
        )


@dataclass(frozen=True)
class ResolvedUser:
    user: User
    tenant: Tenant | None

    def facts(self, changed_fields: frozenset[str] = frozenset()) -> ResourceFacts:
        return ResourceFacts(
            tenant_id=self.user.tenant_id,
            tenant_status=self.tenant.status if self.tenant else None,
            target_user_id=self.user.id,
            target_role=Role(self.user.role),
            target_tenant_id=self.user.tenant_id,
            target_is_active=self.user.is_active,
            changed_fields=changed_fields,
        )


class TenantResolver:
    """Resolve resources to their owning tenant within one session.

    With ``for_update=True`` the rows are locked until the surrounding
    transaction ends, so quota checks and writes see a stable tenant.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.tenant_repo = TenantRepository(session)
        self.user_repo = UserRepository(session)
        self.project_repo = ProjectRepository(session)
        self.task_repo = TaskRepository(session)

    async def resolve_tenant(self, tenant_id: UUID, *, for_update: bool = False) -> Tenant:
        tenant = await self.tenant_repo.get_by_id(tenant_id, for_update=for_update)
        if tenant is None:
            raise NotFoundError("Tenant not found")
        return tenant

    async def resolve_project(
        self, project_id: UUID, *, for_update: bool = False
    ) -> ResolvedProject:
        project = await self.project_repo.get_by_id(project_id, for_update=for_update)
        if project is None:
            raise NotFoundError("Project not found")
        tenant = await self._owning_tenant(project.tenant_id)
        return ResolvedProject(project=project, tenant=tenant)

    async def resolve_task(
        self,
        task_id: UUID,
        *,
        project_id: UUID | None = None,
        for_update: bool = False,
    ) -> ResolvedTask:
        """Resolve a task through its parent project.

        When ``project_id`` is given the task must live under exactly that
        project; a task id from another project is reported as not found.
        """
        task = await self.task_repo.get_by_id(task_id, for_update=for_update)
        if task is None or (project_id is not None and task.project_id != project_id):
            raise NotFoundError("Task not found")

        project = await self.project_repo.get_by_id(task.project_id)
        if project is None:
            raise NotFoundError("Task not found")
        if task.tenant_id != project.tenant_id:
            logger.error(
                "Task tenant does not match its project",
                task_id=str(task.id),
                task_tenant_id=str(task.tenant_id),
                project_tenant_id=str(project.tenant_id),
            )
            raise AppError()

        tenant = await self._owning_tenant(project.tenant_id)
        return ResolvedTask(task=task, project=project, tenant=tenant)

    async def resolve_user(self, user_id: UUID, *, for_update: bool = False) -> ResolvedUser:
        user = await self.user_repo.get_by_id(user_id, for_update=for_update)
        if user is None:
            raise NotFoundError("User not found")
        tenant = await self._owning_tenant(user.tenant_id) if user.tenant_id else None
        return ResolvedUser(user=user, tenant=tenant)

    async def _owning_tenant(self, tenant_id: UUID) -> Tenant:
        tenant = await self.tenant_repo.get_by_id(tenant_id)
        if tenant is None:
            logger.error("Owning tenant row missing", tenant_id=str(tenant_id))
            raise AppError()
        return tenant
