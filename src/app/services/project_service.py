"""Project operations scoped to the owning tenant."""

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.app.core.context import CallerContext
from src.app.core.exceptions import ConflictError, ValidationError
from src.app.core.logging import get_logger
from src.app.models import AuditAction, Project
from src.app.repositories import ProjectRepository
from src.app.schemas.project import ProjectCreate, ProjectUpdate
from src.app.services.access_policy import EntityKind, Operation, authorize
from src.app.services.audit_service import AuditService
from src.app.services.base import TransactionalService, apply_changes, changed_values
from src.app.services.tenant_resolver import TenantResolver, tenant_facts

logger = get_logger(__name__)

PROJECT = EntityKind.PROJECT.value


def _name_conflict(name: str) -> str:
    return f"Project with name '{name}' already exists"


class ProjectService(TransactionalService):
    """Project CRUD. ``tenant_id`` always comes from the caller, never the body."""

    def __init__(self, project_repo: ProjectRepository, audit: AuditService, session: AsyncSession):
        super().__init__(session)
        self.project_repo = project_repo
        self.audit = audit
        self.resolver = TenantResolver(session)

    def _target_tenant(self, caller: CallerContext, tenant_id: UUID | None) -> UUID:
        target = tenant_id or caller.tenant_id
        if target is None:
            raise ValidationError("tenant_id is required for platform administrators")
        return target

    async def create(self, caller: CallerContext, data: ProjectCreate) -> Project:
        """Create a project in the caller's tenant.

        Count, uniqueness check and insert run under a lock on the tenant row,
        so concurrent creators cannot both pass the quota.

        Raises:
            ConflictError: Quota reached or name already used in the tenant
        """
        if caller.tenant_id is None:
            raise ValidationError("Platform administrators cannot own projects")

        tenant = await self.resolver.resolve_tenant(caller.tenant_id, for_update=True)
        authorize(caller, EntityKind.PROJECT, Operation.CREATE, tenant_facts(tenant))

        count = await self.project_repo.count_by_tenant(tenant.id)
        if count >= tenant.max_projects:
            raise ConflictError(
                f"Project limit reached: tenant allows {tenant.max_projects} projects"
            )
        if await self.project_repo.get_by_name(tenant.id, data.name) is not None:
            raise ConflictError(_name_conflict(data.name))

        project = Project(
            tenant_id=tenant.id,
            name=data.name,
            description=data.description,
            priority=data.priority.value,
            status=data.status.value,
            created_by=caller.user_id,
        )
        self.project_repo.add(project)
        self.audit.record(
            caller,
            AuditAction.PROJECT_CREATE,
            PROJECT,
            tenant_id=tenant.id,
            entity_id=project.id,
            changes={"name": project.name},
        )
        await self.commit(_name_conflict(data.name))

        logger.info("Project created", project_id=str(project.id), tenant_id=str(tenant.id))
        return project

    async def list_projects(
        self,
        caller: CallerContext,
        tenant_id: UUID | None = None,
        cursor: str | None = None,
        limit: int = 50,
        status: str | None = None,
        priority: str | None = None,
        created_by: UUID | None = None,
        search: str | None = None,
    ) -> tuple[list[tuple[Project, dict[str, Any]]], str | None, bool]:
        """List projects of one tenant, each paired with its task count and creator.

        ``tenant_id`` defaults to the caller's tenant; naming another tenant
        only works for super admins.
        """
        tenant = await self.resolver.resolve_tenant(self._target_tenant(caller, tenant_id))
        authorize(caller, EntityKind.PROJECT, Operation.LIST, tenant_facts(tenant))

        projects, next_cursor, has_more = await self.project_repo.list_by_tenant(
            tenant.id,
            cursor=cursor,
            limit=limit,
            status=status,
            priority=priority,
            created_by=created_by,
            search=search,
        )
        details = await self.project_repo.get_list_details([p.id for p in projects])
        await self.audit.record_read(caller, AuditAction.PROJECT_LIST, PROJECT, tenant_id=tenant.id)
        return [(p, details[p.id]) for p in projects], next_cursor, has_more

    async def get(self, caller: CallerContext, project_id: UUID) -> Project:
        resolved = await self.resolver.resolve_project(project_id)
        authorize(caller, EntityKind.PROJECT, Operation.READ, resolved.facts())

        await self.audit.record_read(
            caller,
            AuditAction.PROJECT_READ,
            PROJECT,
            tenant_id=resolved.tenant.id,
            entity_id=project_id,
        )
        return resolved.project

    async def update(self, caller: CallerContext, project_id: UUID, data: ProjectUpdate) -> Project:
        values = changed_values(data)
        resolved = await self.resolver.resolve_project(project_id, for_update=True)
        authorize(caller, EntityKind.PROJECT, Operation.UPDATE, resolved.facts())
        project = resolved.project

        new_name = values.get("name")
        if new_name is not None and new_name != project.name:
            if await self.project_repo.get_by_name(project.tenant_id, new_name) is not None:
                raise ConflictError(_name_conflict(new_name))

        diff = apply_changes(project, values)
        self.audit.record(
            caller,
            AuditAction.PROJECT_UPDATE,
            PROJECT,
            tenant_id=project.tenant_id,
            entity_id=project.id,
            changes=diff,
        )
        await self.commit(_name_conflict(new_name or project.name))
        return project

    async def delete(self, caller: CallerContext, project_id: UUID) -> None:
        """Delete a project that has no tasks left.

        Raises:
            ConflictError: The project still has tasks
        """
        resolved = await self.resolver.resolve_project(project_id, for_update=True)
        authorize(caller, EntityKind.PROJECT, Operation.DELETE, resolved.facts())
        project = resolved.project

        task_count = await self.project_repo.count_tasks(project.id)
        if task_count:
            raise ConflictError(
                f"Project has {task_count} task(s); tasks must be deleted first"
            )

        await self.project_repo.delete(project)
        self.audit.record(
            caller,
            AuditAction.PROJECT_DELETE,
            PROJECT,
            tenant_id=project.tenant_id,
            entity_id=project.id,
            changes={"name": project.name},
        )
        await self.commit()

        logger.info("Project deleted", project_id=str(project.id))
