"""Task operations, authorized against the parent project's tenant."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.app.core.context import CallerContext
from src.app.core.logging import get_logger
from src.app.models import AuditAction, Project, Task, Tenant
from src.app.repositories import TaskRepository
from src.app.schemas.task import TaskCreate, TaskStatusUpdate, TaskUpdate
from src.app.services.access_policy import EntityKind, Operation, ResourceFacts, authorize
from src.app.services.audit_service import AuditService
from src.app.services.base import TransactionalService, apply_changes, changed_values
from src.app.services.tenant_resolver import TenantResolver

logger = get_logger(__name__)

TASK = EntityKind.TASK.value


class TaskService(TransactionalService):
    """Task CRUD.

    A task's tenant is always its project's tenant. The caller's token
    tenant is only compared against it.
    """

    def __init__(self, task_repo: TaskRepository, audit: AuditService, session: AsyncSession):
        super().__init__(session)
        self.task_repo = task_repo
        self.audit = audit
        self.resolver = TenantResolver(session)

    async def _authorize_assignee(
        self, caller: CallerContext, project: Project, tenant: Tenant, assignee_id: UUID
    ) -> None:
        """The assignee must be an active user of the project's tenant."""
        assignee = await self.resolver.resolve_user(assignee_id)
        facts = ResourceFacts(
            tenant_id=project.tenant_id,
            tenant_status=tenant.status,
            target_user_id=assignee.user.id,
            target_tenant_id=assignee.user.tenant_id,
            target_is_active=assignee.user.is_active,
        )
        authorize(caller, EntityKind.TASK, Operation.ASSIGN, facts)

    async def create(self, caller: CallerContext, project_id: UUID, data: TaskCreate) -> Task:
        # Locking the project serializes against its deletion.
        resolved = await self.resolver.resolve_project(project_id, for_update=True)
        authorize(
            caller,
            EntityKind.TASK,
            Operation.CREATE,
            resolved.facts(),
            not_found_message="Project not found",
        )
        if data.assigned_to is not None:
            await self._authorize_assignee(
                caller, resolved.project, resolved.tenant, data.assigned_to
            )

        task = Task(
            project_id=resolved.project.id,
            tenant_id=resolved.project.tenant_id,
            title=data.title,
            description=data.description,
            priority=data.priority.value,
            status=data.status.value,
            assigned_to=data.assigned_to,
            created_by=caller.user_id,
            due_date=data.due_date,
        )
        self.task_repo.add(task)
        self.audit.record(
            caller,
            AuditAction.TASK_CREATE,
            TASK,
            tenant_id=task.tenant_id,
            entity_id=task.id,
            changes={"title": task.title, "project_id": task.project_id},
        )
        await self.commit()

        logger.info("Task created", task_id=str(task.id), project_id=str(project_id))
        return task

    async def list_tasks(
        self,
        caller: CallerContext,
        project_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
        status: str | None = None,
        priority: str | None = None,
        assigned_to: UUID | None = None,
        search: str | None = None,
    ) -> tuple[list[Task], str | None, bool]:
        resolved = await self.resolver.resolve_project(project_id)
        authorize(
            caller,
            EntityKind.TASK,
            Operation.LIST,
            resolved.facts(),
            not_found_message="Project not found",
        )

        page = await self.task_repo.list_by_project(
            resolved.project.id,
            cursor=cursor,
            limit=limit,
            status=status,
            priority=priority,
            assigned_to=assigned_to,
            search=search,
        )
        await self.audit.record_read(
            caller, AuditAction.TASK_LIST, TASK, tenant_id=resolved.tenant.id
        )
        return page

    async def get(self, caller: CallerContext, project_id: UUID, task_id: UUID) -> Task:
        resolved = await self.resolver.resolve_task(task_id, project_id=project_id)
        authorize(caller, EntityKind.TASK, Operation.READ, resolved.facts())

        await self.audit.record_read(
            caller,
            AuditAction.TASK_READ,
            TASK,
            tenant_id=resolved.tenant.id,
            entity_id=task_id,
        )
        return resolved.task

    async def update(self, caller: CallerContext, task_id: UUID, data: TaskUpdate) -> Task:
        """Apply a partial update. A new assignee passes the assign rule first."""
        values = changed_values(data)
        resolved = await self.resolver.resolve_task(task_id, for_update=True)
        authorize(
            caller,
            EntityKind.TASK,
            Operation.UPDATE,
            resolved.facts(frozenset(values)),
        )
        task = resolved.task

        new_assignee = values.get("assigned_to")
        if new_assignee is not None and new_assignee != task.assigned_to:
            await self._authorize_assignee(caller, resolved.project, resolved.tenant, new_assignee)

        diff = apply_changes(task, values)
        self.audit.record(
            caller,
            AuditAction.TASK_UPDATE,
            TASK,
            tenant_id=resolved.tenant.id,
            entity_id=task.id,
            changes=diff,
        )
        await self.commit()
        return task

    async def update_status(
        self, caller: CallerContext, task_id: UUID, data: TaskStatusUpdate
    ) -> Task:
        """Move a task to a new status. Open to any member of the owning tenant."""
        resolved = await self.resolver.resolve_task(task_id, for_update=True)
        authorize(
            caller,
            EntityKind.TASK,
            Operation.UPDATE_STATUS,
            resolved.facts(frozenset({"status"})),
        )
        task = resolved.task

        diff = apply_changes(task, {"status": data.status.value})
        self.audit.record(
            caller,
            AuditAction.TASK_STATUS_CHANGE,
            TASK,
            tenant_id=resolved.tenant.id,
            entity_id=task.id,
            changes=diff,
        )
        await self.commit()
        return task

    async def delete(self, caller: CallerContext, task_id: UUID) -> None:
        resolved = await self.resolver.resolve_task(task_id, for_update=True)
        authorize(caller, EntityKind.TASK, Operation.DELETE, resolved.facts())
        task = resolved.task

        await self.task_repo.delete(task)
        self.audit.record(
            caller,
            AuditAction.TASK_DELETE,
            TASK,
            tenant_id=resolved.tenant.id,
            entity_id=task.id,
            changes={"title": task.title, "project_id": task.project_id},
        )
        await self.commit()

        logger.info("Task deleted", task_id=str(task.id))
