"""Repository for Project entity (tenant-scoped)."""

from typing import Any
from uuid import UUID

from sqlalchemy import func, or_
from sqlmodel import select

from src.app.models import Project, Task, User
from src.app.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project entity. Every query is filtered by tenant."""

    model = Project

    async def list_by_tenant(
        self,
        tenant_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
        status: str | None = None,
        priority: str | None = None,
        created_by: UUID | None = None,
        search: str | None = None,
    ) -> tuple[list[Project], str | None, bool]:
        """List projects of a tenant with cursor-based pagination.

        Args:
            tenant_id: Owning tenant
            cursor: Optional cursor for pagination
            limit: Maximum number of results
            status: Optional status filter
            priority: Optional priority filter
            created_by: Optional creator filter
            search: Case-insensitive substring of name or description

        Returns:
            Tuple of (items, next_cursor, has_more)
        """
        query = select(Project).where(Project.tenant_id == tenant_id)
        if status:
            query = query.where(Project.status == status)
        if priority:
            query = query.where(Project.priority == priority)
        if created_by:
            query = query.where(Project.created_by == created_by)
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    Project.name.ilike(pattern),  # type: ignore[attr-defined]
                    Project.description.ilike(pattern),  # type: ignore[union-attr]
                )
            )
        return await self.paginate(query, cursor, limit)

    async def get_by_name(self, tenant_id: UUID, name: str) -> Project | None:
        """Get project by exact name within a tenant."""
        result = await self.session.execute(
            select(Project).where(Project.tenant_id == tenant_id, Project.name == name)
        )
        return result.scalar_one_or_none()

    async def count_by_tenant(self, tenant_id: UUID) -> int:
        """Count projects owned by a tenant."""
        result = await self.session.execute(
            select(func.count()).select_from(Project).where(Project.tenant_id == tenant_id)
        )
        return result.scalar_one()

    async def count_tasks(self, project_id: UUID) -> int:
        """Count tasks under a project."""
        result = await self.session.execute(
            select(func.count()).select_from(Task).where(Task.project_id == project_id)
        )
        return result.scalar_one()

    async def get_list_details(self, project_ids: list[UUID]) -> dict[UUID, dict[str, Any]]:
        """Task count and creator identity for a page of projects.

        Returns:
            Mapping of project id to ``task_count``, ``creator_name`` and ``creator_email``
        """
        if not project_ids:
            return {}
        task_count = (
            select(func.count())
            .select_from(Task)
            .where(Task.project_id == Project.id)
            .correlate(Project)
            .scalar_subquery()
        )
        result = await self.session.execute(
            select(Project.id, task_count, User.full_name, User.email)
            .join(User, User.id == Project.created_by)  # type: ignore[arg-type]
            .where(Project.id.in_(project_ids))  # type: ignore[attr-defined]
        )
        return {
            project_id: {"task_count": count, "creator_name": name, "creator_email": email}
            for project_id, count, name, email in result.all()
        }
