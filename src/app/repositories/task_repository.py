"""Repository for Task entity."""

from uuid import UUID

from sqlalchemy import or_
from sqlmodel import select

from src.app.models import Task
from src.app.repositories.base import BaseRepository


class TaskRepository(BaseRepository[Task]):
    """Repository for Task entity. Queries are scoped by project."""

    model = Task

    async def list_by_project(
        self,
        project_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
        status: str | None = None,
        priority: str | None = None,
        assigned_to: UUID | None = None,
        search: str | None = None,
    ) -> tuple[list[Task], str | None, bool]:
        """List tasks of a project with cursor-based pagination.

        Returns:
            Tuple of (items, next_cursor, has_more)
        """
        query = select(Task).where(Task.project_id == project_id)
        if status:
            query = query.where(Task.status == status)
        if priority:
            query = query.where(Task.priority == priority)
        if assigned_to:
            query = query.where(Task.assigned_to == assigned_to)
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    Task.title.ilike(pattern),  # type: ignore[attr-defined]
                    Task.description.ilike(pattern),  # type: ignore[union-attr]
                )
            )
        return await self.paginate(query, cursor, limit)
