"""Repository for Tenant entity."""

from typing import Any
from uuid import UUID

from sqlalchemy import func
from sqlmodel import select

from src.app.models import Project, Task, Tenant, User
from src.app.repositories.base import BaseRepository


class TenantRepository(BaseRepository[Tenant]):
    """Repository for Tenant entity."""

    model = Tenant

    async def get_by_subdomain(self, subdomain: str) -> Tenant | None:
        """Get tenant by subdomain."""
        result = await self.session.execute(select(Tenant).where(Tenant.subdomain == subdomain))
        return result.scalar_one_or_none()

    async def exists_by_subdomain(self, subdomain: str) -> bool:
        """Check if a tenant with the given subdomain exists."""
        tenant = await self.get_by_subdomain(subdomain)
        return tenant is not None

    async def list_all_paginated(
        self, cursor: str | None, limit: int, status: str | None = None
    ) -> tuple[list[Tenant], str | None, bool]:
        """List all tenants with pagination.

        Args:
            cursor: Optional cursor for pagination
            limit: Maximum number of results
            status: Optional status filter

        Returns:
            Tuple of (items, next_cursor, has_more)
        """
        query = select(Tenant)
        if status:
            query = query.where(Tenant.status == status)
        return await self.paginate(query, cursor, limit)

    async def _count_per_tenant(
        self, model: type[User] | type[Project] | type[Task], tenant_ids: list[UUID], *where: Any
    ) -> dict[UUID, int]:
        result = await self.session.execute(
            select(model.tenant_id, func.count())
            .where(model.tenant_id.in_(tenant_ids), *where)  # type: ignore[union-attr]
            .group_by(model.tenant_id)
        )
        return {tenant_id: count for tenant_id, count in result.all()}

    async def get_usage_many(self, tenant_ids: list[UUID]) -> dict[UUID, dict[str, int]]:
        """Count live rows owned by each tenant, three queries for the whole batch.

        Returns:
            Mapping of tenant id to ``users`` (active only), ``projects`` and ``tasks``
        """
        if not tenant_ids:
            return {}
        users = await self._count_per_tenant(
            User, tenant_ids, User.is_active == True  # noqa: E712
        )
        projects = await self._count_per_tenant(Project, tenant_ids)
        tasks = await self._count_per_tenant(Task, tenant_ids)
        return {
            tenant_id: {
                "users": users.get(tenant_id, 0),
                "projects": projects.get(tenant_id, 0),
                "tasks": tasks.get(tenant_id, 0),
            }
            for tenant_id in tenant_ids
        }

    async def get_usage(self, tenant_id: UUID) -> dict[str, int]:
        """Count live rows owned by a tenant."""
        usage = await self.get_usage_many([tenant_id])
        return usage[tenant_id]
