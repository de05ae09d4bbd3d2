"""Repository for User entity."""

from uuid import UUID

from sqlalchemy import func
from sqlmodel import select

from src.app.models import Role, User
from src.app.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User entity. Emails are unique per tenant, not globally."""

    model = User

    async def get_by_email(self, tenant_id: UUID, email: str) -> User | None:
        """Get user by email address within a tenant."""
        result = await self.session.execute(
            select(User).where(User.tenant_id == tenant_id, User.email == email)
        )
        return result.scalar_one_or_none()

    async def get_platform_admin_by_email(self, email: str) -> User | None:
        """Get a tenant-less super admin by email."""
        result = await self.session.execute(
            select(User).where(
                User.tenant_id.is_(None),  # type: ignore[union-attr]
                User.role == Role.SUPER_ADMIN.value,
                User.email == email,
            )
        )
        return result.scalar_one_or_none()

    async def exists_by_email(self, tenant_id: UUID, email: str) -> bool:
        """Check if a user with the given email exists in a tenant."""
        user = await self.get_by_email(tenant_id, email)
        return user is not None

    async def count_active(self, tenant_id: UUID) -> int:
        """Count active users of a tenant."""
        result = await self.session.execute(
            select(func.count())
            .select_from(User)
            .where(User.tenant_id == tenant_id, User.is_active == True)  # noqa: E712
        )
        return result.scalar_one()

    async def list_by_tenant(
        self,
        tenant_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
        role: str | None = None,
        is_active: bool | None = None,
    ) -> tuple[list[User], str | None, bool]:
        """List users of a tenant with cursor pagination.

        Returns:
            Tuple of (items, next_cursor, has_more)
        """
        query = select(User).where(User.tenant_id == tenant_id)
        if role:
            query = query.where(User.role == role)
        if is_active is not None:
            query = query.where(User.is_active == is_active)
        return await self.paginate(query, cursor, limit)
