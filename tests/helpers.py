"""Test helper functions for common data creation patterns."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.app.core.security import create_access_token
from src.app.models import Project, Task, Tenant, User
from src.app.models.enums import Role
from tests.factories import ProjectFactory, TaskFactory, TenantFactory, UserFactory


def auth_headers(user: User) -> dict[str, str]:
    """Bearer header for a user, built from the same token the login endpoint issues."""
    token = create_access_token(user.id, user.tenant_id, user.role)
    return {"Authorization": f"Bearer {token}"}


async def create_tenant(session: AsyncSession, **kwargs) -> Tenant:
    tenant = TenantFactory.build(**kwargs)
    session.add(tenant)
    await session.flush()
    return tenant


async def create_user(
    session: AsyncSession,
    tenant: Tenant | None,
    role: Role = Role.USER,
    **user_kwargs,
) -> User:
    """Create a user in a tenant.

    Args:
        session: Database session
        tenant: Owning tenant, None for a super admin
        role: Role for the user (default: USER)
        **user_kwargs: Additional args passed to UserFactory

    Returns:
        The flushed user
    """
    user = UserFactory.build(
        tenant_id=tenant.id if tenant else None,
        role=role.value,
        **user_kwargs,
    )
    session.add(user)
    await session.flush()
    return user


async def create_project(session: AsyncSession, creator: User, **kwargs) -> Project:
    project = ProjectFactory.build(tenant_id=creator.tenant_id, created_by=creator.id, **kwargs)
    session.add(project)
    await session.flush()
    return project


async def create_task(
    session: AsyncSession, project: Project, creator: User, **kwargs
) -> Task:
    task = TaskFactory.build(
        project_id=project.id,
        tenant_id=project.tenant_id,
        created_by=creator.id,
        **kwargs,
    )
    session.add(task)
    await session.flush()
    return task
