"""Integration test fixtures.

The suite runs against a throwaway SQLite file (see tests/conftest.py). The
schema is created fresh for every test and dropped afterwards, so tests never
see each other's rows.
"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlmodel import SQLModel

from src.app.core import db
from src.app.core.db import get_session
from src.app.main import create_app
from src.app.models import AuditLog, Tenant, User
from src.app.models.enums import Role
from tests.helpers import create_tenant, create_user


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Shared application engine with a fresh schema."""
    await db.dispose_engine()
    engine = db.get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await db.dispose_engine()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Session for seeding and inspecting data outside the API."""
    async with get_session(engine) as session:
        yield session


@pytest.fixture
async def client(engine: AsyncEngine) -> AsyncGenerator[AsyncClient]:
    app = create_app()
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
async def tenant_a(db_session: AsyncSession) -> Tenant:
    tenant = await create_tenant(db_session, name="Tenant A", subdomain="tenant-a")
    await db_session.commit()
    return tenant


@pytest.fixture
async def tenant_b(db_session: AsyncSession) -> Tenant:
    tenant = await create_tenant(db_session, name="Tenant B", subdomain="tenant-b")
    await db_session.commit()
    return tenant


@pytest.fixture
async def admin_a(db_session: AsyncSession, tenant_a: Tenant) -> User:
    user = await create_user(db_session, tenant_a, Role.TENANT_ADMIN, full_name="Admin A")
    await db_session.commit()
    return user


@pytest.fixture
async def admin_b(db_session: AsyncSession, tenant_b: Tenant) -> User:
    user = await create_user(db_session, tenant_b, Role.TENANT_ADMIN, full_name="Admin B")
    await db_session.commit()
    return user


@pytest.fixture
async def member_a(db_session: AsyncSession, tenant_a: Tenant) -> User:
    user = await create_user(db_session, tenant_a, Role.USER, full_name="Member A")
    await db_session.commit()
    return user


@pytest.fixture
async def member_b(db_session: AsyncSession, tenant_b: Tenant) -> User:
    user = await create_user(db_session, tenant_b, Role.USER, full_name="Member B")
    await db_session.commit()
    return user


@pytest.fixture
async def super_admin(db_session: AsyncSession) -> User:
    user = await create_user(db_session, None, Role.SUPER_ADMIN, full_name="Platform Admin")
    await db_session.commit()
    return user


@pytest.fixture
def count_rows(db_session: AsyncSession):
    """Count rows of a model, optionally filtered, bypassing the identity map."""

    async def _count(model: type[SQLModel], *where) -> int:
        stmt = select(func.count()).select_from(model)
        for clause in where:
            stmt = stmt.where(clause)
        result = await db_session.execute(stmt)
        count = result.scalar_one()
        await db_session.commit()
        return count

    return _count


@pytest.fixture
def audit_entries(db_session: AsyncSession):
    """Fetch audit entries for an action, oldest first."""

    async def _entries(action: str, entity_id=None) -> list[AuditLog]:
        stmt = select(AuditLog).where(AuditLog.action == action)
        if entity_id is not None:
            stmt = stmt.where(AuditLog.entity_id == entity_id)
        result = await db_session.execute(stmt.order_by(AuditLog.created_at))
        entries = list(result.scalars().all())
        await db_session.commit()
        return entries

    return _entries
