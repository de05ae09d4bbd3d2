"""Cross-tenant isolation across every resource kind.

A caller of tenant B addressing tenant A's rows by id gets the same 404 it
would get for an id that does not exist, and nothing in tenant A changes.
"""

import pytest
from httpx import AsyncClient

from src.app.models import AuditLog, Project, User
from tests.helpers import auth_headers, create_project, create_task

pytestmark = pytest.mark.integration


@pytest.fixture
async def tenant_a_data(db_session, admin_a, member_a):
    project = await create_project(db_session, admin_a, name="Secret")
    task = await create_task(db_session, project, admin_a, title="Classified")
    await db_session.commit()
    return project, task


async def test_tenant_b_admin_sees_none_of_tenant_a(
    client: AsyncClient, tenant_a, member_a, tenant_a_data, admin_b
):
    project, task = tenant_a_data
    headers = auth_headers(admin_b)

    responses = {
        "tenant": await client.get(f"/api/v1/tenants/{tenant_a.id}", headers=headers),
        "users": await client.get(f"/api/v1/tenants/{tenant_a.id}/users", headers=headers),
        "project": await client.get(f"/api/v1/projects/{project.id}", headers=headers),
        "tasks": await client.get(f"/api/v1/projects/{project.id}/tasks", headers=headers),
        "task": await client.get(
            f"/api/v1/projects/{project.id}/tasks/{task.id}", headers=headers
        ),
    }

    for name, response in responses.items():
        assert response.status_code == 404, name


async def test_tenant_b_admin_cannot_write_into_tenant_a(
    client: AsyncClient, db_session, tenant_a, member_a, tenant_a_data, admin_b, count_rows
):
    project, _ = tenant_a_data
    headers = auth_headers(admin_b)

    responses = [
        await client.put(f"/api/v1/tenants/{tenant_a.id}", json={"name": "X"}, headers=headers),
        await client.put(f"/api/v1/users/{member_a.id}", json={"full_name": "X"}, headers=headers),
        await client.delete(f"/api/v1/users/{member_a.id}", headers=headers),
        await client.put(f"/api/v1/projects/{project.id}", json={"name": "X"}, headers=headers),
        await client.delete(f"/api/v1/projects/{project.id}", headers=headers),
        await client.post(
            f"/api/v1/projects/{project.id}/tasks", json={"title": "X"}, headers=headers
        ),
    ]

    assert [r.status_code for r in responses] == [404] * len(responses)
    await db_session.refresh(tenant_a)
    await db_session.refresh(member_a)
    await db_session.refresh(project)
    assert tenant_a.name == "Tenant A"
    assert member_a.is_active is True
    assert member_a.full_name == "Member A"
    assert project.name == "Secret"
    assert await count_rows(Project, Project.tenant_id == tenant_a.id) == 1
    assert await count_rows(User, User.tenant_id == tenant_a.id) == 2


async def test_denied_writes_leave_no_audit_trail(
    client: AsyncClient, tenant_a_data, admin_b, count_rows
):
    project, _ = tenant_a_data

    await client.put(
        f"/api/v1/projects/{project.id}", json={"name": "X"}, headers=auth_headers(admin_b)
    )

    assert await count_rows(AuditLog, AuditLog.entity_id == project.id) == 0


async def test_super_admin_reads_across_tenants(
    client: AsyncClient, tenant_a, tenant_a_data, super_admin
):
    project, task = tenant_a_data
    headers = auth_headers(super_admin)

    project_response = await client.get(f"/api/v1/projects/{project.id}", headers=headers)
    task_response = await client.get(
        f"/api/v1/projects/{project.id}/tasks/{task.id}", headers=headers
    )
    users_response = await client.get(f"/api/v1/tenants/{tenant_a.id}/users", headers=headers)

    assert project_response.json()["data"]["tenant_id"] == str(tenant_a.id)
    assert task_response.json()["data"]["title"] == "Classified"
    assert users_response.status_code == 200
