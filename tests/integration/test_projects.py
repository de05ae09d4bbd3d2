"""Integration tests for tenant-scoped projects."""

import pytest
from httpx import AsyncClient

from src.app.models import AuditAction, Project
from tests.helpers import auth_headers, create_project, create_task, create_tenant, create_user

pytestmark = pytest.mark.integration


class TestCreateProject:
    async def test_member_creates_project_in_own_tenant(
        self, client: AsyncClient, tenant_a, member_a, audit_entries
    ):
        response = await client.post(
            "/api/v1/projects",
            json={"name": "Apollo", "priority": "high"},
            headers=auth_headers(member_a),
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["tenant_id"] == str(tenant_a.id)
        assert data["created_by"] == str(member_a.id)
        assert data["priority"] == "high"
        assert data["status"] == "active"
        entries = await audit_entries(AuditAction.PROJECT_CREATE.value)
        assert len(entries) == 1
        assert entries[0].tenant_id == tenant_a.id

    async def test_tenant_in_body_is_ignored(
        self, client: AsyncClient, tenant_a, tenant_b, member_a
    ):
        response = await client.post(
            "/api/v1/projects",
            json={"name": "Sneaky", "tenant_id": str(tenant_b.id)},
            headers=auth_headers(member_a),
        )

        assert response.status_code == 201
        assert response.json()["data"]["tenant_id"] == str(tenant_a.id)

    async def test_duplicate_name_in_tenant(self, client: AsyncClient, db_session, admin_a):
        await create_project(db_session, admin_a, name="Apollo")
        await db_session.commit()

        response = await client.post(
            "/api/v1/projects", json={"name": "Apollo"}, headers=auth_headers(admin_a)
        )

        assert response.status_code == 409

    async def test_same_name_in_other_tenant(
        self, client: AsyncClient, db_session, admin_a, admin_b
    ):
        await create_project(db_session, admin_b, name="Apollo")
        await db_session.commit()

        response = await client.post(
            "/api/v1/projects", json={"name": "Apollo"}, headers=auth_headers(admin_a)
        )

        assert response.status_code == 201

    async def test_project_quota(self, client: AsyncClient, db_session, count_rows):
        tenant = await create_tenant(db_session, max_projects=1)
        admin = await create_user(db_session, tenant)
        await create_project(db_session, admin)
        await db_session.commit()

        response = await client.post(
            "/api/v1/projects", json={"name": "One too many"}, headers=auth_headers(admin)
        )

        assert response.status_code == 409
        assert response.json()["message"].startswith("Project limit reached")
        assert await count_rows(Project, Project.tenant_id == tenant.id) == 1

    async def test_super_admin_cannot_own_projects(self, client: AsyncClient, super_admin):
        response = await client.post(
            "/api/v1/projects", json={"name": "Orphan"}, headers=auth_headers(super_admin)
        )

        assert response.status_code == 400


class TestReadProjects:
    async def test_list_is_scoped_to_callers_tenant(
        self, client: AsyncClient, db_session, admin_a, admin_b
    ):
        mine = await create_project(db_session, admin_a)
        await create_project(db_session, admin_b)
        await db_session.commit()

        response = await client.get("/api/v1/projects", headers=auth_headers(admin_a))

        assert response.status_code == 200
        ids = [item["id"] for item in response.json()["data"]["items"]]
        assert ids == [str(mine.id)]

    async def test_list_items_carry_task_count_and_creator(
        self, client: AsyncClient, db_session, admin_a, member_a
    ):
        busy = await create_project(db_session, member_a, name="Busy")
        await create_project(db_session, admin_a, name="Idle")
        await create_task(db_session, busy, member_a)
        await create_task(db_session, busy, admin_a)
        await db_session.commit()

        response = await client.get("/api/v1/projects", headers=auth_headers(admin_a))

        items = {p["name"]: p for p in response.json()["data"]["items"]}
        assert items["Busy"]["task_count"] == 2
        assert items["Busy"]["creator_name"] == member_a.full_name
        assert items["Busy"]["creator_email"] == member_a.email
        assert items["Idle"]["task_count"] == 0
        assert items["Idle"]["creator_email"] == admin_a.email

    async def test_list_filters(self, client: AsyncClient, db_session, admin_a):
        await create_project(db_session, admin_a, name="Apollo", priority="high")
        await create_project(db_session, admin_a, name="Gemini", priority="low")
        await db_session.commit()

        by_priority = await client.get(
            "/api/v1/projects", params={"priority": "high"}, headers=auth_headers(admin_a)
        )
        by_search = await client.get(
            "/api/v1/projects", params={"search": "gem"}, headers=auth_headers(admin_a)
        )

        assert [p["name"] for p in by_priority.json()["data"]["items"]] == ["Apollo"]
        assert [p["name"] for p in by_search.json()["data"]["items"]] == ["Gemini"]

    async def test_list_pagination(self, client: AsyncClient, db_session, admin_a):
        for i in range(3):
            await create_project(db_session, admin_a, name=f"Project {i}")
        await db_session.commit()

        first = await client.get(
            "/api/v1/projects", params={"limit": 2}, headers=auth_headers(admin_a)
        )
        page = first.json()["data"]
        second = await client.get(
            "/api/v1/projects",
            params={"limit": 2, "cursor": page["next_cursor"]},
            headers=auth_headers(admin_a),
        )

        assert page["has_more"] is True
        assert len(page["items"]) == 2
        rest = second.json()["data"]
        assert rest["has_more"] is False
        assert len(rest["items"]) == 1
        seen = {p["id"] for p in page["items"]} | {p["id"] for p in rest["items"]}
        assert len(seen) == 3

    async def test_invalid_cursor_is_bad_request(self, client: AsyncClient, admin_a):
        response = await client.get(
            "/api/v1/projects", params={"cursor": "bm90LWEtY3Vyc29y"}, headers=auth_headers(admin_a)
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid cursor"

    async def test_naming_other_tenant_is_not_found(self, client: AsyncClient, tenant_b, admin_a):
        response = await client.get(
            "/api/v1/projects",
            params={"tenant_id": str(tenant_b.id)},
            headers=auth_headers(admin_a),
        )

        assert response.status_code == 404

    async def test_super_admin_lists_named_tenant(
        self, client: AsyncClient, db_session, tenant_b, admin_b, super_admin
    ):
        project = await create_project(db_session, admin_b)
        await db_session.commit()

        response = await client.get(
            "/api/v1/projects",
            params={"tenant_id": str(tenant_b.id)},
            headers=auth_headers(super_admin),
        )

        assert [p["id"] for p in response.json()["data"]["items"]] == [str(project.id)]

    async def test_super_admin_must_name_a_tenant(self, client: AsyncClient, super_admin):
        response = await client.get("/api/v1/projects", headers=auth_headers(super_admin))

        assert response.status_code == 400

    async def test_get_other_tenants_project_is_not_found(
        self, client: AsyncClient, db_session, admin_a, admin_b
    ):
        foreign = await create_project(db_session, admin_b)
        await db_session.commit()

        response = await client.get(
            f"/api/v1/projects/{foreign.id}", headers=auth_headers(admin_a)
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Project not found"


class TestUpdateProject:
    async def test_creator_updates(self, client: AsyncClient, db_session, member_a):
        project = await create_project(db_session, member_a)
        await db_session.commit()

        response = await client.put(
            f"/api/v1/projects/{project.id}",
            json={"status": "on_hold", "description": "Paused"},
            headers=auth_headers(member_a),
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "on_hold"
        assert data["description"] == "Paused"

    async def test_other_member_cannot_update(
        self, client: AsyncClient, db_session, admin_a, member_a
    ):
        project = await create_project(db_session, admin_a)
        await db_session.commit()

        response = await client.put(
            f"/api/v1/projects/{project.id}",
            json={"name": "Mine now"},
            headers=auth_headers(member_a),
        )

        assert response.status_code == 403
        assert response.json()["reason"] == "insufficient_role"

    async def test_rename_conflict(self, client: AsyncClient, db_session, admin_a):
        await create_project(db_session, admin_a, name="Apollo")
        project = await create_project(db_session, admin_a, name="Gemini")
        await db_session.commit()

        response = await client.put(
            f"/api/v1/projects/{project.id}",
            json={"name": "Apollo"},
            headers=auth_headers(admin_a),
        )

        assert response.status_code == 409

    async def test_cross_tenant_update_is_not_found(
        self, client: AsyncClient, db_session, admin_a, admin_b
    ):
        foreign = await create_project(db_session, admin_b, name="Theirs")
        await db_session.commit()

        response = await client.put(
            f"/api/v1/projects/{foreign.id}", json={"name": "Ours"}, headers=auth_headers(admin_a)
        )

        assert response.status_code == 404
        await db_session.refresh(foreign)
        assert foreign.name == "Theirs"


class TestDeleteProject:
    async def test_project_with_tasks_cannot_be_deleted(
        self, client: AsyncClient, db_session, admin_a, audit_entries
    ):
        project = await create_project(db_session, admin_a)
        task = await create_task(db_session, project, admin_a)
        await db_session.commit()
        headers = auth_headers(admin_a)

        blocked = await client.delete(f"/api/v1/projects/{project.id}", headers=headers)

        assert blocked.status_code == 409
        assert "tasks must be deleted first" in blocked.json()["message"]

        removed_task = await client.delete(f"/api/v1/tasks/{task.id}", headers=headers)
        removed_project = await client.delete(f"/api/v1/projects/{project.id}", headers=headers)

        assert removed_task.status_code == 200
        assert removed_project.status_code == 200
        entries = await audit_entries(AuditAction.PROJECT_DELETE.value, project.id)
        assert len(entries) == 1
        assert entries[0].entity_type == "project"

    async def test_creator_deletes_own_project(
        self, client: AsyncClient, db_session, member_a, count_rows
    ):
        project = await create_project(db_session, member_a)
        await db_session.commit()

        response = await client.delete(
            f"/api/v1/projects/{project.id}", headers=auth_headers(member_a)
        )

        assert response.status_code == 200
        assert await count_rows(Project, Project.id == project.id) == 0

    async def test_cross_tenant_delete_is_not_found(
        self, client: AsyncClient, db_session, admin_a, admin_b, count_rows
    ):
        foreign = await create_project(db_session, admin_b)
        await db_session.commit()

        response = await client.delete(
            f"/api/v1/projects/{foreign.id}", headers=auth_headers(admin_a)
        )

        assert response.status_code == 404
        assert await count_rows(Project, Project.id == foreign.id) == 1
