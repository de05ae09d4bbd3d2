"""Tests for the shared update and transaction helpers."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from src.app.core.exceptions import ConflictError, ValidationError
from src.app.schemas.project import ProjectUpdate
from src.app.schemas.task import TaskUpdate
from src.app.services.base import TransactionalService, apply_changes, changed_values
from tests.factories import ProjectFactory

pytestmark = pytest.mark.unit


def integrity_error() -> IntegrityError:
    return IntegrityError("INSERT ...", {}, Exception("UNIQUE constraint failed"))


class TestChangedValues:
    def test_empty_payload_rejected(self):
        with pytest.raises(ValidationError, match="No valid fields to update"):
            changed_values(ProjectUpdate())

    def test_enums_become_plain_values(self):
        values = changed_values(ProjectUpdate(priority="high", status="on_hold"))

        assert values == {"priority": "high", "status": "on_hold"}
        assert type(values["priority"]) is str

    def test_explicit_null_kept_for_clearable_fields(self):
        assert changed_values(TaskUpdate(assigned_to=None)) == {"assigned_to": None}


class TestApplyChanges:
    def test_returns_from_to_diff(self):
        project = ProjectFactory.build(tenant_id=uuid4(), created_by=uuid4(), name="Old")
        before = project.updated_at

        diff = apply_changes(project, {"name": "New"})

        assert diff == {"name": {"from": "Old", "to": "New"}}
        assert project.name == "New"
        assert project.updated_at >= before

    def test_repeated_change_is_idempotent_on_state(self):
        project = ProjectFactory.build(tenant_id=uuid4(), created_by=uuid4(), name="Old")

        apply_changes(project, {"name": "New"})
        diff = apply_changes(project, {"name": "New"})

        assert project.name == "New"
        assert diff == {"name": {"from": "New", "to": "New"}}


class TestTransactionalService:
    async def test_commit_maps_integrity_error_to_conflict(self):
        session = AsyncMock()
        session.commit.side_effect = integrity_error()
        service = TransactionalService(session)

        with pytest.raises(ConflictError, match="Project with name 'x' already exists"):
            await service.commit("Project with name 'x' already exists")

        session.rollback.assert_awaited_once()

    async def test_commit_rolls_back_and_reraises_other_errors(self):
        session = AsyncMock()
        session.commit.side_effect = RuntimeError("connection reset")
        service = TransactionalService(session)

        with pytest.raises(RuntimeError):
            await service.commit()

        session.rollback.assert_awaited_once()

    async def test_flush_maps_integrity_error_to_conflict(self):
        session = AsyncMock()
        session.flush.side_effect = integrity_error()
        service = TransactionalService(session)

        with pytest.raises(ConflictError):
            await service.flush("Tenant with subdomain 'acme' already exists")

        session.rollback.assert_awaited_once()
