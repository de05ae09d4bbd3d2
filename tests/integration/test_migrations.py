"""Alembic migrations build the same schema the models describe."""

import asyncio
from pathlib import Path

import pytest
from alembic.config import Config
from sqlalchemy import inspect
from sqlmodel import SQLModel

from alembic import command
from src.app.core.db import run_migrations_async

pytestmark = pytest.mark.integration

PROJECT_ROOT = Path(__file__).resolve().parents[2]
TABLES = {"tenants", "users", "projects", "tasks", "audit_logs"}


async def table_names(engine) -> set[str]:
    async with engine.connect() as conn:
        return set(await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names()))


async def test_upgrade_and_downgrade(engine, monkeypatch):
    monkeypatch.chdir(PROJECT_ROOT)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)

    await run_migrations_async("head")

    assert TABLES <= await table_names(engine)
    async with engine.connect() as conn:
        columns = await conn.run_sync(
            lambda sync_conn: {c["name"] for c in inspect(sync_conn).get_columns("tasks")}
        )
    assert {"project_id", "tenant_id", "assigned_to", "created_by", "due_date"} <= columns
    async with engine.connect() as conn:
        user_indexes = await conn.run_sync(
            lambda sync_conn: {i["name"]: i for i in inspect(sync_conn).get_indexes("users")}
        )
    assert user_indexes["uq_users_platform_email"]["unique"]

    await asyncio.to_thread(command.downgrade, Config("alembic.ini"), "base")

    assert not TABLES & await table_names(engine)
