"""Bootstrap the first platform administrator.

super_admin accounts cannot be created through the API. After migrating,
run once per environment::

    taskgate-create-admin --email ops@example.com --full-name "Platform Ops"

The password is read from ``TASKGATE_ADMIN_PASSWORD`` when set, otherwise it
is prompted for.
"""

import argparse
import asyncio
import getpass
import os

import pydantic
from sqlalchemy.ext.asyncio import AsyncSession

from src.app.core.config import get_settings
from src.app.core.db import dispose_engine, get_session
from src.app.core.exceptions import ConflictError
from src.app.core.logging import get_logger, setup_logging
from src.app.core.security import hash_password
from src.app.models import User
from src.app.models.enums import Role
from src.app.repositories import UserRepository
from src.app.schemas.user import PlatformAdminCreate
from src.app.services.base import TransactionalService

logger = get_logger(__name__)

PASSWORD_ENV = "TASKGATE_ADMIN_PASSWORD"


async def create_platform_admin(session: AsyncSession, data: PlatformAdminCreate) -> User:
    """Create a tenant-less super_admin and commit it.

    Raises:
        ConflictError: A platform admin with this email already exists
    """
    users = UserRepository(session)
    conflict = f"Platform admin with email '{data.email}' already exists"
    if await users.get_platform_admin_by_email(data.email) is not None:
        raise ConflictError(conflict)

    admin = User(
        tenant_id=None,
        email=data.email,
        hashed_password=hash_password(data.password),
        full_name=data.full_name,
        role=Role.SUPER_ADMIN.value,
    )
    users.add(admin)
    await TransactionalService(session).commit(conflict)

    logger.info("Platform admin created", user_id=str(admin.id))
    return admin


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a platform super_admin account.")
    parser.add_argument("--email", required=True)
    parser.add_argument("--full-name", required=True)
    return parser.parse_args(argv)


async def _run(data: PlatformAdminCreate) -> None:
    try:
        async with get_session() as session:
            await create_platform_admin(session, data)
    finally:
        await dispose_engine()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(get_settings().debug)

    password = os.environ.get(PASSWORD_ENV) or getpass.getpass("Password: ")
    try:
        data = PlatformAdminCreate(email=args.email, password=password, full_name=args.full_name)
    except pydantic.ValidationError as e:
        logger.error("Invalid platform admin", error=str(e))
        return 1

    try:
        asyncio.run(_run(data))
    except ConflictError as e:
        logger.error("Platform admin not created", reason=e.message)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
