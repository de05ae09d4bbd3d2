"""User model - each user belongs to exactly one tenant."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Index, UniqueConstraint, text
from sqlmodel import Field, SQLModel

from src.app.models.base import utc_now
from src.app.models.enums import Role


class User(SQLModel, table=True):
    """User account.

    ``tenant_id`` is immutable after creation and only None for super admins.
    Users are never physically deleted; ``is_active`` is cleared instead.
    """

    __tablename__ = "users"
    # NULL tenant_ids never collide under the composite constraint, so platform
    # accounts get their own partial index.
    __table_args__ = (
        UniqueConstraint("tenant_id", "email", name="uq_users_tenant_email"),
        Index(
            "uq_users_platform_email",
            "email",
            unique=True,
            postgresql_where=text("tenant_id IS NULL"),
            sqlite_where=text("tenant_id IS NULL"),
        ),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID | None = Field(default=None, foreign_key="tenants.id", index=True)
    email: str = Field(max_length=255, index=True)
    hashed_password: str = Field(max_length=255)
    full_name: str = Field(max_length=100)
    role: str = Field(default=Role.USER.value, max_length=20)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
