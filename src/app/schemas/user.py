from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.app.core.security.validators import validate_password_strength
from src.app.models.enums import Role

# super_admin accounts are created with the platform admin bootstrap
# (src/app/seed.py), never through the API.
ASSIGNABLE_ROLES = frozenset({Role.USER, Role.TENANT_ADMIN})


def _check_assignable(role: Role) -> Role:
    if role not in ASSIGNABLE_ROLES:
        raise ValueError("Role must be one of: user, tenant_admin")
    return role


class AccountCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=100)
    full_name: str = Field(min_length=1, max_length=100)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return validate_password_strength(v)

    @field_validator("full_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Full name cannot be empty or whitespace only")
        return v


class PlatformAdminCreate(AccountCreate):
    """Tenant-less super_admin account, created only by the bootstrap command."""


class UserCreate(AccountCreate):
    role: Role = Role.USER

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: Role) -> Role:
        return _check_assignable(v)


class UserUpdate(BaseModel):
    """Partial user update. Absent fields are left unchanged."""

    full_name: str | None = Field(None, min_length=1, max_length=100)
    email: EmailStr | None = None
    role: Role | None = None
    is_active: bool | None = None

    @field_validator("full_name", "email", "role", "is_active")
    @classmethod
    def reject_null(cls, v: object) -> object:
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator("full_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Full name cannot be empty or whitespace only")
        return v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: Role) -> Role:
        return _check_assignable(v)


class UserRead(BaseModel):
    id: UUID
    tenant_id: UUID | None
    email: str
    full_name: str
    role: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
