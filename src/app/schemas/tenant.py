from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.app.core.security.validators import (
    MAX_SUBDOMAIN_LENGTH,
    MIN_SUBDOMAIN_LENGTH,
    validate_password_strength,
    validate_subdomain_format,
)
from src.app.models.enums import SubscriptionType, TenantStatus
from src.app.schemas.user import UserRead


class TenantRegister(BaseModel):
    """Self-registration creates the tenant and its first tenant_admin."""

    name: str = Field(min_length=1, max_length=100)
    subdomain: str = Field(
        min_length=MIN_SUBDOMAIN_LENGTH,
        max_length=MAX_SUBDOMAIN_LENGTH,
        json_schema_extra={
            "examples": ["acme", "my-company"],
            "description": "Lowercase alphanumeric with hyphens. Immutable once registered.",
        },
    )
    admin_email: EmailStr
    admin_password: str = Field(min_length=8, max_length=100)
    admin_full_name: str = Field(min_length=1, max_length=100)

    @field_validator("name", "admin_full_name")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Value cannot be empty or whitespace only")
        return v

    @field_validator("subdomain", mode="before")
    @classmethod
    def normalize_subdomain(cls, v: str) -> str:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("subdomain")
    @classmethod
    def validate_subdomain(cls, v: str) -> str:
        return validate_subdomain_format(v)

    @field_validator("admin_email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("admin_password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return validate_password_strength(v)


class TenantUpdate(BaseModel):
    """Partial tenant update.

    Only ``name`` is open to tenant admins. The remaining fields are restricted
    to super admins by the access policy.
    """

    name: str | None = Field(default=None, min_length=1, max_length=100)
    status: TenantStatus | None = None
    subscription_type: SubscriptionType | None = None
    max_users: int | None = Field(default=None, ge=1, le=100_000)
    max_projects: int | None = Field(default=None, ge=1, le=100_000)

    @field_validator("name", "status", "subscription_type", "max_users", "max_projects")
    @classmethod
    def reject_null(cls, v: object) -> object:
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Tenant name cannot be empty or whitespace only")
        return v


class TenantRead(BaseModel):
    id: UUID
    name: str
    subdomain: str
    status: str
    subscription_type: str
    max_users: int
    max_projects: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TenantUsage(BaseModel):
    """Live usage counts for a tenant."""

    users: int
    projects: int
    tasks: int


class TenantDetail(TenantRead):
    usage: TenantUsage


class TenantRegistered(BaseModel):
    tenant: TenantRead
    admin: UserRead
