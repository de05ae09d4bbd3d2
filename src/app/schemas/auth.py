from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from src.app.schemas.tenant import TenantRead
from src.app.schemas.user import UserRead


class LoginRequest(BaseModel):
    """Credentials scoped to one tenant.

    Emails are unique per tenant, so the tenant is named by id or subdomain.
    Platform super admins omit both.
    """

    email: EmailStr
    password: str = Field(min_length=1, max_length=100)
    tenant_id: UUID | None = None
    subdomain: str | None = Field(default=None, max_length=63)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("subdomain")
    @classmethod
    def normalize_subdomain(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip().lower()
        return v or None

    @model_validator(mode="after")
    def check_single_tenant_selector(self) -> "LoginRequest":
        if self.tenant_id is not None and self.subdomain is not None:
            raise ValueError("Provide either tenant_id or subdomain, not both")
        return self


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserRead


class CurrentUserRead(BaseModel):
    user: UserRead
    tenant: TenantRead | None = None
