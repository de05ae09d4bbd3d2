"""Tenant registration, reads and updates."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.app.core.config import get_settings
from src.app.core.context import CallerContext
from src.app.core.exceptions import ConflictError
from src.app.core.logging import get_logger
from src.app.core.security import hash_password
from src.app.models import AuditAction, Role, Tenant, TenantStatus, User
from src.app.repositories import TenantRepository, UserRepository
from src.app.schemas.tenant import TenantRegister, TenantUpdate
from src.app.services.access_policy import (
    EntityKind,
    Operation,
    ResourceFacts,
    authorize,
)
from src.app.services.audit_service import AuditService
from src.app.services.base import TransactionalService, apply_changes, changed_values
from src.app.services.tenant_resolver import TenantResolver, tenant_facts

logger = get_logger(__name__)


class TenantService(TransactionalService):
    """Tenant lifecycle: self-registration, reads with usage, and updates."""

    def __init__(
        self,
        tenant_repo: TenantRepository,
        user_repo: UserRepository,
        audit: AuditService,
        session: AsyncSession,
    ):
        super().__init__(session)
        self.tenant_repo = tenant_repo
        self.user_repo = user_repo
        self.audit = audit
        self.resolver = TenantResolver(session)

    async def register(
        self,
        data: TenantRegister,
        ip_address: str | None = None,
        user_agent: str | None = None,
        request_id: str | None = None,
    ) -> tuple[Tenant, User]:
        """Create a tenant and its first tenant_admin in one transaction.

        Raises:
            ConflictError: Subdomain already taken
        """
        conflict = f"Tenant with subdomain '{data.subdomain}' already exists"
        if await self.tenant_repo.exists_by_subdomain(data.subdomain):
            raise ConflictError(conflict)

        settings = get_settings()
        tenant = Tenant(
            name=data.name,
            subdomain=data.subdomain,
            status=TenantStatus.ACTIVE.value,
            subscription_type=settings.default_subscription_type,
            max_users=settings.default_max_users,
            max_projects=settings.default_max_projects,
        )
        self.tenant_repo.add(tenant)
        await self.flush(conflict)

        admin = User(
            tenant_id=tenant.id,
            email=data.admin_email,
            hashed_password=hash_password(data.admin_password),
            full_name=data.admin_full_name,
            role=Role.TENANT_ADMIN.value,
        )
        self.user_repo.add(admin)
        await self.flush(conflict)

        caller = CallerContext(
            user_id=admin.id,
            tenant_id=tenant.id,
            role=Role.TENANT_ADMIN,
            ip_address=ip_address,
            user_agent=user_agent,
            request_id=request_id,
        )
        self.audit.record(
            caller,
            AuditAction.TENANT_REGISTER,
            EntityKind.TENANT.value,
            tenant_id=tenant.id,
            entity_id=tenant.id,
            changes={"subdomain": tenant.subdomain, "admin_email": admin.email},
        )
        await self.commit(conflict)

        logger.info("Tenant registered", tenant_id=str(tenant.id), subdomain=tenant.subdomain)
        return tenant, admin

    async def get(self, caller: CallerContext, tenant_id: UUID) -> tuple[Tenant, dict[str, int]]:
        """Return the tenant and its live usage counts."""
        tenant = await self.resolver.resolve_tenant(tenant_id)
        authorize(caller, EntityKind.TENANT, Operation.READ, tenant_facts(tenant))

        usage = await self.tenant_repo.get_usage(tenant.id)
        await self.audit.record_read(
            caller,
            AuditAction.TENANT_READ,
            EntityKind.TENANT.value,
            tenant_id=tenant.id,
            entity_id=tenant.id,
        )
        return tenant, usage

    async def list_tenants(
        self,
        caller: CallerContext,
        cursor: str | None,
        limit: int,
        status: str | None = None,
    ) -> tuple[list[tuple[Tenant, dict[str, int]]], str | None, bool]:
        """Super admins see every tenant; everyone else sees only their own.

        Each tenant comes paired with its live usage counts.
        """
        if caller.is_super_admin:
            authorize(caller, EntityKind.TENANT, Operation.LIST_ALL, ResourceFacts())
            page = await self.tenant_repo.list_all_paginated(cursor, limit, status)
        else:
            if caller.tenant_id is None:
                page = ([], None, False)
            else:
                tenant = await self.resolver.resolve_tenant(caller.tenant_id)
                authorize(caller, EntityKind.TENANT, Operation.READ, tenant_facts(tenant))
                matches = status is None or tenant.status == status
                page = ([tenant] if matches else [], None, False)

        tenants, next_cursor, has_more = page
        usage = await self.tenant_repo.get_usage_many([t.id for t in tenants])
        await self.audit.record_read(
            caller,
            AuditAction.TENANT_LIST,
            EntityKind.TENANT.value,
            tenant_id=caller.tenant_id,
        )
        return [(t, usage[t.id]) for t in tenants], next_cursor, has_more

    async def update(self, caller: CallerContext, tenant_id: UUID, data: TenantUpdate) -> Tenant:
        """Apply a partial update.

        Raises:
            ValidationError: Empty payload
            ForbiddenError: Restricted fields changed by a non super admin
            ConflictError: A limit would drop below live usage
        """
        values = changed_values(data)
        tenant = await self.resolver.resolve_tenant(tenant_id, for_update=True)
        authorize(
            caller,
            EntityKind.TENANT,
            Operation.UPDATE,
            tenant_facts(tenant, frozenset(values)),
        )

        if "max_users" in values or "max_projects" in values:
            usage = await self.tenant_repo.get_usage(tenant.id)
            if "max_users" in values and values["max_users"] < usage["users"]:
                raise ConflictError(
                    f"Cannot reduce max_users to {values['max_users']}: "
                    f"tenant currently has {usage['users']} active users"
                )
            if "max_projects" in values and values["max_projects"] < usage["projects"]:
                raise ConflictError(
                    f"Cannot reduce max_projects to {values['max_projects']}: "
                    f"tenant currently has {usage['projects']} projects"
                )

        diff = apply_changes(tenant, values)
        self.audit.record(
            caller,
            AuditAction.TENANT_UPDATE,
            EntityKind.TENANT.value,
            tenant_id=tenant.id,
            entity_id=tenant.id,
            changes=diff,
        )
        await self.commit()
        return tenant
