"""User management within a tenant."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.app.core.context import CallerContext
from src.app.core.exceptions import ConflictError
from src.app.core.logging import get_logger
from src.app.core.security import hash_password
from src.app.models import AuditAction, Tenant, User
from src.app.repositories import UserRepository
from src.app.schemas.user import UserCreate, UserUpdate
from src.app.services.access_policy import EntityKind, Operation, authorize
from src.app.services.audit_service import AuditService
from src.app.services.base import TransactionalService, apply_changes, changed_values
from src.app.services.tenant_resolver import TenantResolver, tenant_facts

logger = get_logger(__name__)


class UserService(TransactionalService):
    """User management service. Users are deactivated, never deleted."""

    def __init__(self, user_repo: UserRepository, audit: AuditService, session: AsyncSession):
        super().__init__(session)
        self.user_repo = user_repo
        self.audit = audit
        self.resolver = TenantResolver(session)

    async def _check_user_quota(self, tenant: Tenant) -> None:
        active = await self.user_repo.count_active(tenant.id)
        if active >= tenant.max_users:
            raise ConflictError(
                f"User limit reached: tenant allows {tenant.max_users} active users"
            )

    async def list_users(
        self,
        caller: CallerContext,
        tenant_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
        role: str | None = None,
        is_active: bool | None = None,
    ) -> tuple[list[User], str | None, bool]:
        tenant = await self.resolver.resolve_tenant(tenant_id)
        authorize(caller, EntityKind.USER, Operation.LIST, tenant_facts(tenant))

        page = await self.user_repo.list_by_tenant(
            tenant.id, cursor=cursor, limit=limit, role=role, is_active=is_active
        )
        await self.audit.record_read(
            caller, AuditAction.USER_LIST, EntityKind.USER.value, tenant_id=tenant.id
        )
        return page

    async def create(self, caller: CallerContext, tenant_id: UUID, data: UserCreate) -> User:
        """Add a user to the tenant named in the path.

        The tenant row is locked so concurrent additions serialize on the quota.

        Raises:
            ConflictError: Quota reached or email already used in this tenant
        """
        tenant = await self.resolver.resolve_tenant(tenant_id, for_update=True)
        authorize(caller, EntityKind.USER, Operation.CREATE, tenant_facts(tenant))

        await self._check_user_quota(tenant)
        conflict = f"User with email '{data.email}' already exists in this tenant"
        if await self.user_repo.exists_by_email(tenant.id, data.email):
            raise ConflictError(conflict)

        user = User(
            tenant_id=tenant.id,
            email=data.email,
            hashed_password=hash_password(data.password),
            full_name=data.full_name,
            role=data.role.value,
        )
        self.user_repo.add(user)
        self.audit.record(
            caller,
            AuditAction.USER_CREATE,
            EntityKind.USER.value,
            tenant_id=tenant.id,
            entity_id=user.id,
            changes={"email": user.email, "role": user.role},
        )
        await self.commit(conflict)

        logger.info("User created", user_id=str(user.id), tenant_id=str(tenant.id))
        return user

    async def update(self, caller: CallerContext, user_id: UUID, data: UserUpdate) -> User:
        """Apply a partial update.

        Reactivating a user counts against the tenant's user quota again.
        """
        values = changed_values(data)
        resolved = await self.resolver.resolve_user(user_id, for_update=True)
        authorize(
            caller,
            EntityKind.USER,
            Operation.UPDATE,
            resolved.facts(frozenset(values)),
            not_found_message="User not found",
        )
        user = resolved.user

        conflict = "User with this email already exists in this tenant"
        new_email = values.get("email")
        if new_email and new_email != user.email and user.tenant_id is not None:
            if await self.user_repo.exists_by_email(user.tenant_id, new_email):
                raise ConflictError(conflict)

        if values.get("is_active") and not user.is_active and user.tenant_id is not None:
            tenant = await self.resolver.resolve_tenant(user.tenant_id, for_update=True)
            await self._check_user_quota(tenant)

        diff = apply_changes(user, values)
        self.audit.record(
            caller,
            AuditAction.USER_UPDATE,
            EntityKind.USER.value,
            tenant_id=user.tenant_id,
            entity_id=user.id,
            changes=diff,
        )
        await self.commit(conflict)
        return user

    async def deactivate(self, caller: CallerContext, user_id: UUID) -> User:
        """Logically delete a user by clearing ``is_active``."""
        resolved = await self.resolver.resolve_user(user_id, for_update=True)
        authorize(
            caller,
            EntityKind.USER,
            Operation.DELETE,
            resolved.facts(),
            not_found_message="User not found",
        )
        user = resolved.user

        diff = apply_changes(user, {"is_active": False})
        self.audit.record(
            caller,
            AuditAction.USER_DEACTIVATE,
            EntityKind.USER.value,
            tenant_id=user.tenant_id,
            entity_id=user.id,
            changes=diff,
        )
        await self.commit()

        logger.info("User deactivated", user_id=str(user.id))
        return user
