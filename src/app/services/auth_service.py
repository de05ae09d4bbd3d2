"""Authentication service - tenant-scoped login."""

from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from src.app.core.config import get_settings
from src.app.core.context import CallerContext
from src.app.core.exceptions import AuthenticationError, ForbiddenError
from src.app.core.logging import get_logger
from src.app.core.security import DUMMY_PASSWORD_HASH, create_access_token, verify_password
from src.app.models import AuditAction, Role, Tenant, User
from src.app.repositories import TenantRepository, UserRepository
from src.app.schemas.auth import LoginRequest
from src.app.services.access_policy import DenyReason
from src.app.services.audit_service import AuditService

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    """Authentication service.

    Emails are unique per tenant, so a login names its tenant by id or
    subdomain. Tenant-less super admins log in without one.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        tenant_repo: TenantRepository,
        audit: AuditService,
        session: AsyncSession,
    ):
        self.user_repo = user_repo
        self.tenant_repo = tenant_repo
        self.audit = audit
        self.session = session

    async def _find_tenant(self, data: LoginRequest) -> Tenant | None:
        if data.tenant_id is not None:
            return await self.tenant_repo.get_by_id(data.tenant_id)
        if data.subdomain is not None:
            return await self.tenant_repo.get_by_subdomain(data.subdomain)
        return None

    async def authenticate(
        self,
        data: LoginRequest,
        ip_address: str | None = None,
        user_agent: str | None = None,
        request_id: str | None = None,
    ) -> tuple[str, int, User]:
        """Verify credentials and issue an access token.

        Validates:
        1. Tenant exists (when one is named)
        2. User exists in that tenant and the password matches
        3. User is active
        4. Tenant is active (super admins have no tenant)

        Returns:
            Tuple of (access_token, expires_in_seconds, user)

        Raises:
            AuthenticationError: Unknown tenant, bad credentials or inactive user
            ForbiddenError: Tenant suspended
        """
        tenant_named = data.tenant_id is not None or data.subdomain is not None
        tenant = await self._find_tenant(data)

        user: User | None = None
        if tenant is not None:
            user = await self.user_repo.get_by_email(tenant.id, data.email)
        elif not tenant_named:
            user = await self.user_repo.get_platform_admin_by_email(data.email)

        # Always verify so response time does not reveal whether the account exists
        password_hash = user.hashed_password if user else DUMMY_PASSWORD_HASH
        password_valid = verify_password(data.password, password_hash)

        if user is None or not password_valid:
            logger.info("Login failed", reason="invalid_credentials")
            raise AuthenticationError(INVALID_CREDENTIALS)
        if not user.is_active:
            logger.info("Login failed", reason="inactive_user", user_id=str(user.id))
            raise AuthenticationError("User account is inactive")
        if tenant is not None and not tenant.is_active:
            logger.info("Login failed", reason="tenant_suspended", tenant_id=str(tenant.id))
            raise ForbiddenError("Tenant is suspended", reason=DenyReason.TENANT_SUSPENDED.value)

        settings = get_settings()
        expires = timedelta(minutes=settings.access_token_expire_minutes)
        token = create_access_token(user.id, user.tenant_id, user.role, expires_delta=expires)

        caller = CallerContext(
            user_id=user.id,
            tenant_id=user.tenant_id,
            role=Role(user.role),
            ip_address=ip_address,
            user_agent=user_agent,
            request_id=request_id,
        )
        await self.audit.record_read(
            caller,
            AuditAction.USER_LOGIN,
            "user",
            tenant_id=user.tenant_id,
            entity_id=user.id,
        )
        logger.info("Login succeeded", user_id=str(user.id))
        return token, int(expires.total_seconds()), user

    async def get_current(self, caller: CallerContext) -> tuple[User, Tenant | None]:
        """Load the caller's user row and tenant for /auth/me."""
        user = await self.user_repo.get_by_id(caller.user_id)
        if user is None:
            raise AuthenticationError("User not found")
        tenant = await self.tenant_repo.get_by_id(user.tenant_id) if user.tenant_id else None
        return user, tenant
