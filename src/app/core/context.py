"""Caller context passed explicitly through resolver, policy and services."""

from dataclasses import dataclass
from uuid import UUID

from src.app.models.enums import Role

MAX_USER_AGENT_LENGTH = 500


@dataclass(frozen=True)
class CallerContext:
    """Immutable identity of the caller plus request metadata for auditing.

    ``tenant_id`` comes from the verified token. It is only ever compared
    against a resource's resolved tenant, never used to filter rows of a
    resource addressed by id.
    """

    user_id: UUID
    tenant_id: UUID | None
    role: Role
    ip_address: str | None = None
    user_agent: str | None = None
    request_id: str | None = None

    def __post_init__(self) -> None:
        if self.user_agent and len(self.user_agent) > MAX_USER_AGENT_LENGTH:
            object.__setattr__(self, "user_agent", self.user_agent[:MAX_USER_AGENT_LENGTH])

    @property
    def is_super_admin(self) -> bool:
        return self.role is Role.SUPER_ADMIN

    @property
    def is_admin(self) -> bool:
        return self.role in (Role.TENANT_ADMIN, Role.SUPER_ADMIN)


def get_client_ip(forwarded_for: str | None, client_host: str | None) -> str | None:
    """Extract client IP from X-Forwarded-For header or client host.

    Args:
        forwarded_for: Value of X-Forwarded-For header (may contain multiple IPs)
        client_host: Direct client host from the connection

    Returns:
        The client IP address (first IP from X-Forwarded-For, or client host)
    """
    if forwarded_for:
        # client, proxy1, proxy2...
        return forwarded_for.split(",")[0].strip()
    return client_host
