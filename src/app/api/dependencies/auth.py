"""Identity assertion: bearer token -> CallerContext."""

from typing import Annotated
from uuid import UUID

from asgi_correlation_id import correlation_id
from fastapi import Depends, Header, Request

from src.app.api.dependencies.repositories import UserRepo
from src.app.core.context import CallerContext, get_client_ip
from src.app.core.exceptions import AuthenticationError
from src.app.core.logging import bind_user_context
from src.app.core.security import ACCESS_TOKEN_TYPE, decode_token
from src.app.models import Role


def _parse_uuid(value: object, what: str) -> UUID:
    try:
        return UUID(str(value))
    except (TypeError, ValueError) as e:
        raise AuthenticationError(f"Invalid {what} in token") from e


def request_metadata(request: Request) -> dict[str, str | None]:
    """Client IP, user agent and correlation id for audit entries."""
    client_host = request.client.host if request.client else None
    return {
        "ip_address": get_client_ip(request.headers.get("x-forwarded-for"), client_host),
        "user_agent": request.headers.get("user-agent"),
        "request_id": correlation_id.get(),
    }


async def get_caller(
    request: Request,
    user_repo: UserRepo,
    authorization: Annotated[str | None, Header()] = None,
) -> CallerContext:
    """Validate the access token and build the caller context.

    Validates: header format, token decode, token type, subject, and that the
    user still exists, is active and belongs to the tenant named in the token.
    Role and tenant are taken from the user row so demotions apply at once.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthenticationError("Missing or invalid authorization header")

    payload = decode_token(authorization[7:])
    if payload is None:
        raise AuthenticationError("Invalid or expired token")
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise AuthenticationError("Invalid token type")
    if not payload.get("sub"):
        raise AuthenticationError("Invalid token payload")

    user_id = _parse_uuid(payload["sub"], "subject")
    token_tenant = payload.get("tenant_id")
    token_tenant_id = _parse_uuid(token_tenant, "tenant_id") if token_tenant else None

    user = await user_repo.get_by_id(user_id)
    if user is None or not user.is_active:
        raise AuthenticationError("User not found or inactive")
    if user.tenant_id != token_tenant_id:
        raise AuthenticationError("Token tenant does not match user")

    caller = CallerContext(
        user_id=user.id,
        tenant_id=user.tenant_id,
        role=Role(user.role),
        **request_metadata(request),
    )
    bind_user_context(caller.user_id, caller.tenant_id, caller.role.value, user.email)
    return caller


Caller = Annotated[CallerContext, Depends(get_caller)]
RequestMeta = Annotated[dict[str, str | None], Depends(request_metadata)]
