"""Authentication endpoints."""

from fastapi import APIRouter
from starlette.requests import Request

from src.app.api.dependencies import AuthServiceDep, Caller, RequestMeta
from src.app.core.rate_limit import limiter
from src.app.schemas.auth import CurrentUserRead, LoginRequest, LoginResponse
from src.app.schemas.common import ApiResponse
from src.app.schemas.tenant import TenantRead
from src.app.schemas.user import UserRead

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=ApiResponse[LoginResponse],
    responses={
        200: {"description": "Successful authentication"},
        401: {"description": "Unknown tenant, invalid credentials or inactive user"},
        403: {"description": "Tenant suspended"},
    },
)
@limiter.limit("5/minute")
async def login(
    request: Request,
    login_data: LoginRequest,
    service: AuthServiceDep,
    meta: RequestMeta,
) -> ApiResponse[LoginResponse]:
    """Authenticate against one tenant and return an access token.

    Name the tenant with ``tenant_id`` or ``subdomain``. Platform super admins
    omit both.
    """
    token, expires_in, user = await service.authenticate(login_data, **meta)
    return ApiResponse[LoginResponse](
        message="Login successful",
        data=LoginResponse(
            access_token=token,
            expires_in=expires_in,
            user=UserRead.model_validate(user),
        ),
    )


@router.get("/me", response_model=ApiResponse[CurrentUserRead])
async def me(caller: Caller, service: AuthServiceDep) -> ApiResponse[CurrentUserRead]:
    """Return the authenticated user and their tenant."""
    user, tenant = await service.get_current(caller)
    return ApiResponse[CurrentUserRead](
        data=CurrentUserRead(
            user=UserRead.model_validate(user),
            tenant=TenantRead.model_validate(tenant) if tenant else None,
        )
    )
