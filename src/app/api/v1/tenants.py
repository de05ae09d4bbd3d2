"""Tenant endpoints: self-registration, reads and updates."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status
from starlette.requests import Request

from src.app.api.dependencies import Caller, RequestMeta, TenantServiceDep
from src.app.core.rate_limit import limiter
from src.app.models import Tenant, TenantStatus
from src.app.schemas.common import ApiResponse
from src.app.schemas.pagination import PaginatedResponse
from src.app.schemas.tenant import (
    TenantDetail,
    TenantRead,
    TenantRegister,
    TenantRegistered,
    TenantUpdate,
    TenantUsage,
)
from src.app.schemas.user import UserRead

router = APIRouter(prefix="/tenants", tags=["tenants"])


def _detail(tenant: Tenant, usage: dict[str, int]) -> TenantDetail:
    return TenantDetail(
        **TenantRead.model_validate(tenant).model_dump(), usage=TenantUsage(**usage)
    )


@router.post(
    "",
    response_model=ApiResponse[TenantRegistered],
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Tenant and its first admin created"},
        409: {"description": "Subdomain already taken"},
    },
)
@limiter.limit("5/minute")
async def register_tenant(
    request: Request,
    data: TenantRegister,
    service: TenantServiceDep,
    meta: RequestMeta,
) -> ApiResponse[TenantRegistered]:
    """Register a new tenant together with its first tenant_admin."""
    tenant, admin = await service.register(data, **meta)
    return ApiResponse[TenantRegistered](
        message="Tenant registered successfully",
        data=TenantRegistered(
            tenant=TenantRead.model_validate(tenant),
            admin=UserRead.model_validate(admin),
        ),
    )


@router.get("", response_model=ApiResponse[PaginatedResponse[TenantDetail]])
async def list_tenants(
    caller: Caller,
    service: TenantServiceDep,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 50,
    status_filter: Annotated[TenantStatus | None, Query(alias="status")] = None,
) -> ApiResponse[PaginatedResponse[TenantDetail]]:
    """List tenants with usage. Super admins see all of them, everyone else only their own."""
    rows, next_cursor, has_more = await service.list_tenants(
        caller, cursor, limit, status_filter.value if status_filter else None
    )
    return ApiResponse[PaginatedResponse[TenantDetail]](
        data=PaginatedResponse(
            items=[_detail(tenant, usage) for tenant, usage in rows],
            next_cursor=next_cursor,
            has_more=has_more,
        )
    )


@router.get(
    "/{tenant_id}",
    response_model=ApiResponse[TenantDetail],
    responses={404: {"description": "Tenant not found"}},
)
async def get_tenant(
    tenant_id: UUID, caller: Caller, service: TenantServiceDep
) -> ApiResponse[TenantDetail]:
    """Get a tenant with its live usage counts."""
    tenant, usage = await service.get(caller, tenant_id)
    return ApiResponse[TenantDetail](data=_detail(tenant, usage))


@router.put(
    "/{tenant_id}",
    response_model=ApiResponse[TenantRead],
    responses={
        400: {"description": "No valid fields to update"},
        403: {"description": "Restricted fields or insufficient role"},
        404: {"description": "Tenant not found"},
        409: {"description": "New limit below current usage"},
    },
)
async def update_tenant(
    tenant_id: UUID,
    data: TenantUpdate,
    caller: Caller,
    service: TenantServiceDep,
) -> ApiResponse[TenantRead]:
    """Update a tenant. Only super admins may change status, plan or limits."""
    tenant = await service.update(caller, tenant_id, data)
    return ApiResponse[TenantRead](
        message="Tenant updated successfully", data=TenantRead.model_validate(tenant)
    )
