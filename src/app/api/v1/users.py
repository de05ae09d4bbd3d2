"""User management endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.app.api.dependencies import Caller, UserServiceDep
from src.app.models import Role
from src.app.schemas.common import ApiResponse
from src.app.schemas.pagination import PaginatedResponse
from src.app.schemas.user import UserCreate, UserRead, UserUpdate

router = APIRouter(tags=["users"])


@router.get(
    "/tenants/{tenant_id}/users",
    response_model=ApiResponse[PaginatedResponse[UserRead]],
    responses={404: {"description": "Tenant not found"}},
)
async def list_users(
    tenant_id: UUID,
    caller: Caller,
    service: UserServiceDep,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 50,
    role: Annotated[Role | None, Query()] = None,
    is_active: Annotated[bool | None, Query()] = None,
) -> ApiResponse[PaginatedResponse[UserRead]]:
    """List users of a tenant. Admins only."""
    users, next_cursor, has_more = await service.list_users(
        caller,
        tenant_id,
        cursor=cursor,
        limit=limit,
        role=role.value if role else None,
        is_active=is_active,
    )
    return ApiResponse[PaginatedResponse[UserRead]](
        data=PaginatedResponse(
            items=[UserRead.model_validate(u) for u in users],
            next_cursor=next_cursor,
            has_more=has_more,
        )
    )


@router.post(
    "/tenants/{tenant_id}/users",
    response_model=ApiResponse[UserRead],
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"description": "Tenant not found"},
        409: {"description": "User limit reached or email already used"},
    },
)
async def create_user(
    tenant_id: UUID,
    data: UserCreate,
    caller: Caller,
    service: UserServiceDep,
) -> ApiResponse[UserRead]:
    """Add a user to a tenant. The tenant comes from the path, never the body."""
    user = await service.create(caller, tenant_id, data)
    return ApiResponse[UserRead](
        message="User created successfully", data=UserRead.model_validate(user)
    )


@router.put(
    "/users/{user_id}",
    response_model=ApiResponse[UserRead],
    responses={
        403: {"description": "Not allowed to change this user or these fields"},
        404: {"description": "User not found"},
    },
)
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    caller: Caller,
    service: UserServiceDep,
) -> ApiResponse[UserRead]:
    """Update a user. Non admins may only change their own full name."""
    user = await service.update(caller, user_id, data)
    return ApiResponse[UserRead](
        message="User updated successfully", data=UserRead.model_validate(user)
    )


@router.delete(
    "/users/{user_id}",
    response_model=ApiResponse[UserRead],
    responses={
        403: {"description": "Self-deletion or protected account"},
        404: {"description": "User not found"},
    },
)
async def delete_user(
    user_id: UUID, caller: Caller, service: UserServiceDep
) -> ApiResponse[UserRead]:
    """Deactivate a user. Users are never physically removed."""
    user = await service.deactivate(caller, user_id)
    return ApiResponse[UserRead](
        message="User deactivated successfully", data=UserRead.model_validate(user)
    )
