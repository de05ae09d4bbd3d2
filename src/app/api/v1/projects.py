"""Project endpoints - tenant-scoped CRUD.

The owning tenant of a project addressed by id is read from the project row,
never from the caller's token.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.app.api.dependencies import Caller, ProjectServiceDep
from src.app.models import Priority, ProjectStatus
from src.app.schemas.common import ApiResponse
from src.app.schemas.pagination import PaginatedResponse
from src.app.schemas.project import ProjectCreate, ProjectListItem, ProjectRead, ProjectUpdate

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get(
    "",
    response_model=ApiResponse[PaginatedResponse[ProjectListItem]],
    summary="List projects",
    description="List projects of the caller's tenant with cursor-based pagination.",
)
async def list_projects(
    caller: Caller,
    service: ProjectServiceDep,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 50,
    status_filter: Annotated[ProjectStatus | None, Query(alias="status")] = None,
    priority: Annotated[Priority | None, Query()] = None,
    created_by: Annotated[UUID | None, Query()] = None,
    search: Annotated[str | None, Query(max_length=100)] = None,
    tenant_id: Annotated[
        UUID | None, Query(description="Tenant to list (super admins only)")
    ] = None,
) -> ApiResponse[PaginatedResponse[ProjectListItem]]:
    rows, next_cursor, has_more = await service.list_projects(
        caller,
        tenant_id=tenant_id,
        cursor=cursor,
        limit=limit,
        status=status_filter.value if status_filter else None,
        priority=priority.value if priority else None,
        created_by=created_by,
        search=search,
    )
    return ApiResponse[PaginatedResponse[ProjectListItem]](
        data=PaginatedResponse(
            items=[
                ProjectListItem(**ProjectRead.model_validate(p).model_dump(), **details)
                for p, details in rows
            ],
            next_cursor=next_cursor,
            has_more=has_more,
        )
    )


@router.get(
    "/{project_id}",
    response_model=ApiResponse[ProjectRead],
    summary="Get project",
    responses={404: {"description": "Project not found"}},
)
async def get_project(
    project_id: UUID, caller: Caller, service: ProjectServiceDep
) -> ApiResponse[ProjectRead]:
    project = await service.get(caller, project_id)
    return ApiResponse[ProjectRead](data=ProjectRead.model_validate(project))


@router.post(
    "",
    response_model=ApiResponse[ProjectRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
    responses={
        201: {"description": "Project created"},
        409: {"description": "Project limit reached or name already exists"},
    },
)
async def create_project(
    data: ProjectCreate, caller: Caller, service: ProjectServiceDep
) -> ApiResponse[ProjectRead]:
    """Create a project in the caller's tenant."""
    project = await service.create(caller, data)
    return ApiResponse[ProjectRead](
        message="Project created successfully", data=ProjectRead.model_validate(project)
    )


@router.put(
    "/{project_id}",
    response_model=ApiResponse[ProjectRead],
    summary="Update project",
    responses={
        403: {"description": "Only admins or the creator may update"},
        404: {"description": "Project not found"},
        409: {"description": "Project with this name already exists"},
    },
)
async def update_project(
    project_id: UUID,
    data: ProjectUpdate,
    caller: Caller,
    service: ProjectServiceDep,
) -> ApiResponse[ProjectRead]:
    project = await service.update(caller, project_id, data)
    return ApiResponse[ProjectRead](
        message="Project updated successfully", data=ProjectRead.model_validate(project)
    )


@router.delete(
    "/{project_id}",
    response_model=ApiResponse[None],
    summary="Delete project",
    responses={
        404: {"description": "Project not found"},
        409: {"description": "Project still has tasks"},
    },
)
async def delete_project(
    project_id: UUID, caller: Caller, service: ProjectServiceDep
) -> ApiResponse[None]:
    await service.delete(caller, project_id)
    return ApiResponse[None](message="Project deleted successfully")
