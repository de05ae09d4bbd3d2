"""Task endpoints.

Creation and listing are nested under the project. Tasks addressed directly
by id are authorized against their parent project's tenant.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.app.api.dependencies import Caller, TaskServiceDep
from src.app.models import Priority, TaskStatus
from src.app.schemas.common import ApiResponse
from src.app.schemas.pagination import PaginatedResponse
from src.app.schemas.task import TaskCreate, TaskRead, TaskStatusUpdate, TaskUpdate

router = APIRouter(tags=["tasks"])


@router.post(
    "/projects/{project_id}/tasks",
    response_model=ApiResponse[TaskRead],
    status_code=status.HTTP_201_CREATED,
    responses={
        403: {"description": "Assignee in another tenant or inactive"},
        404: {"description": "Project or assignee not found"},
    },
)
async def create_task(
    project_id: UUID,
    data: TaskCreate,
    caller: Caller,
    service: TaskServiceDep,
) -> ApiResponse[TaskRead]:
    task = await service.create(caller, project_id, data)
    return ApiResponse[TaskRead](
        message="Task created successfully", data=TaskRead.model_validate(task)
    )


@router.get(
    "/projects/{project_id}/tasks",
    response_model=ApiResponse[PaginatedResponse[TaskRead]],
    responses={404: {"description": "Project not found"}},
)
async def list_tasks(
    project_id: UUID,
    caller: Caller,
    service: TaskServiceDep,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 50,
    status_filter: Annotated[TaskStatus | None, Query(alias="status")] = None,
    priority: Annotated[Priority | None, Query()] = None,
    assigned_to: Annotated[UUID | None, Query()] = None,
    search: Annotated[str | None, Query(max_length=100)] = None,
) -> ApiResponse[PaginatedResponse[TaskRead]]:
    tasks, next_cursor, has_more = await service.list_tasks(
        caller,
        project_id,
        cursor=cursor,
        limit=limit,
        status=status_filter.value if status_filter else None,
        priority=priority.value if priority else None,
        assigned_to=assigned_to,
        search=search,
    )
    return ApiResponse[PaginatedResponse[TaskRead]](
        data=PaginatedResponse(
            items=[TaskRead.model_validate(t) for t in tasks],
            next_cursor=next_cursor,
            has_more=has_more,
        )
    )


@router.get(
    "/projects/{project_id}/tasks/{task_id}",
    response_model=ApiResponse[TaskRead],
    responses={404: {"description": "Task not found under this project"}},
)
async def get_task(
    project_id: UUID, task_id: UUID, caller: Caller, service: TaskServiceDep
) -> ApiResponse[TaskRead]:
    task = await service.get(caller, project_id, task_id)
    return ApiResponse[TaskRead](data=TaskRead.model_validate(task))


@router.put(
    "/tasks/{task_id}",
    response_model=ApiResponse[TaskRead],
    responses={
        403: {"description": "Not allowed to update this task, or invalid assignee"},
        404: {"description": "Task not found"},
    },
)
async def update_task(
    task_id: UUID,
    data: TaskUpdate,
    caller: Caller,
    service: TaskServiceDep,
) -> ApiResponse[TaskRead]:
    task = await service.update(caller, task_id, data)
    return ApiResponse[TaskRead](
        message="Task updated successfully", data=TaskRead.model_validate(task)
    )


@router.patch(
    "/tasks/{task_id}/status",
    response_model=ApiResponse[TaskRead],
    responses={404: {"description": "Task not found"}},
)
async def update_task_status(
    task_id: UUID,
    data: TaskStatusUpdate,
    caller: Caller,
    service: TaskServiceDep,
) -> ApiResponse[TaskRead]:
    """Change a task's status. Any member of the owning tenant may do this."""
    task = await service.update_status(caller, task_id, data)
    return ApiResponse[TaskRead](
        message="Task status updated successfully", data=TaskRead.model_validate(task)
    )


@router.delete(
    "/tasks/{task_id}",
    response_model=ApiResponse[None],
    responses={
        403: {"description": "Only admins or the creator may delete"},
        404: {"description": "Task not found"},
    },
)
async def delete_task(task_id: UUID, caller: Caller, service: TaskServiceDep) -> ApiResponse[None]:
    await service.delete(caller, task_id)
    return ApiResponse[None](message="Task deleted successfully")
