from src.app.schemas.auth import CurrentUserRead, LoginRequest, LoginResponse
from src.app.schemas.common import ApiResponse
from src.app.schemas.pagination import PaginatedResponse
from src.app.schemas.project import ProjectCreate, ProjectListItem, ProjectRead, ProjectUpdate
from src.app.schemas.task import TaskCreate, TaskRead, TaskStatusUpdate, TaskUpdate
from src.app.schemas.tenant import (
    TenantDetail,
    TenantRead,
    TenantRegister,
    TenantRegistered,
    TenantUpdate,
    TenantUsage,
)
from src.app.schemas.user import PlatformAdminCreate, UserCreate, UserRead, UserUpdate

__all__ = [
    # Common
    "ApiResponse",
    "PaginatedResponse",
    # Auth
    "CurrentUserRead",
    "LoginRequest",
    "LoginResponse",
    # Tenant
    "TenantDetail",
    "TenantRead",
    "TenantRegister",
    "TenantRegistered",
    "TenantUpdate",
    "TenantUsage",
    # User
    "PlatformAdminCreate",
    "UserCreate",
    "UserRead",
    "UserUpdate",
    # Project
    "ProjectCreate",
    "ProjectListItem",
    "ProjectRead",
    "ProjectUpdate",
    # Task
    "TaskCreate",
    "TaskRead",
    "TaskStatusUpdate",
    "TaskUpdate",
]
