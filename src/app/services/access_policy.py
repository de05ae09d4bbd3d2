"""Access policy engine.

Pure decision function: given the caller, the entity kind, the operation and
facts about the resolved resource, return Allow or Deny(reason). No I/O and no
state; every input is passed in explicitly.

Rules are evaluated in order and the first match wins:

1. Tenant mismatch. A non super admin may only touch resources whose
   resolved tenant equals the caller's tenant.
2. Tenant lifecycle. A non super admin may not operate inside a tenant that
   is not active. Super admins are exempt so they can reactivate it.
3. Role matrix, keyed by ``(EntityKind, Operation)``.
4. Default deny.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID

from src.app.core.context import CallerContext
from src.app.core.exceptions import ForbiddenError, NotFoundError
from src.app.core.logging import get_logger
from src.app.models.enums import Role, TenantStatus

logger = get_logger(__name__)


class EntityKind(str, Enum):
    TENANT = "tenant"
    USER = "user"
    PROJECT = "project"
    TASK = "task"


class Operation(str, Enum):
    CREATE = "create"
    LIST = "list"
    LIST_ALL = "list_all"
    READ = "read"
    UPDATE = "update"
    UPDATE_STATUS = "update_status"
    DELETE = "delete"
    ASSIGN = "assign"


class DenyReason(str, Enum):
    CROSS_TENANT = "cross_tenant"
    TENANT_SUSPENDED = "tenant_suspended"
    RESTRICTED_FIELDS = "restricted_fields"
    SELF_DELETION = "self_deletion"
    PROTECTED_ACCOUNT = "protected_account"
    DIFFERENT_TENANT = "different_tenant"
    INACTIVE_ASSIGNEE = "inactive_assignee"
    INSUFFICIENT_ROLE = "insufficient_role"


DENY_MESSAGES: dict[DenyReason, str] = {
    DenyReason.CROSS_TENANT: "Cross-tenant access is not allowed",
    DenyReason.TENANT_SUSPENDED: "Tenant is suspended",
    DenyReason.RESTRICTED_FIELDS: "You are not allowed to change these fields",
    DenyReason.SELF_DELETION: (
        "You cannot delete, deactivate or change the role of your own account"
    ),
    DenyReason.PROTECTED_ACCOUNT: "Tenant admins cannot modify other administrator accounts",
    DenyReason.DIFFERENT_TENANT: "Assignee belongs to a different tenant",
    DenyReason.INACTIVE_ASSIGNEE: "Assignee is not an active user",
    DenyReason.INSUFFICIENT_ROLE: "Insufficient role for this operation",
}

ADMIN_ROLES = frozenset({Role.TENANT_ADMIN, Role.SUPER_ADMIN})
RESTRICTED_TENANT_FIELDS = frozenset({"status", "subscription_type", "max_users", "max_projects"})
SELF_EDITABLE_USER_FIELDS = frozenset({"full_name"})
ACCOUNT_CONTROL_FIELDS = frozenset({"role", "is_active"})


@dataclass(frozen=True)
class ResourceFacts:
    """What the resolver learned about the target resource.

    ``tenant_id`` is the authoritative tenant reached through the ownership
    chain. ``target_*`` describe a user being modified or assigned.
    """

    tenant_id: UUID | None = None
    tenant_status: str | None = None
    created_by: UUID | None = None
    assigned_to: UUID | None = None
    target_user_id: UUID | None = None
    target_role: Role | None = None
    target_tenant_id: UUID | None = None
    target_is_active: bool | None = None
    changed_fields: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: DenyReason | None = None

    @property
    def message(self) -> str | None:
        return DENY_MESSAGES[self.reason] if self.reason else None


ALLOW = Decision(allowed=True)


def deny(reason: DenyReason) -> Decision:
    return Decision(allowed=False, reason=reason)


Rule = Callable[[CallerContext, ResourceFacts], Decision]


def _any_member(caller: CallerContext, facts: ResourceFacts) -> Decision:
    return ALLOW


def _admin_only(caller: CallerContext, facts: ResourceFacts) -> Decision:
    return ALLOW if caller.role in ADMIN_ROLES else deny(DenyReason.INSUFFICIENT_ROLE)


def _super_admin_only(caller: CallerContext, facts: ResourceFacts) -> Decision:
    return ALLOW if caller.is_super_admin else deny(DenyReason.INSUFFICIENT_ROLE)


def _admin_or_creator(caller: CallerContext, facts: ResourceFacts) -> Decision:
    if caller.role in ADMIN_ROLES or facts.created_by == caller.user_id:
        return ALLOW
    return deny(DenyReason.INSUFFICIENT_ROLE)


def _tenant_update(caller: CallerContext, facts: ResourceFacts) -> Decision:
    if facts.changed_fields & RESTRICTED_TENANT_FIELDS and not caller.is_super_admin:
        return deny(DenyReason.RESTRICTED_FIELDS)
    return _admin_only(caller, facts)


def _user_delete(caller: CallerContext, facts: ResourceFacts) -> Decision:
    if facts.target_user_id == caller.user_id:
        return deny(DenyReason.SELF_DELETION)
    if caller.role not in ADMIN_ROLES:
        return deny(DenyReason.INSUFFICIENT_ROLE)
    if caller.role is Role.TENANT_ADMIN and facts.target_role in ADMIN_ROLES:
        return deny(DenyReason.PROTECTED_ACCOUNT)
    return ALLOW


def _user_update(caller: CallerContext, facts: ResourceFacts) -> Decision:
    if facts.target_user_id == caller.user_id:
        if caller.role in ADMIN_ROLES:
            if facts.changed_fields & ACCOUNT_CONTROL_FIELDS:
                return deny(DenyReason.SELF_DELETION)
            return ALLOW
        if facts.changed_fields <= SELF_EDITABLE_USER_FIELDS:
            return ALLOW
        return deny(DenyReason.RESTRICTED_FIELDS)
    if caller.role not in ADMIN_ROLES:
        return deny(DenyReason.INSUFFICIENT_ROLE)
    if caller.role is Role.TENANT_ADMIN and facts.target_role in ADMIN_ROLES:
        return deny(DenyReason.PROTECTED_ACCOUNT)
    return ALLOW


def _task_update(caller: CallerContext, facts: ResourceFacts) -> Decision:
    if caller.role in ADMIN_ROLES or caller.user_id in (facts.created_by, facts.assigned_to):
        return ALLOW
    return deny(DenyReason.INSUFFICIENT_ROLE)


def _task_assign(caller: CallerContext, facts: ResourceFacts) -> Decision:
    if facts.target_tenant_id != facts.tenant_id:
        return deny(DenyReason.DIFFERENT_TENANT)
    if not facts.target_is_active:
        return deny(DenyReason.INACTIVE_ASSIGNEE)
    return ALLOW


ROLE_MATRIX: dict[tuple[EntityKind, Operation], Rule] = {
    (EntityKind.TENANT, Operation.READ): _any_member,
    (EntityKind.TENANT, Operation.UPDATE): _tenant_update,
    (EntityKind.TENANT, Operation.LIST_ALL): _super_admin_only,
    (EntityKind.USER, Operation.CREATE): _admin_only,
    (EntityKind.USER, Operation.LIST): _admin_only,
    (EntityKind.USER, Operation.UPDATE): _user_update,
    (EntityKind.USER, Operation.DELETE): _user_delete,
    (EntityKind.PROJECT, Operation.CREATE): _any_member,
    (EntityKind.PROJECT, Operation.LIST): _any_member,
    (EntityKind.PROJECT, Operation.READ): _any_member,
    (EntityKind.PROJECT, Operation.UPDATE): _admin_or_creator,
    (EntityKind.PROJECT, Operation.DELETE): _admin_or_creator,
    (EntityKind.TASK, Operation.CREATE): _any_member,
    (EntityKind.TASK, Operation.LIST): _any_member,
    (EntityKind.TASK, Operation.READ): _any_member,
    (EntityKind.TASK, Operation.UPDATE): _task_update,
    (EntityKind.TASK, Operation.UPDATE_STATUS): _any_member,
    (EntityKind.TASK, Operation.DELETE): _admin_or_creator,
    (EntityKind.TASK, Operation.ASSIGN): _task_assign,
}

# Operations that are not scoped to a single tenant skip rules 1 and 2.
PLATFORM_OPERATIONS = frozenset({(EntityKind.TENANT, Operation.LIST_ALL)})


def evaluate(
    caller: CallerContext,
    entity: EntityKind,
    operation: Operation,
    facts: ResourceFacts,
) -> Decision:
    """Decide whether ``caller`` may perform ``operation`` on the resource."""
    if (entity, operation) not in PLATFORM_OPERATIONS and not caller.is_super_admin:
        if facts.tenant_id is None or facts.tenant_id != caller.tenant_id:
            return deny(DenyReason.CROSS_TENANT)
        if facts.tenant_status != TenantStatus.ACTIVE.value:
            return deny(DenyReason.TENANT_SUSPENDED)

    rule = ROLE_MATRIX.get((entity, operation))
    if rule is None:
        return deny(DenyReason.INSUFFICIENT_ROLE)
    return rule(caller, facts)


def authorize(
    caller: CallerContext,
    entity: EntityKind,
    operation: Operation,
    facts: ResourceFacts,
    *,
    not_found_message: str | None = None,
) -> None:
    """Evaluate and raise on deny.

    A cross-tenant denial surfaces as ``NotFoundError`` so the response cannot
    be used to probe for other tenants' ids. Every denial is logged with its
    precise reason.

    Raises:
        NotFoundError: Resource belongs to another tenant
        ForbiddenError: Any other denial
    """
    decision = evaluate(caller, entity, operation, facts)
    if decision.allowed:
        return

    reason = decision.reason or DenyReason.INSUFFICIENT_ROLE
    logger.warning(
        "Access denied",
        entity=entity.value,
        operation=operation.value,
        reason=reason.value,
        resource_tenant_id=str(facts.tenant_id) if facts.tenant_id else None,
    )
    if reason is DenyReason.CROSS_TENANT:
        raise NotFoundError(not_found_message or f"{entity.value.capitalize()} not found")
    raise ForbiddenError(DENY_MESSAGES[reason], reason=reason.value)
