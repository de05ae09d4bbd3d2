"""Property-based tests for the access policy using hypothesis."""

from uuid import UUID

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from src.app.core.context import CallerContext
from src.app.models.enums import Role, TenantStatus
from src.app.services.access_policy import (
    PLATFORM_OPERATIONS,
    ROLE_MATRIX,
    DenyReason,
    EntityKind,
    Operation,
    ResourceFacts,
    evaluate,
)

pytestmark = pytest.mark.unit

tenant_roles = st.sampled_from([Role.USER, Role.TENANT_ADMIN])
all_roles = st.sampled_from(list(Role))
tenant_scoped_pairs = st.sampled_from(
    [pair for pair in ROLE_MATRIX if pair not in PLATFORM_OPERATIONS]
)
changed_fields = st.frozensets(
    st.sampled_from(
        ["name", "status", "max_users", "full_name", "email", "role", "is_active", "title"]
    ),
    max_size=4,
)


@st.composite
def facts(draw, tenant_id=st.uuids(), status=st.sampled_from([s.value for s in TenantStatus])):
    return ResourceFacts(
        tenant_id=draw(tenant_id),
        tenant_status=draw(status),
        created_by=draw(st.none() | st.uuids()),
        assigned_to=draw(st.none() | st.uuids()),
        target_user_id=draw(st.none() | st.uuids()),
        target_role=draw(st.none() | all_roles),
        target_tenant_id=draw(st.none() | st.uuids()),
        target_is_active=draw(st.none() | st.booleans()),
        changed_fields=draw(changed_fields),
    )


def caller_for(role: Role, user_id: UUID, tenant_id: UUID) -> CallerContext:
    return CallerContext(user_id=user_id, tenant_id=tenant_id, role=role)


@given(
    role=tenant_roles,
    user_id=st.uuids(),
    caller_tenant=st.uuids(),
    pair=tenant_scoped_pairs,
    resource=facts(),
)
@settings(max_examples=300)
def test_foreign_tenant_always_denied(role, user_id, caller_tenant, pair, resource):
    """No tenant-scoped operation ever succeeds on another tenant's resource."""
    if resource.tenant_id == caller_tenant:
        return
    decision = evaluate(caller_for(role, user_id, caller_tenant), *pair, resource)

    assert not decision.allowed
    assert decision.reason is DenyReason.CROSS_TENANT


@given(
    role=tenant_roles,
    user_id=st.uuids(),
    tenant_id=st.uuids(),
    pair=tenant_scoped_pairs,
    data=st.data(),
)
@settings(max_examples=300)
def test_suspended_tenant_always_denied(role, user_id, tenant_id, pair, data):
    """Members of a suspended tenant can do nothing inside it."""
    resource = data.draw(
        facts(tenant_id=st.just(tenant_id), status=st.just(TenantStatus.SUSPENDED.value))
    )
    decision = evaluate(caller_for(role, user_id, tenant_id), *pair, resource)

    assert decision.reason is DenyReason.TENANT_SUSPENDED


@given(
    role=all_roles,
    user_id=st.uuids(),
    tenant_id=st.uuids(),
    entity=st.sampled_from(list(EntityKind)),
    operation=st.sampled_from(list(Operation)),
    resource=facts(),
)
@settings(max_examples=300)
def test_evaluate_is_total(role, user_id, tenant_id, entity, operation, resource):
    """Every input yields a decision, and every denial carries a reason."""
    decision = evaluate(caller_for(role, user_id, tenant_id), entity, operation, resource)

    assert decision.allowed or decision.reason is not None
    assert decision.allowed or decision.message


@given(
    role=all_roles,
    user_id=st.uuids(),
    tenant_id=st.uuids(),
    pair=st.sampled_from(list(ROLE_MATRIX)),
    resource=facts(),
)
def test_evaluate_is_deterministic(role, user_id, tenant_id, pair, resource):
    caller = caller_for(role, user_id, tenant_id)
    assert evaluate(caller, *pair, resource) == evaluate(caller, *pair, resource)


@given(
    user_id=st.uuids(),
    tenant_id=st.uuids(),
    target_role=st.sampled_from([Role.TENANT_ADMIN, Role.SUPER_ADMIN]),
    target_id=st.uuids(),
    fields=changed_fields,
    operation=st.sampled_from([Operation.UPDATE, Operation.DELETE]),
)
def test_tenant_admin_never_modifies_other_admins(
    user_id, tenant_id, target_role, target_id, fields, operation
):
    if target_id == user_id:
        return
    resource = ResourceFacts(
        tenant_id=tenant_id,
        tenant_status=TenantStatus.ACTIVE.value,
        target_user_id=target_id,
        target_role=target_role,
        changed_fields=fields,
    )
    caller = caller_for(Role.TENANT_ADMIN, user_id, tenant_id)

    decision = evaluate(caller, EntityKind.USER, operation, resource)

    assert decision.reason is DenyReason.PROTECTED_ACCOUNT
