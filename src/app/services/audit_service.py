"""Audit logging service - records actions for compliance and security."""

from typing import Any
from uuid import UUID

from pydantic_core import to_jsonable_python
from sqlalchemy.ext.asyncio import AsyncSession

from src.app.core.context import CallerContext
from src.app.core.logging import get_logger
from src.app.models import AuditAction, AuditLog, AuditStatus
from src.app.repositories import AuditLogRepository

logger = get_logger(__name__)


class AuditService:
    """Service for recording audit logs.

    Two modes:
    - ``record`` joins the caller's open transaction, so the entry commits
      and rolls back together with the mutation it describes.
    - ``record_read`` commits through a savepoint and never raises: a failure to log
      a read must not fail the read.
    """

    def __init__(self, audit_repo: AuditLogRepository, session: AsyncSession):
        self.audit_repo = audit_repo
        self.session = session

    def _build(
        self,
        caller: CallerContext,
        action: AuditAction,
        entity_type: str,
        tenant_id: UUID | None,
        entity_id: UUID | None,
        changes: dict[str, Any] | None,
        status: AuditStatus,
    ) -> AuditLog:
        return AuditLog(
            tenant_id=tenant_id,
            user_id=caller.user_id,
            action=action.value,
            entity_type=entity_type,
            entity_id=entity_id,
            changes=to_jsonable_python(changes) if changes else None,
            ip_address=caller.ip_address,
            user_agent=caller.user_agent,
            request_id=caller.request_id,
            status=status.value,
        )

    def record(
        self,
        caller: CallerContext,
        action: AuditAction,
        entity_type: str,
        *,
        tenant_id: UUID | None,
        entity_id: UUID | None = None,
        changes: dict[str, Any] | None = None,
    ) -> AuditLog:
        """Add an audit entry to the current transaction (no flush/commit).

        Args:
            caller: Who performed the action, with request metadata
            action: The action being performed
            entity_type: Type of entity affected (e.g., "project", "task")
            tenant_id: Resolved tenant of the affected entity
            entity_id: ID of the affected entity
            changes: Dictionary of changes for update operations

        Returns:
            The pending AuditLog
        """
        audit_log = self._build(
            caller, action, entity_type, tenant_id, entity_id, changes, AuditStatus.SUCCESS
        )
        self.audit_repo.add(audit_log)
        return audit_log

    async def record_read(
        self,
        caller: CallerContext,
        action: AuditAction,
        entity_type: str,
        *,
        tenant_id: UUID | None,
        entity_id: UUID | None = None,
        changes: dict[str, Any] | None = None,
    ) -> AuditLog | None:
        """Record a read and commit it. Failures are logged, never raised.

        The insert runs inside a savepoint. A failed insert rolls back only
        the savepoint, so rows the caller already loaded stay usable for the
        response. The outer transaction is left for the session owner to end.

        Returns:
            The created AuditLog, or None if logging failed
        """
        try:
            audit_log = self._build(
                caller, action, entity_type, tenant_id, entity_id, changes, AuditStatus.SUCCESS
            )
            async with self.session.begin_nested():
                self.audit_repo.add(audit_log)
            await self.session.commit()

            logger.debug(
                "Audit log recorded",
                action=audit_log.action,
                entity_type=entity_type,
                entity_id=str(entity_id) if entity_id else None,
            )
            return audit_log

        except Exception as e:
            # Fire-and-forget: log the failure but don't propagate
            logger.warning(
                "Failed to record audit log",
                action=action.value,
                entity_type=entity_type,
                error=str(e),
            )
            return None

    async def list_entity_history(self, entity_type: str, entity_id: UUID) -> list[AuditLog]:
        """List audit logs for a specific entity, oldest first."""
        return await self.audit_repo.list_by_entity(entity_type, entity_id)
