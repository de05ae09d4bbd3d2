"""Repository for AuditLog entity."""

from uuid import UUID

from sqlmodel import select

from src.app.models import AuditLog
from src.app.repositories.base import BaseRepository


class AuditLogRepository(BaseRepository[AuditLog]):
    """Repository for AuditLog entity. Append-only: no update or delete helpers."""

    model = AuditLog

    async def list_by_entity(self, entity_type: str, entity_id: UUID) -> list[AuditLog]:
        """List every audit log for a specific entity, oldest first."""
        result = await self.session.execute(
            select(AuditLog)
            .where(AuditLog.entity_type == entity_type, AuditLog.entity_id == entity_id)
            .order_by(AuditLog.created_at)  # type: ignore[arg-type]
        )
        return list(result.scalars().all())
