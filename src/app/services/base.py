"""Shared transaction helpers for the entity services."""

from enum import Enum
from typing import Any

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.app.core.exceptions import ConflictError, ValidationError
from src.app.models.base import utc_now


def changed_values(data: BaseModel) -> dict[str, Any]:
    """Fields explicitly present in an update payload, enums as plain values.

    Raises:
        ValidationError: Payload carries no fields
    """
    values = {
        key: value.value if isinstance(value, Enum) else value
        for key, value in data.model_dump(exclude_unset=True).items()
    }
    if not values:
        raise ValidationError("No valid fields to update")
    return values


def apply_changes(entity: Any, values: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Set values on an entity and return the ``{field: {"from", "to"}}`` diff."""
    diff = {
        key: {"from": getattr(entity, key), "to": value} for key, value in values.items()
    }
    for key, value in values.items():
        setattr(entity, key, value)
    entity.updated_at = utc_now()
    return diff


class TransactionalService:
    """Base for services that own the session's transaction."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def commit(self, conflict_message: str = "Resource already exists") -> None:
        """Commit, mapping unique-constraint violations to ConflictError.

        Any failure rolls the whole transaction back, audit entries included.
        """
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError(conflict_message) from e
        except Exception:
            await self.session.rollback()
            raise

    async def flush(self, conflict_message: str = "Resource already exists") -> None:
        """Flush pending rows, mapping unique-constraint violations to ConflictError."""
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError(conflict_message) from e
