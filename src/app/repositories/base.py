"""Base repository with common CRUD operations."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import and_, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from src.app.core.exceptions import ValidationError
from src.app.schemas.pagination import decode_cursor, encode_cursor


class BaseRepository[ModelType: SQLModel]:
    """Base repository providing common database operations.

    Repositories handle data access only. Transaction control (commit)
    should be done in the service layer.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: UUID, *, for_update: bool = False) -> ModelType | None:
        """Get a record by its primary key.

        With ``for_update`` the row is locked until the transaction ends
        (ignored by SQLite).
        """
        query = select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def delete(self, entity: ModelType) -> None:
        """Mark entity for deletion (no flush/commit)."""
        await self.session.delete(entity)

    def add(self, entity: ModelType) -> None:
        """Add entity to session (no flush/commit)."""
        self.session.add(entity)

    async def paginate(
        self,
        query: Any,  # SelectOfScalar or Select - SQLModel/SQLAlchemy query
        cursor: str | None,
        limit: int,
    ) -> tuple[list[ModelType], str | None, bool]:
        """Keyset pagination over ``(created_at, id)``, newest first.

        The id breaks ties between rows created in the same instant, so a
        page boundary never skips or repeats a row.

        Returns:
            Tuple of (items, next_cursor, has_more)

        Raises:
            ValidationError: Cursor was not issued by this API
        """
        created_at = self.model.created_at  # type: ignore[attr-defined]
        row_id = self.model.id  # type: ignore[attr-defined]

        if cursor:
            after_created, after_id = parse_cursor(cursor)
            query = query.where(
                or_(
                    created_at < after_created,
                    and_(created_at == after_created, row_id < after_id),
                )
            )

        # Fetch limit + 1 to determine if there are more results
        query = query.order_by(created_at.desc(), row_id.desc()).limit(limit + 1)
        result = await self.session.execute(query)
        items = list(result.scalars().all())

        has_more = len(items) > limit
        if has_more:
            items = items[:limit]

        next_cursor = None
        if has_more and items:
            last = items[-1]
            next_cursor = encode_cursor(f"{last.created_at.isoformat()}|{last.id}")

        return items, next_cursor, has_more


def parse_cursor(cursor: str) -> tuple[datetime, UUID]:
    try:
        created_at, _, row_id = decode_cursor(cursor).partition("|")
        return datetime.fromisoformat(created_at), UUID(row_id)
    except ValueError as e:
        raise ValidationError("Invalid cursor") from e
