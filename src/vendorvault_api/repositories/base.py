"""Base repository with common database operations."""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import ColumnElement, Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from vendorvault_api.models.orm.base import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Base repository with common CRUD operations."""

    model: type[T]

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session."""
        self.session = session

    async def get(self, id: UUID) -> T | None:
        """Get a record by ID.

        Args:
            id: Record UUID

        Returns:
            Record or None if not found
        """
        result = await self.session.execute(select(self.model).where(self.model.id == id))
        return result.unique().scalar_one_or_none()

    async def get_by_id(self, id: UUID) -> T | None:
        """Get a record by ID (alias for get)."""
        return await self.get(id)

    async def count(self, *conditions: ColumnElement[bool]) -> int:
        """Count records matching the given conditions.

        Args:
            *conditions: SQLAlchemy filter expressions

        Returns:
            Number of matching records
        """
        query = select(func.count()).select_from(self.model)
        if conditions:
            query = query.where(*conditions)
        result = await self.session.execute(query)
        return result.scalar_one()

    async def count_by(
        self,
        column: InstrumentedAttribute[Any],
        *conditions: ColumnElement[bool],
    ) -> dict[str, int]:
        """Count records grouped by a column.

        Args:
            column: Column to group by, usually a status
            *conditions: SQLAlchemy filter expressions

        Returns:
            Mapping of column value to count
        """
        query = select(column, func.count()).select_from(self.model).group_by(column)
        if conditions:
            query = query.where(*conditions)
        result = await self.session.execute(query)
        return {str(value): count for value, count in result.all()}

    async def paginate(self, query: Select[tuple[T]], offset: int, limit: int) -> tuple[list[T], int]:
        """Run a select with offset/limit and the total count of the unpaged query.

        Args:
            query: Filtered and ordered select of this model
            offset: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Tuple of (records, total)
        """
        count_query = select(func.count()).select_from(query.order_by(None).subquery())
        total = (await self.session.execute(count_query)).scalar_one()
        result = await self.session.execute(query.offset(offset).limit(limit))
        return list(result.unique().scalars().all()), total

    async def create(self, **kwargs: Any) -> T:
        """Create a new record.

        Args:
            **kwargs: Field values

        Returns:
            Created record
        """
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, instance: T, **kwargs: Any) -> T:
        """Update fields of a loaded record.

        Args:
            instance: Record to update
            **kwargs: Fields to update

        Returns:
            Updated record
        """
        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, id: UUID) -> bool:
        """Delete a record by ID.

        Args:
            id: Record UUID

        Returns:
            True if deleted, False if not found
        """
        instance = await self.get_by_id(id)
        if instance is None:
            return False

        await self.session.delete(instance)
        await self.session.flush()
        return True
