"""Inspector repository."""

from uuid import UUID

from sqlalchemy import select

from vendorvault_api.models.orm.inspector import InspectorORM
from vendorvault_api.repositories.base import BaseRepository


class InspectorRepository(BaseRepository[InspectorORM]):
    """Repository for station inspectors."""

    model = InspectorORM

    async def get_by_user(self, user_id: UUID) -> InspectorORM | None:
        """Get the inspector record of a user."""
        result = await self.session.execute(select(InspectorORM).where(InspectorORM.user_id == user_id))
        return result.unique().scalar_one_or_none()

    async def list_for_station(self, station_id: UUID) -> list[InspectorORM]:
        """List a station's inspectors, oldest first."""
        result = await self.session.execute(
            select(InspectorORM)
            .where(InspectorORM.station_id == station_id)
            .order_by(InspectorORM.created_at)
        )
        return list(result.unique().scalars().all())
