"""Negotiation room repository."""

from uuid import UUID

from sqlalchemy import select

from vendorvault_api.models.orm.negotiation import NegotiationRoomORM
from vendorvault_api.repositories.base import BaseRepository


class NegotiationRepository(BaseRepository[NegotiationRoomORM]):
    """Repository for negotiation rooms."""

    model = NegotiationRoomORM

    async def get_by_application(self, application_id: UUID) -> NegotiationRoomORM | None:
        """Get the room of an application."""
        result = await self.session.execute(
            select(NegotiationRoomORM).where(NegotiationRoomORM.application_id == application_id)
        )
        return result.scalar_one_or_none()
