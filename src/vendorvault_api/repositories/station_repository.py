"""Station and station layout repositories."""

from uuid import UUID

from sqlalchemy import func, or_, select

from vendorvault_api.models.domain.station import ApprovalStatus, OperationalStatus
from vendorvault_api.models.orm.station import StationLayoutORM, StationORM
from vendorvault_api.repositories.base import BaseRepository


class StationRepository(BaseRepository[StationORM]):
    """Repository for railway stations."""

    model = StationORM

    async def get_by_code(self, station_code: str) -> StationORM | None:
        """Get a station by its code."""
        result = await self.session.execute(
            select(StationORM).where(StationORM.station_code == station_code.strip().upper())
        )
        return result.scalar_one_or_none()

    async def get_by_manager(self, manager_id: UUID) -> StationORM | None:
        """Get the station managed by a user."""
        result = await self.session.execute(
            select(StationORM)
            .where(StationORM.station_manager_id == manager_id)
            .order_by(StationORM.created_at)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_by_managers(self, manager_ids: list[UUID]) -> dict[UUID, StationORM]:
        """Get stations keyed by their manager's user ID."""
        if not manager_ids:
            return {}
        result = await self.session.execute(
            select(StationORM).where(StationORM.station_manager_id.in_(manager_ids))
        )
        return {
            station.station_manager_id: station
            for station in result.scalars().all()
            if station.station_manager_id is not None
        }

    async def list_public(self) -> list[StationORM]:
        """List approved, active stations with a completed layout, by name."""
        result = await self.session.execute(
            select(StationORM)
            .where(
                StationORM.approval_status == ApprovalStatus.APPROVED,
                StationORM.operational_status == OperationalStatus.ACTIVE,
                StationORM.layout_completed.is_(True),
            )
            .order_by(StationORM.station_name)
        )
        return list(result.scalars().all())

    async def search(self, term: str, limit: int) -> list[StationORM]:
        """Case-insensitive search of approved stations by name or code.

        Args:
            term: Sanitized search term
            limit: Maximum results

        Returns:
            Matching stations ordered by name
        """
        pattern = f"%{term.lower()}%"
        result = await self.session.execute(
            select(StationORM)
            .where(
                StationORM.approval_status == ApprovalStatus.APPROVED,
                or_(
                    func.lower(StationORM.station_name).like(pattern),
                    func.lower(StationORM.station_code).like(pattern),
                ),
            )
            .order_by(StationORM.station_name)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def list_filtered(
        self,
        approval_status: str | None = None,
        term: str | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[StationORM], int]:
        """List stations for administration.

        Returns:
            Tuple of (stations, total)
        """
        query = select(StationORM)
        if approval_status:
            query = query.where(StationORM.approval_status == approval_status)
        if term:
            pattern = f"%{term.lower()}%"
            query = query.where(
                or_(
                    func.lower(StationORM.station_name).like(pattern),
                    func.lower(StationORM.station_code).like(pattern),
                )
            )
        return await self.paginate(query.order_by(StationORM.station_name), offset, limit)


class StationLayoutRepository(BaseRepository[StationLayoutORM]):
    """Repository for station layouts."""

    model = StationLayoutORM

    async def get_by_station(self, station_id: UUID) -> StationLayoutORM | None:
        """Get the layout of a station."""
        result = await self.session.execute(
            select(StationLayoutORM).where(StationLayoutORM.station_id == station_id)
        )
        return result.scalar_one_or_none()
