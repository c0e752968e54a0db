"""Shop application repository."""

from collections.abc import Iterable
from datetime import datetime
from uuid import UUID

from sqlalchemy import select

from vendorvault_api.models.domain.application import BLOCKING_APPLICATION_STATUSES
from vendorvault_api.models.orm.application import ShopApplicationORM
from vendorvault_api.repositories.base import BaseRepository


class ApplicationRepository(BaseRepository[ShopApplicationORM]):
    """Repository for shop applications."""

    model = ShopApplicationORM

    async def get_for_vendor(self, application_id: UUID, vendor_id: UUID) -> ShopApplicationORM | None:
        """Get an application only if it belongs to the vendor."""
        result = await self.session.execute(
            select(ShopApplicationORM).where(
                ShopApplicationORM.id == application_id,
                ShopApplicationORM.vendor_id == vendor_id,
            )
        )
        return result.unique().scalar_one_or_none()

    async def get_for_station(self, application_id: UUID, station_id: UUID) -> ShopApplicationORM | None:
        """Get an application only if it targets the station."""
        result = await self.session.execute(
            select(ShopApplicationORM).where(
                ShopApplicationORM.id == application_id,
                ShopApplicationORM.station_id == station_id,
            )
        )
        return result.unique().scalar_one_or_none()

    async def find_blocking(
        self,
        vendor_id: UUID,
        station_id: UUID,
        shop_id: str,
    ) -> ShopApplicationORM | None:
        """Find an open or approved application by the vendor for the same shop."""
        result = await self.session.execute(
            select(ShopApplicationORM)
            .where(
                ShopApplicationORM.vendor_id == vendor_id,
                ShopApplicationORM.station_id == station_id,
                ShopApplicationORM.shop_id == shop_id,
                ShopApplicationORM.status.in_(BLOCKING_APPLICATION_STATUSES),
            )
            .order_by(ShopApplicationORM.created_at.desc())
            .limit(1)
        )
        return result.unique().scalar_one_or_none()

    async def list_filtered(
        self,
        vendor_id: UUID | None = None,
        station_id: UUID | None = None,
        status: str | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[ShopApplicationORM], int]:
        """List applications newest first.

        Args:
            vendor_id: Restrict to one vendor
            station_id: Restrict to one station
            status: Restrict to one status
            offset: Number of records to skip
            limit: Page size

        Returns:
            Tuple of (applications, total)
        """
        query = select(ShopApplicationORM)
        if vendor_id:
            query = query.where(ShopApplicationORM.vendor_id == vendor_id)
        if station_id:
            query = query.where(ShopApplicationORM.station_id == station_id)
        if status:
            query = query.where(ShopApplicationORM.status == status)
        query = query.order_by(ShopApplicationORM.created_at.desc())
        return await self.paginate(query, offset, limit)

    async def list_for_vendor_at_station(
        self,
        vendor_id: UUID,
        station_id: UUID,
        statuses: Iterable[str] | None = None,
    ) -> list[ShopApplicationORM]:
        """List a vendor's applications at one station."""
        query = select(ShopApplicationORM).where(
            ShopApplicationORM.vendor_id == vendor_id,
            ShopApplicationORM.station_id == station_id,
        )
        if statuses is not None:
            query = query.where(ShopApplicationORM.status.in_(list(statuses)))
        result = await self.session.execute(query)
        return list(result.unique().scalars().all())

    async def list_for_vendor(self, vendor_id: UUID) -> list[ShopApplicationORM]:
        """List every application of a vendor."""
        result = await self.session.execute(
            select(ShopApplicationORM).where(ShopApplicationORM.vendor_id == vendor_id)
        )
        return list(result.unique().scalars().all())

    async def vendor_applied_to_station(self, vendor_id: UUID, station_id: UUID) -> bool:
        """Check whether a vendor has any application at a station."""
        return (
            await self.count(
                ShopApplicationORM.vendor_id == vendor_id,
                ShopApplicationORM.station_id == station_id,
            )
            > 0
        )

    async def vendor_ids_for_station(self, station_id: UUID) -> list[UUID]:
        """IDs of vendors who applied to a station."""
        result = await self.session.execute(
            select(ShopApplicationORM.vendor_id)
            .where(ShopApplicationORM.station_id == station_id)
            .distinct()
        )
        return list(result.scalars().all())

    async def recent_by_status(self, station_id: UUID, status: str, limit: int) -> list[ShopApplicationORM]:
        """Most recent applications of a station in one status."""
        result = await self.session.execute(
            select(ShopApplicationORM)
            .where(
                ShopApplicationORM.station_id == station_id,
                ShopApplicationORM.status == status,
            )
            .order_by(ShopApplicationORM.created_at.desc())
            .limit(limit)
        )
        return list(result.unique().scalars().all())

    async def count_for_vendor_between(self, vendor_id: UUID, start: datetime, end: datetime) -> int:
        """Count applications a vendor created in [start, end)."""
        return await self.count(
            ShopApplicationORM.vendor_id == vendor_id,
            ShopApplicationORM.created_at >= start,
            ShopApplicationORM.created_at < end,
        )
