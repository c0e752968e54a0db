"""License repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select

from vendorvault_api.models.domain.license import LicenseStatus, VALID_LICENSE_STATUSES
from vendorvault_api.models.orm.license import LicenseORM
from vendorvault_api.repositories.base import BaseRepository


class LicenseRepository(BaseRepository[LicenseORM]):
    """Repository for vendor licenses."""

    model = LicenseORM

    async def get_by_number(self, license_number: str) -> LicenseORM | None:
        """Get a license by its number."""
        result = await self.session.execute(
            select(LicenseORM).where(LicenseORM.license_number == license_number)
        )
        return result.unique().scalar_one_or_none()

    async def number_exists(self, license_number: str) -> bool:
        """Check whether a license number is taken."""
        return await self.count(LicenseORM.license_number == license_number) > 0

    async def shop_has_valid_license(self, station_id: UUID, shop_id: str) -> bool:
        """Check whether a shop already holds an APPROVED or ACTIVE license."""
        return (
            await self.count(
                LicenseORM.station_id == station_id,
                LicenseORM.shop_id == shop_id,
                LicenseORM.status.in_(VALID_LICENSE_STATUSES),
            )
            > 0
        )

    async def get_by_application(self, application_id: UUID) -> LicenseORM | None:
        """Get the most recent license issued for an application."""
        result = await self.session.execute(
            select(LicenseORM)
            .where(LicenseORM.application_id == application_id)
            .order_by(LicenseORM.created_at.desc())
            .limit(1)
        )
        return result.unique().scalar_one_or_none()

    async def list_for_vendor(self, vendor_id: UUID, status: str | None = None) -> list[LicenseORM]:
        """List a vendor's licenses, newest first."""
        query = select(LicenseORM).where(LicenseORM.vendor_id == vendor_id)
        if status:
            query = query.where(LicenseORM.status == status)
        result = await self.session.execute(query.order_by(LicenseORM.created_at.desc()))
        return list(result.unique().scalars().all())

    async def list_filtered(
        self,
        status: str | None = None,
        station_id: UUID | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[LicenseORM], int]:
        """List licenses newest first.

        Returns:
            Tuple of (licenses, total)
        """
        query = select(LicenseORM)
        if status:
            query = query.where(LicenseORM.status == status)
        if station_id:
            query = query.where(LicenseORM.station_id == station_id)
        return await self.paginate(query.order_by(LicenseORM.created_at.desc()), offset, limit)

    async def list_valid(self, station_id: UUID | None = None) -> list[LicenseORM]:
        """List APPROVED and ACTIVE licenses."""
        query = select(LicenseORM).where(LicenseORM.status.in_(VALID_LICENSE_STATUSES))
        if station_id:
            query = query.where(LicenseORM.station_id == station_id)
        result = await self.session.execute(query)
        return list(result.unique().scalars().all())

    async def list_valid_expired_before(self, moment: datetime) -> list[LicenseORM]:
        """List valid licenses whose expiry date has passed."""
        result = await self.session.execute(
            select(LicenseORM).where(
                LicenseORM.status.in_(VALID_LICENSE_STATUSES),
                LicenseORM.expires_at.is_not(None),
                LicenseORM.expires_at < moment,
            )
        )
        return list(result.unique().scalars().all())

    async def list_unwarned_expiring_between(self, start: datetime, end: datetime) -> list[LicenseORM]:
        """List valid licenses expiring within [start, end] whose vendor was not yet warned."""
        result = await self.session.execute(
            select(LicenseORM).where(
                LicenseORM.status.in_(VALID_LICENSE_STATUSES),
                LicenseORM.expires_at >= start,
                LicenseORM.expires_at <= end,
                LicenseORM.expiry_warning_sent_at.is_(None),
            )
        )
        return list(result.unique().scalars().all())

    async def list_pending_for_vendor(self, vendor_id: UUID) -> list[LicenseORM]:
        """List a vendor's PENDING licenses."""
        return await self.list_for_vendor(vendor_id, LicenseStatus.PENDING)

    async def list_inspected(
        self,
        station_id: UUID | None = None,
        limit: int | None = None,
    ) -> list[LicenseORM]:
        """Inspected licenses, most recently inspected first."""
        query = select(LicenseORM).where(LicenseORM.last_inspection_date.is_not(None))
        if station_id:
            query = query.where(LicenseORM.station_id == station_id)
        query = query.order_by(LicenseORM.last_inspection_date.desc())
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return list(result.unique().scalars().all())
