"""Vendor profile and verification section repositories."""

from uuid import UUID

from sqlalchemy import select

from vendorvault_api.models.orm.vendor import VendorORM, VerificationSectionORM
from vendorvault_api.repositories.base import BaseRepository


class VendorRepository(BaseRepository[VendorORM]):
    """Repository for vendor business profiles."""

    model = VendorORM

    async def get_by_user_id(self, user_id: UUID) -> VendorORM | None:
        """Get the business profile of a vendor user."""
        result = await self.session.execute(select(VendorORM).where(VendorORM.user_id == user_id))
        return result.scalar_one_or_none()


class VerificationSectionRepository(BaseRepository[VerificationSectionORM]):
    """Repository for submitted verification sections."""

    model = VerificationSectionORM

    async def get_for_vendor(self, vendor_id: UUID) -> dict[str, VerificationSectionORM]:
        """Get every section a vendor has submitted, keyed by section name."""
        result = await self.session.execute(
            select(VerificationSectionORM).where(VerificationSectionORM.vendor_id == vendor_id)
        )
        return {row.section: row for row in result.scalars().all()}

    async def get_section(self, vendor_id: UUID, section: str) -> VerificationSectionORM | None:
        """Get one section of a vendor."""
        result = await self.session.execute(
            select(VerificationSectionORM).where(
                VerificationSectionORM.vendor_id == vendor_id,
                VerificationSectionORM.section == section,
            )
        )
        return result.scalar_one_or_none()
