"""Vendor payment and agreement repositories."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select

from vendorvault_api.models.domain.payment import CLOSED_PAYMENT_STATUSES
from vendorvault_api.models.orm.payment import VendorAgreementORM, VendorPaymentORM
from vendorvault_api.repositories.base import BaseRepository


class PaymentRepository(BaseRepository[VendorPaymentORM]):
    """Repository for vendor dues and their payment records."""

    model = VendorPaymentORM

    async def list_filtered(
        self,
        vendor_id: UUID | None = None,
        station_id: UUID | None = None,
        license_id: UUID | None = None,
        status: str | None = None,
        payment_type: str | None = None,
    ) -> list[VendorPaymentORM]:
        """List payments ordered by due date.

        Args:
            vendor_id: Restrict to one vendor
            station_id: Restrict to one station
            license_id: Restrict to one license
            status: Restrict to one status
            payment_type: Restrict to one payment type

        Returns:
            Matching payments
        """
        query = select(VendorPaymentORM)
        if vendor_id:
            query = query.where(VendorPaymentORM.vendor_id == vendor_id)
        if station_id:
            query = query.where(VendorPaymentORM.station_id == station_id)
        if license_id:
            query = query.where(VendorPaymentORM.license_id == license_id)
        if status:
            query = query.where(VendorPaymentORM.status == status)
        if payment_type:
            query = query.where(VendorPaymentORM.payment_type == payment_type)
        result = await self.session.execute(query.order_by(VendorPaymentORM.due_date))
        return list(result.scalars().all())

    async def get_for_station(self, payment_id: UUID, station_id: UUID) -> VendorPaymentORM | None:
        """Get a payment only if it belongs to the station."""
        result = await self.session.execute(
            select(VendorPaymentORM).where(
                VendorPaymentORM.id == payment_id,
                VendorPaymentORM.station_id == station_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_open_due_before(self, moment: datetime) -> list[VendorPaymentORM]:
        """List unpaid payments whose due date has passed."""
        result = await self.session.execute(
            select(VendorPaymentORM).where(
                VendorPaymentORM.status.not_in(CLOSED_PAYMENT_STATUSES),
                VendorPaymentORM.due_date < moment,
            )
        )
        return list(result.scalars().all())


class AgreementRepository(BaseRepository[VendorAgreementORM]):
    """Repository for vendor agreements."""

    model = VendorAgreementORM

    async def get_by_application(self, application_id: UUID) -> VendorAgreementORM | None:
        """Get the agreement of an application."""
        result = await self.session.execute(
            select(VendorAgreementORM).where(VendorAgreementORM.application_id == application_id)
        )
        return result.scalar_one_or_none()

    async def get_by_license(self, license_id: UUID) -> VendorAgreementORM | None:
        """Get the agreement a license was issued under."""
        result = await self.session.execute(
            select(VendorAgreementORM).where(VendorAgreementORM.license_id == license_id)
        )
        return result.scalar_one_or_none()

    async def list_for_station(self, station_id: UUID) -> list[VendorAgreementORM]:
        """List a station's agreements, newest first."""
        result = await self.session.execute(
            select(VendorAgreementORM)
            .where(VendorAgreementORM.station_id == station_id)
            .order_by(VendorAgreementORM.created_at.desc())
        )
        return list(result.scalars().all())
