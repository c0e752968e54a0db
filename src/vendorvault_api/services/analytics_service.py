"""Dashboard statistics and analytics."""

import logging
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from vendorvault_api.models.domain.application import ApplicationStatus
from vendorvault_api.models.domain.license import VALID_LICENSE_STATUSES
from vendorvault_api.models.domain.payment import CLOSED_PAYMENT_STATUSES
from vendorvault_api.models.domain.user import UserRole
from vendorvault_api.models.dto.admin import (
    AdminStatsResponse,
    ManagerAnalyticsResponse,
    ManagerStatsResponse,
    MonthlyCollection,
)
from vendorvault_api.models.dto.vendor import VendorAnalyticsResponse
from vendorvault_api.models.orm.application import ShopApplicationORM
from vendorvault_api.models.orm.license import LicenseORM
from vendorvault_api.models.orm.payment import VendorPaymentORM
from vendorvault_api.models.orm.station import StationORM
from vendorvault_api.models.orm.user import UserORM
from vendorvault_api.repositories.application_repository import ApplicationRepository
from vendorvault_api.repositories.license_repository import LicenseRepository
from vendorvault_api.repositories.payment_repository import PaymentRepository
from vendorvault_api.repositories.station_repository import (
    StationLayoutRepository,
    StationRepository,
)
from vendorvault_api.repositories.user_repository import UserRepository
from vendorvault_api.services.application_service import build_application_response
from vendorvault_api.services.layout_service import summarize_layout
from vendorvault_api.utils.dates import billing_month, month_start, utcnow

logger = logging.getLogger(__name__)

RECENT_APPLICATIONS_LIMIT = 5
COLLECTION_MONTHS = 6


def percentage_change(current: int, previous: int) -> float:
    """Percentage change from previous to current, 0 when previous is 0."""
    if previous == 0:
        return 0.0
    return round((current - previous) / previous * 100, 2)


def open_balance(payments: list[VendorPaymentORM]) -> Decimal:
    """Sum of outstanding balances of unsettled payments."""
    return sum(
        (p.balance for p in payments if p.status not in CLOSED_PAYMENT_STATUSES),
        Decimal("0"),
    )


def monthly_collections(
    payments: list[VendorPaymentORM],
    now: datetime,
    months: int = COLLECTION_MONTHS,
) -> list[MonthlyCollection]:
    """Amounts received per month over the last months, oldest first."""
    buckets = {billing_month(month_start(now, back)): Decimal("0") for back in range(months - 1, -1, -1)}
    for payment in payments:
        for record in payment.payment_records or []:
            paid_at = record.get("paid_at")
            if not paid_at:
                continue
            month = paid_at[:7]
            if month in buckets:
                buckets[month] += Decimal(str(record.get("amount") or 0))
    return [MonthlyCollection(month=month, collected=float(total)) for month, total in buckets.items()]


class AnalyticsService:
    """Service for dashboard figures."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.application_repo = ApplicationRepository(session)
        self.license_repo = LicenseRepository(session)
        self.payment_repo = PaymentRepository(session)
        self.station_repo = StationRepository(session)
        self.layout_repo = StationLayoutRepository(session)
        self.user_repo = UserRepository(session)

    async def vendor_analytics(self, vendor_id: UUID) -> VendorAnalyticsResponse:
        """Application, revenue and payment figures for a vendor."""
        applications = await self.application_repo.list_for_vendor(vendor_id)
        approved = [a for a in applications if a.status == ApplicationStatus.APPROVED]
        revenue = sum(
            (Decimal(a.final_agreed_rent if a.final_agreed_rent is not None else a.quoted_rent) for a in approved),
            Decimal("0"),
        )

        payments = await self.payment_repo.list_filtered(vendor_id=vendor_id)
        open_due_dates = [p.due_date for p in payments if p.status not in CLOSED_PAYMENT_STATUSES]

        now = utcnow()
        this_month = month_start(now)
        this_month_count = await self.application_repo.count_for_vendor_between(vendor_id, this_month, now)
        last_month_count = await self.application_repo.count_for_vendor_between(
            vendor_id, month_start(now, 1), this_month
        )

        return VendorAnalyticsResponse(
            total_applications=len(applications),
            active_applications=len(approved),
            total_revenue=float(revenue),
            pending_payments=float(open_balance(payments)),
            next_payment_due=min(open_due_dates) if open_due_dates else None,
            monthly_trend=percentage_change(this_month_count, last_month_count),
        )

    async def manager_stats(self, station_id: UUID) -> ManagerStatsResponse:
        """Application and license counts for a station."""
        applications_by_status = await self.application_repo.count_by(
            ShopApplicationORM.status, ShopApplicationORM.station_id == station_id
        )
        licenses_by_status = await self.license_repo.count_by(
            LicenseORM.status, LicenseORM.station_id == station_id
        )
        recent = await self.application_repo.recent_by_status(
            station_id, ApplicationStatus.SUBMITTED.value, RECENT_APPLICATIONS_LIMIT
        )
        return ManagerStatsResponse(
            applications_by_status=applications_by_status,
            total_applications=sum(applications_by_status.values()),
            licenses_by_status=licenses_by_status,
            active_licenses=sum(licenses_by_status.get(s.value, 0) for s in VALID_LICENSE_STATUSES),
            recent_applications=[build_application_response(a) for a in recent],
        )

    async def manager_analytics(self, station_id: UUID) -> ManagerAnalyticsResponse:
        """Revenue, dues and occupancy of a station."""
        payments = await self.payment_repo.list_filtered(station_id=station_id)
        collected = sum((Decimal(p.paid_amount or 0) for p in payments), Decimal("0"))

        layout = await self.layout_repo.get_by_station(station_id)
        summary = summarize_layout((layout.platforms or []) if layout else [])
        occupancy = (
            round(summary.allocated_shops / summary.total_shops * 100, 2) if summary.total_shops else 0.0
        )
        applications_by_status = await self.application_repo.count_by(
            ShopApplicationORM.status, ShopApplicationORM.station_id == station_id
        )
        return ManagerAnalyticsResponse(
            revenue_collected=float(collected),
            pending_dues=float(open_balance(payments)),
            total_shops=summary.total_shops,
            allocated_shops=summary.allocated_shops,
            occupancy_rate=occupancy,
            applications_by_status=applications_by_status,
            monthly_collections=monthly_collections(payments, utcnow()),
        )

    async def admin_stats(self) -> AdminStatsResponse:
        """Platform-wide user, station and license counts."""
        users_by_role = await self.user_repo.count_by(UserORM.role)
        managers_by_status = await self.user_repo.count_by(
            UserORM.status, UserORM.role == UserRole.STATION_MANAGER.value
        )
        stations_by_approval = await self.station_repo.count_by(StationORM.approval_status)
        licenses_by_status = await self.license_repo.count_by(LicenseORM.status)
        return AdminStatsResponse(
            users_by_role=users_by_role,
            total_users=sum(users_by_role.values()),
            station_managers_by_status=managers_by_status,
            stations_by_approval_status=stations_by_approval,
            licenses_by_status=licenses_by_status,
            vendor_count=users_by_role.get(UserRole.VENDOR.value, 0),
        )
