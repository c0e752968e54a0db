"""Application approval: agreement, license, dues and shop allocation."""

import logging
from datetime import timedelta
from decimal import Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from vendorvault_api.constants.validation import (
    DEFAULT_LICENSE_VALIDITY_MONTHS,
    FIRST_RENT_DUE_DAYS,
    STANDARD_AGREEMENT_TERMS,
)
from vendorvault_api.exceptions import (
    ApplicationNotFoundError,
    InvalidStatusTransitionError,
    MissingVerificationsError,
    ShopAlreadyLicensedError,
    ValidationError,
)
from vendorvault_api.models.domain.application import (
    OPEN_APPLICATION_STATUSES,
    ApplicationStatus,
)
from vendorvault_api.models.domain.document import (
    REQUIRED_DOCUMENT_TYPES,
    DocumentStatus,
    DocumentType,
)
from vendorvault_api.models.domain.license import LicenseStatus, LicenseType
from vendorvault_api.models.domain.negotiation import NegotiationStatus
from vendorvault_api.models.domain.notification import NotificationType
from vendorvault_api.models.domain.payment import AgreementStatus, PaymentStatus, PaymentType
from vendorvault_api.models.domain.user import CurrentUser
from vendorvault_api.models.dto.admin import ApprovalResponse
from vendorvault_api.models.dto.application import ApproveRequest
from vendorvault_api.models.dto.payment import AgreementResponse
from vendorvault_api.models.orm.application import ShopApplicationORM
from vendorvault_api.models.orm.negotiation import NegotiationRoomORM
from vendorvault_api.repositories.application_repository import ApplicationRepository
from vendorvault_api.repositories.document_repository import DocumentRepository
from vendorvault_api.repositories.license_repository import LicenseRepository
from vendorvault_api.repositories.negotiation_repository import NegotiationRepository
from vendorvault_api.repositories.payment_repository import (
    AgreementRepository,
    PaymentRepository,
)
from vendorvault_api.repositories.vendor_repository import VerificationSectionRepository
from vendorvault_api.services.application_service import record_status
from vendorvault_api.services.layout_service import LayoutService
from vendorvault_api.services.license_service import LicenseService, build_license_response
from vendorvault_api.services.notification_service import NotificationService
from vendorvault_api.services.verification_service import is_food_business
from vendorvault_api.utils.dates import add_months, billing_month, utcnow

logger = logging.getLogger(__name__)


def agreement_number(station_code: str, year: int, application_id: UUID) -> str:
    """Agreement number AGR-{station}-{year}-{last 6 of application id}."""
    return f"AGR-{station_code}-{year}-{str(application_id)[-6:].upper()}"


def resolve_agreed_rent(application: ShopApplicationORM, room: NegotiationRoomORM | None) -> Decimal:
    """Rent to license at: negotiated, else final agreed, else quoted."""
    if room is not None and room.final_agreement and room.final_agreement.get("agreed_rent") is not None:
        return Decimal(str(room.final_agreement["agreed_rent"]))
    if application.final_agreed_rent is not None:
        return Decimal(application.final_agreed_rent)
    return Decimal(application.quoted_rent)


class ApprovalService:
    """Service turning an approved application into a license."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.application_repo = ApplicationRepository(session)
        self.document_repo = DocumentRepository(session)
        self.section_repo = VerificationSectionRepository(session)
        self.negotiation_repo = NegotiationRepository(session)
        self.agreement_repo = AgreementRepository(session)
        self.payment_repo = PaymentRepository(session)
        self.license_repo = LicenseRepository(session)
        self.license_service = LicenseService(session)
        self.layout_service = LayoutService(session)
        self.notification_service = NotificationService(session)

    async def missing_verifications(self, vendor_id: UUID) -> list[str]:
        """Required document types the vendor has no VERIFIED copy of."""
        required = list(REQUIRED_DOCUMENT_TYPES)
        sections = await self.section_repo.get_for_vendor(vendor_id)
        if is_food_business(sections):
            required.append(DocumentType.FSSAI)

        documents = await self.document_repo.list_for_vendor(vendor_id)
        verified = {d.document_type for d in documents if d.status == DocumentStatus.VERIFIED}
        return [t.value for t in required if t.value not in verified]

    async def approve(
        self,
        application_id: UUID,
        station_id: UUID,
        data: ApproveRequest,
        manager: CurrentUser,
    ) -> ApprovalResponse:
        """Approve an application and issue its license.

        All writes share the request's transaction and are rolled back
        together on failure.

        Args:
            application_id: Application UUID
            station_id: Manager's station
            data: Optional deposit, validity and notes
            manager: Approving station manager

        Returns:
            ApprovalResponse with the license and agreement

        Raises:
            ApplicationNotFoundError: If the application is not the station's
            InvalidStatusTransitionError: If the application is not open
            ValidationError: If expiry_months or security_deposit is out of range
            MissingVerificationsError: If required documents are not verified
            ShopAlreadyLicensedError: If the shop already holds a valid license
        """
        application = await self.application_repo.get_for_station(application_id, station_id)
        if application is None:
            raise ApplicationNotFoundError(str(application_id))
        if application.status not in OPEN_APPLICATION_STATUSES:
            raise InvalidStatusTransitionError("application", application.status, "approve")

        expiry_months = data.expiry_months if data.expiry_months is not None else DEFAULT_LICENSE_VALIDITY_MONTHS
        if expiry_months <= 0:
            raise ValidationError("expiry_months must be greater than 0", field="expiry_months")
        if data.security_deposit is not None and data.security_deposit < 0:
            raise ValidationError("security_deposit cannot be negative", field="security_deposit")

        missing = await self.missing_verifications(application.vendor_id)
        if missing:
            raise MissingVerificationsError(missing)
        if application.shop_id and await self.license_repo.shop_has_valid_license(
            station_id, application.shop_id
        ):
            raise ShopAlreadyLicensedError(application.shop_id)

        room = await self.negotiation_repo.get_by_application(application.id)
        rent = resolve_agreed_rent(application, room)
        if data.security_deposit is not None:
            deposit = data.security_deposit
        elif application.final_security_deposit is not None:
            deposit = Decimal(application.final_security_deposit)
        else:
            deposit = Decimal(application.security_deposit)

        now = utcnow()
        expires_at = add_months(now, expiry_months)
        station = application.station

        # 1. Application
        record_status(application, ApplicationStatus.APPROVED, manager.id, data.notes or "Application approved")
        application.approved_at = now
        application.approved_by = manager.id
        application.final_agreed_rent = rent
        application.final_security_deposit = deposit
        application.license_issued_at = now
        application.license_expires_at = expires_at
        await self.session.flush()

        # 2. Agreement
        agreement = await self.agreement_repo.create(
            agreement_number=agreement_number(station.station_code, now.year, application.id),
            application_id=application.id,
            vendor_id=application.vendor_id,
            station_id=station_id,
            monthly_rent=rent,
            security_deposit=deposit,
            security_deposit_paid=False,
            duration_months=expiry_months,
            start_date=now,
            end_date=expires_at,
            status=AgreementStatus.ACTIVE.value,
            terms=list(STANDARD_AGREEMENT_TERMS),
            created_by=manager.id,
        )

        # 3. License
        license_orm = await self.license_service.issue_license(
            vendor_id=application.vendor_id,
            station_id=station_id,
            application_id=application.id,
            shop_id=application.shop_id,
            shop_name=application.shop_name,
            monthly_rent=rent,
            security_deposit=deposit,
            status=LicenseStatus.ACTIVE,
            license_type=LicenseType.PERMANENT,
            validity_months=expiry_months,
            issued_at=now,
            expires_at=expires_at,
            approved_by=manager.id,
        )
        application.license_number = license_orm.license_number
        agreement = await self.agreement_repo.update(
            agreement,
            license_id=license_orm.id,
            license_number=license_orm.license_number,
        )

        # 4-5. Dues
        dues = {
            "vendor_id": application.vendor_id,
            "station_id": station_id,
            "application_id": application.id,
            "agreement_id": agreement.id,
            "license_id": license_orm.id,
            "paid_amount": Decimal("0"),
            "status": PaymentStatus.PENDING.value,
            "payment_records": [],
            "created_by": manager.id,
        }
        if deposit > 0:
            await self.payment_repo.create(
                payment_type=PaymentType.SECURITY_DEPOSIT.value,
                amount=deposit,
                due_date=now,
                billing_month=billing_month(now),
                notes="Security deposit",
                **dues,
            )
        first_due = now + timedelta(days=FIRST_RENT_DUE_DAYS)
        await self.payment_repo.create(
            payment_type=PaymentType.RENT.value,
            amount=rent,
            due_date=first_due,
            billing_month=billing_month(first_due),
            notes="First month rent",
            **dues,
        )

        # 6. Layout
        allocated = await self.layout_service.allocate_shop(
            station_id,
            application.shop_id,
            application.vendor_id,
            float(rent),
            application.shop_name,
        )
        if not allocated:
            logger.warning(f"Shop {application.shop_id} not found in layout of station {station.station_code}")

        # 7. Negotiation
        if room is not None and room.status in (NegotiationStatus.ACTIVE, NegotiationStatus.AGREED):
            room.status = NegotiationStatus.AGREED.value
            room.last_activity_at = now
        await self.session.flush()

        # 8. Notifications
        await self.notification_service.notify(
            application.vendor_id,
            NotificationType.APPLICATION_APPROVED,
            "Application Approved!",
            f"Your application for shop {application.shop_name or application.shop_id} at "
            f"{station.station_name} has been approved.",
            action_url=f"/vendor/applications/{application.id}",
            metadata={"application_id": str(application.id), "agreement_number": agreement.agreement_number},
        )
        await self.notification_service.notify(
            application.vendor_id,
            NotificationType.LICENSE_ISSUED,
            "License Issued",
            f"License {license_orm.license_number} has been issued, valid until {expires_at:%d %b %Y}.",
            action_url="/vendor/license",
            metadata={"license_id": str(license_orm.id), "license_number": license_orm.license_number},
        )

        logger.info(
            f"Application {application.id} approved by {manager.id}: "
            f"license {license_orm.license_number}, agreement {agreement.agreement_number}"
        )
        return ApprovalResponse(
            message="Application approved and license issued",
            application_id=application.id,
            license=build_license_response(license_orm),
            agreement=AgreementResponse.model_validate(agreement),
            approved_at=now,
        )
