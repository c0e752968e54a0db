"""License scanning and compliance inspections."""

import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from vendorvault_api.exceptions import (
    BadRequestError,
    ForbiddenError,
    InspectorNotFoundError,
    ValidationError,
)
from vendorvault_api.models.domain.license import VALID_LICENSE_STATUSES, ComplianceStatus
from vendorvault_api.models.domain.payment import CLOSED_PAYMENT_STATUSES, PaymentStatus
from vendorvault_api.models.domain.user import CurrentUser
from vendorvault_api.models.dto.inspection import (
    InspectionListResponse,
    InspectionRequest,
    InspectionResponse,
    InspectorStatsResponse,
    ScanResponse,
    ScanSummary,
)
from vendorvault_api.models.dto.payment import AgreementResponse
from vendorvault_api.models.orm.inspector import InspectorORM
from vendorvault_api.models.orm.license import LicenseORM
from vendorvault_api.repositories.application_repository import ApplicationRepository
from vendorvault_api.repositories.inspector_repository import InspectorRepository
from vendorvault_api.repositories.license_repository import LicenseRepository
from vendorvault_api.repositories.payment_repository import AgreementRepository, PaymentRepository
from vendorvault_api.repositories.user_repository import UserRepository
from vendorvault_api.repositories.vendor_repository import VendorRepository
from vendorvault_api.services.application_service import build_application_response
from vendorvault_api.services.license_service import (
    LicenseService,
    build_license_response,
    days_to_expiry,
    is_license_valid,
)
from vendorvault_api.services.payment_service import build_payment_response, refresh_status
from vendorvault_api.utils.dates import iso, utcnow

logger = logging.getLogger(__name__)

RECENT_INSPECTIONS_LIMIT = 10


def parse_license_reference(license_number: str | None, qr: str | None) -> str:
    """License number from an explicit number or scanned QR content.

    QR content is either a verification URL ending in the number or the bare
    number itself.

    Raises:
        ValidationError: If neither is given
    """
    reference = (license_number or qr or "").strip()
    if not reference:
        raise ValidationError("license_number or qr is required", field="license_number")
    if "/" in reference:
        reference = reference.rstrip("/").rsplit("/", 1)[-1]
    return reference.split("?", 1)[0].upper()


def parse_compliance_status(value: str) -> ComplianceStatus:
    """Resolve a compliance status, accepting any case.

    Raises:
        ValidationError: If the value is not a compliance status
    """
    try:
        return ComplianceStatus(value.strip().upper())
    except ValueError as e:
        allowed = ", ".join(s.value for s in ComplianceStatus)
        raise ValidationError(
            f"Invalid compliance status. Must be one of: {allowed}", field="compliance_status"
        ) from e


class InspectionService:
    """Service for inspectors working with licenses."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.license_repo = LicenseRepository(session)
        self.inspector_repo = InspectorRepository(session)
        self.application_repo = ApplicationRepository(session)
        self.agreement_repo = AgreementRepository(session)
        self.payment_repo = PaymentRepository(session)
        self.user_repo = UserRepository(session)
        self.vendor_repo = VendorRepository(session)
        self.license_service = LicenseService(session)

    async def get_inspector(self, user_id: UUID) -> InspectorORM:
        """Get the inspector record of a user.

        Raises:
            InspectorNotFoundError: If the user has no inspector record
        """
        inspector = await self.inspector_repo.get_by_user(user_id)
        if inspector is None:
            raise InspectorNotFoundError()
        return inspector

    async def _check_station(self, user: CurrentUser, license_orm: LicenseORM) -> InspectorORM | None:
        """Restrict inspectors to their own station's licenses."""
        if user.is_admin():
            return None
        inspector = await self.get_inspector(user.id)
        if inspector.station_id != license_orm.station_id:
            raise ForbiddenError("License belongs to another station")
        return inspector

    async def scan(
        self,
        user: CurrentUser,
        license_number: str | None = None,
        qr: str | None = None,
    ) -> ScanResponse:
        """Look up everything about a license from its number or QR code.

        Raises:
            ValidationError: If no reference is given
            LicenseNotFoundError: If the license does not exist
            ForbiddenError: If an inspector scans another station's license
        """
        number = parse_license_reference(license_number, qr)
        license_orm = await self.license_service.get_by_number(number)
        await self._check_station(user, license_orm)

        application = None
        if license_orm.application_id:
            application = await self.application_repo.get_by_id(license_orm.application_id)

        agreement = await self.agreement_repo.get_by_license(license_orm.id)
        if agreement is None and license_orm.application_id:
            agreement = await self.agreement_repo.get_by_application(license_orm.application_id)

        payments = await self.payment_repo.list_filtered(license_id=license_orm.id)
        if not payments:
            payments = await self.payment_repo.list_filtered(
                vendor_id=license_orm.vendor_id, station_id=license_orm.station_id
            )
        now = utcnow()
        for payment in payments:
            refresh_status(payment, now)
        await self.session.flush()

        vendor_user = await self.user_repo.get_by_id(license_orm.vendor_id)
        vendor_profile = await self.vendor_repo.get_by_user_id(license_orm.vendor_id)
        vendor = None
        if vendor_user is not None:
            vendor = {
                "id": str(vendor_user.id),
                "name": vendor_user.name,
                "email": vendor_user.email,
                "phone": vendor_user.phone,
                "photo_url": vendor_user.photo_url,
                "business_name": vendor_profile.business_name if vendor_profile else None,
                "business_type": vendor_profile.business_type if vendor_profile else None,
            }

        open_payments = [p for p in payments if p.status not in CLOSED_PAYMENT_STATUSES]
        summary = ScanSummary(
            total_due=float(sum((p.balance for p in open_payments), Decimal("0"))),
            total_paid=float(sum((Decimal(p.paid_amount or 0) for p in payments), Decimal("0"))),
            overdue_count=sum(1 for p in payments if p.status == PaymentStatus.OVERDUE),
            is_valid=is_license_valid(license_orm, now),
            days_to_expiry=days_to_expiry(license_orm, now),
        )
        logger.info(f"License {license_orm.license_number} scanned by {user.id}")
        return ScanResponse(
            license=build_license_response(license_orm),
            application=build_application_response(application) if application else None,
            agreement=AgreementResponse.model_validate(agreement) if agreement else None,
            payments=[build_payment_response(p) for p in payments],
            vendor=vendor,
            summary=summary,
        )

    async def log_inspection(self, user: CurrentUser, data: InspectionRequest) -> InspectionResponse:
        """Log an inspection against a valid license.

        Raises:
            ValidationError: If the compliance status is unknown
            LicenseNotFoundError: If the license does not exist
            BadRequestError: If the license is not APPROVED or ACTIVE
        """
        compliance = parse_compliance_status(data.compliance_status)
        license_orm = await self.license_service.get_by_number(data.license_number)
        inspector = await self._check_station(user, license_orm)
        if license_orm.status not in VALID_LICENSE_STATUSES:
            raise BadRequestError("Can only inspect approved licenses")

        now = utcnow()
        entry = {
            "inspector_id": str(user.id),
            "inspector_name": user.name,
            "inspection_date": iso(now),
            "notes": data.notes,
            "compliance_status": compliance.value,
        }
        # JSON columns only detect reassignment
        license_orm.inspection_logs = [*(license_orm.inspection_logs or []), entry]
        license_orm.last_inspection_date = now
        license_orm.compliance_status = compliance.value
        if inspector is not None:
            inspector.total_inspections += 1
        await self.session.flush()

        logger.info(f"Inspection of {license_orm.license_number} by {user.id}: {compliance.value}")
        return InspectionResponse(
            license_id=license_orm.id,
            license_number=license_orm.license_number,
            shop_id=license_orm.shop_id,
            shop_name=license_orm.shop_name,
            station_id=license_orm.station_id,
            inspector_id=entry["inspector_id"],
            inspector_name=user.name,
            inspection_date=now,
            notes=data.notes,
            compliance_status=compliance.value,
        )

    async def list_my_inspections(self, user: CurrentUser) -> InspectionListResponse:
        """Inspections logged by the user, newest first."""
        inspector = await self.get_inspector(user.id)
        licenses = await self.license_repo.list_inspected(inspector.station_id)
        inspector_id = str(user.id)

        inspections = [
            InspectionResponse(
                license_id=license_orm.id,
                license_number=license_orm.license_number,
                shop_id=license_orm.shop_id,
                shop_name=license_orm.shop_name,
                station_id=license_orm.station_id,
                inspector_id=entry["inspector_id"],
                inspector_name=entry.get("inspector_name") or user.name,
                inspection_date=entry["inspection_date"],
                notes=entry.get("notes"),
                compliance_status=entry["compliance_status"],
            )
            for license_orm in licenses
            for entry in license_orm.inspection_logs or []
            if entry.get("inspector_id") == inspector_id
        ]
        inspections.sort(key=lambda i: i.inspection_date, reverse=True)
        return InspectionListResponse(inspections=inspections, total=len(inspections))

    async def get_stats(self, user: CurrentUser) -> InspectorStatsResponse:
        """Compliance figures for the inspector's station."""
        inspector = await self.get_inspector(user.id)
        active = await self.license_repo.list_valid(inspector.station_id)
        recent = await self.license_repo.list_inspected(inspector.station_id, RECENT_INSPECTIONS_LIMIT)
        return InspectorStatsResponse(
            total_active_licenses=len(active),
            compliant=sum(1 for lic in active if lic.compliance_status == ComplianceStatus.COMPLIANT),
            non_compliant=sum(1 for lic in active if lic.compliance_status == ComplianceStatus.NON_COMPLIANT),
            requires_attention=sum(
                1 for lic in active if lic.compliance_status == ComplianceStatus.REQUIRES_ATTENTION
            ),
            my_total_inspections=inspector.total_inspections,
            recent_inspections=[build_license_response(lic) for lic in recent],
        )
