"""License issuance, renewal, verification and expiry."""

import base64
import io
import logging
import secrets
import time
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any
from uuid import UUID

import qrcode
from sqlalchemy.ext.asyncio import AsyncSession

from vendorvault_api.config import get_settings
from vendorvault_api.constants.validation import (
    DEFAULT_LICENSE_VALIDITY_MONTHS,
    LICENSE_EXPIRY_WARNING_DAYS,
    LICENSE_NUMBER_PREFIX,
)
from vendorvault_api.exceptions import (
    BadRequestError,
    InvalidStatusTransitionError,
    LicenseNotFoundError,
    ValidationError,
)
from vendorvault_api.models.domain.license import (
    RENEWABLE_LICENSE_STATUSES,
    VALID_LICENSE_STATUSES,
    ComplianceStatus,
    LicenseAction,
    LicenseStatus,
    LicenseType,
)
from vendorvault_api.models.domain.notification import NotificationType
from vendorvault_api.models.domain.user import STAFF_ROLES, CurrentUser
from vendorvault_api.models.dto.license import (
    LicenseActionRequest,
    LicenseListResponse,
    LicenseResponse,
    VerifyLicenseResponse,
)
from vendorvault_api.models.orm.license import LicenseORM
from vendorvault_api.repositories.license_repository import LicenseRepository
from vendorvault_api.repositories.user_repository import UserRepository
from vendorvault_api.repositories.vendor_repository import VendorRepository
from vendorvault_api.services.notification_service import NotificationService
from vendorvault_api.utils.dates import ensure_utc, iso, utcnow
from vendorvault_api.utils.pagination import build_pagination, clamp_page, offset_for

logger = logging.getLogger(__name__)

MAX_NUMBER_ATTEMPTS = 10


def verification_url(license_number: str) -> str:
    """Public verification URL encoded in a license QR code."""
    base = get_settings().public_base_url.rstrip("/")
    return f"{base}/verify/{license_number}"


def generate_qr_data_uri(payload: str) -> str:
    """Render a QR code as a PNG data URI.

    Args:
        payload: Text to encode

    Returns:
        Data URI string (data:image/png;base64,...)
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    qr.add_data(payload)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode("utf-8")
    return f"data:image/png;base64,{encoded}"


def build_qr(license_number: str) -> tuple[str, dict[str, Any]]:
    """QR data URI and metadata for a license number."""
    url = verification_url(license_number)
    metadata = {
        "license_number": license_number,
        "generated_at": iso(utcnow()),
        "verification_url": url,
    }
    return generate_qr_data_uri(url), metadata


def is_license_valid(license_orm: LicenseORM, now: datetime | None = None) -> bool:
    """Check whether a license currently grants the right to trade."""
    if license_orm.status not in VALID_LICENSE_STATUSES:
        return False
    if license_orm.expires_at is None:
        return True
    return ensure_utc(license_orm.expires_at) > (now or utcnow())


def days_to_expiry(license_orm: LicenseORM, now: datetime | None = None) -> int | None:
    """Whole days until expiry, negative once expired."""
    if license_orm.expires_at is None:
        return None
    return (ensure_utc(license_orm.expires_at) - (now or utcnow())).days


def build_license_response(license_orm: LicenseORM) -> LicenseResponse:
    """Build response from ORM model."""
    station = license_orm.station
    return LicenseResponse(
        id=license_orm.id,
        license_number=license_orm.license_number,
        vendor_id=license_orm.vendor_id,
        application_id=license_orm.application_id,
        station_id=license_orm.station_id,
        station_code=station.station_code if station else None,
        station_name=station.station_name if station else None,
        shop_id=license_orm.shop_id,
        shop_name=license_orm.shop_name,
        status=LicenseStatus(license_orm.status),
        compliance_status=ComplianceStatus(license_orm.compliance_status),
        license_type=LicenseType(license_orm.license_type),
        monthly_rent=float(license_orm.monthly_rent),
        security_deposit=float(license_orm.security_deposit),
        validity_period_months=license_orm.validity_period_months,
        renewal_eligible=license_orm.renewal_eligible,
        issued_at=license_orm.issued_at,
        expires_at=license_orm.expires_at,
        approved_at=license_orm.approved_at,
        revocation_reason=license_orm.revocation_reason,
        renewed_from_id=license_orm.renewed_from_id,
        qr_code_data=license_orm.qr_code_data,
        qr_code_metadata=license_orm.qr_code_metadata,
        inspection_logs=license_orm.inspection_logs or [],
        last_inspection_date=license_orm.last_inspection_date,
        created_at=license_orm.created_at,
    )


class LicenseService:
    """Service for vendor licenses."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.repo = LicenseRepository(session)
        self.user_repo = UserRepository(session)
        self.vendor_repo = VendorRepository(session)
        self.notification_service = NotificationService(session)

    async def generate_license_number(self) -> str:
        """Generate a unique license number.

        Format is RVL{year}{last 6 digits of ms timestamp}{3 random digits},
        regenerated until no existing license uses it.

        Raises:
            BadRequestError: If no free number was found
        """
        year = utcnow().year
        for _ in range(MAX_NUMBER_ATTEMPTS):
            stamp = int(time.time() * 1000) % 1_000_000
            number = f"{LICENSE_NUMBER_PREFIX}{year}{stamp:06d}{secrets.randbelow(1000):03d}"
            if not await self.repo.number_exists(number):
                return number
        raise BadRequestError("Could not generate a unique license number")

    async def issue_license(
        self,
        *,
        vendor_id: UUID,
        station_id: UUID,
        application_id: UUID | None,
        shop_id: str | None,
        shop_name: str | None,
        monthly_rent: Decimal,
        security_deposit: Decimal,
        status: LicenseStatus,
        license_type: LicenseType,
        validity_months: int = DEFAULT_LICENSE_VALIDITY_MONTHS,
        issued_at: datetime | None = None,
        expires_at: datetime | None = None,
        approved_by: UUID | None = None,
        renewed_from_id: UUID | None = None,
    ) -> LicenseORM:
        """Create a license with a fresh number and QR code."""
        number = await self.generate_license_number()
        qr_data, qr_metadata = build_qr(number)
        license_orm = await self.repo.create(
            license_number=number,
            vendor_id=vendor_id,
            station_id=station_id,
            application_id=application_id,
            shop_id=shop_id,
            shop_name=shop_name,
            status=status.value,
            compliance_status=ComplianceStatus.COMPLIANT.value,
            license_type=license_type.value,
            monthly_rent=monthly_rent,
            security_deposit=security_deposit,
            validity_period_months=validity_months,
            renewal_eligible=True,
            issued_at=issued_at,
            expires_at=expires_at,
            approved_by=approved_by,
            approved_at=issued_at if approved_by else None,
            renewed_from_id=renewed_from_id,
            qr_code_data=qr_data,
            qr_code_metadata=qr_metadata,
            inspection_logs=[],
        )
        logger.info(f"Issued license {number} ({status.value}) for vendor {vendor_id}")
        return license_orm

    async def list_vendor_licenses(self, vendor_id: UUID) -> LicenseListResponse:
        """List the vendor's licenses, newest first."""
        licenses = await self.repo.list_for_vendor(vendor_id)
        return LicenseListResponse(licenses=[build_license_response(lic) for lic in licenses])

    async def renew(self, license_id: UUID, vendor: CurrentUser) -> LicenseResponse:
        """Request renewal of one of the vendor's licenses.

        Creates a PENDING TEMPORARY license for the same shop and rent.

        Raises:
            LicenseNotFoundError: If the license is not the vendor's
            InvalidStatusTransitionError: If the license cannot be renewed
            BadRequestError: If a renewal is already pending
        """
        current = await self.repo.get_by_id(license_id)
        if current is None or current.vendor_id != vendor.id:
            raise LicenseNotFoundError(str(license_id))
        if current.status not in RENEWABLE_LICENSE_STATUSES:
            raise InvalidStatusTransitionError("license", current.status, "renew")
        if await self.repo.list_pending_for_vendor(vendor.id):
            raise BadRequestError("A license renewal is already pending")

        renewed = await self.issue_license(
            vendor_id=vendor.id,
            station_id=current.station_id,
            application_id=current.application_id,
            shop_id=current.shop_id,
            shop_name=current.shop_name,
            monthly_rent=current.monthly_rent,
            security_deposit=current.security_deposit,
            status=LicenseStatus.PENDING,
            license_type=LicenseType.TEMPORARY,
            validity_months=current.validity_period_months,
            renewed_from_id=current.id,
        )

        await self.notification_service.notify(
            vendor.id,
            NotificationType.LICENSE_RENEWED,
            "License Renewal Requested",
            f"Renewal of license {current.license_number} was requested. "
            f"New license number: {renewed.license_number}.",
            action_url="/vendor/license",
            metadata={"license_id": str(renewed.id), "renewed_from": current.license_number},
        )
        return build_license_response(renewed)

    async def list_licenses(
        self,
        status: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> LicenseListResponse:
        """List all licenses for railway admins."""
        if status:
            try:
                status = LicenseStatus(status.upper()).value
            except ValueError as e:
                raise ValidationError("Invalid license status", field="status") from e
        page, limit = clamp_page(page, limit)
        licenses, total = await self.repo.list_filtered(
            status=status,
            offset=offset_for(page, limit),
            limit=limit,
        )
        return LicenseListResponse(
            licenses=[build_license_response(lic) for lic in licenses],
            pagination=build_pagination(page, limit, total),
        )

    async def apply_action(self, license_id: UUID, data: LicenseActionRequest, admin: CurrentUser) -> LicenseResponse:
        """Revoke or reactivate a license.

        Raises:
            LicenseNotFoundError: If the license does not exist
            ValidationError: If a revocation has no reason
        """
        license_orm = await self.repo.get_by_id(license_id)
        if license_orm is None:
            raise LicenseNotFoundError(str(license_id))

        if data.action == LicenseAction.REVOKE:
            if not data.reason or not data.reason.strip():
                raise ValidationError("Revocation reason is required", field="reason")
            license_orm = await self.repo.update(
                license_orm,
                status=LicenseStatus.REVOKED.value,
                revocation_reason=data.reason.strip(),
            )
        else:
            license_orm = await self.repo.update(
                license_orm,
                status=LicenseStatus.APPROVED.value,
                revocation_reason=None,
            )

        logger.info(f"License {license_orm.license_number} {data.action.value.lower()}d by {admin.id}")
        return build_license_response(license_orm)

    async def get_by_number(self, license_number: str) -> LicenseORM:
        """Get a license by number.

        Raises:
            LicenseNotFoundError: If no license has this number
        """
        license_orm = await self.repo.get_by_number(license_number.strip().upper())
        if license_orm is None:
            raise LicenseNotFoundError(license_number)
        return license_orm

    async def _expire(self, license_orm: LicenseORM) -> None:
        license_orm.status = LicenseStatus.EXPIRED.value
        await self.session.flush()

    async def verify_public(
        self,
        license_number: str,
        viewer: CurrentUser | None = None,
    ) -> VerifyLicenseResponse:
        """Public verification of a license.

        A valid license past its expiry date is marked EXPIRED on read. The
        vendor's phone number is only included for railway staff viewers.
        """
        license_orm = await self.get_by_number(license_number)
        now = utcnow()
        if (
            license_orm.status in VALID_LICENSE_STATUSES
            and license_orm.expires_at is not None
            and ensure_utc(license_orm.expires_at) <= now
        ):
            await self._expire(license_orm)
            logger.info(f"License {license_orm.license_number} expired on verification")

        user = await self.user_repo.get_by_id(license_orm.vendor_id)
        vendor = await self.vendor_repo.get_by_user_id(license_orm.vendor_id)
        station = license_orm.station
        return VerifyLicenseResponse(
            license_number=license_orm.license_number,
            status=LicenseStatus(license_orm.status),
            is_valid=is_license_valid(license_orm, now),
            vendor_name=user.name if user else None,
            vendor_phone=user.phone if user and viewer and viewer.role in STAFF_ROLES else None,
            business_name=vendor.business_name if vendor else None,
            station_name=station.station_name if station else None,
            station_code=station.station_code if station else None,
            shop_id=license_orm.shop_id,
            shop_name=license_orm.shop_name,
            issued_at=license_orm.issued_at,
            expires_at=license_orm.expires_at,
            compliance_status=ComplianceStatus(license_orm.compliance_status),
            last_inspection_date=license_orm.last_inspection_date,
        )

    # =========================================================================
    # Scheduled jobs
    # =========================================================================

    async def expire_overdue_licenses(self) -> int:
        """Expire valid licenses past their expiry date and notify vendors.

        Returns:
            Number of licenses expired
        """
        expired = await self.repo.list_valid_expired_before(utcnow())
        for license_orm in expired:
            await self._expire(license_orm)
            await self.notification_service.notify(
                license_orm.vendor_id,
                NotificationType.LICENSE_EXPIRED,
                "License Expired",
                f"Your license {license_orm.license_number} has expired. Please renew it to continue trading.",
                action_url="/vendor/license",
                metadata={"license_id": str(license_orm.id)},
            )
        return len(expired)

    async def warn_expiring_licenses(self, days: int = LICENSE_EXPIRY_WARNING_DAYS) -> int:
        """Notify vendors whose license expires within the warning window.

        Each license is warned once; the warning time is stamped on it.

        Returns:
            Number of vendors notified
        """
        now = utcnow()
        expiring = await self.repo.list_unwarned_expiring_between(now, now + timedelta(days=days))
        for license_orm in expiring:
            remaining = days_to_expiry(license_orm, now)
            await self.notification_service.notify(
                license_orm.vendor_id,
                NotificationType.SYSTEM_ANNOUNCEMENT,
                "License Expiring Soon",
                f"Your license {license_orm.license_number} expires in {remaining} days.",
                action_url="/vendor/license",
                metadata={"license_id": str(license_orm.id), "days_to_expiry": remaining},
            )
            license_orm.expiry_warning_sent_at = now
        await self.session.flush()
        return len(expiring)
