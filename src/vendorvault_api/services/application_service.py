"""Shop application service."""

import logging
from datetime import timedelta
from decimal import Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from vendorvault_api.constants.validation import APPLICATION_TERM_DAYS, SECURITY_DEPOSIT_MONTHS
from vendorvault_api.exceptions import (
    ApplicationNotFoundError,
    InvalidStatusTransitionError,
    MissingFieldsError,
    StationNotFoundError,
    ValidationError,
)
from vendorvault_api.models.domain.application import (
    OPEN_APPLICATION_STATUSES,
    ApplicationStatus,
)
from vendorvault_api.models.domain.negotiation import NegotiationStatus
from vendorvault_api.models.domain.notification import NotificationType
from vendorvault_api.models.domain.user import CurrentUser
from vendorvault_api.models.dto.admin import ApplicationDetailResponse
from vendorvault_api.models.dto.application import (
    ApplicationListResponse,
    ApplicationResponse,
    ApplyRequest,
    ApplyResponse,
)
from vendorvault_api.models.dto.document import DocumentResponse
from vendorvault_api.models.dto.negotiation import NegotiationSummary
from vendorvault_api.models.orm.application import ShopApplicationORM
from vendorvault_api.repositories.application_repository import ApplicationRepository
from vendorvault_api.repositories.document_repository import DocumentRepository
from vendorvault_api.repositories.negotiation_repository import NegotiationRepository
from vendorvault_api.repositories.station_repository import StationRepository
from vendorvault_api.repositories.user_repository import UserRepository
from vendorvault_api.repositories.vendor_repository import VendorRepository
from vendorvault_api.services.notification_service import NotificationService
from vendorvault_api.services.verification_service import VerificationService
from vendorvault_api.utils.dates import iso, utcnow
from vendorvault_api.utils.pagination import build_pagination, clamp_page, offset_for

logger = logging.getLogger(__name__)

APPLY_REQUIRED_FIELDS = ("station_code", "platform_number", "shop_id", "shop_name", "proposed_monthly_rent")


def record_status(
    application: ShopApplicationORM,
    status: ApplicationStatus,
    changed_by: UUID | None,
    reason: str | None = None,
) -> None:
    """Set an application's status and append it to the status history."""
    application.status = status.value
    # JSON columns only detect reassignment
    application.status_history = [
        *(application.status_history or []),
        {
            "status": status.value,
            "changed_by": str(changed_by) if changed_by else None,
            "changed_at": iso(utcnow()),
            "reason": reason,
        },
    ]


def build_application_response(application: ShopApplicationORM) -> ApplicationResponse:
    """Build response from ORM model."""
    station = application.station
    return ApplicationResponse(
        id=application.id,
        vendor_id=application.vendor_id,
        station_id=application.station_id,
        station_code=station.station_code if station else None,
        station_name=station.station_name if station else None,
        shop_id=application.shop_id,
        shop_name=application.shop_name,
        platform_number=application.platform_number,
        quoted_rent=float(application.quoted_rent),
        security_deposit=float(application.security_deposit),
        proposed_start_date=application.proposed_start_date,
        proposed_end_date=application.proposed_end_date,
        status=ApplicationStatus(application.status),
        risk_level=application.risk_level,
        status_history=application.status_history or [],
        submitted_at=application.submitted_at,
        approved_at=application.approved_at,
        rejected_at=application.rejected_at,
        rejection_reason=application.rejection_reason,
        final_agreed_rent=float(application.final_agreed_rent) if application.final_agreed_rent is not None else None,
        final_security_deposit=(
            float(application.final_security_deposit)
            if application.final_security_deposit is not None
            else None
        ),
        license_number=application.license_number,
        license_issued_at=application.license_issued_at,
        license_expires_at=application.license_expires_at,
        created_at=application.created_at,
    )


class ApplicationService:
    """Service for shop applications."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.repo = ApplicationRepository(session)
        self.station_repo = StationRepository(session)
        self.vendor_repo = VendorRepository(session)
        self.user_repo = UserRepository(session)
        self.document_repo = DocumentRepository(session)
        self.negotiation_repo = NegotiationRepository(session)
        self.verification_service = VerificationService(session)
        self.notification_service = NotificationService(session)

    # =========================================================================
    # Vendor side
    # =========================================================================

    async def apply(self, user: CurrentUser, data: ApplyRequest) -> tuple[ApplyResponse, bool]:
        """Submit an application for a shop slot.

        An open or approved application by the same vendor for the same shop
        is returned instead of creating a duplicate.

        Args:
            user: Applying vendor
            data: Application data

        Returns:
            Tuple of (response, created flag)

        Raises:
            MissingFieldsError: If any required field is absent
            StationNotFoundError: If the station code is unknown
        """
        missing = [field for field in APPLY_REQUIRED_FIELDS if not getattr(data, field)]
        if missing:
            raise MissingFieldsError(missing)

        station = await self.station_repo.get_by_code(data.station_code)
        if station is None:
            raise StationNotFoundError(data.station_code)

        existing = await self.repo.find_blocking(user.id, station.id, data.shop_id)
        if existing is not None:
            return (
                ApplyResponse(
                    message="You already have an application for this shop",
                    application_id=existing.id,
                    status=ApplicationStatus(existing.status),
                    created=False,
                ),
                False,
            )

        now = utcnow()
        rent: Decimal = data.proposed_monthly_rent
        risk_level = await self.verification_service.assess_vendor_risk(user.id)
        application = ShopApplicationORM(
            vendor_id=user.id,
            station_id=station.id,
            shop_id=data.shop_id,
            shop_name=data.shop_name,
            platform_number=data.platform_number,
            quoted_rent=rent,
            security_deposit=rent * SECURITY_DEPOSIT_MONTHS,
            proposed_start_date=now,
            proposed_end_date=now + timedelta(days=APPLICATION_TERM_DAYS),
            submitted_at=now,
            risk_level=risk_level.value,
        )
        record_status(application, ApplicationStatus.SUBMITTED, user.id, "Application submitted")
        self.session.add(application)
        await self.session.flush()

        await self._sync_vendor_station(user, station.station_code, station.station_name, data)

        if station.station_manager_id:
            await self.notification_service.notify(
                station.station_manager_id,
                NotificationType.APPLICATION_SUBMITTED,
                "New Vendor Application",
                f"{user.name} applied for shop {data.shop_name} ({data.shop_id}) "
                f"on platform {data.platform_number}.",
                action_url=f"/station-manager/applications/{application.id}",
                metadata={"application_id": str(application.id), "risk_level": risk_level.value},
            )

        logger.info(f"Application {application.id} submitted for station {station.station_code}")
        return (
            ApplyResponse(
                message="Application submitted successfully",
                application_id=application.id,
                status=ApplicationStatus.SUBMITTED,
                created=True,
            ),
            True,
        )

    async def _sync_vendor_station(
        self,
        user: CurrentUser,
        station_code: str,
        station_name: str,
        data: ApplyRequest,
    ) -> None:
        fields = {
            "station_code": station_code,
            "station_name": station_name,
            "platform_number": data.platform_number,
            "shop_number": data.shop_id,
        }
        vendor = await self.vendor_repo.get_by_user_id(user.id)
        if vendor is None:
            await self.vendor_repo.create(
                user_id=user.id,
                business_name=data.shop_name,
                owner_name=user.name,
                **fields,
            )
        else:
            await self.vendor_repo.update(vendor, **fields)

    async def list_applications(
        self,
        vendor_id: UUID | None = None,
        station_id: UUID | None = None,
        status: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> ApplicationListResponse:
        """List applications, newest first, with pagination."""
        if status:
            try:
                status = ApplicationStatus(status.upper()).value
            except ValueError as e:
                raise ValidationError("Invalid application status", field="status") from e
        page, limit = clamp_page(page, limit)
        applications, total = await self.repo.list_filtered(
            vendor_id=vendor_id,
            station_id=station_id,
            status=status,
            offset=offset_for(page, limit),
            limit=limit,
        )
        return ApplicationListResponse(
            applications=[build_application_response(a) for a in applications],
            pagination=build_pagination(page, limit, total),
        )

    async def get_vendor_application(self, application_id: UUID, vendor_id: UUID) -> ApplicationResponse:
        """Get one of the vendor's own applications.

        Raises:
            ApplicationNotFoundError: If it does not exist or belongs to someone else
        """
        application = await self.repo.get_for_vendor(application_id, vendor_id)
        if application is None:
            raise ApplicationNotFoundError(str(application_id))
        return build_application_response(application)

    async def update_shop_name(self, application_id: UUID, vendor_id: UUID, shop_name: str) -> ApplicationResponse:
        """Rename the shop of an open application.

        Raises:
            InvalidStatusTransitionError: If the application is no longer open
        """
        application = await self.repo.get_for_vendor(application_id, vendor_id)
        if application is None:
            raise ApplicationNotFoundError(str(application_id))
        if application.status not in OPEN_APPLICATION_STATUSES:
            raise InvalidStatusTransitionError("application", application.status, "rename the shop of")
        application = await self.repo.update(application, shop_name=shop_name.strip())
        return build_application_response(application)

    # =========================================================================
    # Station manager side
    # =========================================================================

    async def get_station_application(self, application_id: UUID, station_id: UUID) -> ShopApplicationORM:
        """Get an application of the station.

        Raises:
            ApplicationNotFoundError: If it does not exist or targets another station
        """
        application = await self.repo.get_for_station(application_id, station_id)
        if application is None:
            raise ApplicationNotFoundError(str(application_id))
        return application

    async def get_application_detail(self, application_id: UUID, station_id: UUID) -> ApplicationDetailResponse:
        """Application with vendor, documents, verification and negotiation state."""
        application = await self.get_station_application(application_id, station_id)
        vendor_user = await self.user_repo.get_by_id(application.vendor_id)
        vendor_profile = await self.vendor_repo.get_by_user_id(application.vendor_id)
        documents = await self.document_repo.list_for_vendor(application.vendor_id)
        verification = await self.verification_service.get_status(application.vendor_id)
        room = await self.negotiation_repo.get_by_application(application.id)

        vendor = {
            "id": str(application.vendor_id),
            "name": vendor_user.name if vendor_user else None,
            "email": vendor_user.email if vendor_user else None,
            "phone": vendor_user.phone if vendor_user else None,
            "business_name": vendor_profile.business_name if vendor_profile else None,
            "business_type": vendor_profile.business_type if vendor_profile else None,
            "profile_completion": vendor_user.profile_completion if vendor_user else 0,
        }
        negotiation = None
        if room is not None:
            negotiation = NegotiationSummary(
                status=NegotiationStatus(room.status),
                current_offer=room.current_offer or {},
                counter_offer_count=room.counter_offer_count,
                message_count=len(room.messages or []),
                final_agreement=room.final_agreement,
            )
        return ApplicationDetailResponse(
            application=build_application_response(application),
            vendor=vendor,
            documents=[DocumentResponse.model_validate(d) for d in documents],
            verification_status=verification,
            negotiation=negotiation,
        )

    async def reject(
        self,
        application_id: UUID,
        station_id: UUID,
        reason: str | None,
        manager: CurrentUser,
    ) -> ApplicationResponse:
        """Reject an open application.

        Raises:
            ValidationError: If no reason is given
            InvalidStatusTransitionError: If the application is not open
        """
        if not reason or not reason.strip():
            raise ValidationError("Rejection reason is required", field="rejection_reason")
        application = await self.get_station_application(application_id, station_id)
        if application.status not in OPEN_APPLICATION_STATUSES:
            raise InvalidStatusTransitionError("application", application.status, "reject")

        await self.reject_application(application, reason.strip(), manager.id)
        await self.session.flush()
        logger.info(f"Application {application.id} rejected by {manager.id}")
        return build_application_response(application)

    async def reject_application(
        self,
        application: ShopApplicationORM,
        reason: str,
        rejected_by: UUID | None,
    ) -> None:
        """Mark an application rejected, cancel its negotiation and tell the vendor."""
        now = utcnow()
        record_status(application, ApplicationStatus.REJECTED, rejected_by, reason)
        application.rejected_at = now
        application.rejected_by = rejected_by
        application.rejection_reason = reason

        room = await self.negotiation_repo.get_by_application(application.id)
        if room is not None and room.status == NegotiationStatus.ACTIVE:
            room.status = NegotiationStatus.CANCELLED.value
            room.last_activity_at = now
        await self.session.flush()

        await self.notification_service.notify(
            application.vendor_id,
            NotificationType.APPLICATION_REJECTED,
            "Application Rejected",
            f"Your application for shop {application.shop_name or application.shop_id} was rejected. "
            f"Reason: {reason}",
            action_url=f"/vendor/applications/{application.id}",
            metadata={"application_id": str(application.id)},
        )
