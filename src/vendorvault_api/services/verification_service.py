"""Vendor verification status, profile completion and risk assessment."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from vendorvault_api.constants.validation import LOW_TURNOVER_THRESHOLD, PROFILE_COMPLETION_WEIGHTS
from vendorvault_api.exceptions import (
    ForbiddenError,
    UserNotFoundError,
    VerificationSectionNotFoundError,
)
from vendorvault_api.models.domain.application import RiskLevel
from vendorvault_api.models.domain.document import (
    BusinessCategory,
    SectionStatus,
    VerificationSection,
    VerificationType,
)
from vendorvault_api.models.domain.notification import NotificationType
from vendorvault_api.models.domain.user import CurrentUser, UserRole
from vendorvault_api.models.dto.vendor import (
    CanApplyResponse,
    SectionStatusEntry,
    VendorVerificationRequest,
    VerificationStatusResponse,
)
from vendorvault_api.models.orm.user import UserORM
from vendorvault_api.models.orm.vendor import VerificationSectionORM
from vendorvault_api.repositories.application_repository import ApplicationRepository
from vendorvault_api.repositories.user_repository import UserRepository
from vendorvault_api.repositories.vendor_repository import VerificationSectionRepository
from vendorvault_api.services.notification_service import NotificationService
from vendorvault_api.utils.dates import utcnow

logger = logging.getLogger(__name__)

PERSONAL = "personal"

# Order in which sections are reported
STATUS_SECTIONS: tuple[str, ...] = (
    PERSONAL,
    "bank",
    "business",
    "food_license",
    "police",
    "financial",
    "railway_declaration",
)

NEXT_STEP_COMPLETE = "Complete all sections"
NEXT_STEP_WAIT = "Wait for verification"
NEXT_STEP_APPLY = "You can now apply for shops!"


def is_food_business(sections: dict[str, VerificationSectionORM]) -> bool:
    """Check whether the vendor's business section declares the FOOD category."""
    business = sections.get(VerificationSection.BUSINESS)
    if business is None:
        return False
    return (business.data or {}).get("business_category") == BusinessCategory.FOOD


def build_verification_status(
    user: UserORM,
    sections: dict[str, VerificationSectionORM],
) -> VerificationStatusResponse:
    """Aggregate the verification state of every profile section.

    Args:
        user: Vendor user, carrying the personal identity fields
        sections: Submitted sections keyed by section name

    Returns:
        VerificationStatusResponse
    """
    food = is_food_business(sections)
    entries: dict[str, SectionStatusEntry] = {}

    personal_submitted = bool(user.aadhaar_number and user.pan_number)
    personal_verified = personal_submitted and user.aadhaar_verified and user.pan_verified
    entries[PERSONAL] = _entry(personal_submitted, personal_verified, None)

    for name in STATUS_SECTIONS[1:]:
        if name == "food_license" and not food:
            entries[name] = SectionStatusEntry(
                status=SectionStatus.NOT_REQUIRED, submitted=False, verified=False
            )
            continue
        row = sections.get(name.upper())
        entries[name] = _entry(row is not None, bool(row and row.verified), row.rejection_reason if row else None)

    required = [entry for entry in entries.values() if entry.status != SectionStatus.NOT_REQUIRED]
    total = len(required)
    completed = sum(1 for entry in required if entry.submitted)
    verified = sum(1 for entry in required if entry.verified)
    all_submitted = completed == total
    all_verified = verified == total

    if all_verified:
        next_step = NEXT_STEP_APPLY
    elif all_submitted:
        next_step = NEXT_STEP_WAIT
    else:
        next_step = NEXT_STEP_COMPLETE

    return VerificationStatusResponse(
        sections=entries,
        total_required=total,
        completed_count=completed,
        verified_count=verified,
        completion_percentage=round(completed / total * 100),
        verification_percentage=round(verified / total * 100),
        all_submitted=all_submitted,
        all_verified=all_verified,
        can_apply=all_verified,
        next_step=next_step,
    )


def _entry(submitted: bool, verified: bool, rejection_reason: str | None) -> SectionStatusEntry:
    if verified:
        status = SectionStatus.VERIFIED
    elif submitted:
        status = SectionStatus.PENDING
    else:
        status = SectionStatus.INCOMPLETE
    return SectionStatusEntry(
        status=status,
        submitted=submitted,
        verified=verified,
        rejection_reason=rejection_reason,
    )


def compute_profile_completion(user: UserORM, sections: dict[str, VerificationSectionORM]) -> int:
    """Weighted percentage of submitted profile sections.

    FOOD_LICENSE only counts towards the total for FOOD businesses.
    """
    food = is_food_business(sections)
    total = 0
    completed = 0
    for name, weight in PROFILE_COMPLETION_WEIGHTS.items():
        if name == VerificationSection.FOOD_LICENSE and not food:
            continue
        total += weight
        if name == "PERSONAL":
            done = bool(user.aadhaar_number and user.pan_number)
        else:
            done = name in sections
        if done:
            completed += weight
    return round(completed / total * 100) if total else 0


def _decimal(value: Any) -> Decimal | None:
    if value is None:
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return None


def assess_risk(sections: dict[str, VerificationSectionORM], fully_verified: bool) -> RiskLevel:
    """Score a vendor's application risk.

    Adds 2 for under a year of experience, 1 for a low annual turnover, 2
    when the deposit cannot be paid and 1 for incomplete verification.
    Missing data counts against the vendor.

    Returns:
        LOW for a score of at most 1, MEDIUM up to 3, otherwise HIGH
    """
    business = sections.get(VerificationSection.BUSINESS)
    financial = sections.get(VerificationSection.FINANCIAL)
    business_data = business.data if business else {}
    financial_data = financial.data if financial else {}

    score = 0
    if int(business_data.get("years_of_experience") or 0) < 1:
        score += 2
    turnover = _decimal(financial_data.get("annual_turnover"))
    if turnover is None or turnover < LOW_TURNOVER_THRESHOLD:
        score += 1
    if not financial_data.get("can_pay_security_deposit", False):
        score += 2
    if not fully_verified:
        score += 1

    if score <= 1:
        return RiskLevel.LOW
    if score <= 3:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


class VerificationService:
    """Service for reading and deciding vendor verification."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.user_repo = UserRepository(session)
        self.section_repo = VerificationSectionRepository(session)
        self.application_repo = ApplicationRepository(session)
        self.notification_service = NotificationService(session)

    async def _load(self, vendor_id: UUID) -> tuple[UserORM, dict[str, VerificationSectionORM]]:
        user = await self.user_repo.get_by_id(vendor_id)
        if user is None or user.role != UserRole.VENDOR:
            raise UserNotFoundError(str(vendor_id))
        sections = await self.section_repo.get_for_vendor(vendor_id)
        return user, sections

    async def get_status(self, vendor_id: UUID) -> VerificationStatusResponse:
        """Get the aggregated verification status of a vendor."""
        user, sections = await self._load(vendor_id)
        return build_verification_status(user, sections)

    async def can_apply(self, vendor_id: UUID) -> CanApplyResponse:
        """Check whether a vendor may apply, listing unverified sections."""
        status = await self.get_status(vendor_id)
        missing = [
            name
            for name, entry in status.sections.items()
            if entry.status not in (SectionStatus.VERIFIED, SectionStatus.NOT_REQUIRED)
        ]
        return CanApplyResponse(can_apply=status.can_apply, missing=missing)

    async def assess_vendor_risk(self, vendor_id: UUID) -> RiskLevel:
        """Risk level of a vendor from their submitted sections."""
        user, sections = await self._load(vendor_id)
        status = build_verification_status(user, sections)
        return assess_risk(sections, status.all_verified)

    async def verify_item(
        self,
        data: VendorVerificationRequest,
        reviewer: CurrentUser,
        station_id: UUID | None = None,
    ) -> VerificationStatusResponse:
        """Verify or reject one item of a vendor's profile.

        Args:
            data: Verification decision
            reviewer: Station manager or admin deciding
            station_id: When set, the vendor must have applied to this station

        Returns:
            The vendor's updated verification status

        Raises:
            ForbiddenError: If the vendor never applied to the station
            VerificationSectionNotFoundError: If the item was never submitted
        """
        if station_id is not None and not await self.application_repo.vendor_applied_to_station(
            data.vendor_id, station_id
        ):
            raise ForbiddenError("Vendor has not applied to your station")

        user, sections = await self._load(data.vendor_id)
        verification_type = VerificationType(data.verification_type)

        if verification_type in (VerificationType.AADHAAR, VerificationType.PAN):
            field = f"{verification_type.value}_number"
            if not getattr(user, field):
                raise VerificationSectionNotFoundError(verification_type.value)
            await self.user_repo.update(user, **{f"{verification_type.value}_verified": data.verified})
        else:
            section = sections.get(verification_type.value.upper())
            if section is None:
                raise VerificationSectionNotFoundError(verification_type.value)
            section.verified = data.verified
            section.verified_by = reviewer.id
            section.verified_at = utcnow()
            section.rejection_reason = None if data.verified else data.notes
            await self.session.flush()

        label = verification_type.value.replace("_", " ")
        if data.verified:
            await self.notification_service.notify(
                user.id,
                NotificationType.DOCUMENT_VERIFIED,
                "Verification Approved",
                f"Your {label} details have been verified.",
                action_url="/vendor/profile",
                metadata={"verification_type": verification_type.value},
            )
        else:
            reason = f" Reason: {data.notes}" if data.notes else ""
            await self.notification_service.notify(
                user.id,
                NotificationType.DOCUMENT_REJECTED,
                "Verification Rejected",
                f"Your {label} details were rejected.{reason}",
                action_url="/vendor/profile",
                metadata={"verification_type": verification_type.value},
            )

        logger.info(
            f"Vendor {user.id} {verification_type.value} "
            f"{'verified' if data.verified else 'rejected'} by {reviewer.id}"
        )
        user, sections = await self._load(data.vendor_id)
        return build_verification_status(user, sections)
