"""Vendor profile service."""

import logging
from uuid import UUID

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from vendorvault_api.exceptions import (
    UserNotFoundError,
    ValidationError,
    VendorProfileNotFoundError,
)
from vendorvault_api.models.domain.document import VerificationSection
from vendorvault_api.models.dto.vendor import (
    SECTION_PAYLOADS,
    CompleteProfileResponse,
    PersonalInfoUpdate,
    VendorProfileResponse,
    VendorProfileUpdate,
    VerificationSectionResponse,
)
from vendorvault_api.models.orm.user import UserORM
from vendorvault_api.repositories.user_repository import UserRepository
from vendorvault_api.repositories.vendor_repository import (
    VendorRepository,
    VerificationSectionRepository,
)
from vendorvault_api.services.verification_service import compute_profile_completion

logger = logging.getLogger(__name__)


def parse_section(section: str) -> VerificationSection:
    """Resolve a section path parameter, accepting any case and dashes.

    Raises:
        ValidationError: If the section is unknown
    """
    try:
        return VerificationSection(section.strip().upper().replace("-", "_"))
    except ValueError as e:
        allowed = ", ".join(s.value.lower() for s in VerificationSection)
        raise ValidationError(f"Unknown section. Must be one of: {allowed}", field="section") from e


class VendorService:
    """Service for vendor business profiles and verification sections."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.user_repo = UserRepository(session)
        self.vendor_repo = VendorRepository(session)
        self.section_repo = VerificationSectionRepository(session)

    async def _get_user(self, user_id: UUID) -> UserORM:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(str(user_id))
        return user

    async def get_profile(self, user_id: UUID) -> VendorProfileResponse:
        """Get the vendor's business profile.

        Raises:
            VendorProfileNotFoundError: If no profile exists yet
        """
        vendor = await self.vendor_repo.get_by_user_id(user_id)
        if vendor is None:
            raise VendorProfileNotFoundError()
        return VendorProfileResponse.model_validate(vendor)

    async def upsert_profile(self, user_id: UUID, data: VendorProfileUpdate) -> VendorProfileResponse:
        """Create or update the vendor's business profile.

        Raises:
            ValidationError: If a new profile has no business name
        """
        changes = {
            key: value.value if hasattr(value, "value") else value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None
        }
        if "station_code" in changes:
            changes["station_code"] = changes["station_code"].strip().upper()

        vendor = await self.vendor_repo.get_by_user_id(user_id)
        if vendor is None:
            if not changes.get("business_name"):
                raise ValidationError("Business name is required", field="business_name")
            user = await self._get_user(user_id)
            changes.setdefault("owner_name", user.name)
            vendor = await self.vendor_repo.create(user_id=user_id, **changes)
        elif changes:
            vendor = await self.vendor_repo.update(vendor, **changes)

        completed = bool(vendor.business_name and vendor.business_type)
        if vendor.profile_completed != completed:
            vendor = await self.vendor_repo.update(vendor, profile_completed=completed)
        return VendorProfileResponse.model_validate(vendor)

    async def update_personal(self, user_id: UUID, data: PersonalInfoUpdate) -> CompleteProfileResponse:
        """Update identity numbers and address.

        Changing an identity number clears its verified flag.
        """
        user = await self._get_user(user_id)
        changes: dict[str, object] = {}
        if data.aadhaar_number is not None and data.aadhaar_number != user.aadhaar_number:
            changes.update(aadhaar_number=data.aadhaar_number, aadhaar_verified=False)
        if data.pan_number is not None and data.pan_number != user.pan_number:
            changes.update(pan_number=data.pan_number, pan_verified=False)
        if data.address is not None:
            changes["address"] = data.address.strip() or None
        if data.photo_url is not None:
            changes["photo_url"] = data.photo_url
        if changes:
            await self.user_repo.update(user, **changes)
        return await self.get_complete_profile(user_id)

    async def upsert_section(
        self,
        user_id: UUID,
        section: str,
        payload: dict[str, object],
    ) -> VerificationSectionResponse:
        """Validate and store one verification section.

        A re-submission clears the verified flag and any rejection reason.

        Raises:
            ValidationError: If the section is unknown or the payload is invalid
        """
        section_enum = parse_section(section)
        model: type[BaseModel] = SECTION_PAYLOADS[section_enum]
        try:
            parsed = model.model_validate(payload)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ())) or None
            raise ValidationError(f"Invalid {section_enum.value.lower()} details: {first['msg']}", field=field) from e

        data = parsed.model_dump(mode="json")
        row = await self.section_repo.get_section(user_id, section_enum)
        if row is None:
            row = await self.section_repo.create(vendor_id=user_id, section=section_enum.value, data=data)
        else:
            row = await self.section_repo.update(
                row,
                data=data,
                verified=False,
                verified_at=None,
                verified_by=None,
                rejection_reason=None,
            )

        if section_enum == VerificationSection.BUSINESS:
            await self._sync_business_profile(user_id, data)
        await self._refresh_completion(user_id)
        logger.info(f"Vendor {user_id} submitted {section_enum.value} section")
        return VerificationSectionResponse.model_validate(row)

    async def _sync_business_profile(self, user_id: UUID, data: dict[str, object]) -> None:
        """Mirror the business section onto the vendor profile."""
        fields = {
            "business_name": data["business_name"],
            "business_type": data["business_type"],
            "gst_number": data.get("gst_number"),
            "profile_completed": True,
        }
        vendor = await self.vendor_repo.get_by_user_id(user_id)
        if vendor is None:
            user = await self._get_user(user_id)
            await self.vendor_repo.create(user_id=user_id, owner_name=user.name, **fields)
        else:
            await self.vendor_repo.update(vendor, **fields)

    async def _refresh_completion(self, user_id: UUID) -> int:
        user = await self._get_user(user_id)
        sections = await self.section_repo.get_for_vendor(user_id)
        completion = compute_profile_completion(user, sections)
        if user.profile_completion != completion:
            await self.user_repo.update(user, profile_completion=completion)
        return completion

    async def get_complete_profile(self, user_id: UUID) -> CompleteProfileResponse:
        """Get every profile section and persist the completion percentage."""
        completion = await self._refresh_completion(user_id)
        user = await self._get_user(user_id)
        sections = await self.section_repo.get_for_vendor(user_id)
        vendor = await self.vendor_repo.get_by_user_id(user_id)

        return CompleteProfileResponse(
            user_id=user.id,
            name=user.name,
            email=user.email,
            phone=user.phone,
            address=user.address,
            aadhaar_number=user.aadhaar_number,
            pan_number=user.pan_number,
            aadhaar_verified=user.aadhaar_verified,
            pan_verified=user.pan_verified,
            vendor=VendorProfileResponse.model_validate(vendor) if vendor else None,
            sections={
                s.value.lower(): (
                    VerificationSectionResponse.model_validate(sections[s.value])
                    if s.value in sections
                    else None
                )
                for s in VerificationSection
            },
            profile_completion=completion,
        )
