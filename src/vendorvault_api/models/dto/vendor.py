"""Vendor profile and verification DTOs."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from vendorvault_api.models.domain.document import (
    BusinessCategory,
    BusinessType,
    SectionStatus,
    VerificationSection,
    VerificationType,
)
from vendorvault_api.utils.validation import (
    is_valid_aadhaar,
    is_valid_fssai,
    is_valid_gst,
    is_valid_ifsc,
    is_valid_pan,
    normalize_aadhaar,
    normalize_pan,
)


class VendorProfileResponse(BaseModel):
    """Vendor business profile."""

    id: UUID
    user_id: UUID
    business_name: str
    business_type: str
    owner_name: str | None = None
    gst_number: str | None = None
    station_code: str | None = None
    station_name: str | None = None
    platform_number: str | None = None
    shop_number: str | None = None
    shop_description: str | None = None
    profile_completed: bool = False
    created_at: datetime
    updated_at: datetime

    class Config:
        """Pydantic config."""

        from_attributes = True


class VendorProfileUpdate(BaseModel):
    """Business profile upsert. Only provided fields are changed."""

    business_name: str | None = Field(default=None, max_length=255)
    business_type: BusinessType | None = None
    owner_name: str | None = Field(default=None, max_length=255)
    gst_number: str | None = Field(default=None, max_length=15)
    station_code: str | None = Field(default=None, max_length=5)
    station_name: str | None = Field(default=None, max_length=255)
    platform_number: str | None = Field(default=None, max_length=20)
    shop_number: str | None = Field(default=None, max_length=100)
    shop_description: str | None = Field(default=None, max_length=2000)

    @field_validator("gst_number")
    @classmethod
    def validate_gst(cls, v: str | None) -> str | None:
        """Validate GSTIN format when given."""
        if v is None or not v.strip():
            return None
        v = v.strip().upper()
        if not is_valid_gst(v):
            raise ValueError("Invalid GST number")
        return v


class PersonalInfoUpdate(BaseModel):
    """Identity numbers and address of a vendor."""

    aadhaar_number: str | None = Field(default=None, max_length=20)
    pan_number: str | None = Field(default=None, max_length=15)
    address: str | None = Field(default=None, max_length=500)
    photo_url: str | None = Field(default=None, max_length=1000)

    @field_validator("aadhaar_number")
    @classmethod
    def validate_aadhaar(cls, v: str | None) -> str | None:
        """Validate and normalize an Aadhaar number."""
        if v is None:
            return None
        if not is_valid_aadhaar(v):
            raise ValueError("Aadhaar number must be 12 digits")
        return normalize_aadhaar(v)

    @field_validator("pan_number")
    @classmethod
    def validate_pan(cls, v: str | None) -> str | None:
        """Validate and normalize a PAN."""
        if v is None:
            return None
        if not is_valid_pan(v):
            raise ValueError("Invalid PAN format")
        return normalize_pan(v)


# =============================================================================
# Verification section payloads
# =============================================================================


class BankSection(BaseModel):
    """Bank account details."""

    account_holder_name: str = Field(min_length=1, max_length=255)
    account_number: str = Field(min_length=6, max_length=30)
    ifsc_code: str = Field(max_length=11)
    bank_name: str | None = Field(default=None, max_length=255)
    branch: str | None = Field(default=None, max_length=255)

    @field_validator("ifsc_code")
    @classmethod
    def validate_ifsc(cls, v: str) -> str:
        """Validate IFSC format."""
        v = v.strip().upper()
        if not is_valid_ifsc(v):
            raise ValueError("Invalid IFSC code")
        return v


class BusinessSection(BaseModel):
    """Business details. FOOD businesses also need a food license."""

    business_name: str = Field(min_length=1, max_length=255)
    business_type: BusinessType
    business_category: BusinessCategory
    years_of_experience: int = Field(ge=0, le=100)
    employee_count: int = Field(default=0, ge=0)
    gst_number: str | None = Field(default=None, max_length=15)
    description: str | None = Field(default=None, max_length=2000)

    @field_validator("gst_number")
    @classmethod
    def validate_gst(cls, v: str | None) -> str | None:
        """Validate GSTIN format when given."""
        if v is None or not v.strip():
            return None
        v = v.strip().upper()
        if not is_valid_gst(v):
            raise ValueError("Invalid GST number")
        return v


class FinancialSection(BaseModel):
    """Financial standing."""

    annual_turnover: Decimal = Field(ge=0)
    expected_monthly_revenue: Decimal = Field(ge=0)
    can_pay_security_deposit: bool


class FoodLicenseSection(BaseModel):
    """FSSAI food license."""

    fssai_number: str = Field(max_length=14)
    certificate_url: str = Field(min_length=1, max_length=1000)
    expiry_date: date
    food_type: str = Field(min_length=1, max_length=50)
    food_items: list[str] = Field(default_factory=list, max_length=200)
    hygiene_declaration: bool

    @field_validator("fssai_number")
    @classmethod
    def validate_fssai(cls, v: str) -> str:
        """Validate the 14-digit FSSAI number."""
        v = v.strip()
        if not is_valid_fssai(v):
            raise ValueError("FSSAI number must be 14 digits")
        return v


class PoliceSection(BaseModel):
    """Police verification certificate."""

    certificate_url: str = Field(min_length=1, max_length=1000)
    no_criminal_record_declaration: bool
    issued_by: str | None = Field(default=None, max_length=255)


class RailwayDeclarationSection(BaseModel):
    """Signed declarations required by the railways."""

    agrees_to_railway_rules: bool
    agrees_to_hygiene_standards: bool
    agrees_to_no_encroachment: bool
    agrees_to_no_subletting: bool
    digital_signature: str = Field(min_length=1, max_length=255)
    signed_at: datetime

    @field_validator(
        "agrees_to_railway_rules",
        "agrees_to_hygiene_standards",
        "agrees_to_no_encroachment",
        "agrees_to_no_subletting",
    )
    @classmethod
    def must_agree(cls, v: bool) -> bool:
        """All declarations must be accepted."""
        if not v:
            raise ValueError("All declarations must be accepted")
        return v


SECTION_PAYLOADS: dict[VerificationSection, type[BaseModel]] = {
    VerificationSection.BANK: BankSection,
    VerificationSection.BUSINESS: BusinessSection,
    VerificationSection.FINANCIAL: FinancialSection,
    VerificationSection.FOOD_LICENSE: FoodLicenseSection,
    VerificationSection.POLICE: PoliceSection,
    VerificationSection.RAILWAY_DECLARATION: RailwayDeclarationSection,
}


class VerificationSectionResponse(BaseModel):
    """A submitted verification section."""

    section: VerificationSection
    data: dict[str, Any]
    verified: bool = False
    verified_at: datetime | None = None
    rejection_reason: str | None = None
    updated_at: datetime

    class Config:
        """Pydantic config."""

        from_attributes = True


class CompleteProfileResponse(BaseModel):
    """Every section of a vendor profile with its completion percentage."""

    user_id: UUID
    name: str
    email: str
    phone: str
    address: str | None = None
    aadhaar_number: str | None = None
    pan_number: str | None = None
    aadhaar_verified: bool = False
    pan_verified: bool = False
    vendor: VendorProfileResponse | None = None
    sections: dict[str, VerificationSectionResponse | None]
    profile_completion: int


class SectionStatusEntry(BaseModel):
    """Status of one verification item."""

    status: SectionStatus
    submitted: bool
    verified: bool
    rejection_reason: str | None = None


class VerificationStatusResponse(BaseModel):
    """Aggregated verification progress of a vendor."""

    sections: dict[str, SectionStatusEntry]
    total_required: int
    completed_count: int
    verified_count: int
    completion_percentage: int
    verification_percentage: int
    all_submitted: bool
    all_verified: bool
    can_apply: bool
    next_step: str


class CanApplyResponse(BaseModel):
    """Whether the vendor may apply for shops."""

    can_apply: bool
    missing: list[str]


class VendorVerificationRequest(BaseModel):
    """Station manager verification of one vendor profile item."""

    vendor_id: UUID
    verification_type: str = Field(max_length=30)
    verified: bool
    notes: str | None = Field(default=None, max_length=2000)

    @field_validator("verification_type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        """Restrict to known verification items."""
        allowed = {t.value for t in VerificationType}
        if v not in allowed:
            raise ValueError(f"verification_type must be one of: {', '.join(sorted(allowed))}")
        return v


class VendorAnalyticsResponse(BaseModel):
    """Vendor dashboard figures."""

    total_applications: int
    active_applications: int
    total_revenue: float
    pending_payments: float
    next_payment_due: datetime | None = None
    monthly_trend: float
