"""License DTOs."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from vendorvault_api.models.domain.license import (
    ComplianceStatus,
    LicenseAction,
    LicenseStatus,
    LicenseType,
)
from vendorvault_api.models.dto.common import Pagination


class LicenseResponse(BaseModel):
    """License response DTO."""

    id: UUID
    license_number: str
    vendor_id: UUID
    application_id: UUID | None = None
    station_id: UUID
    station_code: str | None = None
    station_name: str | None = None
    shop_id: str | None = None
    shop_name: str | None = None
    status: LicenseStatus
    compliance_status: ComplianceStatus
    license_type: LicenseType
    monthly_rent: float
    security_deposit: float
    validity_period_months: int
    renewal_eligible: bool
    issued_at: datetime | None = None
    expires_at: datetime | None = None
    approved_at: datetime | None = None
    revocation_reason: str | None = None
    renewed_from_id: UUID | None = None
    qr_code_data: str | None = None
    qr_code_metadata: dict[str, Any] | None = None
    inspection_logs: list[dict[str, Any]] = Field(default_factory=list)
    last_inspection_date: datetime | None = None
    created_at: datetime


class LicenseListResponse(BaseModel):
    """License list response DTO."""

    licenses: list[LicenseResponse]
    pagination: Pagination | None = None


class RenewRequest(BaseModel):
    """License renewal request."""

    license_id: UUID


class LicenseActionRequest(BaseModel):
    """Admin action on a license."""

    action: LicenseAction
    reason: str | None = Field(default=None, max_length=2000)


class VerifyLicenseResponse(BaseModel):
    """Public license verification result."""

    license_number: str
    status: LicenseStatus
    is_valid: bool
    vendor_name: str | None = None
    vendor_phone: str | None = None
    business_name: str | None = None
    station_name: str | None = None
    station_code: str | None = None
    shop_id: str | None = None
    shop_name: str | None = None
    issued_at: datetime | None = None
    expires_at: datetime | None = None
    compliance_status: ComplianceStatus
    last_inspection_date: datetime | None = None
