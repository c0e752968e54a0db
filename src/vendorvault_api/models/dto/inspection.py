"""Inspector and inspection DTOs."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from vendorvault_api.models.dto.application import ApplicationResponse
from vendorvault_api.models.dto.license import LicenseResponse
from vendorvault_api.models.dto.payment import AgreementResponse, PaymentResponse


class InspectorCreate(BaseModel):
    """Station manager request to create an inspector account."""

    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(max_length=15)
    password: str = Field(min_length=8, max_length=128)
    employee_id: str | None = Field(default=None, max_length=50)
    designation: str | None = Field(default=None, max_length=100)


class InspectorResponse(BaseModel):
    """Inspector assigned to a station."""

    id: UUID
    user_id: UUID
    station_id: UUID
    name: str
    email: str
    phone: str
    employee_id: str | None = None
    designation: str | None = None
    status: str
    total_inspections: int
    created_at: datetime


class InspectorListResponse(BaseModel):
    """Inspectors of a station."""

    inspectors: list[InspectorResponse]
    total: int


class InspectionRequest(BaseModel):
    """Inspection result logged against a license.

    compliance_status is checked by the service so that an unknown value
    gets a specific message.
    """

    license_number: str = Field(min_length=1, max_length=30)
    compliance_status: str = Field(max_length=30)
    notes: str | None = Field(default=None, max_length=5000)


class InspectionResponse(BaseModel):
    """A single inspection log entry."""

    license_id: UUID
    license_number: str
    shop_id: str | None = None
    shop_name: str | None = None
    station_id: UUID
    inspector_id: str
    inspector_name: str
    inspection_date: datetime
    notes: str | None = None
    compliance_status: str


class InspectionListResponse(BaseModel):
    """Inspections logged by the current inspector."""

    inspections: list[InspectionResponse]
    total: int


class ScanSummary(BaseModel):
    """Quick compliance summary shown after scanning a license."""

    total_due: float
    total_paid: float
    overdue_count: int
    is_valid: bool
    days_to_expiry: int | None = None


class ScanResponse(BaseModel):
    """Everything an inspector needs about a scanned license."""

    license: LicenseResponse
    application: ApplicationResponse | None = None
    agreement: AgreementResponse | None = None
    payments: list[PaymentResponse]
    vendor: dict[str, Any] | None = None
    summary: ScanSummary


class InspectorStatsResponse(BaseModel):
    """Inspector dashboard figures."""

    total_active_licenses: int
    compliant: int
    non_compliant: int
    requires_attention: int
    my_total_inspections: int
    recent_inspections: list[LicenseResponse]
