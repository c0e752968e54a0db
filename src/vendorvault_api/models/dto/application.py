"""Shop application DTOs."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from vendorvault_api.models.domain.application import ApplicationStatus
from vendorvault_api.models.dto.common import Pagination


class ApplyRequest(BaseModel):
    """Vendor application for a shop slot.

    Fields are optional here so the service can report every missing field
    at once.
    """

    station_code: str | None = Field(default=None, max_length=5)
    platform_number: str | None = Field(default=None, max_length=20)
    shop_id: str | None = Field(default=None, max_length=100)
    shop_name: str | None = Field(default=None, max_length=255)
    proposed_monthly_rent: Decimal | None = Field(default=None, gt=0, max_digits=12, decimal_places=2)


class ApplyResponse(BaseModel):
    """Result of an application submission."""

    success: bool = True
    message: str
    application_id: UUID
    status: ApplicationStatus
    created: bool


class ApplicationResponse(BaseModel):
    """Shop application response DTO."""

    id: UUID
    vendor_id: UUID
    station_id: UUID
    station_code: str | None = None
    station_name: str | None = None
    shop_id: str
    shop_name: str | None = None
    platform_number: str | None = None
    quoted_rent: float
    security_deposit: float
    proposed_start_date: datetime
    proposed_end_date: datetime
    status: ApplicationStatus
    risk_level: str | None = None
    status_history: list[dict[str, Any]] = Field(default_factory=list)
    submitted_at: datetime | None = None
    approved_at: datetime | None = None
    rejected_at: datetime | None = None
    rejection_reason: str | None = None
    final_agreed_rent: float | None = None
    final_security_deposit: float | None = None
    license_number: str | None = None
    license_issued_at: datetime | None = None
    license_expires_at: datetime | None = None
    created_at: datetime


class ApplicationListResponse(BaseModel):
    """Paginated application list."""

    applications: list[ApplicationResponse]
    pagination: Pagination


class ShopNameUpdate(BaseModel):
    """Rename the shop of an open application."""

    shop_name: str = Field(min_length=1, max_length=255)


class ApproveRequest(BaseModel):
    """Station manager approval options."""

    security_deposit: Decimal | None = Field(default=None, max_digits=12, decimal_places=2)
    expiry_months: int | None = None
    notes: str | None = Field(default=None, max_length=2000)


class RejectRequest(BaseModel):
    """Station manager rejection."""

    rejection_reason: str | None = Field(default=None, max_length=2000)
