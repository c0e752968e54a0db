"""Payment and agreement DTOs."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from vendorvault_api.models.domain.payment import (
    AgreementStatus,
    PaymentMode,
    PaymentStatus,
    PaymentType,
)


class PaymentResponse(BaseModel):
    """Vendor payment response DTO."""

    id: UUID
    vendor_id: UUID
    station_id: UUID
    application_id: UUID | None = None
    agreement_id: UUID | None = None
    license_id: UUID | None = None
    payment_type: PaymentType
    amount: float
    paid_amount: float
    balance: float
    due_date: datetime
    billing_month: str | None = None
    status: PaymentStatus
    payment_records: list[dict[str, Any]] = Field(default_factory=list)
    notes: str | None = None
    created_at: datetime


class PaymentListResponse(BaseModel):
    """Payment list with totals."""

    payments: list[PaymentResponse]
    total_due: float
    total_paid: float


class PaymentCreateRequest(BaseModel):
    """Station manager request to raise a due for a vendor."""

    vendor_id: UUID
    payment_type: PaymentType
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    due_date: datetime
    billing_month: str | None = Field(default=None, pattern=r"^\d{4}-\d{2}$")
    notes: str | None = Field(default=None, max_length=2000)


class RecordPaymentRequest(BaseModel):
    """A payment received against a due."""

    paid_amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    mode: PaymentMode
    reference: str | None = Field(default=None, max_length=100)
    receipt_number: str | None = Field(default=None, max_length=100)


class AgreementResponse(BaseModel):
    """Vendor agreement response DTO."""

    id: UUID
    agreement_number: str
    application_id: UUID
    vendor_id: UUID
    station_id: UUID
    license_id: UUID | None = None
    license_number: str | None = None
    monthly_rent: float
    security_deposit: float
    security_deposit_paid: bool
    duration_months: int
    start_date: datetime
    end_date: datetime
    status: AgreementStatus
    terms: list[str]
    created_at: datetime

    class Config:
        """Pydantic config."""

        from_attributes = True
