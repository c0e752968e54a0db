"""Vendor payments and agreements."""

import logging
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from vendorvault_api.exceptions import (
    BadRequestError,
    InvalidStatusTransitionError,
    PaymentNotFoundError,
    ValidationError,
)
from vendorvault_api.models.domain.application import ApplicationStatus
from vendorvault_api.models.domain.payment import (
    CLOSED_PAYMENT_STATUSES,
    PaymentStatus,
    PaymentType,
)
from vendorvault_api.models.domain.user import CurrentUser
from vendorvault_api.models.dto.payment import (
    AgreementResponse,
    PaymentCreateRequest,
    PaymentListResponse,
    PaymentResponse,
    RecordPaymentRequest,
)
from vendorvault_api.models.orm.payment import VendorPaymentORM
from vendorvault_api.repositories.application_repository import ApplicationRepository
from vendorvault_api.repositories.payment_repository import (
    AgreementRepository,
    PaymentRepository,
)
from vendorvault_api.utils.dates import ensure_utc, iso, utcnow

logger = logging.getLogger(__name__)


def compute_payment_status(
    amount: Decimal,
    paid_amount: Decimal,
    due_date: datetime,
    current: str,
    now: datetime | None = None,
) -> PaymentStatus:
    """Derive a payment's status from what was paid and when it is due.

    WAIVED is kept as is. A partial payment past its due date is OVERDUE.
    """
    if current == PaymentStatus.WAIVED:
        return PaymentStatus.WAIVED
    past_due = ensure_utc(due_date) < (now or utcnow())
    if paid_amount >= amount:
        return PaymentStatus.PAID
    if paid_amount > 0:
        return PaymentStatus.OVERDUE if past_due else PaymentStatus.PARTIAL
    if past_due:
        return PaymentStatus.OVERDUE
    return PaymentStatus.PENDING


def refresh_status(payment: VendorPaymentORM, now: datetime | None = None) -> bool:
    """Recompute a payment's status in place.

    Returns:
        True if the status changed
    """
    status = compute_payment_status(
        Decimal(payment.amount),
        Decimal(payment.paid_amount or 0),
        payment.due_date,
        payment.status,
        now,
    )
    if payment.status == status:
        return False
    payment.status = status.value
    return True


def build_payment_response(payment: VendorPaymentORM) -> PaymentResponse:
    """Build response from ORM model."""
    return PaymentResponse(
        id=payment.id,
        vendor_id=payment.vendor_id,
        station_id=payment.station_id,
        application_id=payment.application_id,
        agreement_id=payment.agreement_id,
        license_id=payment.license_id,
        payment_type=PaymentType(payment.payment_type),
        amount=float(payment.amount),
        paid_amount=float(payment.paid_amount or 0),
        balance=float(payment.balance),
        due_date=payment.due_date,
        billing_month=payment.billing_month,
        status=PaymentStatus(payment.status),
        payment_records=payment.payment_records or [],
        notes=payment.notes,
        created_at=payment.created_at,
    )


def build_payment_list(payments: list[VendorPaymentORM]) -> PaymentListResponse:
    """Payment list with outstanding and paid totals."""
    total_due = sum(
        (p.balance for p in payments if p.status not in CLOSED_PAYMENT_STATUSES),
        Decimal("0"),
    )
    total_paid = sum((Decimal(p.paid_amount or 0) for p in payments), Decimal("0"))
    return PaymentListResponse(
        payments=[build_payment_response(p) for p in payments],
        total_due=float(total_due),
        total_paid=float(total_paid),
    )


def _parse_filter(value: str | None, enum: type, field: str) -> str | None:
    if not value:
        return None
    try:
        return enum(value.upper()).value
    except ValueError as e:
        raise ValidationError(f"Invalid {field}", field=field) from e


class PaymentService:
    """Service for vendor dues and their settlement."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.repo = PaymentRepository(session)
        self.agreement_repo = AgreementRepository(session)
        self.application_repo = ApplicationRepository(session)

    async def list_vendor_payments(self, vendor_id: UUID) -> PaymentListResponse:
        """List a vendor's payments with balances."""
        payments = await self.repo.list_filtered(vendor_id=vendor_id)
        now = utcnow()
        for payment in payments:
            refresh_status(payment, now)
        await self.session.flush()
        return build_payment_list(payments)

    async def list_station_payments(
        self,
        station_id: UUID,
        status: str | None = None,
        payment_type: str | None = None,
    ) -> PaymentListResponse:
        """List a station's payments, recomputing each status first.

        The status filter applies to the recomputed status.
        """
        status = _parse_filter(status, PaymentStatus, "status")
        payment_type = _parse_filter(payment_type, PaymentType, "type")
        payments = await self.repo.list_filtered(station_id=station_id, payment_type=payment_type)

        now = utcnow()
        changed = [p for p in payments if refresh_status(p, now)]
        if changed:
            await self.session.flush()
            logger.info(f"Recomputed status of {len(changed)} payments at station {station_id}")
        if status:
            payments = [p for p in payments if p.status == status]
        return build_payment_list(payments)

    async def create_payment(
        self,
        station_id: UUID,
        data: PaymentCreateRequest,
        manager: CurrentUser,
    ) -> PaymentResponse:
        """Raise a due against a vendor licensed at the station.

        Raises:
            BadRequestError: If the vendor has no approved application here
        """
        approved = await self.application_repo.list_for_vendor_at_station(
            data.vendor_id, station_id, [ApplicationStatus.APPROVED.value]
        )
        if not approved:
            raise BadRequestError("Vendor has no approved application at this station")
        application = approved[0]
        agreement = await self.agreement_repo.get_by_application(application.id)

        payment = await self.repo.create(
            vendor_id=data.vendor_id,
            station_id=station_id,
            application_id=application.id,
            agreement_id=agreement.id if agreement else None,
            license_id=agreement.license_id if agreement else None,
            payment_type=data.payment_type.value,
            amount=data.amount,
            paid_amount=Decimal("0"),
            due_date=ensure_utc(data.due_date),
            billing_month=data.billing_month,
            status=PaymentStatus.PENDING.value,
            payment_records=[],
            notes=data.notes,
            created_by=manager.id,
        )
        logger.info(f"Created {data.payment_type.value} payment {payment.id} for vendor {data.vendor_id}")
        return build_payment_response(payment)

    async def record_payment(
        self,
        payment_id: UUID,
        station_id: UUID,
        data: RecordPaymentRequest,
        manager: CurrentUser,
    ) -> PaymentResponse:
        """Record money received against a due.

        Raises:
            PaymentNotFoundError: If the payment is not the station's
            InvalidStatusTransitionError: If the payment is already closed
        """
        payment = await self.repo.get_for_station(payment_id, station_id)
        if payment is None:
            raise PaymentNotFoundError(str(payment_id))
        if payment.status in CLOSED_PAYMENT_STATUSES:
            raise InvalidStatusTransitionError("payment", payment.status, "record a payment on")

        record = {
            "amount": float(data.paid_amount),
            "mode": data.mode.value,
            "reference": data.reference,
            "receipt_number": data.receipt_number,
            "paid_at": iso(utcnow()),
            "recorded_by": str(manager.id),
        }
        payment.payment_records = [*(payment.payment_records or []), record]
        payment.paid_amount = Decimal(payment.paid_amount or 0) + data.paid_amount
        refresh_status(payment)
        await self.session.flush()

        if payment.payment_type == PaymentType.SECURITY_DEPOSIT and payment.status == PaymentStatus.PAID:
            await self._mark_deposit_paid(payment)

        await self.session.refresh(payment)
        logger.info(f"Recorded {data.paid_amount} on payment {payment.id}, now {payment.status}")
        return build_payment_response(payment)

    async def _mark_deposit_paid(self, payment: VendorPaymentORM) -> None:
        agreement = None
        if payment.agreement_id:
            agreement = await self.agreement_repo.get_by_id(payment.agreement_id)
        elif payment.application_id:
            agreement = await self.agreement_repo.get_by_application(payment.application_id)
        if agreement is not None and not agreement.security_deposit_paid:
            await self.agreement_repo.update(agreement, security_deposit_paid=True)

    async def list_agreements(self, station_id: UUID) -> list[AgreementResponse]:
        """List a station's agreements."""
        agreements = await self.agreement_repo.list_for_station(station_id)
        return [AgreementResponse.model_validate(a) for a in agreements]

    async def mark_overdue_payments(self) -> int:
        """Recompute the status of open payments past their due date.

        Returns:
            Number of payments whose status changed
        """
        now = utcnow()
        payments = await self.repo.list_open_due_before(now)
        changed = sum(1 for payment in payments if refresh_status(payment, now))
        await self.session.flush()
        return changed
