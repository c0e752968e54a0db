"""Payment and agreement domain enums."""

from enum import StrEnum


class PaymentType(StrEnum):
    """Kinds of vendor dues."""

    RENT = "RENT"
    SECURITY_DEPOSIT = "SECURITY_DEPOSIT"
    PENALTY = "PENALTY"
    RENEWAL_FEE = "RENEWAL_FEE"
    OTHER = "OTHER"


class PaymentStatus(StrEnum):
    """Payment settlement status."""

    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
    PARTIAL = "PARTIAL"
    WAIVED = "WAIVED"


# Payments that no longer accept records
CLOSED_PAYMENT_STATUSES = frozenset({PaymentStatus.PAID, PaymentStatus.WAIVED})


class PaymentMode(StrEnum):
    """Instrument used to settle a payment."""

    CASH = "CASH"
    CHEQUE = "CHEQUE"
    DD = "DD"
    ONLINE = "ONLINE"
    NEFT = "NEFT"
    RTGS = "RTGS"
    UPI = "UPI"


class AgreementStatus(StrEnum):
    """Vendor agreement status."""

    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    RENEWED = "RENEWED"
    TERMINATED = "TERMINATED"
