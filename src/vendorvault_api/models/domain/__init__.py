"""Domain models package."""

from vendorvault_api.models.domain.application import ApplicationStatus, RiskLevel
from vendorvault_api.models.domain.document import DocumentStatus, DocumentType, VerificationSection
from vendorvault_api.models.domain.license import ComplianceStatus, LicenseStatus, LicenseType
from vendorvault_api.models.domain.negotiation import MessageType, NegotiationStatus, SenderRole
from vendorvault_api.models.domain.notification import NotificationType
from vendorvault_api.models.domain.payment import (
    AgreementStatus,
    PaymentMode,
    PaymentStatus,
    PaymentType,
)
from vendorvault_api.models.domain.station import ApprovalStatus, OperationalStatus
from vendorvault_api.models.domain.user import CurrentUser, UserRole, UserStatus

__all__ = [
    "AgreementStatus",
    "ApplicationStatus",
    "ApprovalStatus",
    "ComplianceStatus",
    "CurrentUser",
    "DocumentStatus",
    "DocumentType",
    "LicenseStatus",
    "LicenseType",
    "MessageType",
    "NegotiationStatus",
    "NotificationType",
    "OperationalStatus",
    "PaymentMode",
    "PaymentStatus",
    "PaymentType",
    "RiskLevel",
    "SenderRole",
    "UserRole",
    "UserStatus",
    "VerificationSection",
]
