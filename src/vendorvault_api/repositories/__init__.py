"""Repositories package."""

from vendorvault_api.repositories.application_repository import ApplicationRepository
from vendorvault_api.repositories.base import BaseRepository
from vendorvault_api.repositories.document_repository import DocumentRepository
from vendorvault_api.repositories.inspector_repository import InspectorRepository
from vendorvault_api.repositories.license_repository import LicenseRepository
from vendorvault_api.repositories.negotiation_repository import NegotiationRepository
from vendorvault_api.repositories.notification_repository import NotificationRepository
from vendorvault_api.repositories.payment_repository import (
    AgreementRepository,
    PaymentRepository,
)
from vendorvault_api.repositories.station_repository import (
    StationLayoutRepository,
    StationRepository,
)
from vendorvault_api.repositories.user_repository import UserRepository
from vendorvault_api.repositories.vendor_repository import (
    VendorRepository,
    VerificationSectionRepository,
)

__all__ = [
    "AgreementRepository",
    "ApplicationRepository",
    "BaseRepository",
    "DocumentRepository",
    "InspectorRepository",
    "LicenseRepository",
    "NegotiationRepository",
    "NotificationRepository",
    "PaymentRepository",
    "StationLayoutRepository",
    "StationRepository",
    "UserRepository",
    "VendorRepository",
    "VerificationSectionRepository",
]
