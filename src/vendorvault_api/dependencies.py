"""Centralized dependency injection factories for FastAPI.

This module provides reusable service factory functions for dependency injection,
eliminating duplicate definitions across routers.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vendorvault_api.database import get_db
from vendorvault_api.models.domain.user import CurrentUser
from vendorvault_api.models.orm.station import StationORM
from vendorvault_api.security.auth import require_station_manager
from vendorvault_api.services.admin_service import AdminService
from vendorvault_api.services.analytics_service import AnalyticsService
from vendorvault_api.services.application_service import ApplicationService
from vendorvault_api.services.approval_service import ApprovalService
from vendorvault_api.services.auth_service import AuthService
from vendorvault_api.services.document_service import DocumentService
from vendorvault_api.services.inspection_service import InspectionService
from vendorvault_api.services.inspector_service import InspectorService
from vendorvault_api.services.layout_service import LayoutService
from vendorvault_api.services.license_service import LicenseService
from vendorvault_api.services.negotiation_service import NegotiationService
from vendorvault_api.services.notification_service import NotificationService
from vendorvault_api.services.payment_service import PaymentService
from vendorvault_api.services.station_service import StationService
from vendorvault_api.services.vendor_service import VendorService
from vendorvault_api.services.verification_service import VerificationService


# =============================================================================
# Core Service Factories
# =============================================================================


def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    """Get AuthService instance."""
    return AuthService(db)


def get_notification_service(db: AsyncSession = Depends(get_db)) -> NotificationService:
    """Get NotificationService instance."""
    return NotificationService(db)


def get_analytics_service(db: AsyncSession = Depends(get_db)) -> AnalyticsService:
    """Get AnalyticsService instance."""
    return AnalyticsService(db)


def get_admin_service(db: AsyncSession = Depends(get_db)) -> AdminService:
    """Get AdminService instance."""
    return AdminService(db)


# =============================================================================
# Station Service Factories
# =============================================================================


def get_station_service(db: AsyncSession = Depends(get_db)) -> StationService:
    """Get StationService instance."""
    return StationService(db)


def get_layout_service(db: AsyncSession = Depends(get_db)) -> LayoutService:
    """Get LayoutService instance."""
    return LayoutService(db)


def get_inspector_service(db: AsyncSession = Depends(get_db)) -> InspectorService:
    """Get InspectorService instance."""
    return InspectorService(db)


def get_inspection_service(db: AsyncSession = Depends(get_db)) -> InspectionService:
    """Get InspectionService instance."""
    return InspectionService(db)


# =============================================================================
# Vendor Service Factories
# =============================================================================


def get_vendor_service(db: AsyncSession = Depends(get_db)) -> VendorService:
    """Get VendorService instance."""
    return VendorService(db)


def get_verification_service(db: AsyncSession = Depends(get_db)) -> VerificationService:
    """Get VerificationService instance."""
    return VerificationService(db)


def get_document_service(db: AsyncSession = Depends(get_db)) -> DocumentService:
    """Get DocumentService instance."""
    return DocumentService(db)


# =============================================================================
# Application Lifecycle Service Factories
# =============================================================================


def get_application_service(db: AsyncSession = Depends(get_db)) -> ApplicationService:
    """Get ApplicationService instance."""
    return ApplicationService(db)


def get_negotiation_service(db: AsyncSession = Depends(get_db)) -> NegotiationService:
    """Get NegotiationService instance."""
    return NegotiationService(db)


def get_approval_service(db: AsyncSession = Depends(get_db)) -> ApprovalService:
    """Get ApprovalService instance."""
    return ApprovalService(db)


def get_license_service(db: AsyncSession = Depends(get_db)) -> LicenseService:
    """Get LicenseService instance."""
    return LicenseService(db)


def get_payment_service(db: AsyncSession = Depends(get_db)) -> PaymentService:
    """Get PaymentService instance."""
    return PaymentService(db)


# =============================================================================
# Scoping
# =============================================================================


async def get_managed_station(
    current_user: Annotated[CurrentUser, Depends(require_station_manager)],
    station_service: Annotated[StationService, Depends(get_station_service)],
) -> StationORM:
    """Resolve the station managed by the current station manager.

    Raises:
        StationNotFoundError: If the manager has no station
    """
    return await station_service.get_managed_station(current_user.id)
