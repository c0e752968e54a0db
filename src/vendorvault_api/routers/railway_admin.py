"""Railway admin router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from vendorvault_api.dependencies import (
    get_admin_service,
    get_analytics_service,
    get_application_service,
    get_document_service,
    get_license_service,
    get_station_service,
)
from vendorvault_api.models.domain.user import CurrentUser
from vendorvault_api.models.dto.admin import (
    AdminStatsResponse,
    ManagerDecisionResponse,
    ManagerRejectRequest,
    PendingManagerListResponse,
    UserListResponse,
)
from vendorvault_api.models.dto.application import ApplicationListResponse
from vendorvault_api.models.dto.document import DocumentResponse, DocumentVerifyRequest
from vendorvault_api.models.dto.license import (
    LicenseActionRequest,
    LicenseListResponse,
    LicenseResponse,
)
from vendorvault_api.models.dto.station import (
    AdminStationListResponse,
    StationResponse,
    StationUpdate,
)
from vendorvault_api.security.auth import require_railway_admin
from vendorvault_api.security.rate_limit import (
    API_DEFAULT_LIMIT,
    SENSITIVE_OPERATION_LIMIT,
    limiter,
)
from vendorvault_api.services.admin_service import AdminService
from vendorvault_api.services.analytics_service import AnalyticsService
from vendorvault_api.services.application_service import ApplicationService
from vendorvault_api.services.document_service import DocumentService
from vendorvault_api.services.license_service import LicenseService
from vendorvault_api.services.station_service import StationService

router = APIRouter()

AdminUser = Annotated[CurrentUser, Depends(require_railway_admin)]


# =============================================================================
# Station managers
# =============================================================================


@router.get("/pending-managers", response_model=PendingManagerListResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def list_pending_managers(
    request: Request,
    current_user: AdminUser,
    admin_service: Annotated[AdminService, Depends(get_admin_service)],
) -> PendingManagerListResponse:
    """List station managers awaiting approval."""
    return await admin_service.list_pending_managers()


@router.post("/managers/{user_id}/approve", response_model=ManagerDecisionResponse)
@limiter.limit(SENSITIVE_OPERATION_LIMIT)
async def approve_manager(
    request: Request,
    user_id: UUID,
    current_user: AdminUser,
    admin_service: Annotated[AdminService, Depends(get_admin_service)],
) -> ManagerDecisionResponse:
    """Approve a station manager and their station."""
    return await admin_service.approve_manager(user_id, current_user)


@router.post("/managers/{user_id}/reject", response_model=ManagerDecisionResponse)
@limiter.limit(SENSITIVE_OPERATION_LIMIT)
async def reject_manager(
    request: Request,
    user_id: UUID,
    body: ManagerRejectRequest,
    current_user: AdminUser,
    admin_service: Annotated[AdminService, Depends(get_admin_service)],
) -> ManagerDecisionResponse:
    """Reject a station manager and their station."""
    return await admin_service.reject_manager(user_id, body.reason, current_user)


# =============================================================================
# Stations
# =============================================================================


@router.get("/stations", response_model=AdminStationListResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def list_stations(
    request: Request,
    current_user: AdminUser,
    station_service: Annotated[StationService, Depends(get_station_service)],
    approval_status: str | None = Query(default=None),
    q: str | None = Query(default=None, max_length=100),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1),
) -> AdminStationListResponse:
    """List all stations."""
    return await station_service.list_stations(approval_status, q, page, limit)


@router.get("/stations/{station_id}", response_model=StationResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def get_station(
    request: Request,
    station_id: UUID,
    current_user: AdminUser,
    station_service: Annotated[StationService, Depends(get_station_service)],
) -> StationResponse:
    """Get a station."""
    return await station_service.get_station(station_id)


@router.patch("/stations/{station_id}", response_model=StationResponse)
@limiter.limit(SENSITIVE_OPERATION_LIMIT)
async def update_station(
    request: Request,
    station_id: UUID,
    body: StationUpdate,
    current_user: AdminUser,
    station_service: Annotated[StationService, Depends(get_station_service)],
) -> StationResponse:
    """Update operational attributes of a station."""
    return await station_service.update_station(station_id, body)


# =============================================================================
# Licenses and applications
# =============================================================================


@router.get("/licenses", response_model=LicenseListResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def list_licenses(
    request: Request,
    current_user: AdminUser,
    license_service: Annotated[LicenseService, Depends(get_license_service)],
    status_filter: str | None = Query(default=None, alias="status"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1),
) -> LicenseListResponse:
    """List licenses across all stations."""
    return await license_service.list_licenses(status_filter, page, limit)


@router.post("/licenses/{license_id}/action", response_model=LicenseResponse)
@limiter.limit(SENSITIVE_OPERATION_LIMIT)
async def license_action(
    request: Request,
    license_id: UUID,
    body: LicenseActionRequest,
    current_user: AdminUser,
    license_service: Annotated[LicenseService, Depends(get_license_service)],
) -> LicenseResponse:
    """Revoke or reactivate a license."""
    return await license_service.apply_action(license_id, body, current_user)


@router.get("/applications", response_model=ApplicationListResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def list_applications(
    request: Request,
    current_user: AdminUser,
    application_service: Annotated[ApplicationService, Depends(get_application_service)],
    status_filter: str | None = Query(default=None, alias="status"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1),
) -> ApplicationListResponse:
    """List applications across all stations."""
    return await application_service.list_applications(status=status_filter, page=page, limit=limit)


# =============================================================================
# Users, stats and documents
# =============================================================================


@router.get("/users", response_model=UserListResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def list_users(
    request: Request,
    current_user: AdminUser,
    admin_service: Annotated[AdminService, Depends(get_admin_service)],
    role: str | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias="status"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1),
) -> UserListResponse:
    """List users with optional role and status filters."""
    return await admin_service.list_users(role, status_filter, page, limit)


@router.get("/stats", response_model=AdminStatsResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def get_stats(
    request: Request,
    current_user: AdminUser,
    analytics_service: Annotated[AnalyticsService, Depends(get_analytics_service)],
) -> AdminStatsResponse:
    """Get platform-wide counts."""
    return await analytics_service.admin_stats()


@router.patch("/documents/{document_id}/verify", response_model=DocumentResponse)
@limiter.limit(SENSITIVE_OPERATION_LIMIT)
async def verify_document(
    request: Request,
    document_id: UUID,
    body: DocumentVerifyRequest,
    current_user: AdminUser,
    document_service: Annotated[DocumentService, Depends(get_document_service)],
) -> DocumentResponse:
    """Verify or reject any vendor document."""
    return await document_service.verify_document(document_id, body, current_user)
