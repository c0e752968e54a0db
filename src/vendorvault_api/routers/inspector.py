"""Inspector router for license scanning and compliance inspections."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status

from vendorvault_api.dependencies import get_inspection_service
from vendorvault_api.models.domain.user import CurrentUser, UserRole
from vendorvault_api.models.dto.inspection import (
    InspectionListResponse,
    InspectionRequest,
    InspectionResponse,
    InspectorStatsResponse,
    ScanResponse,
)
from vendorvault_api.security.auth import require_inspector, require_role
from vendorvault_api.security.rate_limit import API_DEFAULT_LIMIT, limiter
from vendorvault_api.services.inspection_service import InspectionService

router = APIRouter()

require_scanner = require_role(UserRole.INSPECTOR, UserRole.RAILWAY_ADMIN)


@router.get("/scan", response_model=ScanResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def scan_license(
    request: Request,
    current_user: Annotated[CurrentUser, Depends(require_scanner)],
    inspection_service: Annotated[InspectionService, Depends(get_inspection_service)],
    license_number: str | None = Query(default=None, max_length=30),
    qr: str | None = Query(default=None, max_length=500),
) -> ScanResponse:
    """Look up a license with its agreement, payments and vendor.

    Accepts the license number or the scanned QR content.
    """
    return await inspection_service.scan(current_user, license_number, qr)


@router.post("/inspections", response_model=InspectionResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(API_DEFAULT_LIMIT)
async def log_inspection(
    request: Request,
    body: InspectionRequest,
    current_user: Annotated[CurrentUser, Depends(require_inspector)],
    inspection_service: Annotated[InspectionService, Depends(get_inspection_service)],
) -> InspectionResponse:
    """Log a compliance inspection."""
    return await inspection_service.log_inspection(current_user, body)


@router.get("/inspections", response_model=InspectionListResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def list_inspections(
    request: Request,
    current_user: Annotated[CurrentUser, Depends(require_inspector)],
    inspection_service: Annotated[InspectionService, Depends(get_inspection_service)],
) -> InspectionListResponse:
    """List inspections logged by the current inspector."""
    return await inspection_service.list_my_inspections(current_user)


@router.get("/stats", response_model=InspectorStatsResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def get_stats(
    request: Request,
    current_user: Annotated[CurrentUser, Depends(require_inspector)],
    inspection_service: Annotated[InspectionService, Depends(get_inspection_service)],
) -> InspectorStatsResponse:
    """Get compliance figures for the inspector's station."""
    return await inspection_service.get_stats(current_user)
