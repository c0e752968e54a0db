"""Public license verification router."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from vendorvault_api.dependencies import get_license_service
from vendorvault_api.models.domain.user import CurrentUser
from vendorvault_api.models.dto.license import VerifyLicenseResponse
from vendorvault_api.security.auth import get_optional_user
from vendorvault_api.security.rate_limit import API_DEFAULT_LIMIT, limiter
from vendorvault_api.services.license_service import LicenseService

router = APIRouter()


@router.get("/{license_number}", response_model=VerifyLicenseResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def verify_license(
    request: Request,
    license_number: str,
    viewer: Annotated[CurrentUser | None, Depends(get_optional_user)],
    license_service: Annotated[LicenseService, Depends(get_license_service)],
) -> VerifyLicenseResponse:
    """Verify a license by number, as encoded in its QR code."""
    return await license_service.verify_public(license_number, viewer)
