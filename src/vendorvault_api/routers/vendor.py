"""Vendor router for profiles, applications, negotiation, licenses and payments."""

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, Request, Response, status

from vendorvault_api.dependencies import (
    get_analytics_service,
    get_application_service,
    get_document_service,
    get_license_service,
    get_negotiation_service,
    get_payment_service,
    get_vendor_service,
    get_verification_service,
)
from vendorvault_api.models.domain.user import CurrentUser
from vendorvault_api.models.dto.application import (
    ApplicationListResponse,
    ApplicationResponse,
    ApplyRequest,
    ApplyResponse,
    ShopNameUpdate,
)
from vendorvault_api.models.dto.document import (
    DocumentCreate,
    DocumentListResponse,
    DocumentResponse,
)
from vendorvault_api.models.dto.license import LicenseListResponse, LicenseResponse, RenewRequest
from vendorvault_api.models.dto.negotiation import (
    NegotiationMessageRequest,
    NegotiationRoomResponse,
)
from vendorvault_api.models.dto.payment import PaymentListResponse
from vendorvault_api.models.dto.vendor import (
    CanApplyResponse,
    CompleteProfileResponse,
    PersonalInfoUpdate,
    VendorAnalyticsResponse,
    VendorProfileResponse,
    VendorProfileUpdate,
    VerificationSectionResponse,
    VerificationStatusResponse,
)
from vendorvault_api.security.auth import require_vendor
from vendorvault_api.security.rate_limit import (
    API_DEFAULT_LIMIT,
    SENSITIVE_OPERATION_LIMIT,
    limiter,
)
from vendorvault_api.services.analytics_service import AnalyticsService
from vendorvault_api.services.application_service import ApplicationService
from vendorvault_api.services.document_service import DocumentService
from vendorvault_api.services.license_service import LicenseService
from vendorvault_api.services.negotiation_service import NegotiationService
from vendorvault_api.services.payment_service import PaymentService
from vendorvault_api.services.vendor_service import VendorService
from vendorvault_api.services.verification_service import VerificationService

router = APIRouter()


# =============================================================================
# Profile
# =============================================================================


@router.get("/profile", response_model=VendorProfileResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def get_profile(
    request: Request,
    current_user: Annotated[CurrentUser, Depends(require_vendor)],
    vendor_service: Annotated[VendorService, Depends(get_vendor_service)],
) -> VendorProfileResponse:
    """Get the vendor's business profile."""
    return await vendor_service.get_profile(current_user.id)


@router.put("/profile", response_model=VendorProfileResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def update_profile(
    request: Request,
    body: VendorProfileUpdate,
    current_user: Annotated[CurrentUser, Depends(require_vendor)],
    vendor_service: Annotated[VendorService, Depends(get_vendor_service)],
) -> VendorProfileResponse:
    """Create or update the vendor's business profile."""
    return await vendor_service.upsert_profile(current_user.id, body)


@router.put("/profile/personal", response_model=CompleteProfileResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def update_personal(
    request: Request,
    body: PersonalInfoUpdate,
    current_user: Annotated[CurrentUser, Depends(require_vendor)],
    vendor_service: Annotated[VendorService, Depends(get_vendor_service)],
) -> CompleteProfileResponse:
    """Update identity numbers and address."""
    return await vendor_service.update_personal(current_user.id, body)


@router.put("/profile/sections/{section}", response_model=VerificationSectionResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def update_section(
    request: Request,
    section: str,
    current_user: Annotated[CurrentUser, Depends(require_vendor)],
    vendor_service: Annotated[VendorService, Depends(get_vendor_service)],
    payload: dict[str, Any] = Body(...),
) -> VerificationSectionResponse:
    """Submit a verification section (bank, business, financial, food license, police or railway declaration)."""
    return await vendor_service.upsert_section(current_user.id, section, payload)


@router.get("/profile/complete", response_model=CompleteProfileResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def get_complete_profile(
    request: Request,
    current_user: Annotated[CurrentUser, Depends(require_vendor)],
    vendor_service: Annotated[VendorService, Depends(get_vendor_service)],
) -> CompleteProfileResponse:
    """Get every profile section with the completion percentage."""
    return await vendor_service.get_complete_profile(current_user.id)


@router.get("/verification-status", response_model=VerificationStatusResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def get_verification_status(
    request: Request,
    current_user: Annotated[CurrentUser, Depends(require_vendor)],
    verification_service: Annotated[VerificationService, Depends(get_verification_service)],
) -> VerificationStatusResponse:
    """Get the verification state of every section."""
    return await verification_service.get_status(current_user.id)


@router.get("/can-apply", response_model=CanApplyResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def can_apply(
    request: Request,
    current_user: Annotated[CurrentUser, Depends(require_vendor)],
    verification_service: Annotated[VerificationService, Depends(get_verification_service)],
) -> CanApplyResponse:
    """Check whether the vendor may submit applications."""
    return await verification_service.can_apply(current_user.id)


# =============================================================================
# Applications
# =============================================================================


@router.post("/apply", response_model=ApplyResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(SENSITIVE_OPERATION_LIMIT)
async def apply(
    request: Request,
    response: Response,
    body: ApplyRequest,
    current_user: Annotated[CurrentUser, Depends(require_vendor)],
    application_service: Annotated[ApplicationService, Depends(get_application_service)],
) -> ApplyResponse:
    """Apply for a shop slot.

    Returns 200 with the existing application when one is already open for
    the same shop.
    """
    result, created = await application_service.apply(current_user, body)
    if not created:
        response.status_code = status.HTTP_200_OK
    return result


@router.get("/applications", response_model=ApplicationListResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def list_applications(
    request: Request,
    current_user: Annotated[CurrentUser, Depends(require_vendor)],
    application_service: Annotated[ApplicationService, Depends(get_application_service)],
    status_filter: str | None = Query(default=None, alias="status"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1),
) -> ApplicationListResponse:
    """List the vendor's applications, newest first."""
    return await application_service.list_applications(
        vendor_id=current_user.id,
        status=status_filter,
        page=page,
        limit=limit,
    )


@router.get("/applications/{application_id}", response_model=ApplicationResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def get_application(
    request: Request,
    application_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_vendor)],
    application_service: Annotated[ApplicationService, Depends(get_application_service)],
) -> ApplicationResponse:
    """Get one of the vendor's applications."""
    return await application_service.get_vendor_application(application_id, current_user.id)


@router.patch("/applications/{application_id}/shop-name", response_model=ApplicationResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def update_shop_name(
    request: Request,
    application_id: UUID,
    body: ShopNameUpdate,
    current_user: Annotated[CurrentUser, Depends(require_vendor)],
    application_service: Annotated[ApplicationService, Depends(get_application_service)],
) -> ApplicationResponse:
    """Rename the shop while the application is still open."""
    return await application_service.update_shop_name(application_id, current_user.id, body.shop_name)


# =============================================================================
# Negotiation
# =============================================================================


@router.get("/negotiation/{application_id}", response_model=NegotiationRoomResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def get_negotiation(
    request: Request,
    application_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_vendor)],
    negotiation_service: Annotated[NegotiationService, Depends(get_negotiation_service)],
) -> NegotiationRoomResponse:
    """Get the negotiation room of an application, opening it on first access."""
    return await negotiation_service.get_vendor_room(application_id, current_user)


@router.post("/negotiation/{application_id}", response_model=NegotiationRoomResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def post_negotiation_message(
    request: Request,
    application_id: UUID,
    body: NegotiationMessageRequest,
    current_user: Annotated[CurrentUser, Depends(require_vendor)],
    negotiation_service: Annotated[NegotiationService, Depends(get_negotiation_service)],
) -> NegotiationRoomResponse:
    """Post a message or counter offer to the station manager."""
    return await negotiation_service.post_vendor_message(application_id, current_user, body)


# =============================================================================
# Licenses and payments
# =============================================================================


@router.get("/license", response_model=LicenseListResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def list_licenses(
    request: Request,
    current_user: Annotated[CurrentUser, Depends(require_vendor)],
    license_service: Annotated[LicenseService, Depends(get_license_service)],
) -> LicenseListResponse:
    """List the vendor's licenses with QR data."""
    return await license_service.list_vendor_licenses(current_user.id)


@router.post("/renew", response_model=LicenseResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(SENSITIVE_OPERATION_LIMIT)
async def renew_license(
    request: Request,
    body: RenewRequest,
    current_user: Annotated[CurrentUser, Depends(require_vendor)],
    license_service: Annotated[LicenseService, Depends(get_license_service)],
) -> LicenseResponse:
    """Request renewal of a license."""
    return await license_service.renew(body.license_id, current_user)


@router.get("/payments", response_model=PaymentListResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def list_payments(
    request: Request,
    current_user: Annotated[CurrentUser, Depends(require_vendor)],
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> PaymentListResponse:
    """List the vendor's payments with balances."""
    return await payment_service.list_vendor_payments(current_user.id)


@router.get("/analytics", response_model=VendorAnalyticsResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def get_analytics(
    request: Request,
    current_user: Annotated[CurrentUser, Depends(require_vendor)],
    analytics_service: Annotated[AnalyticsService, Depends(get_analytics_service)],
) -> VendorAnalyticsResponse:
    """Get the vendor dashboard figures."""
    return await analytics_service.vendor_analytics(current_user.id)


# =============================================================================
# Documents
# =============================================================================


@router.get("/documents", response_model=DocumentListResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def list_documents(
    request: Request,
    current_user: Annotated[CurrentUser, Depends(require_vendor)],
    document_service: Annotated[DocumentService, Depends(get_document_service)],
) -> DocumentListResponse:
    """List the vendor's documents."""
    return await document_service.list_documents(current_user.id)


@router.post("/documents", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(API_DEFAULT_LIMIT)
async def upload_document(
    request: Request,
    response: Response,
    body: DocumentCreate,
    current_user: Annotated[CurrentUser, Depends(require_vendor)],
    document_service: Annotated[DocumentService, Depends(get_document_service)],
) -> DocumentResponse:
    """Register an uploaded document. Replaces an existing document of the same type."""
    result, created = await document_service.upload_document(current_user.id, body)
    if not created:
        response.status_code = status.HTTP_200_OK
    return result


@router.get("/documents/{document_id}", response_model=DocumentResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def get_document(
    request: Request,
    document_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_vendor)],
    document_service: Annotated[DocumentService, Depends(get_document_service)],
) -> DocumentResponse:
    """Get one of the vendor's documents."""
    return await document_service.get_document(document_id, current_user.id)


@router.delete("/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(API_DEFAULT_LIMIT)
async def delete_document(
    request: Request,
    document_id: UUID,
    current_user: Annotated[CurrentUser, Depends(require_vendor)],
    document_service: Annotated[DocumentService, Depends(get_document_service)],
) -> None:
    """Delete a document that has not been verified."""
    await document_service.delete_document(document_id, current_user.id)
