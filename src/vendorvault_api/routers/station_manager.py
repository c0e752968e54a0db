"""Station manager router.

Every endpoint is scoped to the station managed by the current user.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status

from vendorvault_api.dependencies import (
    get_analytics_service,
    get_application_service,
    get_approval_service,
    get_document_service,
    get_inspector_service,
    get_layout_service,
    get_managed_station,
    get_negotiation_service,
    get_payment_service,
    get_station_service,
    get_verification_service,
)
from vendorvault_api.models.domain.user import CurrentUser
from vendorvault_api.models.dto.admin import (
    ApplicationDetailResponse,
    ApprovalResponse,
    ManagerAnalyticsResponse,
    ManagerStatsResponse,
)
from vendorvault_api.models.dto.application import (
    ApplicationListResponse,
    ApplicationResponse,
    ApproveRequest,
    RejectRequest,
)
from vendorvault_api.models.dto.document import (
    DocumentListResponse,
    DocumentResponse,
    DocumentVerifyRequest,
)
from vendorvault_api.models.dto.inspection import (
    InspectorCreate,
    InspectorListResponse,
    InspectorResponse,
)
from vendorvault_api.models.dto.negotiation import (
    NegotiationMessageRequest,
    NegotiationRoomResponse,
)
from vendorvault_api.models.dto.payment import (
    AgreementResponse,
    PaymentCreateRequest,
    PaymentListResponse,
    PaymentResponse,
    RecordPaymentRequest,
)
from vendorvault_api.models.dto.station import (
    LayoutResponse,
    LayoutSaveRequest,
    ManagerStationResponse,
)
from vendorvault_api.models.dto.vendor import (
    VendorVerificationRequest,
    VerificationStatusResponse,
)
from vendorvault_api.models.orm.station import StationORM
from vendorvault_api.security.auth import require_station_manager
from vendorvault_api.security.rate_limit import (
    API_DEFAULT_LIMIT,
    SENSITIVE_OPERATION_LIMIT,
    limiter,
)
from vendorvault_api.services.analytics_service import AnalyticsService
from vendorvault_api.services.application_service import ApplicationService
from vendorvault_api.services.approval_service import ApprovalService
from vendorvault_api.services.document_service import DocumentService
from vendorvault_api.services.inspector_service import InspectorService
from vendorvault_api.services.layout_service import LayoutService
from vendorvault_api.services.negotiation_service import NegotiationService
from vendorvault_api.services.payment_service import PaymentService
from vendorvault_api.services.station_service import StationService
from vendorvault_api.services.verification_service import VerificationService

router = APIRouter()

ManagerUser = Annotated[CurrentUser, Depends(require_station_manager)]
ManagedStation = Annotated[StationORM, Depends(get_managed_station)]


# =============================================================================
# Station and layout
# =============================================================================


@router.get("/station", response_model=ManagerStationResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def get_station(
    request: Request,
    current_user: ManagerUser,
    station_service: Annotated[StationService, Depends(get_station_service)],
) -> ManagerStationResponse:
    """Get the managed station with its layout summary."""
    return await station_service.get_manager_station(current_user.id)


@router.get("/layout", response_model=LayoutResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def get_layout(
    request: Request,
    station: ManagedStation,
    layout_service: Annotated[LayoutService, Depends(get_layout_service)],
) -> LayoutResponse:
    """Get the saved station layout."""
    return await layout_service.get_layout(station.id)


@router.put("/layout", response_model=LayoutResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def save_layout(
    request: Request,
    response: Response,
    body: LayoutSaveRequest,
    current_user: ManagerUser,
    station: ManagedStation,
    layout_service: Annotated[LayoutService, Depends(get_layout_service)],
) -> LayoutResponse:
    """Create or replace the station layout. Returns 201 on first save."""
    result, created = await layout_service.save_layout(station.id, body, current_user)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return result


@router.get("/stats", response_model=ManagerStatsResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def get_stats(
    request: Request,
    station: ManagedStation,
    analytics_service: Annotated[AnalyticsService, Depends(get_analytics_service)],
) -> ManagerStatsResponse:
    """Get application and license counts for the station."""
    return await analytics_service.manager_stats(station.id)


@router.get("/analytics", response_model=ManagerAnalyticsResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def get_analytics(
    request: Request,
    station: ManagedStation,
    analytics_service: Annotated[AnalyticsService, Depends(get_analytics_service)],
) -> ManagerAnalyticsResponse:
    """Get revenue, dues and occupancy for the station."""
    return await analytics_service.manager_analytics(station.id)


# =============================================================================
# Applications
# =============================================================================


@router.get("/applications", response_model=ApplicationListResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def list_applications(
    request: Request,
    station: ManagedStation,
    application_service: Annotated[ApplicationService, Depends(get_application_service)],
    status_filter: str | None = Query(default=None, alias="status"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1),
) -> ApplicationListResponse:
    """List applications for the station, newest first."""
    return await application_service.list_applications(
        station_id=station.id,
        status=status_filter,
        page=page,
        limit=limit,
    )


@router.get("/applications/{application_id}", response_model=ApplicationDetailResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def get_application(
    request: Request,
    application_id: UUID,
    station: ManagedStation,
    application_service: Annotated[ApplicationService, Depends(get_application_service)],
) -> ApplicationDetailResponse:
    """Get an application with the vendor, documents and verification status."""
    return await application_service.get_application_detail(application_id, station.id)


@router.post("/applications/{application_id}/approve", response_model=ApprovalResponse)
@limiter.limit(SENSITIVE_OPERATION_LIMIT)
async def approve_application(
    request: Request,
    application_id: UUID,
    body: ApproveRequest,
    current_user: ManagerUser,
    station: ManagedStation,
    approval_service: Annotated[ApprovalService, Depends(get_approval_service)],
) -> ApprovalResponse:
    """Approve an application, issuing the agreement, license and first dues."""
    return await approval_service.approve(application_id, station.id, body, current_user)


@router.post("/applications/{application_id}/reject", response_model=ApplicationResponse)
@limiter.limit(SENSITIVE_OPERATION_LIMIT)
async def reject_application(
    request: Request,
    application_id: UUID,
    body: RejectRequest,
    current_user: ManagerUser,
    station: ManagedStation,
    application_service: Annotated[ApplicationService, Depends(get_application_service)],
) -> ApplicationResponse:
    """Reject an application with a reason."""
    return await application_service.reject(application_id, station.id, body.rejection_reason, current_user)


# =============================================================================
# Negotiation
# =============================================================================


@router.get("/negotiation/{application_id}", response_model=NegotiationRoomResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def get_negotiation(
    request: Request,
    application_id: UUID,
    station: ManagedStation,
    negotiation_service: Annotated[NegotiationService, Depends(get_negotiation_service)],
) -> NegotiationRoomResponse:
    """Get the negotiation room of an application."""
    return await negotiation_service.get_manager_room(application_id, station.id)


@router.post("/negotiation/{application_id}", response_model=NegotiationRoomResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def post_negotiation_message(
    request: Request,
    application_id: UUID,
    body: NegotiationMessageRequest,
    current_user: ManagerUser,
    station: ManagedStation,
    negotiation_service: Annotated[NegotiationService, Depends(get_negotiation_service)],
) -> NegotiationRoomResponse:
    """Post a message, counter offer or agreement to the vendor."""
    return await negotiation_service.post_manager_message(application_id, station.id, current_user, body)


# =============================================================================
# Documents and verification
# =============================================================================


@router.get("/documents", response_model=DocumentListResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def list_documents(
    request: Request,
    station: ManagedStation,
    document_service: Annotated[DocumentService, Depends(get_document_service)],
    vendor_id: UUID | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias="status"),
) -> DocumentListResponse:
    """List documents of vendors who applied to the station."""
    return await document_service.list_station_documents(station.id, vendor_id, status_filter)


@router.patch("/documents/{document_id}/verify", response_model=DocumentResponse)
@limiter.limit(SENSITIVE_OPERATION_LIMIT)
async def verify_document(
    request: Request,
    document_id: UUID,
    body: DocumentVerifyRequest,
    current_user: ManagerUser,
    station: ManagedStation,
    document_service: Annotated[DocumentService, Depends(get_document_service)],
) -> DocumentResponse:
    """Verify or reject a vendor document."""
    return await document_service.verify_document(document_id, body, current_user, station.id)


@router.patch("/vendor-verification", response_model=VerificationStatusResponse)
@limiter.limit(SENSITIVE_OPERATION_LIMIT)
async def verify_vendor_item(
    request: Request,
    body: VendorVerificationRequest,
    current_user: ManagerUser,
    station: ManagedStation,
    verification_service: Annotated[VerificationService, Depends(get_verification_service)],
) -> VerificationStatusResponse:
    """Verify or reject one item of a vendor profile."""
    return await verification_service.verify_item(body, current_user, station.id)


@router.get("/vendors/{vendor_id}/verification", response_model=VerificationStatusResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def get_vendor_verification(
    request: Request,
    vendor_id: UUID,
    station: ManagedStation,
    verification_service: Annotated[VerificationService, Depends(get_verification_service)],
) -> VerificationStatusResponse:
    """Get a vendor's verification status."""
    return await verification_service.get_status(vendor_id)


# =============================================================================
# Inspectors
# =============================================================================


@router.post("/inspectors", response_model=InspectorResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(SENSITIVE_OPERATION_LIMIT)
async def create_inspector(
    request: Request,
    body: InspectorCreate,
    current_user: ManagerUser,
    station: ManagedStation,
    inspector_service: Annotated[InspectorService, Depends(get_inspector_service)],
) -> InspectorResponse:
    """Create an inspector account for the station."""
    return await inspector_service.create_inspector(station.id, body, current_user)


@router.get("/inspectors", response_model=InspectorListResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def list_inspectors(
    request: Request,
    station: ManagedStation,
    inspector_service: Annotated[InspectorService, Depends(get_inspector_service)],
) -> InspectorListResponse:
    """List the station's inspectors."""
    return await inspector_service.list_inspectors(station.id)


# =============================================================================
# Payments and agreements
# =============================================================================


@router.get("/payments", response_model=PaymentListResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def list_payments(
    request: Request,
    station: ManagedStation,
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
    status_filter: str | None = Query(default=None, alias="status"),
    payment_type: str | None = Query(default=None, alias="type"),
) -> PaymentListResponse:
    """List the station's payments with recomputed statuses."""
    return await payment_service.list_station_payments(station.id, status_filter, payment_type)


@router.post("/payments", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(SENSITIVE_OPERATION_LIMIT)
async def create_payment(
    request: Request,
    body: PaymentCreateRequest,
    current_user: ManagerUser,
    station: ManagedStation,
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> PaymentResponse:
    """Raise a due for a vendor of the station."""
    return await payment_service.create_payment(station.id, body, current_user)


@router.post("/payments/{payment_id}/record", response_model=PaymentResponse)
@limiter.limit(SENSITIVE_OPERATION_LIMIT)
async def record_payment(
    request: Request,
    payment_id: UUID,
    body: RecordPaymentRequest,
    current_user: ManagerUser,
    station: ManagedStation,
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> PaymentResponse:
    """Record money received against a due."""
    return await payment_service.record_payment(payment_id, station.id, body, current_user)


@router.get("/agreements", response_model=list[AgreementResponse])
@limiter.limit(API_DEFAULT_LIMIT)
async def list_agreements(
    request: Request,
    station: ManagedStation,
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> list[AgreementResponse]:
    """List the station's vendor agreements."""
    return await payment_service.list_agreements(station.id)
