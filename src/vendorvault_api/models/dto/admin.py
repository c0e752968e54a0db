"""Railway admin and dashboard DTOs."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from vendorvault_api.models.dto.application import ApplicationResponse
from vendorvault_api.models.dto.auth import UserResponse
from vendorvault_api.models.dto.common import Pagination
from vendorvault_api.models.dto.document import DocumentResponse
from vendorvault_api.models.dto.license import LicenseResponse
from vendorvault_api.models.dto.negotiation import NegotiationSummary
from vendorvault_api.models.dto.payment import AgreementResponse
from vendorvault_api.models.dto.station import StationResponse
from vendorvault_api.models.dto.vendor import VerificationStatusResponse


class PendingManagerResponse(BaseModel):
    """A station manager awaiting approval and the station they applied for."""

    user: UserResponse
    station: StationResponse | None = None


class PendingManagerListResponse(BaseModel):
    """Pending station manager applications."""

    managers: list[PendingManagerResponse]
    total: int


class ManagerRejectRequest(BaseModel):
    """Rejection of a station manager application."""

    reason: str | None = Field(default=None, max_length=2000)


class ManagerDecisionResponse(BaseModel):
    """Result of approving or rejecting a station manager."""

    success: bool = True
    message: str
    user: UserResponse
    station: StationResponse | None = None


class UserListResponse(BaseModel):
    """Paginated user list."""

    users: list[UserResponse]
    pagination: Pagination


class AdminStatsResponse(BaseModel):
    """Platform-wide counts."""

    users_by_role: dict[str, int]
    total_users: int
    station_managers_by_status: dict[str, int]
    stations_by_approval_status: dict[str, int]
    licenses_by_status: dict[str, int]
    vendor_count: int


class ManagerStatsResponse(BaseModel):
    """Station manager dashboard counts."""

    applications_by_status: dict[str, int]
    total_applications: int
    licenses_by_status: dict[str, int]
    active_licenses: int
    recent_applications: list[ApplicationResponse]


class MonthlyCollection(BaseModel):
    """Collections in one billing month."""

    month: str
    collected: float


class ManagerAnalyticsResponse(BaseModel):
    """Station revenue and occupancy figures."""

    revenue_collected: float
    pending_dues: float
    total_shops: int
    allocated_shops: int
    occupancy_rate: float
    applications_by_status: dict[str, int]
    monthly_collections: list[MonthlyCollection]


class ApplicationDetailResponse(BaseModel):
    """Application with everything a station manager needs to decide."""

    application: ApplicationResponse
    vendor: dict[str, Any]
    documents: list[DocumentResponse]
    verification_status: VerificationStatusResponse
    negotiation: NegotiationSummary | None = None


class ApprovalResponse(BaseModel):
    """Result of approving an application."""

    success: bool = True
    message: str
    application_id: UUID
    license: LicenseResponse
    agreement: AgreementResponse
    approved_at: datetime
