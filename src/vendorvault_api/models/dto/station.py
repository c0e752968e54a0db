"""Station and layout DTOs."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from vendorvault_api.constants.validation import DEFAULT_UNIT_TO_METERS
from vendorvault_api.models.domain.station import (
    ApprovalStatus,
    OperationalStatus,
    StationCategory,
)
from vendorvault_api.models.dto.common import Pagination


class StationResponse(BaseModel):
    """Station response DTO."""

    id: UUID
    station_name: str
    station_code: str
    railway_zone: str
    division: str | None = None
    station_category: str
    platforms_count: int
    daily_footfall_avg: int
    address: str | None = None
    station_manager_id: UUID | None = None
    operational_status: OperationalStatus
    approval_status: ApprovalStatus
    layout_completed: bool
    rejection_reason: str | None = None
    approved_at: datetime | None = None
    created_at: datetime

    class Config:
        """Pydantic config."""

        from_attributes = True


class StationListResponse(BaseModel):
    """Public station list."""

    stations: list[StationResponse]
    total: int


class AdminStationListResponse(BaseModel):
    """Paginated station list for railway admins."""

    stations: list[StationResponse]
    pagination: Pagination


class StationUpdate(BaseModel):
    """Admin update of station attributes."""

    operational_status: OperationalStatus | None = None
    daily_footfall_avg: int | None = Field(default=None, ge=0)
    platforms_count: int | None = Field(default=None, ge=1, le=100)
    station_category: StationCategory | None = None


# =============================================================================
# Layout
# =============================================================================


class LayoutShop(BaseModel):
    """A shop slot drawn on a platform, measured in canvas units."""

    id: str = Field(min_length=1, max_length=100)
    x: float = 0
    y: float | None = None
    width: float
    height: float | None = None
    category: str | None = Field(default=None, max_length=50)
    is_allocated: bool = False
    vendor_id: str | None = None
    rent: float | None = None
    shop_name: str | None = Field(default=None, max_length=255)

    class Config:
        """Pydantic config."""

        extra = "allow"


class LayoutPlatform(BaseModel):
    """A platform and its shops."""

    id: str = Field(min_length=1, max_length=100)
    name: str | None = Field(default=None, max_length=100)
    number: int | str | None = None
    shops: list[LayoutShop] = Field(default_factory=list)

    class Config:
        """Pydantic config."""

        extra = "allow"


class CanvasSettings(BaseModel):
    """Layout editor canvas dimensions."""

    width: int = 2000
    height: int = 1200
    grid_size: int = 20


class LayoutPricing(BaseModel):
    """Pricing parameters of a layout."""

    unit_to_meters: float = DEFAULT_UNIT_TO_METERS
    price_per_100x100_single: float = 5000
    price_per_100x100_dual: float = 7500
    security_deposit_rate: float = 3


class LayoutSaveRequest(BaseModel):
    """Full layout as saved by the layout editor."""

    platforms: list[LayoutPlatform] = Field(default_factory=list, max_length=100)
    infrastructure_blocks: list[dict[str, Any]] = Field(default_factory=list, max_length=1000)
    canvas_settings: CanvasSettings = Field(default_factory=CanvasSettings)
    pricing: LayoutPricing = Field(default_factory=LayoutPricing)


class LayoutResponse(BaseModel):
    """Saved station layout."""

    id: UUID
    station_id: UUID
    platforms: list[dict[str, Any]]
    infrastructure_blocks: list[dict[str, Any]]
    canvas_settings: dict[str, Any]
    pricing: dict[str, Any]
    is_locked: bool
    version: str
    updated_at: datetime

    class Config:
        """Pydantic config."""

        from_attributes = True


class LayoutSummary(BaseModel):
    """Shop counts of a layout."""

    platforms: int
    total_shops: int
    allocated_shops: int
    available_shops: int


class ManagerStationResponse(BaseModel):
    """The manager's station with a layout summary."""

    station: StationResponse
    layout: LayoutSummary | None = None


class PublicShop(BaseModel):
    """A shop as shown to vendors browsing a station."""

    id: str
    x: float
    width: float
    height: float
    category: str | None = None
    shop_name: str | None = None
    rent: float | None = None
    is_available: bool


class PublicPlatform(BaseModel):
    """A platform as shown to vendors browsing a station."""

    id: str
    name: str | None = None
    number: int | str | None = None
    shops: list[PublicShop]


class PublicLayoutResponse(BaseModel):
    """Public view of a station layout."""

    station: StationResponse
    platforms: list[PublicPlatform]
    pricing: dict[str, Any]
    canvas_settings: dict[str, Any]
