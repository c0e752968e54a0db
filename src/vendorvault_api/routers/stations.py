"""Public station directory router."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from vendorvault_api.dependencies import get_layout_service, get_station_service
from vendorvault_api.models.dto.station import PublicLayoutResponse, StationListResponse
from vendorvault_api.security.rate_limit import API_DEFAULT_LIMIT, limiter
from vendorvault_api.services.layout_service import LayoutService
from vendorvault_api.services.station_service import StationService

router = APIRouter()


@router.get("", response_model=StationListResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def list_stations(
    request: Request,
    station_service: Annotated[StationService, Depends(get_station_service)],
) -> StationListResponse:
    """List stations open for vendor applications."""
    return await station_service.list_public()


@router.get("/search", response_model=StationListResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def search_stations(
    request: Request,
    station_service: Annotated[StationService, Depends(get_station_service)],
    q: str | None = Query(default=None, max_length=100),
) -> StationListResponse:
    """Search approved stations by name or code."""
    return await station_service.search(q)


@router.get("/{station_code}/layout", response_model=PublicLayoutResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def get_station_layout(
    request: Request,
    station_code: str,
    layout_service: Annotated[LayoutService, Depends(get_layout_service)],
) -> PublicLayoutResponse:
    """Get the shop layout of a station for vendors choosing a slot."""
    return await layout_service.get_public_layout(station_code)
