"""Station service."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from vendorvault_api.constants.validation import STATION_SEARCH_LIMIT
from vendorvault_api.exceptions import StationNotFoundError
from vendorvault_api.models.dto.station import (
    AdminStationListResponse,
    ManagerStationResponse,
    StationListResponse,
    StationResponse,
    StationUpdate,
)
from vendorvault_api.models.orm.station import StationORM
from vendorvault_api.repositories.station_repository import (
    StationLayoutRepository,
    StationRepository,
)
from vendorvault_api.services.layout_service import summarize_layout
from vendorvault_api.utils.pagination import build_pagination, clamp_page, offset_for
from vendorvault_api.utils.validation import sanitize_search

logger = logging.getLogger(__name__)


class StationService:
    """Service for station lookup and administration."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.repo = StationRepository(session)
        self.layout_repo = StationLayoutRepository(session)

    async def list_public(self) -> StationListResponse:
        """List stations open for vendor applications."""
        stations = await self.repo.list_public()
        return StationListResponse(
            stations=[StationResponse.model_validate(s) for s in stations],
            total=len(stations),
        )

    async def search(self, query: str | None) -> StationListResponse:
        """Search approved stations by name or code."""
        term = sanitize_search(query)
        if not term:
            return StationListResponse(stations=[], total=0)
        stations = await self.repo.search(term, STATION_SEARCH_LIMIT)
        return StationListResponse(
            stations=[StationResponse.model_validate(s) for s in stations],
            total=len(stations),
        )

    async def get_managed_station(self, manager_id: UUID) -> StationORM:
        """Get the station a manager is responsible for.

        Raises:
            StationNotFoundError: If the manager has no station
        """
        station = await self.repo.get_by_manager(manager_id)
        if station is None:
            raise StationNotFoundError()
        return station

    async def get_manager_station(self, manager_id: UUID) -> ManagerStationResponse:
        """Get the manager's station with a layout summary."""
        station = await self.get_managed_station(manager_id)
        layout = await self.layout_repo.get_by_station(station.id)
        return ManagerStationResponse(
            station=StationResponse.model_validate(station),
            layout=summarize_layout(layout.platforms or []) if layout else None,
        )

    async def list_stations(
        self,
        approval_status: str | None,
        query: str | None,
        page: int | None,
        limit: int | None,
    ) -> AdminStationListResponse:
        """List stations for railway admins."""
        page, limit = clamp_page(page, limit)
        stations, total = await self.repo.list_filtered(
            approval_status=approval_status,
            term=sanitize_search(query),
            offset=offset_for(page, limit),
            limit=limit,
        )
        return AdminStationListResponse(
            stations=[StationResponse.model_validate(s) for s in stations],
            pagination=build_pagination(page, limit, total),
        )

    async def get_station(self, station_id: UUID) -> StationResponse:
        """Get a station by ID.

        Raises:
            StationNotFoundError: If the station does not exist
        """
        station = await self.repo.get_by_id(station_id)
        if station is None:
            raise StationNotFoundError(str(station_id))
        return StationResponse.model_validate(station)

    async def update_station(self, station_id: UUID, data: StationUpdate) -> StationResponse:
        """Update operational attributes of a station.

        Raises:
            StationNotFoundError: If the station does not exist
        """
        station = await self.repo.get_by_id(station_id)
        if station is None:
            raise StationNotFoundError(str(station_id))

        changes = {
            key: value.value if hasattr(value, "value") else value
            for key, value in data.model_dump(exclude_none=True).items()
        }
        station = await self.repo.update(station, **changes)
        logger.info(f"Station {station.station_code} updated: {sorted(changes)}")
        return StationResponse.model_validate(station)
