"""Station layout service and shop size validation."""

import logging
import math
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from vendorvault_api.constants.validation import (
    AREA_TOLERANCE,
    DEFAULT_UNIT_TO_METERS,
    LAYOUT_VERSION,
    MAX_LAYOUT_OFFENDER_SAMPLES,
    MAX_SHOP_AREA_M2,
    MAX_SHOP_UNITS,
    MIN_SHOP_UNITS,
)
from vendorvault_api.exceptions import (
    ForbiddenError,
    LayoutLockedError,
    LayoutNotFoundError,
    LayoutValidationError,
    StationNotFoundError,
    ValidationError,
)
from vendorvault_api.models.domain.user import CurrentUser
from vendorvault_api.models.dto.station import (
    LayoutResponse,
    LayoutSaveRequest,
    LayoutSummary,
    PublicLayoutResponse,
    PublicPlatform,
    PublicShop,
    StationResponse,
)
from vendorvault_api.models.orm.station import StationLayoutORM
from vendorvault_api.repositories.station_repository import (
    StationLayoutRepository,
    StationRepository,
)

logger = logging.getLogger(__name__)


def effective_max_units(unit_to_meters: float) -> int:
    """Largest allowed shop side in canvas units for a unit scale.

    A square shop of this side has an area of about MAX_SHOP_AREA_M2, clamped
    to [MIN_SHOP_UNITS, MAX_SHOP_UNITS].
    """
    side = math.floor(math.sqrt(MAX_SHOP_AREA_M2) / unit_to_meters + AREA_TOLERANCE)
    return min(MAX_SHOP_UNITS, max(MIN_SHOP_UNITS, side))


def _dimension(value: Any, fallback: float) -> float:
    """A shop side in canvas units. Only a missing value takes the fallback."""
    return fallback if value is None else float(value)


def find_layout_offenders(platforms: list[dict[str, Any]], unit_to_meters: float) -> list[dict[str, Any]]:
    """Find shops whose size is outside the allowed bounds.

    A shop offends when its width or height (height falls back to width) is
    outside [MIN_SHOP_UNITS, effective max], or its floor area exceeds
    MAX_SHOP_AREA_M2.

    Args:
        platforms: Layout platforms with their shops
        unit_to_meters: Canvas unit to meter scale, must be positive

    Returns:
        One entry per offending shop with platform, shop_id, width, height and area_m2

    Raises:
        ValidationError: If unit_to_meters is not positive
    """
    if unit_to_meters <= 0:
        raise ValidationError("unit_to_meters must be greater than 0", field="pricing.unit_to_meters")

    max_units = effective_max_units(unit_to_meters)
    offenders: list[dict[str, Any]] = []
    for platform in platforms:
        platform_ref = platform.get("name") or platform.get("number") or platform.get("id")
        for shop in platform.get("shops", []):
            width = _dimension(shop.get("width"), 0.0)
            height = _dimension(shop.get("height"), width)
            area_m2 = width * height * unit_to_meters**2
            out_of_bounds = not (MIN_SHOP_UNITS <= width <= max_units) or not (
                MIN_SHOP_UNITS <= height <= max_units
            )
            if out_of_bounds or area_m2 > MAX_SHOP_AREA_M2 + AREA_TOLERANCE:
                offenders.append(
                    {
                        "platform": platform_ref,
                        "shop_id": shop.get("id"),
                        "width": width,
                        "height": height,
                        "area_m2": round(area_m2, 4),
                    }
                )
    return offenders


def summarize_layout(platforms: list[dict[str, Any]]) -> LayoutSummary:
    """Count shops and allocations of a layout."""
    total = 0
    allocated = 0
    for platform in platforms:
        for shop in platform.get("shops", []):
            total += 1
            if shop.get("is_allocated"):
                allocated += 1
    return LayoutSummary(
        platforms=len(platforms),
        total_shops=total,
        allocated_shops=allocated,
        available_shops=total - allocated,
    )


def _preserve_allocations(
    new_platforms: list[dict[str, Any]],
    old_platforms: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Carry allocation fields of existing shops over to the saved layout.

    Shops that were not allocated before are saved as available, whatever
    allocation fields the client sent.
    """
    allocated = {
        shop["id"]: shop
        for platform in old_platforms
        for shop in platform.get("shops", [])
        if shop.get("is_allocated") and shop.get("id")
    }
    for platform in new_platforms:
        for shop in platform.get("shops", []):
            previous = allocated.get(shop.get("id"))
            if previous is not None:
                shop["is_allocated"] = True
                shop["vendor_id"] = previous.get("vendor_id")
                shop["rent"] = previous.get("rent")
                shop["shop_name"] = previous.get("shop_name")
            else:
                shop["is_allocated"] = False
                shop["vendor_id"] = None
    return new_platforms


class LayoutService:
    """Service for station layouts."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.station_repo = StationRepository(session)
        self.layout_repo = StationLayoutRepository(session)

    async def get_layout(self, station_id: UUID) -> LayoutResponse:
        """Get the saved layout of a station.

        Raises:
            LayoutNotFoundError: If no layout has been saved
        """
        layout = await self.layout_repo.get_by_station(station_id)
        if layout is None:
            raise LayoutNotFoundError()
        return LayoutResponse.model_validate(layout)

    async def save_layout(
        self,
        station_id: UUID,
        data: LayoutSaveRequest,
        user: CurrentUser,
    ) -> tuple[LayoutResponse, bool]:
        """Create or replace a station layout.

        Args:
            station_id: Station UUID
            data: Full layout
            user: Station manager saving the layout

        Returns:
            Tuple of (saved layout, created flag)

        Raises:
            ForbiddenError: If the user does not manage the station
            LayoutLockedError: If the layout is locked
            LayoutValidationError: If any shop is out of bounds
        """
        station = await self.station_repo.get_by_id(station_id)
        if station is None:
            raise StationNotFoundError(str(station_id))
        if station.station_manager_id != user.id:
            raise ForbiddenError("Only the station manager can edit this layout")

        layout = await self.layout_repo.get_by_station(station_id)
        if layout is not None and layout.is_locked:
            raise LayoutLockedError()

        platforms = [p.model_dump() for p in data.platforms]
        offenders = find_layout_offenders(platforms, data.pricing.unit_to_meters)
        if offenders:
            logger.warning(f"Rejected layout for station {station_id}: {len(offenders)} shops out of bounds")
            raise LayoutValidationError(
                f"Shop size must be between {MIN_SHOP_UNITS} and "
                f"{effective_max_units(data.pricing.unit_to_meters)} units and at most "
                f"{MAX_SHOP_AREA_M2:g} m²",
                offenders[:MAX_LAYOUT_OFFENDER_SAMPLES],
                len(offenders),
            )

        fields = {
            "infrastructure_blocks": data.infrastructure_blocks,
            "canvas_settings": data.canvas_settings.model_dump(),
            "pricing": data.pricing.model_dump(),
        }
        created = layout is None
        platforms = _preserve_allocations(platforms, [] if created else layout.platforms or [])
        if created:
            layout = await self.layout_repo.create(
                station_id=station_id,
                platforms=platforms,
                version=LAYOUT_VERSION,
                created_by=user.id,
                **fields,
            )
        else:
            layout = await self.layout_repo.update(layout, platforms=platforms, **fields)

        await self.station_repo.update(station, layout_completed=True)
        logger.info(f"Layout {'created' if created else 'updated'} for station {station.station_code}")
        return LayoutResponse.model_validate(layout), created

    async def get_public_layout(self, station_code: str) -> PublicLayoutResponse:
        """Public view of a station's shops with availability.

        Raises:
            StationNotFoundError: If the station does not exist
            LayoutNotFoundError: If the station has no layout
        """
        station = await self.station_repo.get_by_code(station_code)
        if station is None:
            raise StationNotFoundError(station_code)
        layout = await self.layout_repo.get_by_station(station.id)
        if layout is None:
            raise LayoutNotFoundError()

        platforms = []
        for platform in layout.platforms or []:
            shops = [
                PublicShop(
                    id=str(shop.get("id")),
                    x=float(shop.get("x") or 0),
                    width=_dimension(shop.get("width"), 0.0),
                    height=_dimension(shop.get("height"), _dimension(shop.get("width"), 0.0)),
                    category=shop.get("category"),
                    shop_name=shop.get("shop_name"),
                    rent=shop.get("rent"),
                    is_available=not shop.get("is_allocated", False),
                )
                for shop in platform.get("shops", [])
            ]
            platforms.append(
                PublicPlatform(
                    id=str(platform.get("id")),
                    name=platform.get("name"),
                    number=platform.get("number"),
                    shops=shops,
                )
            )

        return PublicLayoutResponse(
            station=StationResponse.model_validate(station),
            platforms=platforms,
            pricing=layout.pricing or {"unit_to_meters": DEFAULT_UNIT_TO_METERS},
            canvas_settings=layout.canvas_settings or {},
        )

    async def allocate_shop(
        self,
        station_id: UUID,
        shop_id: str,
        vendor_id: UUID,
        rent: float,
        shop_name: str | None,
    ) -> bool:
        """Mark a layout shop as allocated to a vendor.

        Returns:
            True if the shop was found in the layout
        """
        layout = await self.layout_repo.get_by_station(station_id)
        if layout is None:
            return False
        platforms, found = _with_allocation(layout, shop_id, vendor_id, rent, shop_name)
        if found:
            # JSON columns only detect reassignment
            layout.platforms = platforms
            await self.session.flush()
        return found


def _with_allocation(
    layout: StationLayoutORM,
    shop_id: str,
    vendor_id: UUID,
    rent: float,
    shop_name: str | None,
) -> tuple[list[dict[str, Any]], bool]:
    platforms = [
        {**platform, "shops": [dict(shop) for shop in platform.get("shops", [])]}
        for platform in layout.platforms or []
    ]
    found = False
    for platform in platforms:
        for shop in platform["shops"]:
            if str(shop.get("id")) == shop_id:
                shop.update(
                    is_allocated=True,
                    vendor_id=str(vendor_id),
                    rent=rent,
                    shop_name=shop_name or shop.get("shop_name"),
                )
                found = True
    return platforms, found
