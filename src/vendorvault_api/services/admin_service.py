"""Railway admin service for station manager onboarding and users."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from vendorvault_api.exceptions import BadRequestError, UserNotFoundError, ValidationError
from vendorvault_api.models.domain.notification import NotificationType
from vendorvault_api.models.domain.station import ApprovalStatus, OperationalStatus
from vendorvault_api.models.domain.user import CurrentUser, UserRole, UserStatus
from vendorvault_api.models.dto.admin import (
    ManagerDecisionResponse,
    PendingManagerListResponse,
    PendingManagerResponse,
    UserListResponse,
)
from vendorvault_api.models.dto.auth import UserResponse
from vendorvault_api.models.dto.station import StationResponse
from vendorvault_api.models.orm.user import UserORM
from vendorvault_api.repositories.station_repository import StationRepository
from vendorvault_api.repositories.user_repository import UserRepository
from vendorvault_api.services.notification_service import NotificationService
from vendorvault_api.utils.dates import utcnow
from vendorvault_api.utils.pagination import build_pagination, clamp_page, offset_for

logger = logging.getLogger(__name__)


def _parse_enum(value: str | None, enum: type, field: str) -> str | None:
    if not value:
        return None
    try:
        return enum(value.upper()).value
    except ValueError as e:
        raise ValidationError(f"Invalid {field}", field=field) from e


class AdminService:
    """Service for railway admin user management."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.user_repo = UserRepository(session)
        self.station_repo = StationRepository(session)
        self.notification_service = NotificationService(session)

    async def list_pending_managers(self) -> PendingManagerListResponse:
        """List PENDING station managers with the station they applied for."""
        users = await self.user_repo.list_by_role(UserRole.STATION_MANAGER.value, UserStatus.PENDING.value)
        stations = await self.station_repo.get_by_managers([u.id for u in users])
        managers = [
            PendingManagerResponse(
                user=UserResponse.model_validate(user),
                station=StationResponse.model_validate(stations[user.id]) if user.id in stations else None,
            )
            for user in users
        ]
        return PendingManagerListResponse(managers=managers, total=len(managers))

    async def _get_pending_manager(self, user_id: UUID) -> UserORM:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(str(user_id))
        if user.role != UserRole.STATION_MANAGER or user.status != UserStatus.PENDING:
            raise BadRequestError("User is not a pending station manager")
        return user

    async def approve_manager(self, user_id: UUID, admin: CurrentUser) -> ManagerDecisionResponse:
        """Activate a station manager and approve their station.

        Raises:
            UserNotFoundError: If the user does not exist
            BadRequestError: If the user is not a pending station manager
        """
        user = await self._get_pending_manager(user_id)
        now = utcnow()
        user = await self.user_repo.update(
            user,
            status=UserStatus.ACTIVE.value,
            approved_by=admin.id,
            approved_at=now,
            rejection_reason=None,
        )

        station = await self.station_repo.get_by_manager(user.id)
        if station is not None:
            station = await self.station_repo.update(
                station,
                approval_status=ApprovalStatus.APPROVED.value,
                operational_status=OperationalStatus.ACTIVE.value,
                approved_by=admin.id,
                approved_at=now,
                rejection_reason=None,
            )

        await self.notification_service.notify(
            user.id,
            NotificationType.SYSTEM_ANNOUNCEMENT,
            "Station Manager Application Approved",
            "Your station manager account has been approved. You can now sign in.",
            action_url="/station-manager",
        )
        logger.info(f"Station manager {user.id} approved by {admin.id}")
        return ManagerDecisionResponse(
            message="Station manager approved",
            user=UserResponse.model_validate(user),
            station=StationResponse.model_validate(station) if station else None,
        )

    async def reject_manager(self, user_id: UUID, reason: str | None, admin: CurrentUser) -> ManagerDecisionResponse:
        """Reject a station manager and their station.

        Raises:
            ValidationError: If no reason is given
            UserNotFoundError: If the user does not exist
            BadRequestError: If the user is not a pending station manager
        """
        if not reason or not reason.strip():
            raise ValidationError("Rejection reason is required", field="reason")
        reason = reason.strip()
        user = await self._get_pending_manager(user_id)
        user = await self.user_repo.update(user, status=UserStatus.REJECTED.value, rejection_reason=reason)

        station = await self.station_repo.get_by_manager(user.id)
        if station is not None:
            station = await self.station_repo.update(
                station,
                approval_status=ApprovalStatus.REJECTED.value,
                rejection_reason=reason,
            )

        logger.info(f"Station manager {user.id} rejected by {admin.id}")
        return ManagerDecisionResponse(
            message="Station manager rejected",
            user=UserResponse.model_validate(user),
            station=StationResponse.model_validate(station) if station else None,
        )

    async def list_users(
        self,
        role: str | None = None,
        status: str | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> UserListResponse:
        """List users with optional role and status filters."""
        role = _parse_enum(role, UserRole, "role")
        status = _parse_enum(status, UserStatus, "status")
        page, limit = clamp_page(page, limit)
        users, total = await self.user_repo.list_users(
            role=role,
            status=status,
            offset=offset_for(page, limit),
            limit=limit,
        )
        return UserListResponse(
            users=[UserResponse.model_validate(u) for u in users],
            pagination=build_pagination(page, limit, total),
        )
