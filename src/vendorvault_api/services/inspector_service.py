"""Inspector account service."""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from vendorvault_api.constants.validation import PHONE_DIGITS_PATTERN
from vendorvault_api.exceptions import EmailAlreadyRegisteredError, ValidationError
from vendorvault_api.models.domain.user import CurrentUser, InspectorStatus, UserRole, UserStatus
from vendorvault_api.models.dto.inspection import (
    InspectorCreate,
    InspectorListResponse,
    InspectorResponse,
)
from vendorvault_api.models.orm.inspector import InspectorORM
from vendorvault_api.repositories.inspector_repository import InspectorRepository
from vendorvault_api.repositories.user_repository import UserRepository
from vendorvault_api.security.password import get_password_service
from vendorvault_api.utils.validation import capitalize_name, normalize_phone

logger = logging.getLogger(__name__)


def build_inspector_response(inspector: InspectorORM) -> InspectorResponse:
    """Build response from ORM model."""
    return InspectorResponse(
        id=inspector.id,
        user_id=inspector.user_id,
        station_id=inspector.station_id,
        name=inspector.user.name,
        email=inspector.user.email,
        phone=inspector.user.phone,
        employee_id=inspector.employee_id,
        designation=inspector.designation,
        status=inspector.status,
        total_inspections=inspector.total_inspections,
        created_at=inspector.created_at,
    )


class InspectorService:
    """Service for station inspectors."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.repo = InspectorRepository(session)
        self.user_repo = UserRepository(session)
        self.password_service = get_password_service()

    async def create_inspector(
        self,
        station_id: UUID,
        data: InspectorCreate,
        manager: CurrentUser,
    ) -> InspectorResponse:
        """Create an inspector account assigned to the manager's station.

        Raises:
            ValidationError: If the phone number is not 10 digits
            EmailAlreadyRegisteredError: If the email is taken
        """
        phone = normalize_phone(data.phone)
        if not PHONE_DIGITS_PATTERN.match(phone):
            raise ValidationError("Phone number must be 10 digits", field="phone")
        email = data.email.lower()
        if await self.user_repo.email_exists(email):
            raise EmailAlreadyRegisteredError(email)

        user = await self.user_repo.create(
            email=email,
            password_hash=self.password_service.hash_password(data.password),
            name=capitalize_name(data.name),
            phone=phone,
            role=UserRole.INSPECTOR.value,
            status=UserStatus.ACTIVE.value,
            railway_employee_id=data.employee_id,
            designation=data.designation,
            approved_by=manager.id,
        )
        inspector = await self.repo.create(
            user_id=user.id,
            station_id=station_id,
            employee_id=data.employee_id,
            designation=data.designation,
            status=InspectorStatus.ACTIVE.value,
            total_inspections=0,
            created_by=manager.id,
        )
        logger.info(f"Inspector {user.id} created for station {station_id} by {manager.id}")
        return build_inspector_response(inspector)

    async def list_inspectors(self, station_id: UUID) -> InspectorListResponse:
        """List the station's inspectors."""
        inspectors = await self.repo.list_for_station(station_id)
        return InspectorListResponse(
            inspectors=[build_inspector_response(i) for i in inspectors],
            total=len(inspectors),
        )
