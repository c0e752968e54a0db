"""Rent negotiation between vendors and station managers."""

import logging
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from vendorvault_api.constants.validation import DEFAULT_LICENSE_VALIDITY_MONTHS, MAX_COUNTER_OFFERS
from vendorvault_api.exceptions import (
    ApplicationNotFoundError,
    BadRequestError,
    InvalidStatusTransitionError,
    ValidationError,
)
from vendorvault_api.models.domain.application import (
    OPEN_APPLICATION_STATUSES,
    ApplicationStatus,
)
from vendorvault_api.models.domain.negotiation import (
    MessageType,
    NegotiationAction,
    NegotiationStatus,
    SenderRole,
)
from vendorvault_api.models.domain.notification import NotificationType
from vendorvault_api.models.domain.user import CurrentUser
from vendorvault_api.models.dto.negotiation import (
    NegotiationMessageRequest,
    NegotiationRoomResponse,
)
from vendorvault_api.models.orm.application import ShopApplicationORM
from vendorvault_api.models.orm.negotiation import NegotiationRoomORM
from vendorvault_api.repositories.application_repository import ApplicationRepository
from vendorvault_api.repositories.negotiation_repository import NegotiationRepository
from vendorvault_api.services.application_service import record_status
from vendorvault_api.services.notification_service import NotificationService
from vendorvault_api.utils.dates import iso, utcnow

logger = logging.getLogger(__name__)


def _money(value: Decimal | float | None) -> float | None:
    return float(value) if value is not None else None


def _message(
    sender: CurrentUser,
    role: SenderRole,
    message_type: MessageType,
    content: str,
    proposed_rent: Decimal | None = None,
    proposed_deposit: Decimal | None = None,
) -> dict[str, Any]:
    return {
        "message_id": str(uuid4()),
        "sender_id": str(sender.id),
        "sender_role": role.value,
        "sender_name": sender.name,
        "message_type": message_type.value,
        "content": content,
        "proposed_rent": _money(proposed_rent),
        "proposed_deposit": _money(proposed_deposit),
        "is_read": False,
        "timestamp": iso(utcnow()),
    }


class NegotiationService:
    """Service for negotiation rooms."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.repo = NegotiationRepository(session)
        self.application_repo = ApplicationRepository(session)
        self.notification_service = NotificationService(session)

    async def _vendor_application(self, application_id: UUID, vendor_id: UUID) -> ShopApplicationORM:
        application = await self.application_repo.get_for_vendor(application_id, vendor_id)
        if application is None:
            raise ApplicationNotFoundError(str(application_id))
        return application

    async def _station_application(self, application_id: UUID, station_id: UUID) -> ShopApplicationORM:
        application = await self.application_repo.get_for_station(application_id, station_id)
        if application is None:
            raise ApplicationNotFoundError(str(application_id))
        return application

    async def _get_or_create(self, application: ShopApplicationORM) -> NegotiationRoomORM:
        """Get the application's room, opening it with the quoted terms."""
        room = await self.repo.get_by_application(application.id)
        if room is not None:
            return room
        now = utcnow()
        room = await self.repo.create(
            application_id=application.id,
            vendor_id=application.vendor_id,
            station_manager_id=application.station.station_manager_id if application.station else None,
            status=NegotiationStatus.ACTIVE.value,
            current_offer={
                "rent": float(application.quoted_rent),
                "security_deposit": float(application.security_deposit),
                "duration": DEFAULT_LICENSE_VALIDITY_MONTHS,
                "proposed_by": SenderRole.VENDOR.value,
                "proposed_at": iso(application.submitted_at or now),
            },
            messages=[],
            counter_offer_count=0,
            max_counter_offers=MAX_COUNTER_OFFERS,
            last_activity_at=now,
        )
        logger.info(f"Opened negotiation room for application {application.id}")
        return room

    async def get_vendor_room(self, application_id: UUID, vendor: CurrentUser) -> NegotiationRoomResponse:
        """Get or open the negotiation room of the vendor's application."""
        application = await self._vendor_application(application_id, vendor.id)
        room = await self._get_or_create(application)
        return NegotiationRoomResponse.model_validate(room)

    async def get_manager_room(self, application_id: UUID, station_id: UUID) -> NegotiationRoomResponse:
        """Get or open the negotiation room of a station application."""
        application = await self._station_application(application_id, station_id)
        room = await self._get_or_create(application)
        return NegotiationRoomResponse.model_validate(room)

    def _ensure_open(self, room: NegotiationRoomORM, application: ShopApplicationORM) -> None:
        if room.status != NegotiationStatus.ACTIVE:
            raise InvalidStatusTransitionError("negotiation", room.status, "post to")
        if application.status not in OPEN_APPLICATION_STATUSES:
            raise InvalidStatusTransitionError("application", application.status, "negotiate")

    def _apply_counter_offer(
        self,
        room: NegotiationRoomORM,
        role: SenderRole,
        rent: Decimal,
        deposit: Decimal | None,
    ) -> None:
        """Record a counter-offer as the room's current offer.

        Raises:
            BadRequestError: If the counter-offer limit is reached
        """
        if room.counter_offer_count >= room.max_counter_offers:
            raise BadRequestError(
                "Maximum number of counter offers reached",
                {"max_counter_offers": room.max_counter_offers},
            )
        current = room.current_offer or {}
        room.current_offer = {
            **current,
            "rent": float(rent),
            "security_deposit": _money(deposit) if deposit is not None else current.get("security_deposit"),
            "proposed_by": role.value,
            "proposed_at": iso(utcnow()),
        }
        room.counter_offer_count += 1

    def _append(self, room: NegotiationRoomORM, message: dict[str, Any]) -> None:
        # JSON columns only detect reassignment
        room.messages = [*(room.messages or []), message]
        room.last_activity_at = utcnow()

    def _start_negotiation(self, application: ShopApplicationORM, user: CurrentUser) -> None:
        if application.status == ApplicationStatus.SUBMITTED:
            record_status(application, ApplicationStatus.NEGOTIATION, user.id, "Negotiation started")

    async def post_vendor_message(
        self,
        application_id: UUID,
        vendor: CurrentUser,
        data: NegotiationMessageRequest,
    ) -> NegotiationRoomResponse:
        """Post a message or counter-offer as the vendor.

        Raises:
            ValidationError: If neither a message nor a rent is given
            InvalidStatusTransitionError: If the room or application is closed
            BadRequestError: If the counter-offer limit is reached
        """
        if not (data.message and data.message.strip()) and data.proposed_rent is None:
            raise ValidationError("Message or proposed rent is required", field="message")

        application = await self._vendor_application(application_id, vendor.id)
        room = await self._get_or_create(application)
        self._ensure_open(room, application)

        message_type = MessageType.TEXT
        content = (data.message or "").strip()
        if data.proposed_rent is not None:
            self._apply_counter_offer(room, SenderRole.VENDOR, data.proposed_rent, data.proposed_deposit)
            message_type = MessageType.COUNTER_OFFER
            content = content or f"Counter offer: monthly rent ₹{data.proposed_rent}"

        self._append(
            room,
            _message(vendor, SenderRole.VENDOR, message_type, content, data.proposed_rent, data.proposed_deposit),
        )
        self._start_negotiation(application, vendor)
        await self.session.flush()

        manager_id = room.station_manager_id or (
            application.station.station_manager_id if application.station else None
        )
        if manager_id:
            await self.notification_service.notify(
                manager_id,
                NotificationType.NEGOTIATION_MESSAGE,
                "New Negotiation Message",
                f"{vendor.name} sent a message about shop {application.shop_name or application.shop_id}.",
                action_url=f"/station-manager/negotiation/{application.id}",
                metadata={"application_id": str(application.id), "message_type": message_type.value},
            )
        return NegotiationRoomResponse.model_validate(room)

    async def post_manager_message(
        self,
        application_id: UUID,
        station_id: UUID,
        manager: CurrentUser,
        data: NegotiationMessageRequest,
    ) -> NegotiationRoomResponse:
        """Post a message, counter-offer or agreement as the station manager.

        Raises:
            ValidationError: If AGREE has no rent or a message has no text
            InvalidStatusTransitionError: If the room or application is closed
            BadRequestError: If the counter-offer limit is reached
        """
        application = await self._station_application(application_id, station_id)

        if data.action == NegotiationAction.AGREE:
            if data.proposed_rent is None:
                raise ValidationError("Agreed rent is required", field="proposed_rent")
            room = await self._get_or_create(application)
            self._ensure_open(room, application)
            return await self._agree(room, application, manager, data)

        if not data.message or not data.message.strip():
            raise ValidationError("Message is required", field="message")

        room = await self._get_or_create(application)
        self._ensure_open(room, application)
        if room.station_manager_id is None:
            room.station_manager_id = manager.id

        message_type = MessageType.TEXT
        if data.proposed_rent is not None:
            self._apply_counter_offer(room, SenderRole.STATION_MANAGER, data.proposed_rent, data.proposed_deposit)
            message_type = MessageType.COUNTER_OFFER

        self._append(
            room,
            _message(
                manager,
                SenderRole.STATION_MANAGER,
                message_type,
                data.message.strip(),
                data.proposed_rent,
                data.proposed_deposit,
            ),
        )
        self._start_negotiation(application, manager)
        await self.session.flush()

        await self._notify_vendor(
            application,
            "New Negotiation Message",
            f"The station manager replied about shop {application.shop_name or application.shop_id}.",
            message_type,
        )
        return NegotiationRoomResponse.model_validate(room)

    async def _agree(
        self,
        room: NegotiationRoomORM,
        application: ShopApplicationORM,
        manager: CurrentUser,
        data: NegotiationMessageRequest,
    ) -> NegotiationRoomResponse:
        rent: Decimal = data.proposed_rent
        deposit = data.proposed_deposit
        if deposit is None:
            offered = (room.current_offer or {}).get("security_deposit")
            deposit = Decimal(str(offered)) if offered is not None else application.security_deposit

        now = utcnow()
        room.status = NegotiationStatus.AGREED.value
        room.station_manager_id = room.station_manager_id or manager.id
        room.final_agreement = {
            "agreed_rent": float(rent),
            "agreed_deposit": float(deposit),
            "agreed_by": str(manager.id),
            "agreed_at": iso(now),
        }
        room.current_offer = {
            **(room.current_offer or {}),
            "rent": float(rent),
            "security_deposit": float(deposit),
            "proposed_by": SenderRole.STATION_MANAGER.value,
            "proposed_at": iso(now),
        }
        content = (data.message or "").strip() or f"Agreement reached. Monthly rent set at ₹{rent}."
        self._append(
            room,
            _message(manager, SenderRole.STATION_MANAGER, MessageType.SYSTEM, content, rent, deposit),
        )
        application.final_agreed_rent = rent
        application.final_security_deposit = deposit
        self._start_negotiation(application, manager)
        await self.session.flush()

        logger.info(f"Negotiation agreed for application {application.id} at {rent}")
        await self._notify_vendor(
            application,
            "Negotiation Agreed",
            f"Agreement reached for shop {application.shop_name or application.shop_id}: "
            f"monthly rent ₹{rent}.",
            MessageType.SYSTEM,
        )
        return NegotiationRoomResponse.model_validate(room)

    async def _notify_vendor(
        self,
        application: ShopApplicationORM,
        title: str,
        message: str,
        message_type: MessageType,
    ) -> None:
        await self.notification_service.notify(
            application.vendor_id,
            NotificationType.NEGOTIATION_MESSAGE,
            title,
            message,
            action_url=f"/vendor/negotiation/{application.id}",
            metadata={"application_id": str(application.id), "message_type": message_type.value},
        )
