"""Negotiation room ORM model."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from vendorvault_api.models.orm.base import (
    Base,
    JSONType,
    TimestampMixin,
    UTCDateTime,
    UUIDMixin,
)


class NegotiationRoomORM(Base, UUIDMixin, TimestampMixin):
    """Rent negotiation thread between a vendor and a station manager."""

    __tablename__ = "negotiation_rooms"

    application_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("shop_applications.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    vendor_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    station_manager_id: Mapped[UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    current_offer: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict, nullable=False)
    messages: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, default=list, nullable=False)
    counter_offer_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    max_counter_offers: Mapped[int] = mapped_column(Integer, default=10, nullable=False)
    final_agreement: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    last_activity_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
