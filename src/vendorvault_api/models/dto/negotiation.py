"""Negotiation DTOs."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from vendorvault_api.models.domain.negotiation import NegotiationAction, NegotiationStatus


class NegotiationMessageRequest(BaseModel):
    """A message or counter-offer posted to a negotiation room."""

    message: str | None = Field(default=None, max_length=5000)
    proposed_rent: Decimal | None = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    proposed_deposit: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    action: NegotiationAction | None = None


class NegotiationRoomResponse(BaseModel):
    """Negotiation room with its message thread."""

    id: UUID
    application_id: UUID
    vendor_id: UUID
    station_manager_id: UUID | None = None
    status: NegotiationStatus
    current_offer: dict[str, Any]
    messages: list[dict[str, Any]]
    counter_offer_count: int
    max_counter_offers: int
    final_agreement: dict[str, Any] | None = None
    last_activity_at: datetime | None = None
    created_at: datetime

    class Config:
        """Pydantic config."""

        from_attributes = True


class NegotiationSummary(BaseModel):
    """Short negotiation state shown with an application."""

    status: NegotiationStatus
    current_offer: dict[str, Any]
    counter_offer_count: int
    message_count: int
    final_agreement: dict[str, Any] | None = None
