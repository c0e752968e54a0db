"""Negotiation domain enums."""

from enum import StrEnum


class NegotiationStatus(StrEnum):
    """Negotiation room status."""

    ACTIVE = "ACTIVE"
    AGREED = "AGREED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"


class SenderRole(StrEnum):
    """Roles allowed to post in a negotiation room."""

    VENDOR = "VENDOR"
    STATION_MANAGER = "STATION_MANAGER"


class MessageType(StrEnum):
    """Negotiation message kinds."""

    TEXT = "TEXT"
    COUNTER_OFFER = "COUNTER_OFFER"
    SYSTEM = "SYSTEM"
    ATTACHMENT = "ATTACHMENT"


class NegotiationAction(StrEnum):
    """Explicit actions a station manager can take in a room."""

    AGREE = "AGREE"
