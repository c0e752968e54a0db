"""Notification domain enums."""

from enum import StrEnum


class NotificationType(StrEnum):
    """In-app notification types."""

    APPLICATION_SUBMITTED = "APPLICATION_SUBMITTED"
    APPLICATION_APPROVED = "APPLICATION_APPROVED"
    APPLICATION_REJECTED = "APPLICATION_REJECTED"
    DOCUMENT_VERIFIED = "DOCUMENT_VERIFIED"
    DOCUMENT_REJECTED = "DOCUMENT_REJECTED"
    DOCUMENT_REUPLOAD_REQUIRED = "DOCUMENT_REUPLOAD_REQUIRED"
    LICENSE_ISSUED = "LICENSE_ISSUED"
    LICENSE_RENEWED = "LICENSE_RENEWED"
    LICENSE_EXPIRED = "LICENSE_EXPIRED"
    NEGOTIATION_MESSAGE = "NEGOTIATION_MESSAGE"
    STATION_MANAGER_APPLICATION = "STATION_MANAGER_APPLICATION"
    SYSTEM_ANNOUNCEMENT = "SYSTEM_ANNOUNCEMENT"
