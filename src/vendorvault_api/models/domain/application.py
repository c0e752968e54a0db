"""Shop application domain enums."""

from enum import StrEnum


class ApplicationStatus(StrEnum):
    """Shop application lifecycle status."""

    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    NEGOTIATION = "NEGOTIATION"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    LICENSED = "LICENSED"
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    TERMINATED = "TERMINATED"


# Applications a station manager can still approve or reject
OPEN_APPLICATION_STATUSES = frozenset({ApplicationStatus.SUBMITTED, ApplicationStatus.NEGOTIATION})

# Applications that block a second application for the same shop
BLOCKING_APPLICATION_STATUSES = frozenset(
    {ApplicationStatus.SUBMITTED, ApplicationStatus.NEGOTIATION, ApplicationStatus.APPROVED}
)


class RiskLevel(StrEnum):
    """Vendor risk assessment."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
