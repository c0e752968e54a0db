"""License domain enums."""

from enum import StrEnum


class LicenseStatus(StrEnum):
    """License status enum."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"
    REVOKED = "REVOKED"
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"


# Licenses that currently grant the right to trade
VALID_LICENSE_STATUSES = frozenset({LicenseStatus.APPROVED, LicenseStatus.ACTIVE})

RENEWABLE_LICENSE_STATUSES = frozenset(
    {LicenseStatus.APPROVED, LicenseStatus.ACTIVE, LicenseStatus.EXPIRED}
)


class ComplianceStatus(StrEnum):
    """Inspection outcome."""

    COMPLIANT = "COMPLIANT"
    NON_COMPLIANT = "NON_COMPLIANT"
    REQUIRES_ATTENTION = "REQUIRES_ATTENTION"


class LicenseType(StrEnum):
    """License tenure type."""

    TEMPORARY = "TEMPORARY"
    PERMANENT = "PERMANENT"
    SEASONAL = "SEASONAL"


class LicenseAction(StrEnum):
    """Admin actions on an issued license."""

    REVOKE = "REVOKE"
    REACTIVATE = "REACTIVATE"
