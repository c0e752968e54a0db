"""User domain model."""

from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, EmailStr


class UserRole(StrEnum):
    """Platform roles."""

    VENDOR = "VENDOR"
    STATION_MANAGER = "STATION_MANAGER"
    INSPECTOR = "INSPECTOR"
    RAILWAY_ADMIN = "RAILWAY_ADMIN"


# Railway staff see vendor contact details on public license checks
STAFF_ROLES = frozenset({UserRole.STATION_MANAGER, UserRole.INSPECTOR, UserRole.RAILWAY_ADMIN})


class UserStatus(StrEnum):
    """Account lifecycle status."""

    ACTIVE = "ACTIVE"
    PENDING = "PENDING"
    REJECTED = "REJECTED"
    SUSPENDED = "SUSPENDED"


class InspectorStatus(StrEnum):
    """Inspector assignment status."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class CurrentUser(BaseModel):
    """Authenticated user resolved from a JWT."""

    id: UUID
    email: EmailStr
    name: str
    role: UserRole
    status: UserStatus
    last_login_at: datetime | None = None

    class Config:
        """Pydantic config."""

        from_attributes = True

    def has_role(self, *roles: UserRole) -> bool:
        """Check if the user holds any of the given roles.

        Args:
            roles: Roles to check

        Returns:
            True if the user's role is among them
        """
        return self.role in roles

    def is_admin(self) -> bool:
        """Check if user is a railway administrator."""
        return self.role == UserRole.RAILWAY_ADMIN
