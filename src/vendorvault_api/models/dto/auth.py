"""Authentication DTOs."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from vendorvault_api.models.domain.station import StationCategory
from vendorvault_api.models.domain.user import UserRole, UserStatus
from vendorvault_api.models.dto.vendor import VendorProfileResponse


class UserResponse(BaseModel):
    """Public view of a user account."""

    id: UUID
    email: str
    name: str
    phone: str
    role: UserRole
    status: UserStatus
    photo_url: str | None = None
    address: str | None = None
    aadhaar_verified: bool = False
    pan_verified: bool = False
    profile_completion: int = 0
    railway_employee_id: str | None = None
    designation: str | None = None
    rejection_reason: str | None = None
    last_login_at: datetime | None = None
    created_at: datetime

    class Config:
        """Pydantic config."""

        from_attributes = True


class RegisterRequest(BaseModel):
    """Vendor self-registration request."""

    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(min_length=10, max_length=15)
    password: str = Field(min_length=8, max_length=128)
    role: UserRole | None = None
    address: str | None = Field(default=None, max_length=500)
    state: str | None = Field(default=None, max_length=100)
    pincode: str | None = Field(default=None, max_length=10)
    business_name: str | None = Field(default=None, max_length=255)
    business_type: str | None = Field(default=None, max_length=30)


class LoginRequest(BaseModel):
    """Email and password login request."""

    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class AuthResponse(BaseModel):
    """Successful authentication response."""

    user: UserResponse
    token: str


class MeResponse(BaseModel):
    """Current user with the vendor profile for vendors."""

    user: UserResponse
    vendor: VendorProfileResponse | None = None


class StationManagerApplicationRequest(BaseModel):
    """Public application to become a station manager."""

    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(min_length=10, max_length=15)
    password: str = Field(min_length=1, max_length=128)
    aadhaar_number: str = Field(max_length=20)
    pan_number: str = Field(max_length=15)
    railway_employee_id: str = Field(min_length=1, max_length=50)
    designation: str = Field(min_length=1, max_length=100)
    department: str | None = Field(default=None, max_length=100)
    address: str | None = Field(default=None, max_length=500)
    state: str | None = Field(default=None, max_length=100)
    pincode: str = Field(max_length=10)
    photo_url: str | None = Field(default=None, max_length=1000)

    # Station the applicant will manage
    station_name: str = Field(min_length=1, max_length=255)
    station_code: str = Field(min_length=2, max_length=5)
    railway_zone: str = Field(min_length=1, max_length=100)
    division: str | None = Field(default=None, max_length=100)
    station_category: StationCategory
    platforms_count: int = Field(ge=1, le=100)
    daily_footfall_avg: int = Field(default=0, ge=0)
    station_address: str | None = Field(default=None, max_length=500)


class StationManagerApplicationResponse(BaseModel):
    """Result of a station manager application."""

    success: bool = True
    message: str
    user_id: UUID
    station_id: UUID
    status: UserStatus


class ForgotPasswordRequest(BaseModel):
    """Password reset request."""

    email: EmailStr


class ForgotPasswordResponse(BaseModel):
    """Password reset request acknowledgement."""

    success: bool = True
    message: str
    reset_token: str | None = None


class ResetPasswordRequest(BaseModel):
    """Password reset confirmation."""

    token: str = Field(min_length=1, max_length=2048)
    new_password: str = Field(min_length=8, max_length=128)
