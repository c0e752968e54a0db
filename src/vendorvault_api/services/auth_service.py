"""Authentication service."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from vendorvault_api.config import get_settings
from vendorvault_api.exceptions import (
    AccountInactiveError,
    BadRequestError,
    EmailAlreadyRegisteredError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidTokenError,
    UserNotFoundError,
    ValidationError,
)
from vendorvault_api.models.domain.notification import NotificationType
from vendorvault_api.models.domain.station import ApprovalStatus, OperationalStatus
from vendorvault_api.models.domain.user import CurrentUser, UserRole, UserStatus
from vendorvault_api.models.dto.auth import (
    AuthResponse,
    ForgotPasswordResponse,
    MeResponse,
    RegisterRequest,
    StationManagerApplicationRequest,
    StationManagerApplicationResponse,
    UserResponse,
)
from vendorvault_api.models.dto.vendor import VendorProfileResponse
from vendorvault_api.repositories.station_repository import StationRepository
from vendorvault_api.repositories.user_repository import UserRepository
from vendorvault_api.repositories.vendor_repository import VendorRepository
from vendorvault_api.security.auth import (
    TOKEN_TYPE_PASSWORD_RESET,
    create_access_token,
    create_password_reset_token,
    decode_token,
)
from vendorvault_api.security.password import get_password_service
from vendorvault_api.services.notification_service import NotificationService
from vendorvault_api.utils.dates import utcnow
from vendorvault_api.utils.validation import (
    capitalize_name,
    format_address,
    is_valid_aadhaar,
    is_valid_mobile,
    is_valid_pan,
    is_valid_pincode,
    is_valid_station_code,
    normalize_aadhaar,
    normalize_pan,
    normalize_phone,
    normalize_station_code,
    password_strength_errors,
)

logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = "If an account exists for this email, a password reset link has been sent."


class AuthService:
    """Service for registration, login and password recovery."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.user_repo = UserRepository(session)
        self.vendor_repo = VendorRepository(session)
        self.station_repo = StationRepository(session)
        self.notification_service = NotificationService(session)
        self.password_service = get_password_service()

    async def register_vendor(self, data: RegisterRequest) -> AuthResponse:
        """Register a vendor account and sign it in.

        Args:
            data: Registration data

        Returns:
            AuthResponse with the new user and an access token

        Raises:
            ForbiddenError: If a role other than VENDOR is requested
            EmailAlreadyRegisteredError: If the email is taken
        """
        if data.role is not None and data.role != UserRole.VENDOR:
            raise ForbiddenError("Only vendors can self-register")

        email = data.email.lower()
        if await self.user_repo.email_exists(email):
            raise EmailAlreadyRegisteredError(email)

        name = capitalize_name(data.name)
        user = await self.user_repo.create(
            email=email,
            password_hash=self.password_service.hash_password(data.password),
            name=name,
            phone=data.phone.strip(),
            role=UserRole.VENDOR,
            status=UserStatus.ACTIVE,
            address=format_address(data.address, data.state, data.pincode),
            last_login_at=utcnow(),
        )

        if data.business_name:
            await self.vendor_repo.create(
                user_id=user.id,
                business_name=data.business_name.strip(),
                business_type=(data.business_type or "other").lower(),
                owner_name=name,
                profile_completed=bool(data.business_type),
            )

        logger.info(f"Vendor registered: {user.id}")
        token = create_access_token(user.id, user.email, user.role)
        return AuthResponse(user=UserResponse.model_validate(user), token=token)

    async def login(self, email: str, password: str) -> AuthResponse:
        """Authenticate with email and password.

        Raises:
            InvalidCredentialsError: If the email or password do not match
            AccountInactiveError: If the account is not ACTIVE
        """
        user = await self.user_repo.get_by_email(email)
        stored_hash = user.password_hash if user is not None else None
        if not self.password_service.verify_password(password, stored_hash) or user is None:
            logger.warning("Failed login attempt")
            raise InvalidCredentialsError()

        if user.status != UserStatus.ACTIVE:
            raise AccountInactiveError(pending=user.status == UserStatus.PENDING)

        changes: dict[str, object] = {"last_login_at": utcnow()}
        if self.password_service.needs_rehash(user.password_hash):
            changes["password_hash"] = self.password_service.hash_password(password)
        user = await self.user_repo.update(user, **changes)
        token = create_access_token(user.id, user.email, user.role)
        return AuthResponse(user=UserResponse.model_validate(user), token=token)

    async def get_me(self, current_user: CurrentUser) -> MeResponse:
        """Get the current user, with the vendor profile for vendors."""
        user = await self.user_repo.get_by_id(current_user.id)
        if user is None:
            raise UserNotFoundError(str(current_user.id))

        vendor = None
        if user.role == UserRole.VENDOR:
            profile = await self.vendor_repo.get_by_user_id(user.id)
            if profile is not None:
                vendor = VendorProfileResponse.model_validate(profile)
        return MeResponse(user=UserResponse.model_validate(user), vendor=vendor)

    async def apply_station_manager(
        self, data: StationManagerApplicationRequest
    ) -> StationManagerApplicationResponse:
        """Register a pending station manager together with their station.

        Args:
            data: Application data

        Returns:
            StationManagerApplicationResponse

        Raises:
            ValidationError: If an identity field is malformed or the password is weak
            BadRequestError: If the email or station code is taken
        """
        if not is_valid_aadhaar(data.aadhaar_number):
            raise ValidationError("Aadhaar number must be 12 digits", field="aadhaar_number")
        if not is_valid_pan(data.pan_number):
            raise ValidationError("Invalid PAN format", field="pan_number")
        if not is_valid_mobile(data.phone):
            raise ValidationError("Invalid mobile number", field="phone")
        if not is_valid_pincode(data.pincode):
            raise ValidationError("Pincode must be 6 digits", field="pincode")
        if not is_valid_station_code(data.station_code):
            raise ValidationError("Station code must be 2-5 letters", field="station_code")
        weaknesses = password_strength_errors(data.password)
        if weaknesses:
            raise ValidationError(weaknesses[0], field="password")

        email = data.email.lower()
        if await self.user_repo.email_exists(email):
            raise EmailAlreadyRegisteredError(email)
        station_code = normalize_station_code(data.station_code)
        if await self.station_repo.get_by_code(station_code) is not None:
            raise BadRequestError("Station code already registered")

        user = await self.user_repo.create(
            email=email,
            password_hash=self.password_service.hash_password(data.password),
            name=capitalize_name(data.name),
            phone=normalize_phone(data.phone),
            role=UserRole.STATION_MANAGER,
            status=UserStatus.PENDING,
            photo_url=data.photo_url,
            address=format_address(data.address, data.state, data.pincode),
            aadhaar_number=normalize_aadhaar(data.aadhaar_number),
            pan_number=normalize_pan(data.pan_number),
            railway_employee_id=data.railway_employee_id.strip(),
            designation=data.designation.strip(),
            department=data.department,
        )
        station = await self.station_repo.create(
            station_name=data.station_name.strip(),
            station_code=station_code,
            railway_zone=data.railway_zone.strip(),
            division=data.division,
            station_category=data.station_category.value,
            platforms_count=data.platforms_count,
            daily_footfall_avg=data.daily_footfall_avg,
            address=data.station_address,
            station_manager_id=user.id,
            operational_status=OperationalStatus.PENDING_APPROVAL,
            approval_status=ApprovalStatus.PENDING,
        )

        await self.notification_service.notify_role(
            UserRole.RAILWAY_ADMIN,
            NotificationType.STATION_MANAGER_APPLICATION,
            "New Station Manager Application",
            f"{user.name} applied to manage {station.station_name} ({station.station_code}).",
            action_url="/railway-admin/pending-managers",
            metadata={"user_id": str(user.id), "station_id": str(station.id)},
        )

        logger.info(f"Station manager application received: {user.id} for {station.station_code}")
        return StationManagerApplicationResponse(
            message="Application submitted. You can log in once a railway admin approves it.",
            user_id=user.id,
            station_id=station.id,
            status=UserStatus.PENDING,
        )

    async def forgot_password(self, email: str) -> ForgotPasswordResponse:
        """Issue a password reset token when the account exists.

        The response is identical whether or not the email is registered.
        The token itself is only returned in debug mode.
        """
        user = await self.user_repo.get_by_email(email)
        token = None
        if user is not None:
            token = create_password_reset_token(user.id, user.email)
            logger.info(f"Password reset requested for user {user.id}")

        return ForgotPasswordResponse(
            message=FORGOT_PASSWORD_MESSAGE,
            reset_token=token if get_settings().debug else None,
        )

    async def reset_password(self, token: str, new_password: str) -> None:
        """Set a new password using a reset token.

        Raises:
            BadRequestError: If the token is invalid, expired or not a reset token
        """
        try:
            payload = decode_token(token, expected_type=TOKEN_TYPE_PASSWORD_RESET)
        except InvalidTokenError as e:
            raise BadRequestError("Invalid or expired reset token") from e

        user = await self.user_repo.get_by_email(payload.get("email", ""))
        if user is None or str(user.id) != payload["sub"]:
            raise BadRequestError("Invalid or expired reset token")

        await self.user_repo.update(
            user, password_hash=self.password_service.hash_password(new_password)
        )
        logger.info(f"Password reset for user {user.id}")
