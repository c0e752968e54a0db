"""Authentication router."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from vendorvault_api.config import get_settings
from vendorvault_api.dependencies import get_auth_service
from vendorvault_api.models.domain.user import CurrentUser
from vendorvault_api.models.dto.auth import (
    AuthResponse,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    MeResponse,
    RegisterRequest,
    ResetPasswordRequest,
    StationManagerApplicationRequest,
    StationManagerApplicationResponse,
)
from vendorvault_api.models.dto.common import MessageResponse
from vendorvault_api.security.auth import get_current_user
from vendorvault_api.security.rate_limit import (
    API_DEFAULT_LIMIT,
    AUTH_LOGIN_LIMIT,
    AUTH_REGISTER_LIMIT,
    SENSITIVE_OPERATION_LIMIT,
    limiter,
)
from vendorvault_api.services.auth_service import AuthService

router = APIRouter()


def _set_auth_cookie(response: Response, token: str) -> None:
    """Set the authentication cookie on response."""
    settings = get_settings()
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.auth_cookie_samesite,
        max_age=settings.jwt_expiration_days * 24 * 3600,
        path="/",
    )


def _clear_auth_cookie(response: Response) -> None:
    """Clear the authentication cookie."""
    settings = get_settings()
    response.delete_cookie(
        key=settings.auth_cookie_name,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.auth_cookie_samesite,
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(AUTH_REGISTER_LIMIT)
async def register(
    request: Request,
    response: Response,
    body: RegisterRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """Register a vendor account and sign in."""
    result = await auth_service.register_vendor(body)
    _set_auth_cookie(response, result.token)
    return result


@router.post("/login", response_model=AuthResponse)
@limiter.limit(AUTH_LOGIN_LIMIT)
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """Authenticate with email and password."""
    result = await auth_service.login(body.email, body.password)
    _set_auth_cookie(response, result.token)
    return result


@router.post("/logout", response_model=MessageResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def logout(request: Request, response: Response) -> MessageResponse:
    """Clear the authentication cookie."""
    _clear_auth_cookie(response)
    return MessageResponse(message="Logout successful")


@router.get("/me", response_model=MeResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def get_me(
    request: Request,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> MeResponse:
    """Get the current user, with the vendor profile for vendors."""
    return await auth_service.get_me(current_user)


@router.post(
    "/station-manager-application",
    response_model=StationManagerApplicationResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(AUTH_REGISTER_LIMIT)
async def apply_station_manager(
    request: Request,
    body: StationManagerApplicationRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> StationManagerApplicationResponse:
    """Apply to manage a station. The account stays PENDING until approved."""
    return await auth_service.apply_station_manager(body)


@router.post("/forgot-password", response_model=ForgotPasswordResponse)
@limiter.limit(SENSITIVE_OPERATION_LIMIT)
async def forgot_password(
    request: Request,
    body: ForgotPasswordRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> ForgotPasswordResponse:
    """Request a password reset. The response never reveals whether the email exists."""
    return await auth_service.forgot_password(body.email)


@router.post("/reset-password", response_model=MessageResponse)
@limiter.limit(SENSITIVE_OPERATION_LIMIT)
async def reset_password(
    request: Request,
    body: ResetPasswordRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> MessageResponse:
    """Set a new password with a reset token."""
    await auth_service.reset_password(body.token, body.new_password)
    return MessageResponse(message="Password has been reset")
