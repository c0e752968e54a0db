"""Authentication and authorization utilities."""

from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone
from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from vendorvault_api.config import get_settings
from vendorvault_api.database import get_db
from vendorvault_api.exceptions import (
    AccountInactiveError,
    InsufficientRoleError,
    InvalidTokenError,
    UnauthorizedError,
)
from vendorvault_api.models.domain.user import CurrentUser, UserRole, UserStatus
from vendorvault_api.repositories.user_repository import UserRepository

TOKEN_TYPE_ACCESS = "access"
TOKEN_TYPE_PASSWORD_RESET = "password-reset"

bearer_scheme = HTTPBearer(auto_error=False)


def _encode(payload: dict[str, Any], expires_in: timedelta) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {**payload, "iat": now, "exp": now + expires_in}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def create_access_token(user_id: UUID, email: str, role: UserRole | str) -> str:
    """Create a JWT access token.

    Args:
        user_id: User UUID
        email: User email
        role: User role

    Returns:
        JWT token string
    """
    settings = get_settings()
    return _encode(
        {
            "sub": str(user_id),
            "email": email,
            "role": str(role),
            "type": TOKEN_TYPE_ACCESS,
        },
        timedelta(days=settings.jwt_expiration_days),
    )


def create_password_reset_token(user_id: UUID, email: str) -> str:
    """Create a short-lived password reset token.

    Args:
        user_id: User UUID
        email: User email

    Returns:
        JWT token string
    """
    settings = get_settings()
    return _encode(
        {"sub": str(user_id), "email": email, "type": TOKEN_TYPE_PASSWORD_RESET},
        timedelta(minutes=settings.password_reset_expiration_minutes),
    )


def decode_token(token: str, expected_type: str = TOKEN_TYPE_ACCESS) -> dict[str, Any]:
    """Decode and verify a JWT token.

    Args:
        token: JWT token string
        expected_type: Required value of the "type" claim

    Returns:
        Token payload

    Raises:
        InvalidTokenError: If the token is invalid, expired or of another type
    """
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise InvalidTokenError() from e

    if payload.get("type") != expected_type or "sub" not in payload:
        raise InvalidTokenError()
    return payload


def extract_token(request: Request, credentials: HTTPAuthorizationCredentials | None) -> str | None:
    """Read the token from the Authorization header, falling back to the cookie."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(get_settings().auth_cookie_name)


async def _resolve_user(token: str, db: AsyncSession) -> CurrentUser:
    payload = decode_token(token)
    try:
        user_id = UUID(payload["sub"])
    except ValueError as e:
        raise InvalidTokenError() from e

    user = await UserRepository(db).get_by_id(user_id)
    if user is None:
        raise InvalidTokenError()
    if user.status != UserStatus.ACTIVE:
        raise AccountInactiveError(pending=user.status == UserStatus.PENDING)
    return CurrentUser.model_validate(user)


async def get_current_user(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
) -> CurrentUser:
    """Get the current authenticated user.

    The token is taken from the Bearer header or the auth cookie, and the
    user is loaded from the database so status changes apply immediately.

    Raises:
        UnauthorizedError: If no token is present
        InvalidTokenError: If the token is invalid or the user is gone
        AccountInactiveError: If the account is not ACTIVE
    """
    token = extract_token(request, credentials)
    if not token:
        raise UnauthorizedError("Authentication required")
    return await _resolve_user(token, db)


async def get_optional_user(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
) -> CurrentUser | None:
    """Get the current user on public routes.

    Returns None instead of raising when there is no token, the token is
    invalid or the account is not ACTIVE.
    """
    token = extract_token(request, credentials)
    if not token:
        return None
    try:
        return await _resolve_user(token, db)
    except (InvalidTokenError, AccountInactiveError):
        return None


def require_role(*roles: UserRole) -> Callable[..., Awaitable[CurrentUser]]:
    """Create a dependency that requires one of the given roles.

    Args:
        roles: Roles granted access

    Returns:
        Dependency function that returns the current user
    """

    async def role_checker(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if not current_user.has_role(*roles):
            raise InsufficientRoleError([role.value for role in roles])
        return current_user

    return role_checker


require_vendor = require_role(UserRole.VENDOR)
require_station_manager = require_role(UserRole.STATION_MANAGER)
require_inspector = require_role(UserRole.INSPECTOR)
require_railway_admin = require_role(UserRole.RAILWAY_ADMIN)
