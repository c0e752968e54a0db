"""In-app notifications router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from vendorvault_api.dependencies import get_notification_service
from vendorvault_api.models.domain.user import CurrentUser
from vendorvault_api.models.dto.notification import (
    NotificationListResponse,
    NotificationResponse,
    ReadAllResponse,
)
from vendorvault_api.security.auth import get_current_user
from vendorvault_api.security.rate_limit import API_DEFAULT_LIMIT, limiter
from vendorvault_api.services.notification_service import NotificationService

router = APIRouter()


@router.get("", response_model=NotificationListResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def list_notifications(
    request: Request,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    notification_service: Annotated[NotificationService, Depends(get_notification_service)],
    unread_only: bool = Query(default=False),
    limit: int | None = Query(default=None, ge=1),
) -> NotificationListResponse:
    """List the current user's notifications, newest first."""
    return await notification_service.list_notifications(current_user.id, unread_only, limit)


@router.patch("/read-all", response_model=ReadAllResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def mark_all_read(
    request: Request,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    notification_service: Annotated[NotificationService, Depends(get_notification_service)],
) -> ReadAllResponse:
    """Mark all of the current user's notifications as read."""
    return await notification_service.mark_all_read(current_user.id)


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
@limiter.limit(API_DEFAULT_LIMIT)
async def mark_read(
    request: Request,
    notification_id: UUID,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    notification_service: Annotated[NotificationService, Depends(get_notification_service)],
) -> NotificationResponse:
    """Mark a notification as read."""
    return await notification_service.mark_read(notification_id, current_user.id)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(API_DEFAULT_LIMIT)
async def delete_notification(
    request: Request,
    notification_id: UUID,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    notification_service: Annotated[NotificationService, Depends(get_notification_service)],
) -> None:
    """Delete a notification."""
    await notification_service.delete(notification_id, current_user.id)
