"""In-app notification service."""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from vendorvault_api.constants.validation import DEFAULT_NOTIFICATION_LIMIT, MAX_PAGE_SIZE
from vendorvault_api.exceptions import NotificationNotFoundError
from vendorvault_api.models.domain.notification import NotificationType
from vendorvault_api.models.domain.user import UserRole, UserStatus
from vendorvault_api.models.dto.notification import (
    NotificationListResponse,
    NotificationResponse,
    ReadAllResponse,
)
from vendorvault_api.repositories.notification_repository import NotificationRepository
from vendorvault_api.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Service for creating and reading in-app notifications."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session."""
        self.session = session
        self.repo = NotificationRepository(session)
        self.user_repo = UserRepository(session)

    async def notify(
        self,
        user_id: UUID,
        type: NotificationType,
        title: str,
        message: str,
        action_url: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> bool:
        """Create a notification for a user.

        Runs in a savepoint so a failure is logged and never rolls back the
        business operation that triggered it.

        Args:
            user_id: Recipient
            type: Notification type
            title: Short title
            message: Body text
            action_url: Optional frontend link
            metadata: Optional structured context

        Returns:
            True if the notification was stored
        """
        try:
            async with self.session.begin_nested():
                await self.repo.create(
                    user_id=user_id,
                    type=type.value,
                    title=title,
                    message=message,
                    action_url=action_url,
                    extra_data=metadata,
                )
        except SQLAlchemyError as e:
            logger.warning(f"Failed to create {type.value} notification for user {user_id}: {e}")
            return False
        return True

    async def notify_role(
        self,
        role: UserRole,
        type: NotificationType,
        title: str,
        message: str,
        action_url: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> int:
        """Notify every active user holding a role.

        Returns:
            Number of notifications stored
        """
        users = await self.user_repo.list_by_role(role, UserStatus.ACTIVE)
        sent = 0
        for user in users:
            if await self.notify(user.id, type, title, message, action_url, metadata):
                sent += 1
        return sent

    async def list_notifications(
        self,
        user_id: UUID,
        unread_only: bool = False,
        limit: int | None = None,
    ) -> NotificationListResponse:
        """List a user's notifications with the unread count.

        Args:
            user_id: Current user
            unread_only: Only unread notifications
            limit: Page size, default 50, capped at 100

        Returns:
            NotificationListResponse
        """
        limit = max(1, min(limit or DEFAULT_NOTIFICATION_LIMIT, MAX_PAGE_SIZE))
        notifications = await self.repo.list_for_user(user_id, unread_only, limit)
        unread = await self.repo.count_unread(user_id)
        return NotificationListResponse(
            notifications=[NotificationResponse.model_validate(n) for n in notifications],
            unread_count=unread,
        )

    async def mark_read(self, notification_id: UUID, user_id: UUID) -> NotificationResponse:
        """Mark one of the user's notifications as read.

        Raises:
            NotificationNotFoundError: If the notification is not the user's
        """
        notification = await self.repo.get_for_user(notification_id, user_id)
        if notification is None:
            raise NotificationNotFoundError(str(notification_id))
        notification = await self.repo.update(notification, read=True)
        return NotificationResponse.model_validate(notification)

    async def mark_all_read(self, user_id: UUID) -> ReadAllResponse:
        """Mark every notification of the user as read."""
        updated = await self.repo.mark_all_read(user_id)
        return ReadAllResponse(updated=updated)

    async def delete(self, notification_id: UUID, user_id: UUID) -> None:
        """Delete one of the user's notifications.

        Raises:
            NotificationNotFoundError: If the notification is not the user's
        """
        notification = await self.repo.get_for_user(notification_id, user_id)
        if notification is None:
            raise NotificationNotFoundError(str(notification_id))
        await self.session.delete(notification)
        await self.session.flush()
