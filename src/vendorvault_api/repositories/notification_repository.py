"""Notification repository."""

from uuid import UUID

from sqlalchemy import select, update

from vendorvault_api.models.orm.notification import NotificationORM
from vendorvault_api.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[NotificationORM]):
    """Repository for in-app notifications."""

    model = NotificationORM

    async def list_for_user(
        self,
        user_id: UUID,
        unread_only: bool = False,
        limit: int = 50,
    ) -> list[NotificationORM]:
        """List a user's notifications, newest first."""
        query = select(NotificationORM).where(NotificationORM.user_id == user_id)
        if unread_only:
            query = query.where(NotificationORM.read.is_(False))
        result = await self.session.execute(
            query.order_by(NotificationORM.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def count_unread(self, user_id: UUID) -> int:
        """Count a user's unread notifications."""
        return await self.count(
            NotificationORM.user_id == user_id,
            NotificationORM.read.is_(False),
        )

    async def get_for_user(self, notification_id: UUID, user_id: UUID) -> NotificationORM | None:
        """Get a notification only if it belongs to the user."""
        result = await self.session.execute(
            select(NotificationORM).where(
                NotificationORM.id == notification_id,
                NotificationORM.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def mark_all_read(self, user_id: UUID) -> int:
        """Mark every unread notification of a user as read.

        Returns:
            Number of notifications updated
        """
        result = await self.session.execute(
            update(NotificationORM)
            .where(NotificationORM.user_id == user_id, NotificationORM.read.is_(False))
            .values(read=True)
            .execution_options(synchronize_session=False)
        )
        await self.session.flush()
        return result.rowcount or 0
