"""User repository."""

from sqlalchemy import func, select

from vendorvault_api.models.orm.user import UserORM
from vendorvault_api.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserORM]):
    """Repository for user account operations."""

    model = UserORM

    async def get_by_email(self, email: str) -> UserORM | None:
        """Get a user by email, case-insensitively.

        Args:
            email: User email address

        Returns:
            UserORM or None if not found
        """
        result = await self.session.execute(
            select(UserORM).where(func.lower(UserORM.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        """Check whether an email is already registered."""
        return await self.get_by_email(email) is not None

    async def list_by_role(self, role: str, status: str | None = None) -> list[UserORM]:
        """List users holding a role, optionally filtered by status.

        Args:
            role: User role
            status: Optional account status

        Returns:
            Users ordered by creation date, oldest first
        """
        query = select(UserORM).where(UserORM.role == role)
        if status:
            query = query.where(UserORM.status == status)
        result = await self.session.execute(query.order_by(UserORM.created_at))
        return list(result.scalars().all())

    async def list_users(
        self,
        role: str | None = None,
        status: str | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[UserORM], int]:
        """List users with optional role and status filters.

        Returns:
            Tuple of (users, total)
        """
        query = select(UserORM)
        if role:
            query = query.where(UserORM.role == role)
        if status:
            query = query.where(UserORM.status == status)
        return await self.paginate(query.order_by(UserORM.created_at.desc()), offset, limit)
