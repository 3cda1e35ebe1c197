"""
User repository.

Data access layer for User model.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from referral_network.models.user import User
from referral_network.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """User repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user repository."""
        super().__init__(User, session)

    async def get_for_update(self, user_id: int) -> Optional[User]:
        """
        Get user with row lock.

        Args:
            user_id: User ID

        Returns:
            User or None
        """
        stmt = select(User).where(User.id == user_id).with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
