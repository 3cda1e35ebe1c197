"""
User level repository.

Data access layer for UserLevel model.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from referral_network.models.user_level import UserLevel
from referral_network.repositories.base import BaseRepository


class UserLevelRepository(BaseRepository[UserLevel]):
    """User level repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user level repository."""
        super().__init__(UserLevel, session)

    async def get_active(
        self, user_id: int, for_update: bool = False
    ) -> Optional[UserLevel]:
        """
        Get the user's active assignment.

        Args:
            user_id: User ID
            for_update: Lock the row for the rest of the transaction

        Returns:
            Active user level or None
        """
        stmt = select(UserLevel).where(
            UserLevel.user_id == user_id,
            UserLevel.end_date.is_(None),
        )
        if for_update:
            stmt = stmt.with_for_update(of=UserLevel)

        result = await self.session.execute(stmt)
        return result.unique().scalars().first()

    async def get_active_for_users(
        self, user_ids: List[int]
    ) -> List[UserLevel]:
        """
        Get active assignments for several users.

        Args:
            user_ids: User IDs

        Returns:
            Active user levels (users without one are absent)
        """
        if not user_ids:
            return []

        stmt = select(UserLevel).where(
            UserLevel.user_id.in_(user_ids),
            UserLevel.end_date.is_(None),
        )
        result = await self.session.execute(stmt)
        return list(result.unique().scalars().all())

    async def get_history(self, user_id: int) -> List[UserLevel]:
        """
        Get all assignments of a user, oldest first.

        Args:
            user_id: User ID

        Returns:
            User level history
        """
        stmt = (
            select(UserLevel)
            .where(UserLevel.user_id == user_id)
            .order_by(UserLevel.start_date.asc(), UserLevel.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.unique().scalars().all())
