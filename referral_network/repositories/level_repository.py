"""
Level repository.

Data access layer for Level model.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from referral_network.models.level import Level
from referral_network.repositories.base import BaseRepository


class LevelRepository(BaseRepository[Level]):
    """Level repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize level repository."""
        super().__init__(Level, session)

    async def get_all_ordered(self) -> List[Level]:
        """
        Get all levels, lowest hierarchy first.

        Returns:
            List of levels
        """
        stmt = select(Level).order_by(Level.hierarchy.asc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_hierarchy(self, hierarchy: int) -> Optional[Level]:
        """
        Get level by hierarchy.

        Args:
            hierarchy: Hierarchy number

        Returns:
            Level or None
        """
        return await self.get_by(hierarchy=hierarchy)
