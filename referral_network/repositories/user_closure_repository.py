"""
User closure repository.

Data access layer for the referral tree closure table.
"""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from referral_network.models.level import Level
from referral_network.models.user import User
from referral_network.models.user_closure import UserClosure
from referral_network.models.user_level import UserLevel
from referral_network.repositories.base import BaseRepository


class UserClosureRepository(BaseRepository[UserClosure]):
    """User closure repository with tree queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user closure repository."""
        super().__init__(UserClosure, session)

    async def get_by_pair(
        self, ancestor_id: int, descendant_id: int
    ) -> Optional[UserClosure]:
        """
        Get closure row by composite key.

        Args:
            ancestor_id: Ancestor user ID
            descendant_id: Descendant user ID

        Returns:
            Closure row or None
        """
        return await self.get_by_id((ancestor_id, descendant_id))

    async def get_ancestor_rows(
        self, descendant_id: int, exclude_self: bool = False
    ) -> List[UserClosure]:
        """
        Get all rows where user is the descendant (closest ancestor first).

        Args:
            descendant_id: User ID
            exclude_self: Skip the depth-0 self row

        Returns:
            Closure rows ordered by depth ascending
        """
        stmt = select(UserClosure).where(
            UserClosure.descendant_id == descendant_id
        )
        if exclude_self:
            stmt = stmt.where(UserClosure.depth > 0)
        stmt = stmt.order_by(UserClosure.depth.asc(), UserClosure.ancestor_id.asc())

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_descendant_rows(
        self, ancestor_id: int, exclude_self: bool = False
    ) -> List[UserClosure]:
        """
        Get all rows where user is the ancestor (self, children, grandchildren...).

        Args:
            ancestor_id: User ID
            exclude_self: Skip the depth-0 self row

        Returns:
            Closure rows ordered by depth ascending
        """
        stmt = select(UserClosure).where(UserClosure.ancestor_id == ancestor_id)
        if exclude_self:
            stmt = stmt.where(UserClosure.depth > 0)
        stmt = stmt.order_by(
            UserClosure.depth.asc(), UserClosure.descendant_id.asc()
        )

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_direct_descendant_rows(
        self, ancestor_id: int
    ) -> List[UserClosure]:
        """
        Get immediate children rows (depth = 1).

        Args:
            ancestor_id: User ID

        Returns:
            Closure rows ordered by descendant ID
        """
        stmt = (
            select(UserClosure)
            .where(
                UserClosure.ancestor_id == ancestor_id,
                UserClosure.depth == 1,
            )
            .order_by(UserClosure.descendant_id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def is_descendant(
        self, ancestor_id: int, descendant_id: int
    ) -> bool:
        """
        Check if descendant is strictly below ancestor.

        Args:
            ancestor_id: Candidate ancestor
            descendant_id: Candidate descendant

        Returns:
            True if a row with depth >= 1 exists
        """
        stmt = select(func.count()).select_from(UserClosure).where(
            UserClosure.ancestor_id == ancestor_id,
            UserClosure.descendant_id == descendant_id,
            UserClosure.depth >= 1,
        )
        result = await self.session.execute(stmt)
        return (result.scalar() or 0) > 0

    async def sum_business_done(
        self, ancestor_id: int, direct_only: bool
    ) -> Decimal:
        """
        Sum business_done over a user's downline (self excluded).

        Args:
            ancestor_id: User ID
            direct_only: Only depth = 1 (DIRECT) instead of depth > 0 (NETWORK)

        Returns:
            Total business done
        """
        depth_filter = (
            UserClosure.depth == 1 if direct_only else UserClosure.depth > 0
        )
        stmt = (
            select(func.coalesce(func.sum(User.business_done), 0))
            .select_from(UserClosure)
            .join(User, User.id == UserClosure.descendant_id)
            .where(UserClosure.ancestor_id == ancestor_id, depth_filter)
        )
        result = await self.session.execute(stmt)
        return Decimal(str(result.scalar() or 0))

    async def count_branches_with_level(
        self, ancestor_id: int, min_hierarchy: int, direct_only: bool
    ) -> int:
        """
        Count distinct branches holding an active level at or above hierarchy.

        A branch is identified by root_child_id, so several qualifying users
        under the same immediate child count once.

        Args:
            ancestor_id: User ID
            min_hierarchy: Minimum level hierarchy
            direct_only: Only consider immediate children

        Returns:
            Number of distinct branches
        """
        depth_filter = (
            UserClosure.depth == 1 if direct_only else UserClosure.depth > 0
        )
        stmt = (
            select(func.count(distinct(UserClosure.root_child_id)))
            .select_from(UserClosure)
            .join(
                UserLevel,
                (UserLevel.user_id == UserClosure.descendant_id)
                & UserLevel.end_date.is_(None),
            )
            .join(Level, Level.id == UserLevel.level_id)
            .where(
                UserClosure.ancestor_id == ancestor_id,
                depth_filter,
                UserClosure.root_child_id.is_not(None),
                Level.hierarchy >= min_hierarchy,
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0
