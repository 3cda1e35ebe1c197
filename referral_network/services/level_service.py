"""
Level service.

Level configuration reads, administration and rank assignment.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import Any, Iterable

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from referral_network.config.levels_seed import LEVELS_DATA
from referral_network.models.level import Level
from referral_network.models.user_level import UserLevel
from referral_network.repositories.level_repository import LevelRepository
from referral_network.repositories.user_level_repository import (
    UserLevelRepository,
)
from referral_network.repositories.user_repository import UserRepository
from referral_network.services.level_conditions import parse_conditions
from referral_network.utils.exceptions import ConflictError, NotFoundError
from referral_network.utils.money import to_decimal


class LevelService:
    """Level service for configuration and user rank assignments."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize level service."""
        self.session = session
        self.level_repo = LevelRepository(session)
        self.user_level_repo = UserLevelRepository(session)
        self.user_repo = UserRepository(session)

    async def get_all_levels_ordered(self) -> list[Level]:
        """Get all configured levels, lowest hierarchy first."""
        return await self.level_repo.get_all_ordered()

    async def get_by_hierarchy(self, hierarchy: int) -> Level:
        """
        Get level by hierarchy.

        Args:
            hierarchy: Hierarchy number

        Returns:
            Level

        Raises:
            NotFoundError: If no level has this hierarchy
        """
        level = await self.level_repo.get_by_hierarchy(hierarchy)
        if not level:
            raise NotFoundError(f"Level with hierarchy {hierarchy} not found")
        return level

    async def get_user_current_level(self, user_id: int) -> Level | None:
        """
        Get user's active level.

        Args:
            user_id: User ID

        Returns:
            Level or None if user has no rank yet
        """
        user_level = await self.user_level_repo.get_active(user_id)
        return user_level.level if user_level else None

    async def get_user_current_hierarchy(self, user_id: int) -> int:
        """Get user's active hierarchy (0 when unranked)."""
        level = await self.get_user_current_level(user_id)
        return level.hierarchy if level else 0

    async def get_active_levels_for_users(
        self, user_ids: list[int]
    ) -> dict[int, Level]:
        """
        Get active levels for several users.

        Args:
            user_ids: User IDs

        Returns:
            Dict user_id -> Level (unranked users are absent)
        """
        user_levels = await self.user_level_repo.get_active_for_users(user_ids)
        return {ul.user_id: ul.level for ul in user_levels}

    async def get_level_history(self, user_id: int) -> list[UserLevel]:
        """Get user's rank assignments, oldest first."""
        return await self.user_level_repo.get_history(user_id)

    async def assign_level_by_hierarchy(
        self, user_id: int, hierarchy: int
    ) -> UserLevel:
        """
        Make a level the user's active level.

        Locks the user row and the active assignment so concurrent
        promotions of the same user run one after another. Closing the old
        row and opening the new one happen in the same flush.

        Args:
            user_id: User ID
            hierarchy: Target level hierarchy

        Returns:
            Active user level (existing row when the user already holds this
            level or a higher one)

        Raises:
            NotFoundError: If user or level is missing
        """
        user = await self.user_repo.get_for_update(user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")

        level = await self.get_by_hierarchy(hierarchy)

        current = await self.user_level_repo.get_active(
            user_id, for_update=True
        )
        if current and current.level.hierarchy >= level.hierarchy:
            # Ranks only go up
            logger.debug(
                "Level assignment skipped, user already at or above target",
                extra={
                    "user_id": user_id,
                    "current_hierarchy": current.level.hierarchy,
                    "target_hierarchy": level.hierarchy,
                },
            )
            return current

        now = datetime.now(UTC)
        if current:
            current.end_date = now
            await self.session.flush()

        new_user_level = UserLevel(
            user_id=user_id,
            level=level,
            start_date=now,
        )
        self.session.add(new_user_level)
        await self.session.flush()

        logger.info(
            "User level assigned",
            extra={
                "user_id": user_id,
                "level_id": level.id,
                "hierarchy": level.hierarchy,
                "previous_level_id": current.level_id if current else None,
            },
        )

        return new_user_level

    async def create_level(
        self,
        title: str,
        hierarchy: int,
        passive_income_percentage: Decimal | int | float | str,
        appraisal_bonus: Decimal | int | float | str = 0,
        conditions: Iterable[dict[str, Any]] = (),
    ) -> Level:
        """
        Create a level.

        Args:
            title: Level title
            hierarchy: Unique positive rank number
            passive_income_percentage: Share of the pool for this step (0-100)
            appraisal_bonus: One-off bonus amount
            conditions: Raw eligibility conditions

        Returns:
            Created level

        Raises:
            ValueError: On invalid hierarchy or percentage
            ConflictError: If hierarchy is taken
        """
        if not title:
            raise ValueError("title is required")
        if hierarchy <= 0:
            raise ValueError("hierarchy must be > 0")

        percentage = to_decimal(passive_income_percentage)
        if percentage < 0 or percentage > 100:
            raise ValueError("passive_income_percentage must be within 0..100")

        if await self.level_repo.get_by_hierarchy(hierarchy):
            raise ConflictError(f"Level with hierarchy {hierarchy} already exists")

        # Store only well-formed conditions
        parsed = parse_conditions(list(conditions))

        level = await self.level_repo.create(
            title=title,
            hierarchy=hierarchy,
            passive_income_percentage=percentage,
            appraisal_bonus=to_decimal(appraisal_bonus),
            conditions=[
                c.model_dump(exclude_none=True) for c in parsed
            ],
        )

        logger.info(
            "Level created",
            extra={"level_id": level.id, "hierarchy": hierarchy},
        )

        return level

    async def seed_default_levels(self) -> list[Level]:
        """
        Insert missing default levels.

        Hierarchy is the position in LEVELS_DATA; existing hierarchies are
        left untouched, so running it twice is safe.

        Returns:
            Newly created levels
        """
        created: list[Level] = []
        for hierarchy, data in enumerate(LEVELS_DATA, start=1):
            if await self.level_repo.get_by_hierarchy(hierarchy):
                continue
            created.append(
                await self.create_level(hierarchy=hierarchy, **data)
            )

        logger.info(
            "Default levels seeded",
            extra={"created": len(created), "total": len(LEVELS_DATA)},
        )

        return created
