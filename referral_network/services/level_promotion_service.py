"""
Level promotion service.

Finds the highest level a user qualifies for and persists the rank change.
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from referral_network.models.level import Level
from referral_network.repositories.user_repository import UserRepository
from referral_network.services.condition_evaluators import (
    BusinessConditionEvaluator,
    ConditionEvaluator,
    LevelsConditionEvaluator,
)
from referral_network.services.level_conditions import parse_conditions
from referral_network.services.level_service import LevelService


class LevelPromotionService:
    """Level promotion service (greedy highest-first)."""

    def __init__(
        self,
        session: AsyncSession,
        evaluators: list[ConditionEvaluator] | None = None,
    ) -> None:
        """
        Initialize level promotion service.

        Args:
            session: Database session
            evaluators: Condition evaluators (BUSINESS and LEVELS by default)
        """
        self.session = session
        self.level_service = LevelService(session)
        self.user_repo = UserRepository(session)
        self.evaluators: list[ConditionEvaluator] = (
            evaluators
            if evaluators is not None
            else [
                BusinessConditionEvaluator(session),
                LevelsConditionEvaluator(session),
            ]
        )

    def _get_evaluator(self, condition_type: str) -> ConditionEvaluator | None:
        for evaluator in self.evaluators:
            if evaluator.can_handle(condition_type):
                return evaluator
        return None

    async def check_level_conditions(self, user_id: int, level: Level) -> bool:
        """
        Check all conditions of a level for a user.

        Conditions are ANDed; a level without conditions is always met.
        A condition of unknown type fails the level.

        Args:
            user_id: User ID
            level: Candidate level

        Returns:
            True if every condition holds
        """
        for condition in parse_conditions(level.conditions):
            evaluator = self._get_evaluator(condition.type)
            if evaluator is None:
                logger.warning(
                    "No evaluator for condition type",
                    extra={
                        "user_id": user_id,
                        "level_id": level.id,
                        "condition_type": condition.type,
                    },
                )
                return False

            if not await evaluator.evaluate(condition, user_id, condition.scope):
                return False

        return True

    async def find_highest_eligible_level(
        self, user_id: int, current_hierarchy: int
    ) -> Level | None:
        """
        Find the best level above the current one whose conditions hold.

        Args:
            user_id: User ID
            current_hierarchy: User's active hierarchy (0 when unranked)

        Returns:
            Highest eligible level or None
        """
        levels = await self.level_service.get_all_levels_ordered()
        candidates = sorted(
            (lvl for lvl in levels if lvl.hierarchy > current_hierarchy),
            key=lambda lvl: lvl.hierarchy,
            reverse=True,
        )

        for level in candidates:
            if await self.check_level_conditions(user_id, level):
                return level

        return None

    async def promote_user_if_eligible(self, user_id: int) -> bool:
        """
        Promote user to the highest level they qualify for.

        Safe to call repeatedly: with no state change in between, the second
        call finds nothing above the current rank.

        Args:
            user_id: User ID

        Returns:
            True if a promotion happened
        """
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            logger.debug(
                "Promotion skipped, user not found",
                extra={"user_id": user_id},
            )
            return False

        current_hierarchy = await self.level_service.get_user_current_hierarchy(
            user_id
        )
        target = await self.find_highest_eligible_level(
            user_id, current_hierarchy
        )

        if not target or target.hierarchy <= current_hierarchy:
            logger.debug(
                "Promotion skipped",
                extra={
                    "user_id": user_id,
                    "current_hierarchy": current_hierarchy,
                },
            )
            return False

        assigned = await self.level_service.assign_level_by_hierarchy(
            user_id, target.hierarchy
        )
        if assigned.level_id != target.id:
            # Rank moved past the target since it was read
            return False

        logger.info(
            "User promoted",
            extra={
                "user_id": user_id,
                "from_hierarchy": current_hierarchy,
                "to_hierarchy": target.hierarchy,
                "level_title": target.title,
            },
        )

        return True
