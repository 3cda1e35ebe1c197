"""
Level condition evaluators.

One evaluator per condition type, selected through can_handle().
"""

from decimal import Decimal
from typing import Protocol

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from referral_network.models.enums import LevelConditionScope, LevelConditionType
from referral_network.repositories.user_closure_repository import (
    UserClosureRepository,
)
from referral_network.services.level_conditions import LevelCondition


class ConditionEvaluator(Protocol):
    """Capability shared by all condition evaluators."""

    def can_handle(self, condition_type: str) -> bool:
        """Check if this evaluator handles the condition type."""
        ...

    async def evaluate(
        self, condition: LevelCondition, user_id: int, scope: str
    ) -> bool:
        """Check if user satisfies the condition."""
        ...


def is_direct_scope(scope: str) -> bool:
    """DIRECT limits to immediate children; anything else is NETWORK."""
    return scope == LevelConditionScope.DIRECT.value


class BusinessConditionEvaluator:
    """Evaluates BUSINESS conditions (downline volume, self excluded)."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize business condition evaluator."""
        self.closure_repo = UserClosureRepository(session)

    def can_handle(self, condition_type: str) -> bool:
        return condition_type == LevelConditionType.BUSINESS.value

    async def evaluate(
        self, condition: LevelCondition, user_id: int, scope: str
    ) -> bool:
        if not self.can_handle(condition.type):
            return False

        actual = await self.get_business_done(user_id, scope)
        return actual >= condition.required_value

    async def get_business_done(self, user_id: int, scope: str) -> Decimal:
        """
        Sum business done below a user.

        Args:
            user_id: User ID
            scope: DIRECT (depth = 1) or NETWORK (depth > 0)

        Returns:
            Total business done of the scoped downline
        """
        return await self.closure_repo.sum_business_done(
            user_id, direct_only=is_direct_scope(scope)
        )


class LevelsConditionEvaluator:
    """Evaluates LEVELS conditions (distinct branches holding a rank)."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize levels condition evaluator."""
        self.closure_repo = UserClosureRepository(session)

    def can_handle(self, condition_type: str) -> bool:
        return condition_type == LevelConditionType.LEVELS.value

    async def evaluate(
        self, condition: LevelCondition, user_id: int, scope: str
    ) -> bool:
        if not self.can_handle(condition.type):
            return False

        if not condition.level:
            # Misconfigured level, never satisfiable
            logger.warning(
                "LEVELS condition without target level",
                extra={"user_id": user_id},
            )
            return False

        branches = await self.count_branches_at_level(
            user_id, condition.level, scope
        )
        return Decimal(branches) >= condition.required_value

    async def count_branches_at_level(
        self, user_id: int, target_hierarchy: int, scope: str
    ) -> int:
        """
        Count distinct branches with an active assignee at or above a level.

        Args:
            user_id: User ID
            target_hierarchy: Minimum hierarchy
            scope: DIRECT (children only) or NETWORK (whole downline)

        Returns:
            Number of branches
        """
        return await self.closure_repo.count_branches_with_level(
            user_id,
            target_hierarchy,
            direct_only=is_direct_scope(scope),
        )
