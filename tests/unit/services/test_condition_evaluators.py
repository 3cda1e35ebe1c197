"""
Unit tests for condition evaluators.

Tests BUSINESS sums and LEVELS branch counting.
"""

from decimal import Decimal

import pytest

from referral_network.services.condition_evaluators import (
    BusinessConditionEvaluator,
    LevelsConditionEvaluator,
)
from referral_network.services.level_conditions import LevelCondition


def business(scope: str, value) -> LevelCondition:
    return LevelCondition(type="BUSINESS", scope=scope, value=value)


def levels(scope: str, value: int, level: int | None) -> LevelCondition:
    return LevelCondition(type="LEVELS", scope=scope, value=value, level=level)


class TestBusinessConditionEvaluator:
    """Tests for BUSINESS conditions."""

    @pytest.mark.asyncio
    async def test_direct_and_network_sums(
        self,
        db_session,  # pylint: disable=redefined-outer-name
        create_user_helper,  # pylint: disable=redefined-outer-name
    ):
        """
        GIVEN: Root (1000) -> child (500) -> grandchild (300)
        WHEN: Evaluating business done of root
        THEN: DIRECT counts 500, NETWORK counts 800, self never counts
        """
        evaluator = BusinessConditionEvaluator(db_session)
        root = await create_user_helper(business_done=Decimal("1000"))
        child = await create_user_helper(
            parent=root, business_done=Decimal("500")
        )
        await create_user_helper(parent=child, business_done=Decimal("300"))

        assert await evaluator.get_business_done(root.id, "DIRECT") == 500
        assert await evaluator.get_business_done(root.id, "NETWORK") == 800

        assert await evaluator.evaluate(business("DIRECT", 500), root.id, "DIRECT")
        assert not await evaluator.evaluate(
            business("DIRECT", 501), root.id, "DIRECT"
        )
        assert await evaluator.evaluate(
            business("NETWORK", 800), root.id, "NETWORK"
        )
        assert not await evaluator.evaluate(
            business("NETWORK", 800.5), root.id, "NETWORK"
        )

    @pytest.mark.asyncio
    async def test_leaf_has_no_business(
        self,
        db_session,  # pylint: disable=redefined-outer-name
        create_user_helper,  # pylint: disable=redefined-outer-name
    ):
        """Test user without downline only meets a zero requirement."""
        evaluator = BusinessConditionEvaluator(db_session)
        user = await create_user_helper(business_done=Decimal("99999"))

        assert await evaluator.evaluate(business("NETWORK", 0), user.id, "NETWORK")
        assert not await evaluator.evaluate(
            business("NETWORK", 1), user.id, "NETWORK"
        )

    def test_can_handle(self):
        """Test type dispatch."""
        evaluator = BusinessConditionEvaluator(None)
        assert evaluator.can_handle("BUSINESS")
        assert not evaluator.can_handle("LEVELS")


class TestLevelsConditionEvaluator:
    """Tests for LEVELS conditions."""

    @pytest.mark.asyncio
    async def test_same_branch_counts_once(
        self,
        db_session,  # pylint: disable=redefined-outer-name
        create_user_helper,  # pylint: disable=redefined-outer-name
        create_level_helper,  # pylint: disable=redefined-outer-name
        assign_level_helper,  # pylint: disable=redefined-outer-name
    ):
        """
        GIVEN: Two level-2 users in the same branch under root
        WHEN: Checking NETWORK LEVELS level=2 value=2
        THEN: Condition fails until a second branch qualifies
        """
        evaluator = LevelsConditionEvaluator(db_session)
        await create_level_helper(1)
        await create_level_helper(2)
        await create_level_helper(3)

        root = await create_user_helper()
        left = await create_user_helper(parent=root)
        left_a = await create_user_helper(parent=left)
        left_b = await create_user_helper(parent=left)
        right = await create_user_helper(parent=root)

        await assign_level_helper(left_a, 2)
        await assign_level_helper(left_b, 3)

        condition = levels("NETWORK", 2, 2)
        assert await evaluator.count_branches_at_level(
            root.id, 2, "NETWORK"
        ) == 1
        assert not await evaluator.evaluate(condition, root.id, "NETWORK")

        await assign_level_helper(right, 2)

        assert await evaluator.count_branches_at_level(
            root.id, 2, "NETWORK"
        ) == 2
        assert await evaluator.evaluate(condition, root.id, "NETWORK")

    @pytest.mark.asyncio
    async def test_lower_rank_and_closed_rows_ignored(
        self,
        db_session,  # pylint: disable=redefined-outer-name
        create_user_helper,  # pylint: disable=redefined-outer-name
        create_level_helper,  # pylint: disable=redefined-outer-name
        assign_level_helper,  # pylint: disable=redefined-outer-name
    ):
        """Only the active rank at or above the target counts."""
        evaluator = LevelsConditionEvaluator(db_session)
        await create_level_helper(1)
        await create_level_helper(2)

        root = await create_user_helper()
        child = await create_user_helper(parent=root)

        await assign_level_helper(child, 1)
        assert await evaluator.count_branches_at_level(root.id, 2, "NETWORK") == 0

        await assign_level_helper(child, 2)
        assert await evaluator.count_branches_at_level(root.id, 2, "NETWORK") == 1
        assert await evaluator.count_branches_at_level(root.id, 1, "NETWORK") == 1

    @pytest.mark.asyncio
    async def test_direct_scope_only_children(
        self,
        db_session,  # pylint: disable=redefined-outer-name
        create_user_helper,  # pylint: disable=redefined-outer-name
        create_level_helper,  # pylint: disable=redefined-outer-name
        assign_level_helper,  # pylint: disable=redefined-outer-name
    ):
        """DIRECT scope ignores qualifying grandchildren."""
        evaluator = LevelsConditionEvaluator(db_session)
        await create_level_helper(1)

        root = await create_user_helper()
        child = await create_user_helper(parent=root)
        grandchild = await create_user_helper(parent=child)
        await assign_level_helper(grandchild, 1)

        assert await evaluator.count_branches_at_level(root.id, 1, "DIRECT") == 0
        assert await evaluator.count_branches_at_level(root.id, 1, "NETWORK") == 1

        await assign_level_helper(child, 1)
        assert await evaluator.evaluate(levels("DIRECT", 1, 1), root.id, "DIRECT")

    @pytest.mark.asyncio
    async def test_missing_target_level_never_satisfied(
        self,
        db_session,  # pylint: disable=redefined-outer-name
        create_user_helper,  # pylint: disable=redefined-outer-name
    ):
        """Misconfigured condition is not satisfiable, even with value 0."""
        evaluator = LevelsConditionEvaluator(db_session)
        root = await create_user_helper()

        assert not await evaluator.evaluate(
            levels("NETWORK", 0, None), root.id, "NETWORK"
        )
