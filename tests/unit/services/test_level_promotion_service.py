"""
Unit tests for LevelPromotionService.

Tests greedy highest-first promotion and idempotence.
"""

from decimal import Decimal

import pytest

from referral_network.services.level_promotion_service import (
    LevelPromotionService,
)

BUSINESS_DIRECT_100 = {"type": "BUSINESS", "scope": "DIRECT", "value": 100}
BUSINESS_NETWORK_1000 = {"type": "BUSINESS", "scope": "NETWORK", "value": 1000}


class TestPromoteUserIfEligible:
    """Tests for promote_user_if_eligible."""

    @pytest.mark.asyncio
    async def test_jumps_to_highest_eligible_level(
        self,
        promotion_service,  # pylint: disable=redefined-outer-name
        level_service,  # pylint: disable=redefined-outer-name
        create_user_helper,  # pylint: disable=redefined-outer-name
        create_level_helper,  # pylint: disable=redefined-outer-name
    ):
        """
        GIVEN: User qualifying for levels 1, 2 and 3 at once
        WHEN: Promotion runs
        THEN: User lands on level 3 in a single assignment
        """
        await create_level_helper(1)
        await create_level_helper(2, conditions=[BUSINESS_DIRECT_100])
        await create_level_helper(3, conditions=[BUSINESS_NETWORK_1000])
        await create_level_helper(
            4,
            conditions=[BUSINESS_NETWORK_1000, {
                "type": "BUSINESS", "scope": "DIRECT", "value": 5000,
            }],
        )
        user = await create_user_helper()
        await create_user_helper(parent=user, business_done=Decimal("1000"))

        promoted = await promotion_service.promote_user_if_eligible(user.id)

        assert promoted is True
        assert await level_service.get_user_current_hierarchy(user.id) == 3
        assert len(await level_service.get_level_history(user.id)) == 1

    @pytest.mark.asyncio
    async def test_second_call_is_noop(
        self,
        promotion_service,  # pylint: disable=redefined-outer-name
        level_service,  # pylint: disable=redefined-outer-name
        create_user_helper,  # pylint: disable=redefined-outer-name
        create_level_helper,  # pylint: disable=redefined-outer-name
    ):
        """Test promotion is idempotent without state changes."""
        await create_level_helper(1)
        user = await create_user_helper()

        assert await promotion_service.promote_user_if_eligible(user.id) is True
        assert await promotion_service.promote_user_if_eligible(user.id) is False
        assert len(await level_service.get_level_history(user.id)) == 1

    @pytest.mark.asyncio
    async def test_never_demotes(
        self,
        promotion_service,  # pylint: disable=redefined-outer-name
        level_service,  # pylint: disable=redefined-outer-name
        create_user_helper,  # pylint: disable=redefined-outer-name
        create_level_helper,  # pylint: disable=redefined-outer-name
        assign_level_helper,  # pylint: disable=redefined-outer-name
    ):
        """Test users above their qualification keep their rank."""
        await create_level_helper(1)
        await create_level_helper(2, conditions=[BUSINESS_DIRECT_100])
        user = await create_user_helper()
        await assign_level_helper(user, 2)

        assert await promotion_service.promote_user_if_eligible(user.id) is False
        assert await level_service.get_user_current_hierarchy(user.id) == 2

    @pytest.mark.asyncio
    async def test_unknown_condition_type_fails_level(
        self,
        promotion_service,  # pylint: disable=redefined-outer-name
        level_service,  # pylint: disable=redefined-outer-name
        create_user_helper,  # pylint: disable=redefined-outer-name
        create_level_helper,  # pylint: disable=redefined-outer-name
    ):
        """Test a level guarded by an unknown type is never granted."""
        await create_level_helper(1)
        await create_level_helper(
            2, conditions=[{"type": "REFERRALS", "scope": "DIRECT", "value": 0}]
        )
        user = await create_user_helper()

        await promotion_service.promote_user_if_eligible(user.id)

        assert await level_service.get_user_current_hierarchy(user.id) == 1

    @pytest.mark.asyncio
    async def test_conditions_are_anded(
        self,
        promotion_service,  # pylint: disable=redefined-outer-name
        create_user_helper,  # pylint: disable=redefined-outer-name
        create_level_helper,  # pylint: disable=redefined-outer-name
    ):
        """Test one failing condition fails the level."""
        level = await create_level_helper(
            1, conditions=[BUSINESS_DIRECT_100, BUSINESS_NETWORK_1000]
        )
        user = await create_user_helper()
        await create_user_helper(parent=user, business_done=Decimal("100"))

        assert not await promotion_service.check_level_conditions(
            user.id, level
        )
        assert await promotion_service.find_highest_eligible_level(
            user.id, 0
        ) is None

    @pytest.mark.asyncio
    async def test_stale_rank_read_does_not_demote(
        self,
        monkeypatch,
        promotion_service,  # pylint: disable=redefined-outer-name
        level_service,  # pylint: disable=redefined-outer-name
        create_user_helper,  # pylint: disable=redefined-outer-name
        create_level_helper,  # pylint: disable=redefined-outer-name
        assign_level_helper,  # pylint: disable=redefined-outer-name
    ):
        """
        GIVEN: User at level 3 whose rank read is out of date (0)
        WHEN: Promotion picks level 2 from the stale read
        THEN: The locked assignment keeps level 3 and nothing is promoted
        """
        await create_level_helper(1)
        await create_level_helper(2)
        await create_level_helper(3, conditions=[BUSINESS_DIRECT_100])
        user = await create_user_helper()
        await assign_level_helper(user, 3)

        async def stale_hierarchy(_user_id):
            return 0

        monkeypatch.setattr(
            promotion_service.level_service,
            "get_user_current_hierarchy",
            stale_hierarchy,
        )

        assert await promotion_service.promote_user_if_eligible(user.id) is False
        assert await level_service.get_user_current_hierarchy(user.id) == 3
        assert len(await level_service.get_level_history(user.id)) == 1

    @pytest.mark.asyncio
    async def test_missing_user_not_promoted(
        self,
        promotion_service,  # pylint: disable=redefined-outer-name
        create_level_helper,  # pylint: disable=redefined-outer-name
    ):
        """Test unknown user returns False."""
        await create_level_helper(1)

        assert await promotion_service.promote_user_if_eligible(999999) is False

    @pytest.mark.asyncio
    async def test_custom_evaluators(
        self,
        db_session,  # pylint: disable=redefined-outer-name
        create_user_helper,  # pylint: disable=redefined-outer-name
        create_level_helper,  # pylint: disable=redefined-outer-name
    ):
        """Test extra condition types plug in through evaluators."""

        class AlwaysTrue:
            def can_handle(self, condition_type):
                return condition_type == "REFERRALS"

            async def evaluate(self, condition, user_id, scope):
                return True

        await create_level_helper(
            1, conditions=[{"type": "REFERRALS", "scope": "DIRECT", "value": 3}]
        )
        user = await create_user_helper()
        service = LevelPromotionService(db_session, evaluators=[AlwaysTrue()])

        assert await service.promote_user_if_eligible(user.id) is True
