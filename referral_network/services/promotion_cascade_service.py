"""
Promotion cascade service.

Re-checks ranks up the ancestor chain after a user's metrics change.
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from referral_network.services.closure_service import ClosureService
from referral_network.services.level_promotion_service import (
    LevelPromotionService,
)
from referral_network.utils.exceptions import is_isolatable


class PromotionCascadeService:
    """Promotion cascade service."""

    def __init__(
        self,
        session: AsyncSession,
        promotion_service: LevelPromotionService | None = None,
    ) -> None:
        """Initialize promotion cascade service."""
        self.session = session
        self.closure_service = ClosureService(session)
        self.promotion_service = promotion_service or LevelPromotionService(
            session
        )

    async def check_and_promote_user(self, user_id: int) -> bool:
        """
        Promote a single user without touching ancestors.

        Args:
            user_id: User ID

        Returns:
            True if the user was promoted
        """
        return await self.promotion_service.promote_user_if_eligible(user_id)

    async def check_and_promote_ancestors(self, user_id: int) -> list[int]:
        """
        Promote user, then every ancestor that now qualifies.

        Ancestors are visited closest first. A promoted ancestor restarts
        the cascade from itself, since its new rank may satisfy LEVELS
        conditions further up. Recursion only moves up a finite chain.

        A missing user or level for one ancestor is logged and skipped;
        database, conflict and funds errors abort the cascade.

        Args:
            user_id: User whose metrics changed

        Returns:
            IDs of promoted users in promotion order
        """
        promoted: list[int] = []

        if await self.promotion_service.promote_user_if_eligible(user_id):
            promoted.append(user_id)

        ancestors = await self.closure_service.get_all_ascendants_of_user(
            user_id, exclude_self=True
        )

        for row in ancestors:
            ancestor_id = row.ancestor_id
            try:
                if await self.promotion_service.promote_user_if_eligible(
                    ancestor_id
                ):
                    promoted.append(ancestor_id)
                    promoted.extend(
                        await self.check_and_promote_ancestors(ancestor_id)
                    )
            except Exception as e:
                if not is_isolatable(e):
                    raise
                logger.exception(
                    f"Promotion check failed for ancestor {ancestor_id}",
                    extra={"user_id": user_id, "ancestor_id": ancestor_id},
                )

        return promoted
