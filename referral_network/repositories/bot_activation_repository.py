"""
Bot activation repository.

Data access layer for BotActivation model.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from referral_network.models.bot_activation import BotActivation
from referral_network.models.enums import BotActivationStatus
from referral_network.repositories.base import BaseRepository


class BotActivationRepository(BaseRepository[BotActivation]):
    """Bot activation repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize bot activation repository."""
        super().__init__(BotActivation, session)

    async def get_active(
        self, user_id: int, for_update: bool = False
    ) -> Optional[BotActivation]:
        """
        Get user's active bot activation.

        Args:
            user_id: User ID
            for_update: Lock the row

        Returns:
            Active activation or None
        """
        stmt = (
            select(BotActivation)
            .where(
                BotActivation.user_id == user_id,
                BotActivation.status == BotActivationStatus.ACTIVE.value,
            )
            .order_by(BotActivation.id.desc())
            .limit(1)
        )
        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
