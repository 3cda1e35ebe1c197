"""Bot income tracking for the passive income flow."""

from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from referral_network.models.bot_activation import BotActivation
from referral_network.repositories.bot_activation_repository import (
    BotActivationRepository,
)


class BotIncomeService:
    """Keeps the income counter of a user's active bot activation."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize bot income service."""
        self.session = session
        self.activation_repo = BotActivationRepository(session)

    async def increase_active_bot_income_received(
        self, user_id: int, amount: Decimal
    ) -> BotActivation | None:
        """
        Add received income to the user's active activation.

        Args:
            user_id: User ID
            amount: Income amount

        Returns:
            Updated activation, None if the user has no active one
        """
        activation = await self.activation_repo.get_active(
            user_id, for_update=True
        )
        if not activation:
            return None

        activation.income_received += amount
        await self.session.flush()

        if activation.max_income and activation.income_received >= activation.max_income:
            logger.info(
                "Bot activation reached income cap",
                extra={
                    "user_id": user_id,
                    "activation_id": activation.id,
                    "income_received": str(activation.income_received),
                },
            )

        return activation
