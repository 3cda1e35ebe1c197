"""
User service.

User reads and the business volume counter.
"""

from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from referral_network.models.user import User
from referral_network.repositories.user_repository import UserRepository
from referral_network.utils.exceptions import NotFoundError


class UserService:
    """User service."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user service."""
        self.session = session
        self.user_repo = UserRepository(session)

    async def get_user_or_raise(self, user_id: int) -> User:
        """
        Get user by ID.

        Raises:
            NotFoundError: If user is missing
        """
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")
        return user

    async def increment_business_done(
        self, user_id: int, amount: Decimal
    ) -> User:
        """
        Add purchase volume to a user's business_done.

        Args:
            user_id: User ID
            amount: Positive amount

        Returns:
            Updated user
        """
        if amount <= 0:
            raise ValueError("Business amount must be positive")

        user = await self.user_repo.get_for_update(user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")

        user.business_done += amount
        await self.session.flush()

        logger.debug(
            "Business done increased",
            extra={
                "user_id": user_id,
                "amount": str(amount),
                "business_done": str(user.business_done),
            },
        )

        return user
