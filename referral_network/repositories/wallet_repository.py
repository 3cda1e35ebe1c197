"""
Wallet repository.

Data access layer for Wallet model.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from referral_network.models.enums import WalletType
from referral_network.models.wallet import Wallet
from referral_network.repositories.base import BaseRepository


class WalletRepository(BaseRepository[Wallet]):
    """Wallet repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize wallet repository."""
        super().__init__(Wallet, session)

    async def get_personal(self, user_id: int) -> Optional[Wallet]:
        """
        Get user's personal wallet.

        Args:
            user_id: User ID

        Returns:
            Wallet or None
        """
        return await self.get_by(
            user_id=user_id, wallet_type=WalletType.PERSONAL.value
        )

    async def get_company(self, wallet_type: WalletType) -> Optional[Wallet]:
        """
        Get company wallet by type.

        Args:
            wallet_type: COMPANY_INCOME or COMPANY_INVESTMENT

        Returns:
            Wallet or None
        """
        return await self.get_by(user_id=None, wallet_type=wallet_type.value)

    async def lock_many(self, wallet_ids: List[int]) -> List[Wallet]:
        """
        Lock wallets in ascending ID order.

        Args:
            wallet_ids: Wallet IDs

        Returns:
            Locked wallets ordered by ID
        """
        stmt = (
            select(Wallet)
            .where(Wallet.id.in_(wallet_ids))
            .order_by(Wallet.id.asc())
            .with_for_update()
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
