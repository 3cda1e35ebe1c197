"""
Transaction repository.

Data access layer for Transaction model.
"""

from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from referral_network.models.transaction import Transaction
from referral_network.repositories.base import BaseRepository


class TransactionRepository(BaseRepository[Transaction]):
    """Transaction repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize transaction repository."""
        super().__init__(Transaction, session)

    async def get_by_wallet(
        self,
        wallet_id: int,
        transaction_type: Optional[str] = None,
    ) -> List[Transaction]:
        """
        Get transactions touching a wallet, oldest first.

        Args:
            wallet_id: Wallet ID (either side)
            transaction_type: Optional type filter

        Returns:
            List of transactions
        """
        stmt = select(Transaction).where(
            or_(
                Transaction.from_wallet_id == wallet_id,
                Transaction.to_wallet_id == wallet_id,
            )
        )
        if transaction_type:
            stmt = stmt.where(Transaction.type == transaction_type)
        stmt = stmt.order_by(Transaction.id.asc())

        result = await self.session.execute(stmt)
        return list(result.scalars().all())
