"""
Transaction service.

Appends rows to the wallet ledger.
"""

from datetime import UTC, datetime
from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from referral_network.models.enums import TransactionStatus, TransactionType
from referral_network.models.transaction import Transaction
from referral_network.repositories.transaction_repository import (
    TransactionRepository,
)


class TransactionService:
    """Transaction service for ledger writes and reads."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize transaction service."""
        self.session = session
        self.transaction_repo = TransactionRepository(session)

    async def record_transaction(
        self,
        from_wallet_id: int | None,
        to_wallet_id: int | None,
        amount: Decimal,
        transaction_type: TransactionType,
        description: str | None = None,
        entity_id: int | None = None,
        initiator_id: int | None = None,
    ) -> Transaction:
        """
        Record an approved ledger row.

        Args:
            from_wallet_id: Debited wallet
            to_wallet_id: Credited wallet
            amount: Positive amount
            transaction_type: Ledger type
            description: Human readable note
            entity_id: Related business entity (e.g. purchase)
            initiator_id: User who triggered the movement

        Returns:
            Created transaction
        """
        if amount <= 0:
            raise ValueError("Transaction amount must be positive")

        now = datetime.now(UTC)
        transaction = await self.transaction_repo.create(
            from_wallet_id=from_wallet_id,
            to_wallet_id=to_wallet_id,
            amount=amount,
            type=transaction_type.value,
            status=TransactionStatus.APPROVED.value,
            description=description,
            entity_id=entity_id,
            initiator_id=initiator_id,
            created_at=now,
            status_updated_at=now,
        )

        logger.debug(
            "Transaction recorded",
            extra={
                "transaction_id": transaction.id,
                "type": transaction.type,
                "amount": str(amount),
            },
        )

        return transaction

    async def get_wallet_transactions(
        self,
        wallet_id: int,
        transaction_type: TransactionType | None = None,
    ) -> list[Transaction]:
        """Get ledger rows touching a wallet, oldest first."""
        return await self.transaction_repo.get_by_wallet(
            wallet_id,
            transaction_type.value if transaction_type else None,
        )
