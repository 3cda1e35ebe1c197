"""
Transaction model.

Immutable ledger of wallet-to-wallet movements.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    DECIMAL,
    CheckConstraint,
    DateTime,
    ForeignKey,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from referral_network.models.base import Base
from referral_network.models.enums import TransactionStatus


class Transaction(Base):
    """Transaction model - ledger rows written by the income flows."""

    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint(
            'amount > 0', name='check_transaction_amount_positive'
        ),
    )

    # Primary key
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Wallet references
    from_wallet_id: Mapped[int | None] = mapped_column(
        ForeignKey("wallets.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    to_wallet_id: Mapped[int | None] = mapped_column(
        ForeignKey("wallets.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    # Transaction type
    type: Mapped[str] = mapped_column(
        String(50), nullable=False, index=True
    )  # income:passive, purchase:package, ...

    # Amount
    amount: Mapped[Decimal] = mapped_column(
        DECIMAL(18, 8), nullable=False
    )

    # Status
    status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=TransactionStatus.PENDING.value,
        index=True
    )

    # Description
    description: Mapped[str | None] = mapped_column(
        Text, nullable=True
    )

    # Reference to the business entity (e.g. purchase id)
    entity_id: Mapped[int | None] = mapped_column(nullable=True)

    # Who triggered the movement
    initiator_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
        index=True,
    )
    status_updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Transaction(id={self.id}, from={self.from_wallet_id}, "
            f"to={self.to_wallet_id}, type={self.type}, "
            f"amount={self.amount}, status={self.status})>"
        )
