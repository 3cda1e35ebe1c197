"""
Wallet model.

Personal wallets belong to a user; company wallets have no owner.
"""

from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DECIMAL, CheckConstraint, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from referral_network.models.base import Base, TimestampMixin
from referral_network.models.enums import WalletType

if TYPE_CHECKING:
    from referral_network.models.user import User


class Wallet(TimestampMixin, Base):
    """Wallet model - balances moved by the income flows."""

    __tablename__ = "wallets"
    __table_args__ = (
        CheckConstraint(
            'balance >= 0', name='check_wallet_balance_non_negative'
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )

    balance: Mapped[Decimal] = mapped_column(
        DECIMAL(18, 8), default=Decimal("0"), nullable=False
    )

    wallet_type: Mapped[str] = mapped_column(
        String(50),
        default=WalletType.PERSONAL.value,
        nullable=False,
        index=True
    )  # personal, company:income, company:investment

    currency: Mapped[str] = mapped_column(
        String(10), default="USDT", nullable=False
    )

    # Relationships
    user: Mapped[Optional["User"]] = relationship(
        "User",
        back_populates="wallets",
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Wallet(id={self.id}, user_id={self.user_id}, "
            f"type={self.wallet_type}, balance={self.balance})>"
        )
