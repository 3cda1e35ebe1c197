"""
Bot activation model.

Tracks income received against a user's income cap.
"""

from decimal import Decimal

from sqlalchemy import DECIMAL, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from referral_network.models.base import Base, TimestampMixin
from referral_network.models.enums import BotActivationStatus


class BotActivation(TimestampMixin, Base):
    """Bot activation model - income cap tracker."""

    __tablename__ = "bot_activations"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    status: Mapped[str] = mapped_column(
        String(20),
        default=BotActivationStatus.ACTIVE.value,
        nullable=False,
        index=True
    )

    income_received: Mapped[Decimal] = mapped_column(
        DECIMAL(18, 8), default=Decimal("0"), nullable=False
    )
    max_income: Mapped[Decimal] = mapped_column(
        DECIMAL(18, 8), default=Decimal("0"), nullable=False
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<BotActivation(id={self.id}, user_id={self.user_id}, "
            f"status={self.status}, income_received={self.income_received})>"
        )
