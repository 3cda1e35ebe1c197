"""
User model.

Represents a registered member of the referral network.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    DECIMAL,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from referral_network.models.base import Base

if TYPE_CHECKING:
    from referral_network.models.wallet import Wallet


class User(Base):
    """User model - members of the referral tree."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            'business_done >= 0',
            name='check_user_business_done_non_negative'
        ),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Identity
    username: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    email: Mapped[str | None] = mapped_column(
        String(255), unique=True, nullable=True
    )

    # Referral (exclusive parent pointer, NULL for roots)
    referred_by_user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    # Accumulated purchase volume (mutated by purchase flow only)
    business_done: Mapped[Decimal] = mapped_column(
        DECIMAL(18, 8), default=Decimal("0"), nullable=False
    )

    # Status flags
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    # Relationships
    referrer: Mapped[Optional["User"]] = relationship(
        "User",
        remote_side=[id],
        foreign_keys=[referred_by_user_id],
    )
    wallets: Mapped[list["Wallet"]] = relationship(
        "Wallet",
        back_populates="user",
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<User(id={self.id}, username={self.username}, "
            f"referred_by_user_id={self.referred_by_user_id})>"
        )
