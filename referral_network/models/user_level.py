"""
User level model.

Append-only rank assignment history. The active row has end_date = NULL.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from referral_network.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from referral_network.models.level import Level


class UserLevel(TimestampMixin, Base):
    """User level model - rank assignments."""

    __tablename__ = "user_levels"
    __table_args__ = (
        Index("idx_user_levels_user_level", "user_id", "level_id"),
        Index("idx_user_levels_user_end_date", "user_id", "end_date"),
        # At most one active rank per user
        Index(
            "uq_user_levels_active_user",
            "user_id",
            unique=True,
            postgresql_where=text("end_date IS NULL"),
            sqlite_where=text("end_date IS NULL"),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    level_id: Mapped[int] = mapped_column(
        ForeignKey("levels.id", ondelete="RESTRICT"),
        nullable=False
    )

    start_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False
    )
    end_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Always needed to resolve hierarchy
    level: Mapped["Level"] = relationship(
        "Level", lazy="joined", innerjoin=True
    )

    @property
    def is_active(self) -> bool:
        """Check if assignment is the current one."""
        return self.end_date is None

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<UserLevel(id={self.id}, user_id={self.user_id}, "
            f"level_id={self.level_id}, end_date={self.end_date})>"
        )
