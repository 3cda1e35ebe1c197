"""
User closure model.

Transitive closure of the referral tree: one row per (ancestor, descendant)
pair, including a depth-0 self row for every user.
"""

from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from referral_network.models.base import Base


class UserClosure(Base):
    """Closure row - ancestor reaches descendant at a given depth."""

    __tablename__ = "user_closure"
    __table_args__ = (
        Index("idx_uc_ancestor_rootchild", "ancestor_id", "root_child_id"),
        Index(
            "idx_uc_ancestor_depth_descendant",
            "ancestor_id",
            "depth",
            "descendant_id",
        ),
        Index("idx_uc_descendant", "descendant_id"),
    )

    # Composite primary key
    ancestor_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    descendant_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

    # Distance between ancestor and descendant (0 = self row)
    depth: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )

    # Immediate child of ancestor on the path to descendant (NULL on self rows)
    root_child_id: Mapped[int | None] = mapped_column(
        Integer, nullable=True
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<UserClosure(ancestor_id={self.ancestor_id}, "
            f"descendant_id={self.descendant_id}, depth={self.depth}, "
            f"root_child_id={self.root_child_id})>"
        )
