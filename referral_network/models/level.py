"""
Level model.

Rank configuration: ordered by hierarchy, each carrying its passive income
percentage and eligibility conditions.
"""

from decimal import Decimal
from typing import Any

from sqlalchemy import DECIMAL, JSON, CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from referral_network.models.base import Base, TimestampMixin


class Level(TimestampMixin, Base):
    """Level model - administrator-managed rank definitions."""

    __tablename__ = "levels"
    __table_args__ = (
        CheckConstraint('hierarchy > 0', name='check_level_hierarchy_positive'),
        CheckConstraint(
            'passive_income_percentage >= 0 AND passive_income_percentage <= 100',
            name='check_level_passive_income_percentage_range'
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    # Strict rank order, higher = better
    hierarchy: Mapped[int] = mapped_column(
        Integer, nullable=False, unique=True, index=True
    )

    appraisal_bonus: Mapped[Decimal] = mapped_column(
        DECIMAL(10, 2), nullable=False, default=Decimal("0")
    )

    # Share of the passive pool attributed to this hierarchy step
    passive_income_percentage: Mapped[Decimal] = mapped_column(
        DECIMAL(5, 2), nullable=False
    )

    # Raw condition list, see services.level_conditions.parse_conditions
    conditions: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Level(id={self.id}, title={self.title}, "
            f"hierarchy={self.hierarchy})>"
        )
