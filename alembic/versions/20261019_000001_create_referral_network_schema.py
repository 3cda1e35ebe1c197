"""create referral network schema

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19 00:00:01.000000

Users, closure table, levels, rank history, wallets, ledger and bot
activations.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261019_000001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    # Users
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False, autoincrement=True),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("referred_by_user_id", sa.Integer(), nullable=True),
        sa.Column(
            "business_done",
            sa.DECIMAL(precision=18, scale=8),
            nullable=False,
            server_default="0",
        ),
        sa.Column(
            "is_active", sa.Boolean(), nullable=False, server_default="true"
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["referred_by_user_id"], ["users.id"], ondelete="SET NULL"
        ),
        sa.UniqueConstraint("email"),
        sa.CheckConstraint(
            "business_done >= 0", name="check_user_business_done_non_negative"
        ),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index(
        "ix_users_referred_by_user_id", "users", ["referred_by_user_id"]
    )

    # Closure table
    op.create_table(
        "user_closure",
        sa.Column("ancestor_id", sa.Integer(), nullable=False),
        sa.Column("descendant_id", sa.Integer(), nullable=False),
        sa.Column("depth", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("root_child_id", sa.Integer(), nullable=True),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("ancestor_id", "descendant_id"),
        sa.ForeignKeyConstraint(
            ["ancestor_id"], ["users.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["descendant_id"], ["users.id"], ondelete="CASCADE"
        ),
    )
    op.create_index(
        "idx_uc_ancestor_rootchild",
        "user_closure",
        ["ancestor_id", "root_child_id"],
    )
    op.create_index(
        "idx_uc_ancestor_depth_descendant",
        "user_closure",
        ["ancestor_id", "depth", "descendant_id"],
    )
    op.create_index("idx_uc_descendant", "user_closure", ["descendant_id"])

    # Levels
    op.create_table(
        "levels",
        sa.Column("id", sa.Integer(), nullable=False, autoincrement=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("hierarchy", sa.Integer(), nullable=False),
        sa.Column(
            "appraisal_bonus",
            sa.DECIMAL(precision=10, scale=2),
            nullable=False,
            server_default="0",
        ),
        sa.Column(
            "passive_income_percentage",
            sa.DECIMAL(precision=5, scale=2),
            nullable=False,
        ),
        sa.Column("conditions", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "hierarchy > 0", name="check_level_hierarchy_positive"
        ),
        sa.CheckConstraint(
            "passive_income_percentage >= 0 AND passive_income_percentage <= 100",
            name="check_level_passive_income_percentage_range",
        ),
    )
    op.create_index(
        "ix_levels_hierarchy", "levels", ["hierarchy"], unique=True
    )

    # Rank history
    op.create_table(
        "user_levels",
        sa.Column("id", sa.Integer(), nullable=False, autoincrement=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("level_id", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["level_id"], ["levels.id"], ondelete="RESTRICT"
        ),
    )
    op.create_index("ix_user_levels_user_id", "user_levels", ["user_id"])
    op.create_index(
        "idx_user_levels_user_level", "user_levels", ["user_id", "level_id"]
    )
    op.create_index(
        "idx_user_levels_user_end_date", "user_levels", ["user_id", "end_date"]
    )
    # At most one active rank per user
    op.create_index(
        "uq_user_levels_active_user",
        "user_levels",
        ["user_id"],
        unique=True,
        postgresql_where=sa.text("end_date IS NULL"),
    )

    # Wallets
    op.create_table(
        "wallets",
        sa.Column("id", sa.Integer(), nullable=False, autoincrement=True),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column(
            "balance",
            sa.DECIMAL(precision=18, scale=8),
            nullable=False,
            server_default="0",
        ),
        sa.Column(
            "wallet_type",
            sa.String(length=50),
            nullable=False,
            server_default="personal",
        ),
        sa.Column(
            "currency",
            sa.String(length=10),
            nullable=False,
            server_default="USDT",
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.CheckConstraint(
            "balance >= 0", name="check_wallet_balance_non_negative"
        ),
    )
    op.create_index("ix_wallets_user_id", "wallets", ["user_id"])
    op.create_index("ix_wallets_wallet_type", "wallets", ["wallet_type"])

    # Ledger
    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), nullable=False, autoincrement=True),
        sa.Column("from_wallet_id", sa.Integer(), nullable=True),
        sa.Column("to_wallet_id", sa.Integer(), nullable=True),
        sa.Column("type", sa.String(length=50), nullable=False),
        sa.Column(
            "amount", sa.DECIMAL(precision=18, scale=8), nullable=False
        ),
        sa.Column(
            "status",
            sa.String(length=50),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("entity_id", sa.Integer(), nullable=True),
        sa.Column("initiator_id", sa.Integer(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "status_updated_at", sa.DateTime(timezone=True), nullable=True
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["from_wallet_id"], ["wallets.id"], ondelete="SET NULL"
        ),
        sa.ForeignKeyConstraint(
            ["to_wallet_id"], ["wallets.id"], ondelete="SET NULL"
        ),
        sa.ForeignKeyConstraint(
            ["initiator_id"], ["users.id"], ondelete="SET NULL"
        ),
        sa.CheckConstraint(
            "amount > 0", name="check_transaction_amount_positive"
        ),
    )
    op.create_index(
        "ix_transactions_from_wallet_id", "transactions", ["from_wallet_id"]
    )
    op.create_index(
        "ix_transactions_to_wallet_id", "transactions", ["to_wallet_id"]
    )
    op.create_index("ix_transactions_type", "transactions", ["type"])
    op.create_index("ix_transactions_status", "transactions", ["status"])
    op.create_index(
        "ix_transactions_created_at", "transactions", ["created_at"]
    )

    # Bot activations
    op.create_table(
        "bot_activations",
        sa.Column("id", sa.Integer(), nullable=False, autoincrement=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column(
            "status",
            sa.String(length=20),
            nullable=False,
            server_default="active",
        ),
        sa.Column(
            "income_received",
            sa.DECIMAL(precision=18, scale=8),
            nullable=False,
            server_default="0",
        ),
        sa.Column(
            "max_income",
            sa.DECIMAL(precision=18, scale=8),
            nullable=False,
            server_default="0",
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index(
        "ix_bot_activations_user_id", "bot_activations", ["user_id"]
    )
    op.create_index(
        "ix_bot_activations_status", "bot_activations", ["status"]
    )


def downgrade() -> None:
    op.drop_table("bot_activations")
    op.drop_table("transactions")
    op.drop_table("wallets")
    op.drop_table("user_levels")
    op.drop_table("levels")
    op.drop_table("user_closure")
    op.drop_table("users")
