"""
Database enums.

Centralized enums used across database models.
"""

from enum import StrEnum


class LevelConditionType(StrEnum):
    """Level condition type values."""

    BUSINESS = "BUSINESS"  # Sum of business done in downline
    LEVELS = "LEVELS"  # Distinct branches holding a level


class LevelConditionScope(StrEnum):
    """Level condition scope values."""

    DIRECT = "DIRECT"  # Immediate children only (depth = 1)
    NETWORK = "NETWORK"  # Whole downline (depth > 0)


class WalletType(StrEnum):
    """Wallet type values."""

    PERSONAL = "personal"
    COMPANY_INCOME = "company:income"
    COMPANY_INVESTMENT = "company:investment"


class TransactionStatus(StrEnum):
    """Transaction status values."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class TransactionType(StrEnum):
    """Transaction type values."""

    P2P = "p2p"
    INCOME_PASSIVE = "income:passive"
    INCOME_BOT = "income:bot"
    INCOME_APPRAISAL = "income:appraisal"
    PURCHASE_PACKAGE = "purchase:package"


class BotActivationStatus(StrEnum):
    """Bot activation status values."""

    ACTIVE = "active"
    EXPIRED = "expired"
