"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from referral_network.models.base import Base
from referral_network.models.bot_activation import BotActivation
from referral_network.models.enums import (
    BotActivationStatus,
    LevelConditionScope,
    LevelConditionType,
    TransactionStatus,
    TransactionType,
    WalletType,
)
from referral_network.models.level import Level
from referral_network.models.transaction import Transaction

# Core Models
from referral_network.models.user import User
from referral_network.models.user_closure import UserClosure
from referral_network.models.user_level import UserLevel
from referral_network.models.wallet import Wallet

__all__ = [
    # Base
    "Base",
    # Enums
    "BotActivationStatus",
    "LevelConditionScope",
    "LevelConditionType",
    "TransactionStatus",
    "TransactionType",
    "WalletType",
    # Core Models
    "User",
    "UserClosure",
    "Level",
    "UserLevel",
    # Collaborator Models
    "Wallet",
    "Transaction",
    "BotActivation",
]
