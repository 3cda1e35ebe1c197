"""
Repositories.

Data access layer for all models.
"""

from referral_network.repositories.base import BaseRepository
from referral_network.repositories.bot_activation_repository import (
    BotActivationRepository,
)
from referral_network.repositories.level_repository import LevelRepository
from referral_network.repositories.transaction_repository import (
    TransactionRepository,
)
from referral_network.repositories.user_closure_repository import (
    UserClosureRepository,
)
from referral_network.repositories.user_level_repository import (
    UserLevelRepository,
)
from referral_network.repositories.user_repository import UserRepository
from referral_network.repositories.wallet_repository import WalletRepository

__all__ = [
    "BaseRepository",
    "BotActivationRepository",
    "LevelRepository",
    "TransactionRepository",
    "UserClosureRepository",
    "UserLevelRepository",
    "UserRepository",
    "WalletRepository",
]
