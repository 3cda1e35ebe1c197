"""
Services.

Business logic layer.
"""

# Closure Store
from referral_network.services.closure_service import (
    ClosureService,
    resolve_root_child_id,
)

# Levels & Promotion
from referral_network.services.condition_evaluators import (
    BusinessConditionEvaluator,
    ConditionEvaluator,
    LevelsConditionEvaluator,
)
from referral_network.services.level_conditions import (
    LevelCondition,
    parse_conditions,
)
from referral_network.services.level_promotion_service import (
    LevelPromotionService,
)
from referral_network.services.level_service import LevelService
from referral_network.services.promotion_cascade_service import (
    PromotionCascadeService,
)

# Passive Income
from referral_network.services.passive_income_service import (
    DistributionResult,
    PassiveIncomeService,
    PassiveShare,
    PurchaseSettlement,
    plan_distribution,
)

# Collaborators
from referral_network.services.bot_income_service import BotIncomeService
from referral_network.services.transaction_service import TransactionService
from referral_network.services.user_service import UserService
from referral_network.services.wallet_service import WalletService

# Facade
from referral_network.services.network_service import ReferralNetworkService

__all__ = [
    "BotIncomeService",
    "BusinessConditionEvaluator",
    "ClosureService",
    "ConditionEvaluator",
    "DistributionResult",
    "LevelCondition",
    "LevelPromotionService",
    "LevelService",
    "LevelsConditionEvaluator",
    "PassiveIncomeService",
    "PassiveShare",
    "PromotionCascadeService",
    "PurchaseSettlement",
    "ReferralNetworkService",
    "TransactionService",
    "UserService",
    "WalletService",
    "parse_conditions",
    "plan_distribution",
    "resolve_root_child_id",
]
