"""
Passive income service.

Distributes the upline pool of a purchase over the purchaser's ancestors by
hierarchy range coverage, and settles package purchases.

Each hierarchy step above the purchaser's own rank is paid to the first
ancestor (closest first) whose rank reaches it. Steps nobody reaches stay
with the company.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Sequence

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from referral_network.config.settings import settings
from referral_network.models.enums import TransactionType
from referral_network.models.level import Level
from referral_network.models.user import User
from referral_network.services.bot_income_service import BotIncomeService
from referral_network.services.closure_service import ClosureService
from referral_network.services.level_service import LevelService
from referral_network.services.transaction_service import TransactionService
from referral_network.services.user_service import UserService
from referral_network.services.wallet_service import WalletService
from referral_network.utils.exceptions import InsufficientFundsError
from referral_network.utils.money import ZERO, quantize_down, to_decimal

UNDISTRIBUTED_SUFFIX = "+ undistributed passive share"


@dataclass(frozen=True)
class PassiveShare:
    """Amount paid to one ancestor for a hierarchy range."""

    ancestor_id: int
    amount: Decimal
    start_hierarchy: int
    end_hierarchy: int


@dataclass
class DistributionResult:
    """Outcome of one pool distribution."""

    pool: Decimal
    paid_out: list[PassiveShare] = field(default_factory=list)
    undistributed_remainder: Decimal = ZERO

    @property
    def total_paid(self) -> Decimal:
        return sum((share.amount for share in self.paid_out), ZERO)


@dataclass
class PurchaseSettlement:
    """Outcome of a package purchase."""

    investment_amount: Decimal
    company_amount: Decimal  # base cut + undistributed remainder
    distribution: DistributionResult


def build_level_lookups(
    levels: Iterable[Level],
) -> tuple[dict[int, Decimal], int]:
    """
    Index configured levels.

    Returns:
        Tuple of (hierarchy -> passive percentage, max hierarchy)
    """
    hierarchy_percentages = {
        level.hierarchy: to_decimal(level.passive_income_percentage)
        for level in levels
    }
    max_hierarchy = max(hierarchy_percentages, default=0)
    return hierarchy_percentages, max_hierarchy


def calculate_percentage_for_range(
    hierarchy_percentages: dict[int, Decimal], start: int, end: int
) -> Decimal:
    """Sum percentages of hierarchies start..end (inclusive, gaps count 0)."""
    return sum(
        (hierarchy_percentages.get(h, ZERO) for h in range(start, end + 1)),
        ZERO,
    )


def calculate_share_amount(
    pool: Decimal, percentage: Decimal, remaining: Decimal
) -> Decimal:
    """Share of the pool for a percentage, truncated and capped by remaining."""
    share = quantize_down(pool * percentage / Decimal("100"))
    return min(share, remaining)


def plan_distribution(
    pool: Decimal,
    purchaser_hierarchy: int,
    ancestors: Sequence[tuple[int, int]],
    hierarchy_percentages: dict[int, Decimal],
    max_hierarchy: int,
) -> DistributionResult:
    """
    Compute who gets what, without moving money.

    Args:
        pool: Amount to distribute
        purchaser_hierarchy: Purchaser's rank (0 when unranked)
        ancestors: (ancestor_id, hierarchy) pairs, closest first
        hierarchy_percentages: hierarchy -> percentage of the pool
        max_hierarchy: Highest configured hierarchy

    Returns:
        Planned shares and the undistributed remainder
    """
    result = DistributionResult(pool=pool)
    remaining = pool
    last_covered = purchaser_hierarchy

    for ancestor_id, hierarchy in ancestors:
        if remaining <= 0 or last_covered >= max_hierarchy:
            break
        if hierarchy <= last_covered:
            continue

        start = last_covered + 1
        end = min(hierarchy, max_hierarchy)
        percentage = calculate_percentage_for_range(
            hierarchy_percentages, start, end
        )
        amount = calculate_share_amount(pool, percentage, remaining)

        if amount > 0:
            result.paid_out.append(
                PassiveShare(
                    ancestor_id=ancestor_id,
                    amount=amount,
                    start_hierarchy=start,
                    end_hierarchy=end,
                )
            )
            remaining -= amount

        # Range is attributed even when nothing was paid
        last_covered = end

    result.undistributed_remainder = remaining
    return result


class PassiveIncomeService:
    """Passive income distribution and purchase settlement."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize passive income service."""
        self.session = session
        self.closure_service = ClosureService(session)
        self.level_service = LevelService(session)
        self.wallet_service = WalletService(session)
        self.transaction_service = TransactionService(session)
        self.bot_income_service = BotIncomeService(session)
        self.user_service = UserService(session)

    async def distribute_upline_allocation(
        self,
        purchaser_id: int,
        pool: Decimal,
        entity_id: int | None = None,
    ) -> DistributionResult:
        """
        Pay the pool out to the purchaser's ancestors.

        Shares move from the purchaser's wallet to each ancestor's wallet.
        The remainder is only reported; crediting it is up to the caller.
        Any missing wallet or shortfall raises and nothing should be
        committed.

        Args:
            purchaser_id: Purchasing user
            pool: Amount to distribute
            entity_id: Purchase reference for the ledger

        Returns:
            Distribution result

        Raises:
            ValueError: If pool is negative or finer than the currency unit
        """
        pool = to_decimal(pool)
        if not pool.is_finite() or pool < 0:
            raise ValueError("Pool must be a finite non-negative amount")
        if pool != quantize_down(pool):
            raise ValueError(
                f"Pool {pool} has more than 8 decimal places"
            )

        purchaser = await self.user_service.get_user_or_raise(purchaser_id)

        if pool == 0:
            return DistributionResult(pool=pool)

        levels = await self.level_service.get_all_levels_ordered()
        hierarchy_percentages, max_hierarchy = build_level_lookups(levels)
        if not levels:
            logger.warning(
                "No levels configured, passive pool left undistributed",
                extra={"purchaser_id": purchaser_id, "pool": str(pool)},
            )
            return DistributionResult(pool=pool, undistributed_remainder=pool)

        purchaser_hierarchy = (
            await self.level_service.get_user_current_hierarchy(purchaser_id)
        )

        ancestor_rows = await self.closure_service.get_all_ascendants_of_user(
            purchaser_id, exclude_self=True
        )
        ancestor_ids = [row.ancestor_id for row in ancestor_rows]
        active_levels = await self.level_service.get_active_levels_for_users(
            ancestor_ids
        )
        ancestors = [
            (
                ancestor_id,
                active_levels[ancestor_id].hierarchy
                if ancestor_id in active_levels
                else 0,
            )
            for ancestor_id in ancestor_ids
        ]

        result = plan_distribution(
            pool,
            purchaser_hierarchy,
            ancestors,
            hierarchy_percentages,
            max_hierarchy,
        )

        if result.paid_out:
            purchaser_wallet = await self.wallet_service.get_user_wallet(
                purchaser_id
            )
            for share in result.paid_out:
                await self._pay_share(
                    purchaser_wallet.id, purchaser, share, entity_id
                )

        logger.info(
            "Passive income distributed",
            extra={
                "purchaser_id": purchaser_id,
                "pool": str(pool),
                "paid": str(result.total_paid),
                "recipients": len(result.paid_out),
                "remainder": str(result.undistributed_remainder),
            },
        )

        return result

    async def _pay_share(
        self,
        purchaser_wallet_id: int,
        purchaser: User,
        share: PassiveShare,
        entity_id: int | None,
    ) -> None:
        ancestor_wallet = await self.wallet_service.get_user_wallet(
            share.ancestor_id
        )
        await self.wallet_service.transfer_between_wallets(
            purchaser_wallet_id, ancestor_wallet.id, share.amount
        )
        await self.transaction_service.record_transaction(
            from_wallet_id=purchaser_wallet_id,
            to_wallet_id=ancestor_wallet.id,
            amount=share.amount,
            transaction_type=TransactionType.INCOME_PASSIVE,
            description=(
                f"Passive income from {purchaser.username} "
                f"(levels {share.start_hierarchy}-{share.end_hierarchy})"
            ),
            entity_id=entity_id,
            initiator_id=purchaser.id,
        )
        await self.bot_income_service.increase_active_bot_income_received(
            share.ancestor_id, share.amount
        )

        logger.info(
            f"Passive share paid to user {share.ancestor_id}",
            extra={
                "ancestor_id": share.ancestor_id,
                "amount": str(share.amount),
                "start_hierarchy": share.start_hierarchy,
                "end_hierarchy": share.end_hierarchy,
            },
        )

    async def credit_company(
        self,
        purchaser_id: int,
        amount: Decimal,
        transaction_type: TransactionType,
        description: str,
        entity_id: int | None = None,
    ) -> None:
        """
        Move amount from purchaser's wallet to the company income wallet.

        Zero amounts are skipped.
        """
        if amount <= 0:
            return

        purchaser_wallet = await self.wallet_service.get_user_wallet(
            purchaser_id
        )
        company_wallet = await self.wallet_service.get_company_income_wallet()

        await self.wallet_service.transfer_between_wallets(
            purchaser_wallet.id, company_wallet.id, amount
        )
        await self.transaction_service.record_transaction(
            from_wallet_id=purchaser_wallet.id,
            to_wallet_id=company_wallet.id,
            amount=amount,
            transaction_type=transaction_type,
            description=description,
            entity_id=entity_id,
            initiator_id=purchaser_id,
        )

    async def handle_package_purchase_transaction(
        self,
        purchaser_id: int,
        investment_amount: Decimal,
        package_title: str,
        entity_id: int | None = None,
    ) -> PurchaseSettlement:
        """
        Settle a package purchase.

        Splits the investment into the company cut and the upline pool,
        distributes the pool, then moves the company cut plus whatever the
        pool left over to the company income wallet.

        Args:
            purchaser_id: Purchasing user
            investment_amount: Package price
            package_title: Package title for the ledger
            entity_id: Purchase reference

        Returns:
            Purchase settlement

        Raises:
            InsufficientFundsError: If purchaser cannot pay the package
        """
        investment = quantize_down(to_decimal(investment_amount))
        if investment <= 0:
            raise ValueError("Investment amount must be positive")

        purchaser_wallet = await self.wallet_service.get_user_wallet(
            purchaser_id
        )
        if purchaser_wallet.balance < investment:
            raise InsufficientFundsError(
                purchaser_wallet.id, purchaser_wallet.balance, investment
            )

        # Company cut absorbs the truncation of the pool
        pool = quantize_down(investment * settings.upline_allocation_percentage)
        company_base = investment - pool

        distribution = await self.distribute_upline_allocation(
            purchaser_id, pool, entity_id=entity_id
        )

        remainder = distribution.undistributed_remainder
        company_amount = company_base + remainder

        description = f"Package purchase: {package_title}"
        if remainder > 0:
            description = f"{description} {UNDISTRIBUTED_SUFFIX}"

        await self.credit_company(
            purchaser_id,
            company_amount,
            TransactionType.PURCHASE_PACKAGE,
            description,
            entity_id=entity_id,
        )

        logger.info(
            "Package purchase settled",
            extra={
                "purchaser_id": purchaser_id,
                "investment": str(investment),
                "company_amount": str(company_amount),
                "undistributed": str(remainder),
            },
        )

        return PurchaseSettlement(
            investment_amount=investment,
            company_amount=company_amount,
            distribution=distribution,
        )
