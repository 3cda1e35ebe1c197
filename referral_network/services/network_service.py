"""
Referral network service.

Entry points called by the signup and purchase flows. Each call is one
database transaction: committed on success, rolled back on any error.
"""

from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from referral_network.config.settings import settings
from referral_network.models.enums import TransactionType
from referral_network.models.user_closure import UserClosure
from referral_network.services.closure_service import ClosureService
from referral_network.services.level_service import LevelService
from referral_network.services.passive_income_service import (
    UNDISTRIBUTED_SUFFIX,
    DistributionResult,
    PassiveIncomeService,
    PurchaseSettlement,
)
from referral_network.services.promotion_cascade_service import (
    PromotionCascadeService,
)
from referral_network.services.user_service import UserService
from referral_network.utils.exceptions import ConflictError, ReferralNetworkError
from referral_network.utils.money import quantize_down, to_decimal


class ReferralNetworkService:
    """Facade over closure, distribution and promotion services."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize referral network service."""
        self.session = session
        self.closure_service = ClosureService(session)
        self.level_service = LevelService(session)
        self.passive_income_service = PassiveIncomeService(session)
        self.cascade_service = PromotionCascadeService(session)
        self.user_service = UserService(session)

    async def on_user_signup_completed(
        self, user_id: int, parent_id: int | None = None
    ) -> list[UserClosure]:
        """
        Attach a new user to the referral tree.

        A duplicate closure row means the tree is already corrupt for this
        user and is raised. Other failures are logged so signup itself can
        complete.

        Args:
            user_id: New user ID
            parent_id: Referrer user ID

        Returns:
            Created closure rows (empty if creation failed)

        Raises:
            ConflictError: If the user already has closure rows
        """
        try:
            rows = await self.closure_service.create_closures_for_user(
                user_id, parent_id
            )
            await self.session.commit()
            return rows
        except ConflictError:
            await self.session.rollback()
            raise
        except (ReferralNetworkError, ValueError) as e:
            await self.session.rollback()
            logger.error(
                f"Closure creation failed for user {user_id}: {e}",
                extra={"user_id": user_id, "parent_id": parent_id},
            )
            return []
        except Exception:
            await self.session.rollback()
            raise

    async def on_purchase_completed(
        self,
        purchaser_id: int,
        pool: Decimal,
        entity_id: int | None = None,
    ) -> DistributionResult:
        """
        Distribute a passive income pool and re-check ranks.

        The undistributed remainder is moved to the company income wallet.

        Args:
            purchaser_id: Purchasing user
            pool: Passive income pool
            entity_id: Purchase reference

        Returns:
            Distribution result

        Raises:
            ValueError: If pool is negative or has more than 8 decimal places
        """
        try:
            result = await self.passive_income_service.distribute_upline_allocation(
                purchaser_id, pool, entity_id=entity_id
            )

            await self.passive_income_service.credit_company(
                purchaser_id,
                result.undistributed_remainder,
                TransactionType.INCOME_PASSIVE,
                f"Passive income pool {UNDISTRIBUTED_SUFFIX}",
                entity_id=entity_id,
            )
            if result.undistributed_remainder > 0:
                logger.info(
                    "Undistributed passive share credited to company",
                    extra={
                        "purchaser_id": purchaser_id,
                        "amount": str(result.undistributed_remainder),
                    },
                )

            await self.cascade_service.check_and_promote_ancestors(purchaser_id)

            await self.session.commit()
            return result
        except Exception:
            await self.session.rollback()
            raise

    async def on_package_purchased(
        self,
        purchaser_id: int,
        investment_amount: Decimal,
        package_title: str,
        entity_id: int | None = None,
    ) -> PurchaseSettlement:
        """
        Run the full package purchase flow.

        1. Add the investment to the purchaser's business_done
        2. Settle company cut and passive income
        3. Give the entry level to first-time buyers
        4. Re-check ranks of the purchaser and all ancestors

        Args:
            purchaser_id: Purchasing user
            investment_amount: Package price
            package_title: Package title for the ledger
            entity_id: Purchase reference

        Returns:
            Purchase settlement
        """
        investment = quantize_down(to_decimal(investment_amount))

        try:
            await self.user_service.increment_business_done(
                purchaser_id, investment
            )

            settlement = (
                await self.passive_income_service
                .handle_package_purchase_transaction(
                    purchaser_id,
                    investment,
                    package_title,
                    entity_id=entity_id,
                )
            )

            if not await self.level_service.get_user_current_level(purchaser_id):
                await self._assign_entry_level(purchaser_id)

            promoted = await self.cascade_service.check_and_promote_ancestors(
                purchaser_id
            )

            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Package purchase completed",
            extra={
                "purchaser_id": purchaser_id,
                "investment": str(investment),
                "promoted": promoted,
            },
        )

        return settlement

    async def _assign_entry_level(self, purchaser_id: int) -> None:
        hierarchy = settings.entry_level_hierarchy
        entry_level = await self.level_service.level_repo.get_by_hierarchy(
            hierarchy
        )
        if not entry_level:
            # Unconfigured entry level leaves the buyer unranked
            logger.warning(
                f"Entry level {hierarchy} is not configured",
                extra={"purchaser_id": purchaser_id},
            )
            return

        await self.level_service.assign_level_by_hierarchy(
            purchaser_id, hierarchy
        )
