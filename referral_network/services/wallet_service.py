"""
Wallet service.

Wallet lookups and locked balance transfers.
"""

from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from referral_network.config.settings import settings
from referral_network.models.enums import WalletType
from referral_network.models.wallet import Wallet
from referral_network.repositories.wallet_repository import WalletRepository
from referral_network.utils.exceptions import (
    InsufficientFundsError,
    NotFoundError,
)
from referral_network.utils.money import ZERO


class WalletService:
    """Wallet service."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize wallet service."""
        self.session = session
        self.wallet_repo = WalletRepository(session)

    async def create_wallet(
        self,
        user_id: int | None,
        wallet_type: WalletType = WalletType.PERSONAL,
        balance: Decimal = ZERO,
    ) -> Wallet:
        """
        Create a wallet.

        Args:
            user_id: Owner (None for company wallets)
            wallet_type: Wallet type
            balance: Opening balance

        Returns:
            Created wallet
        """
        if balance < 0:
            raise ValueError("Opening balance cannot be negative")

        return await self.wallet_repo.create(
            user_id=user_id,
            wallet_type=wallet_type.value,
            balance=balance,
            currency=settings.currency,
        )

    async def get_user_wallet(self, user_id: int) -> Wallet:
        """
        Get user's personal wallet.

        Raises:
            NotFoundError: If user has no wallet
        """
        wallet = await self.wallet_repo.get_personal(user_id)
        if not wallet:
            raise NotFoundError(f"Wallet for user {user_id} not found")
        return wallet

    async def get_company_income_wallet(self) -> Wallet:
        """
        Get the company income wallet.

        Raises:
            NotFoundError: If it was never created
        """
        wallet = await self.wallet_repo.get_company(WalletType.COMPANY_INCOME)
        if not wallet:
            raise NotFoundError("Company income wallet not found")
        return wallet

    async def transfer_between_wallets(
        self,
        from_wallet_id: int,
        to_wallet_id: int,
        amount: Decimal,
    ) -> tuple[Wallet, Wallet]:
        """
        Move amount between two wallets.

        Both rows are locked in ascending ID order before the balance check
        so concurrent transfers cannot interleave or deadlock.

        Args:
            from_wallet_id: Debited wallet
            to_wallet_id: Credited wallet
            amount: Positive amount

        Returns:
            Tuple of (from_wallet, to_wallet) after the move

        Raises:
            ValueError: On non-positive amount or same wallet
            NotFoundError: If a wallet is missing
            InsufficientFundsError: If from_wallet balance is too low
        """
        if amount <= 0:
            raise ValueError("Transfer amount must be positive")
        if from_wallet_id == to_wallet_id:
            raise ValueError("Cannot transfer to the same wallet")

        wallets = {
            w.id: w
            for w in await self.wallet_repo.lock_many(
                [from_wallet_id, to_wallet_id]
            )
        }
        from_wallet = wallets.get(from_wallet_id)
        to_wallet = wallets.get(to_wallet_id)

        if not from_wallet:
            raise NotFoundError(f"Wallet {from_wallet_id} not found")
        if not to_wallet:
            raise NotFoundError(f"Wallet {to_wallet_id} not found")

        if from_wallet.balance < amount:
            raise InsufficientFundsError(
                from_wallet.id, from_wallet.balance, amount
            )

        from_wallet.balance -= amount
        to_wallet.balance += amount
        await self.session.flush()

        logger.debug(
            "Wallet transfer",
            extra={
                "from_wallet_id": from_wallet_id,
                "to_wallet_id": to_wallet_id,
                "amount": str(amount),
            },
        )

        return from_wallet, to_wallet
