"""
Exception handling utilities.

Defines domain exception types and the categories that decide whether a
failure aborts the triggering operation or stays isolated to one branch.
"""

from sqlalchemy.exc import SQLAlchemyError


class ReferralNetworkError(Exception):
    """Base class for referral network domain errors."""


class NotFoundError(ReferralNetworkError):
    """Raised when a referenced user, level or wallet is missing."""


class ConflictError(ReferralNetworkError):
    """Raised on duplicate closure rows or duplicate level hierarchy."""


class InsufficientFundsError(ReferralNetworkError):
    """Raised when a wallet cannot cover a transfer."""

    def __init__(self, wallet_id: int, balance, amount) -> None:
        self.wallet_id = wallet_id
        self.balance = balance
        self.amount = amount
        super().__init__(
            f"Wallet {wallet_id} balance {balance} is less than {amount}"
        )


# Exception categories based on handling strategy

# Must raise - data integrity or money movement failures
MUST_RAISE = (
    ConflictError,
    InsufficientFundsError,
    SQLAlchemyError,  # Session is unusable until rolled back
)

# Can be logged and isolated to a single ancestor during a cascade
ISOLATABLE = (
    NotFoundError,
)


def must_raise(exc: Exception) -> bool:
    """
    Check if exception must be raised.

    Args:
        exc: Exception to check

    Returns:
        True if exception must abort the operation
    """
    return isinstance(exc, MUST_RAISE)


def is_isolatable(exc: Exception) -> bool:
    """
    Check if exception can be isolated to one branch.

    Args:
        exc: Exception to check

    Returns:
        True if the caller may log it and continue
    """
    return isinstance(exc, ISOLATABLE) and not must_raise(exc)
