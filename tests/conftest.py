"""
Pytest configuration and shared fixtures.

Tests run against TEST_DATABASE_URL, an in-memory SQLite database by
default. The schema is created fresh for every test.
"""

import itertools
import os
from collections.abc import AsyncGenerator, Callable
from decimal import Decimal
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from referral_network.models import Level, User, Wallet
from referral_network.models.base import Base
from referral_network.models.enums import WalletType
from referral_network.repositories import (
    LevelRepository,
    TransactionRepository,
    UserClosureRepository,
    UserLevelRepository,
    UserRepository,
    WalletRepository,
)
from referral_network.services import (
    ClosureService,
    LevelPromotionService,
    LevelService,
    PassiveIncomeService,
    PromotionCascadeService,
    ReferralNetworkService,
    TransactionService,
    UserService,
    WalletService,
)

# ==================== PYTEST CONFIGURATION ====================


def pytest_configure(config: Any) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "critical: marks tests as critical")
    config.addinivalue_line(
        "markers", "postgres: needs TEST_DATABASE_URL pointing to PostgreSQL"
    )


# ==================== DATABASE FIXTURES ====================

# Test database URL
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite://")


def _engine_options(url: str) -> dict[str, Any]:
    """In-memory SQLite needs one shared connection."""
    if url.startswith("sqlite"):
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    return {}


@pytest_asyncio.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create async engine with a fresh schema."""
    engine = create_async_engine(
        TEST_DATABASE_URL, echo=False, **_engine_options(TEST_DATABASE_URL)
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(
    async_engine: AsyncEngine,  # pylint: disable=redefined-outer-name
) -> AsyncGenerator[AsyncSession, None]:
    """
    Create database session for tests.

    Args:
        async_engine: Async database engine

    Yields:
        AsyncSession: Database session
    """
    async_session = async_sessionmaker(
        async_engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        yield session
        await session.rollback()


# ==================== REPOSITORY FIXTURES ====================


@pytest.fixture
def user_repository(
    db_session: AsyncSession,  # pylint: disable=redefined-outer-name
) -> UserRepository:
    """User repository instance."""
    return UserRepository(db_session)


@pytest.fixture
def closure_repository(
    db_session: AsyncSession,  # pylint: disable=redefined-outer-name
) -> UserClosureRepository:
    """User closure repository instance."""
    return UserClosureRepository(db_session)


@pytest.fixture
def level_repository(
    db_session: AsyncSession,  # pylint: disable=redefined-outer-name
) -> LevelRepository:
    """Level repository instance."""
    return LevelRepository(db_session)


@pytest.fixture
def user_level_repository(
    db_session: AsyncSession,  # pylint: disable=redefined-outer-name
) -> UserLevelRepository:
    """User level repository instance."""
    return UserLevelRepository(db_session)


@pytest.fixture
def wallet_repository(
    db_session: AsyncSession,  # pylint: disable=redefined-outer-name
) -> WalletRepository:
    """Wallet repository instance."""
    return WalletRepository(db_session)


@pytest.fixture
def transaction_repository(
    db_session: AsyncSession,  # pylint: disable=redefined-outer-name
) -> TransactionRepository:
    """Transaction repository instance."""
    return TransactionRepository(db_session)


# ==================== SERVICE FIXTURES ====================


@pytest.fixture
def closure_service(
    db_session: AsyncSession,  # pylint: disable=redefined-outer-name
) -> ClosureService:
    """Closure service instance."""
    return ClosureService(db_session)


@pytest.fixture
def level_service(
    db_session: AsyncSession,  # pylint: disable=redefined-outer-name
) -> LevelService:
    """Level service instance."""
    return LevelService(db_session)


@pytest.fixture
def promotion_service(
    db_session: AsyncSession,  # pylint: disable=redefined-outer-name
) -> LevelPromotionService:
    """Level promotion service instance."""
    return LevelPromotionService(db_session)


@pytest.fixture
def cascade_service(
    db_session: AsyncSession,  # pylint: disable=redefined-outer-name
) -> PromotionCascadeService:
    """Promotion cascade service instance."""
    return PromotionCascadeService(db_session)


@pytest.fixture
def passive_income_service(
    db_session: AsyncSession,  # pylint: disable=redefined-outer-name
) -> PassiveIncomeService:
    """Passive income service instance."""
    return PassiveIncomeService(db_session)


@pytest.fixture
def wallet_service(
    db_session: AsyncSession,  # pylint: disable=redefined-outer-name
) -> WalletService:
    """Wallet service instance."""
    return WalletService(db_session)


@pytest.fixture
def transaction_service(
    db_session: AsyncSession,  # pylint: disable=redefined-outer-name
) -> TransactionService:
    """Transaction service instance."""
    return TransactionService(db_session)


@pytest.fixture
def user_service(
    db_session: AsyncSession,  # pylint: disable=redefined-outer-name
) -> UserService:
    """User service instance."""
    return UserService(db_session)


@pytest.fixture
def network_service(
    db_session: AsyncSession,  # pylint: disable=redefined-outer-name
) -> ReferralNetworkService:
    """Referral network facade instance."""
    return ReferralNetworkService(db_session)


# ==================== HELPER FIXTURES ====================

_username_counter = itertools.count(1)


@pytest.fixture
def create_user_helper(
    db_session: AsyncSession,  # pylint: disable=redefined-outer-name
) -> Callable[..., Any]:
    """
    Helper to create a user attached to the tree.

    Creates the user, a personal wallet and the closure rows.
    """

    async def _create_user(
        parent: User | None = None,
        username: str | None = None,
        business_done: Decimal = Decimal("0"),
        balance: Decimal = Decimal("0"),
        with_closure: bool = True,
        **kwargs: Any,
    ) -> User:
        if username is None:
            username = f"user_{next(_username_counter)}"

        user = User(
            username=username,
            referred_by_user_id=parent.id if parent else None,
            business_done=business_done,
            **kwargs,
        )
        db_session.add(user)
        await db_session.flush()

        db_session.add(
            Wallet(
                user_id=user.id,
                wallet_type=WalletType.PERSONAL.value,
                balance=balance,
            )
        )

        if with_closure:
            await ClosureService(db_session).create_closures_for_user(
                user.id, parent.id if parent else None
            )

        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _create_user


@pytest.fixture
def create_level_helper(
    db_session: AsyncSession,  # pylint: disable=redefined-outer-name
) -> Callable[..., Any]:
    """Helper to create levels dynamically."""

    async def _create_level(
        hierarchy: int,
        passive_income_percentage: Decimal = Decimal("1"),
        conditions: list[dict[str, Any]] | None = None,
        title: str | None = None,
    ) -> Level:
        level = await LevelService(db_session).create_level(
            title=title or f"Level {hierarchy}",
            hierarchy=hierarchy,
            passive_income_percentage=passive_income_percentage,
            conditions=conditions or [],
        )
        await db_session.commit()
        return level

    return _create_level


@pytest.fixture
def assign_level_helper(
    db_session: AsyncSession,  # pylint: disable=redefined-outer-name
) -> Callable[..., Any]:
    """Helper to give a user an active level."""

    async def _assign(user: User, hierarchy: int) -> None:
        await LevelService(db_session).assign_level_by_hierarchy(
            user.id, hierarchy
        )
        await db_session.commit()

    return _assign


@pytest_asyncio.fixture
async def company_wallet(
    db_session: AsyncSession,  # pylint: disable=redefined-outer-name
) -> Wallet:
    """Company income wallet."""
    wallet = await WalletService(db_session).create_wallet(
        None, WalletType.COMPANY_INCOME
    )
    await db_session.commit()
    return wallet


@pytest_asyncio.fixture
async def three_levels(
    create_level_helper: Callable[..., Any],  # pylint: disable=redefined-outer-name
) -> list[Level]:
    """Hierarchies 1, 2, 3 paying 5%, 3%, 2% with no conditions."""
    return [
        await create_level_helper(1, Decimal("5")),
        await create_level_helper(2, Decimal("3")),
        await create_level_helper(3, Decimal("2")),
    ]
