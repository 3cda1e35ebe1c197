#!/usr/bin/env python3
"""
Seed default levels.

Inserts the default level ladder, skipping hierarchies that already exist.

Run: python scripts/seed_levels.py [--create-tables]
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger  # noqa: E402

from referral_network.config.database import (  # noqa: E402
    async_session_maker,
    close_db,
    init_db,
)
from referral_network.config.logging import setup_logging  # noqa: E402
from referral_network.services.level_service import LevelService  # noqa: E402


async def seed_levels(create_tables: bool = False) -> int:
    """
    Seed levels.

    Args:
        create_tables: Create missing tables first (local databases)

    Returns:
        Number of levels created
    """
    await init_db(create_tables=create_tables)

    try:
        async with async_session_maker() as session:
            created = await LevelService(session).seed_default_levels()
            await session.commit()
    finally:
        await close_db()

    for level in created:
        logger.info(f"Created level {level.hierarchy}: {level.title}")
    logger.info(f"=== SUMMARY === Created: {len(created)} levels")

    return len(created)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Seed default levels")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create tables from models before seeding",
    )
    args = parser.parse_args()

    setup_logging(level="INFO")
    asyncio.run(seed_levels(create_tables=args.create_tables))


if __name__ == "__main__":
    main()
