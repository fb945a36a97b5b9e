#!/usr/bin/env python3
"""Initialize the database schema for Cher's Closet.

This script:
1. Validates the database environment
2. Creates every missing table and index
3. Optionally seeds sample inspirations (--seed)
"""

import argparse
import asyncio
import sys

from beartype import beartype
from dotenv import load_dotenv

from cher_closet.core.config import Settings, validate_database_environment
from cher_closet.core.database import ConnectionPoolManager, PoolConfig
from cher_closet.core.errors import ConfigurationError
from cher_closet.core.schema import apply_schema, seed_inspirations


@beartype
async def initialize(settings: Settings, *, seed: bool) -> None:
    manager = ConnectionPoolManager(PoolConfig.from_settings(settings))
    await manager.initialize()
    try:
        await apply_schema(manager)
        print("✅ Schema is up to date")
        if seed:
            inserted = await seed_inspirations(manager)
            print(f"✅ Seeded {inserted} inspiration(s)")
    finally:
        await manager.close()


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--seed", action="store_true", help="insert sample inspirations")
    args = parser.parse_args()

    load_dotenv()
    settings = Settings()
    try:
        validate_database_environment(settings)
    except ConfigurationError as e:
        print(f"❌ {e}")
        sys.exit(1)

    asyncio.run(initialize(settings, seed=args.seed))


if __name__ == "__main__":
    main()
