#!/usr/bin/env python3
"""Database connection check.

Verifies that:
1. The database environment variables for the deployment mode are set
2. The database answers a probe
3. The required tables exist

Usage:
    python scripts/check_database.py
"""

import asyncio
import sys

from beartype import beartype
from dotenv import load_dotenv

from cher_closet.core.config import Settings, validate_database_environment
from cher_closet.core.database import ConnectionPoolManager, PoolConfig
from cher_closet.core.errors import ConfigurationError
from cher_closet.core.health import REQUIRED_TABLES, HealthVerifier

COLORS = {
    "reset": "\x1b[0m",
    "red": "\x1b[31m",
    "green": "\x1b[32m",
    "yellow": "\x1b[33m",
    "blue": "\x1b[34m",
    "magenta": "\x1b[35m",
}


def say(message: str = "", color: str = "reset") -> None:
    print(f"{COLORS[color]}{message}{COLORS['reset']}")


@beartype
async def check_database(settings: Settings) -> bool:
    """Run every check, printing a report; True when all pass."""
    say("====================================================", "magenta")
    say("           DATABASE CONNECTION CHECKER               ", "magenta")
    say("====================================================", "magenta")
    say()

    say("Checking environment variables...", "blue")
    try:
        validate_database_environment(settings)
    except ConfigurationError as e:
        say(f"❌ {e}", "red")
        say("Create a .env file with the required variables.", "yellow")
        return False
    say(f"✅ Environment complete ({settings.platform_label})", "green")
    say()

    manager = ConnectionPoolManager(PoolConfig.from_settings(settings))
    try:
        await manager.initialize()
        verifier = HealthVerifier(
            manager,
            retries=settings.health_check_retries,
            delay_seconds=settings.health_check_retry_delay / 1000,
        )

        say("Attempting to connect to the database...", "blue")
        if not await verifier.test_connection():
            say("❌ Could not connect to the PostgreSQL database", "red")
            return False
        say("✅ Successfully connected to the PostgreSQL database", "green")
        say()

        say("Checking for required database tables...", "blue")
        report = await verifier.verify_health()
        if not report.healthy:
            missing = report.details.missing_tables if report.details else None
            if missing:
                say(f"❌ Missing required tables: {', '.join(missing)}", "red")
                say('Run "python scripts/init_db.py" to create them.', "yellow")
            else:
                say(f"❌ {report.message}", "red")
            return False
        say("✅ All required database tables exist", "green")
        say()

        say("Table record counts:", "blue")
        for table in REQUIRED_TABLES:
            row = await manager.fetch_row(f"SELECT COUNT(*) AS total FROM {table}")
            total = row["total"] if row else 0
            say(f"  - {table}: {total} record(s)", "green" if total else "yellow")
        return True
    except Exception as e:
        say(f"❌ Database check failed: {e}", "red")
        return False
    finally:
        await manager.close()


def main() -> None:
    load_dotenv()
    ok = asyncio.run(check_database(Settings()))
    say()
    say("Database check passed." if ok else "Database check failed.", "green" if ok else "red")
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
