# Cher's Closet - Wardrobe Management Backend
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Database connectivity and schema verification."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from attrs import field, frozen
from beartype import beartype

from .database import ConnectionPoolManager, PoolStatus

logger = logging.getLogger(__name__)

REQUIRED_TABLES: tuple[str, ...] = (
    "users",
    "wardrobe_items",
    "outfits",
    "inspirations",
    "weather_preferences",
    "mood_preferences",
)

PING_QUERY = "SELECT 1 AS ping"
TABLES_QUERY = (
    "SELECT table_name FROM information_schema.tables WHERE table_schema = 'public'"
)

MESSAGE_CONNECTION_FAILED = "Database connection failed"
MESSAGE_SCHEMA_INCOMPLETE = "Database schema incomplete"
MESSAGE_VERIFIED = "Database connection and schema verified"
MESSAGE_CHECK_FAILED = "Database health check failed"


@frozen
class HealthDetails:
    """Diagnostic payload attached to a health report."""

    tables: list[str] | None = field(default=None)
    missing_tables: list[str] | None = field(default=None)
    pool_status: PoolStatus | None = field(default=None)
    error: str | None = field(default=None)


@frozen
class HealthReport:
    """Outcome of a full database health verification."""

    healthy: bool = field()
    message: str = field()
    details: HealthDetails | None = field(default=None)


class HealthVerifier:
    """Checks that the database is reachable and carries the expected schema."""

    @beartype
    def __init__(
        self,
        pool_manager: ConnectionPoolManager,
        *,
        retries: int = 3,
        delay_seconds: float = 1.0,
        required_tables: tuple[str, ...] = REQUIRED_TABLES,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        if retries < 1:
            raise ValueError("retries must be at least 1")
        self._pool_manager = pool_manager
        self._retries = retries
        self._delay_seconds = delay_seconds
        self._required_tables = required_tables
        self._sleep = sleep

    @beartype
    async def test_connection(
        self, retries: int | None = None, delay_seconds: float | None = None
    ) -> bool:
        """Probe the database, retrying a bounded number of times.

        Returns True as soon as one probe answers ``ping = 1``. Never raises
        for connectivity failures.
        """
        attempts = self._retries if retries is None else retries
        delay = self._delay_seconds if delay_seconds is None else delay_seconds
        if attempts < 1:
            raise ValueError("retries must be at least 1")

        for attempt in range(1, attempts + 1):
            try:
                rows = await self._pool_manager.execute_query(PING_QUERY)
                if rows and rows[0]["ping"] == 1:
                    return True
                logger.warning(
                    f"Database probe returned an unexpected result "
                    f"(attempt {attempt}/{attempts})"
                )
            except Exception as e:
                logger.warning(
                    f"Database connection test failed (attempt {attempt}/{attempts}): {e}"
                )
            if attempt < attempts:
                await self._sleep(delay)
        return False

    @beartype
    async def verify_health(self) -> HealthReport:
        """Verify connectivity and the presence of every required table."""
        try:
            if not await self.test_connection():
                return HealthReport(healthy=False, message=MESSAGE_CONNECTION_FAILED)

            rows = await self._pool_manager.execute_query(TABLES_QUERY)
            tables = [row["table_name"] for row in rows]
            missing = [name for name in self._required_tables if name not in tables]
            if missing:
                return HealthReport(
                    healthy=False,
                    message=MESSAGE_SCHEMA_INCOMPLETE,
                    details=HealthDetails(missing_tables=missing),
                )

            return HealthReport(
                healthy=True,
                message=MESSAGE_VERIFIED,
                details=HealthDetails(
                    tables=tables,
                    pool_status=self._pool_manager.get_pool_status(),
                ),
            )
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return HealthReport(
                healthy=False,
                message=MESSAGE_CHECK_FAILED,
                details=HealthDetails(error=str(e)),
            )
