# Cher's Closet - Wardrobe Management Backend
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Connection pool management with automatic reconnection.

The ``ConnectionPoolManager`` owns the process-wide asyncpg pool. Every query
in the application goes through it, so it is the one place that sees
connection-level failures. Such failures are published as pool error events;
the manager subscribes to its own events and drives a bounded, fixed-interval
reconnection sequence:

    IDLE --error--> RECONNECTING --probe ok--> IDLE
                         |
                         +--attempts exhausted--> GAVE_UP

While a sequence is in flight further error events are ignored. Once the
manager has given up it stays there until ``reconnect()`` is called
explicitly.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

import asyncpg
from attrs import field, frozen
from beartype import beartype

from .config import Settings
from .errors import ConfigurationError, ConnectionTimeoutError, PoolNotInitializedError

logger = logging.getLogger(__name__)

PoolErrorListener = Callable[[BaseException], None]

# Failures that mean the connection (or the server) is gone, as opposed to a
# bad query.
CONNECTION_ERRORS: tuple[type[BaseException], ...] = (
    asyncpg.PostgresConnectionError,
    asyncpg.CannotConnectNowError,
    OSError,
)


@frozen
class PoolConfig:
    """Immutable pool configuration."""

    connection_string: str | None = field()
    max_pool_size: int = field(default=10)
    idle_timeout_ms: int = field(default=30000)
    connection_timeout_ms: int = field(default=10000)
    use_secure_transport: bool = field(default=False)
    max_reconnect_attempts: int = field(default=10)
    reconnect_interval_ms: int = field(default=5000)

    @classmethod
    @beartype
    def from_settings(cls, settings: Settings) -> "PoolConfig":
        return cls(
            connection_string=settings.database_url,
            max_pool_size=settings.db_pool_size,
            idle_timeout_ms=settings.db_idle_timeout,
            connection_timeout_ms=settings.db_connection_timeout,
            use_secure_transport=settings.use_secure_transport,
            max_reconnect_attempts=settings.db_max_reconnect_attempts,
            reconnect_interval_ms=settings.db_reconnect_interval,
        )


@frozen
class PoolStatus:
    """Immutable pool occupancy snapshot."""

    total_count: int = field()
    idle_count: int = field()
    waiting_count: int = field()


class ReconnectionPhase(str, Enum):
    """Phases of the reconnection state machine."""

    IDLE = "idle"
    RECONNECTING = "reconnecting"
    GAVE_UP = "gave_up"


@frozen
class ReconnectionState:
    """Immutable view of the reconnection state machine."""

    phase: ReconnectionPhase = field()
    attempt_count: int = field()
    max_attempts: int = field()

    @property
    def is_reconnecting(self) -> bool:
        return self.phase is ReconnectionPhase.RECONNECTING


class ConnectionPoolManager:
    """Owns the shared connection pool and its recovery."""

    @beartype
    def __init__(
        self,
        config: PoolConfig,
        *,
        pool_factory: Callable[..., Awaitable[Any]] | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """Initialize the manager without opening any connection."""
        self.config = config
        self._pool_factory = pool_factory or asyncpg.create_pool
        self._sleep = sleep
        self._pool: Any = None
        self._waiting = 0
        self._error_listeners: list[PoolErrorListener] = []
        self._phase = ReconnectionPhase.IDLE
        self._attempts = 0
        self._reconnect_task: asyncio.Task[None] | None = None

    @property
    def is_initialized(self) -> bool:
        return self._pool is not None

    @property
    def reconnection_state(self) -> ReconnectionState:
        return ReconnectionState(
            phase=self._phase,
            attempt_count=self._attempts,
            max_attempts=self.config.max_reconnect_attempts,
        )

    @beartype
    async def initialize(self) -> None:
        """Create the pool and subscribe the reconnection handler."""
        if self._pool is not None:
            return
        if not self.config.connection_string:
            raise ConfigurationError("DATABASE_URL environment variable is required.")

        self._pool = await self._pool_factory(
            dsn=self.config.connection_string,
            min_size=0,
            max_size=self.config.max_pool_size,
            max_inactive_connection_lifetime=self.config.idle_timeout_ms / 1000,
            timeout=self.config.connection_timeout_ms / 1000,
            ssl="require" if self.config.use_secure_transport else False,
            init=self._on_new_connection,
        )
        self.add_error_listener(self._handle_pool_error)
        logger.info(
            f"Database connection pool created (max_size={self.config.max_pool_size}, "
            f"secure={self.config.use_secure_transport})"
        )

    async def close(self) -> None:
        """Stop any reconnection sequence and close the pool."""
        if self._reconnect_task is not None and not self._reconnect_task.done():
            self._reconnect_task.cancel()
            try:
                await self._reconnect_task
            except asyncio.CancelledError:
                pass
        self._reconnect_task = None
        self._phase = ReconnectionPhase.IDLE
        self._attempts = 0

        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("Database connection pool closed")
        self._error_listeners.clear()

    async def _on_new_connection(self, conn: Any) -> None:
        logger.info("New database connection established")

    # Query execution

    @beartype
    async def execute_query(self, query: str, *args: Any) -> list[Any]:
        """Run a query on a pooled connection and return all rows."""
        return await self._run(lambda conn: conn.fetch(query, *args))

    @beartype
    async def fetch_row(self, query: str, *args: Any) -> Any:
        """Run a query and return the first row, or ``None``."""
        return await self._run(lambda conn: conn.fetchrow(query, *args))

    @beartype
    async def execute(self, query: str, *args: Any) -> str:
        """Run a statement and return its status string."""
        return await self._run(lambda conn: conn.execute(query, *args))

    async def _run(self, operation: Callable[[Any], Awaitable[Any]]) -> Any:
        pool = self._require_pool()
        conn = await self._acquire(pool)
        try:
            return await operation(conn)
        except CONNECTION_ERRORS as e:
            self.notify_pool_error(e)
            raise
        finally:
            await self._release(pool, conn)

    async def _release(self, pool: Any, conn: Any) -> None:
        # A broken connection may fail to release; the query's own outcome wins
        try:
            await pool.release(conn, timeout=self.config.connection_timeout_ms / 1000)
        except Exception as e:
            logger.warning(f"Failed to release database connection: {e}")

    async def _acquire(self, pool: Any) -> Any:
        timeout = self.config.connection_timeout_ms / 1000
        self._waiting += 1
        try:
            return await pool.acquire(timeout=timeout)
        except asyncio.TimeoutError as e:
            raise ConnectionTimeoutError(
                f"Timed out acquiring a database connection after {timeout:.1f}s"
            ) from e
        except CONNECTION_ERRORS as e:
            self.notify_pool_error(e)
            raise
        finally:
            self._waiting -= 1

    def _require_pool(self) -> Any:
        if self._pool is None:
            raise PoolNotInitializedError(
                "Connection pool is not initialized. Call initialize() first."
            )
        return self._pool

    @beartype
    def get_pool_status(self) -> PoolStatus:
        """Snapshot of pool occupancy; zeros before initialization."""
        if self._pool is None:
            return PoolStatus(total_count=0, idle_count=0, waiting_count=0)
        return PoolStatus(
            total_count=self._pool.get_size(),
            idle_count=self._pool.get_idle_size(),
            waiting_count=self._waiting,
        )

    # Pool error events

    @beartype
    def add_error_listener(self, listener: PoolErrorListener) -> None:
        if listener not in self._error_listeners:
            self._error_listeners.append(listener)

    @beartype
    def notify_pool_error(self, error: BaseException) -> None:
        """Publish a pool error event to every listener.

        Listeners run on the next loop iteration, never inside the caller's
        stack frame.
        """
        loop = asyncio.get_running_loop()
        for listener in list(self._error_listeners):
            loop.call_soon(listener, error)

    def _handle_pool_error(self, error: BaseException) -> None:
        logger.error(f"Unexpected error on idle database client: {error}")
        self.start_reconnection()

    # Reconnection state machine

    @beartype
    def start_reconnection(self) -> bool:
        """Begin a reconnection sequence unless one is running or exhausted."""
        if self._phase is ReconnectionPhase.RECONNECTING:
            logger.debug("Reconnection already in progress; ignoring pool error")
            return False
        if self._phase is ReconnectionPhase.GAVE_UP:
            logger.warning(
                "Database connection lost and reconnection was abandoned; "
                "call reconnect() to retry"
            )
            return False
        self._begin_sequence()
        return True

    @beartype
    async def reconnect(self) -> bool:
        """Manually probe the database, joining any sequence in flight."""
        if not self._sequence_in_flight():
            self._begin_sequence()
        await self.wait_for_reconnection()
        return self._phase is ReconnectionPhase.IDLE

    async def wait_for_reconnection(self) -> None:
        """Wait for the current reconnection sequence, if any, to finish."""
        if self._reconnect_task is not None:
            await asyncio.shield(self._reconnect_task)

    def _sequence_in_flight(self) -> bool:
        return (
            self._phase is ReconnectionPhase.RECONNECTING
            and self._reconnect_task is not None
            and not self._reconnect_task.done()
        )

    def _begin_sequence(self) -> None:
        self._phase = ReconnectionPhase.RECONNECTING
        self._attempts = 0
        self._reconnect_task = asyncio.get_running_loop().create_task(
            self._reconnect_loop()
        )

    async def _reconnect_loop(self) -> None:
        try:
            await self._attempt_until_settled()
        finally:
            # Aborted without an outcome
            if self._phase is ReconnectionPhase.RECONNECTING:
                self._phase = ReconnectionPhase.GAVE_UP

    async def _attempt_until_settled(self) -> None:
        max_attempts = self.config.max_reconnect_attempts
        interval = self.config.reconnect_interval_ms / 1000
        while True:
            self._attempts += 1
            logger.info(
                f"Attempting database reconnection "
                f"(attempt {self._attempts}/{max_attempts})..."
            )
            if await self._probe():
                logger.info("Database reconnection successful")
                self._attempts = 0
                self._phase = ReconnectionPhase.IDLE
                return

            if self._attempts >= max_attempts:
                logger.error(
                    "Max reconnection attempts reached. Database connection lost."
                )
                self._phase = ReconnectionPhase.GAVE_UP
                return
            await self._sleep(interval)

    async def _probe(self) -> bool:
        pool = self._pool
        if pool is None:
            return False
        try:
            conn = await pool.acquire(timeout=self.config.connection_timeout_ms / 1000)
            try:
                await conn.fetchval("SELECT 1")
            finally:
                await self._release(pool, conn)
        except Exception as e:
            logger.error(f"Database reconnection attempt failed: {e}")
            return False
        return True
