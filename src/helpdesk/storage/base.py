"""
Base Storage

PostgreSQL access shared by every storage. Storages pointed at the same
DSN share one asyncpg pool, opened by the first init() and closed by the
last close().
"""
import asyncpg
import asyncio
import logging
import os
import time
from typing import Optional, Any, Dict, Tuple

logger = logging.getLogger("helpdesk.storage")

CONNECT_RETRIES = 3
RETRY_DELAY_SECONDS = 1

# dsn -> (pool, number of storages holding it)
_pools: Dict[str, Tuple[asyncpg.Pool, int]] = {}
_pool_pid = os.getpid()
_pool_lock = asyncio.Lock()


async def _open_pool(dsn: str) -> asyncpg.Pool:
    """Create a pool and check it answers, retrying on connection errors"""
    for attempt in range(1, CONNECT_RETRIES + 1):
        try:
            pool = await asyncpg.create_pool(dsn, min_size=1, max_size=10, command_timeout=60)
            async with pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
            logger.info(f"PostgreSQL connected (attempt {attempt}/{CONNECT_RETRIES})")
            return pool
        except (OSError, asyncpg.PostgresError) as e:
            logger.error(f"PostgreSQL connection failed (attempt {attempt}/{CONNECT_RETRIES}): {e}")
            if attempt < CONNECT_RETRIES:
                await asyncio.sleep(RETRY_DELAY_SECONDS)

    raise ConnectionError("Failed to connect to PostgreSQL after all retries")


async def acquire_pool(dsn: str) -> asyncpg.Pool:
    """Get the shared pool for a DSN, opening it on first use"""
    global _pool_pid
    async with _pool_lock:
        # Pools inherited across a fork are unusable
        if _pool_pid != os.getpid():
            logger.info("New process detected, dropping inherited pools")
            _pools.clear()
            _pool_pid = os.getpid()

        if dsn in _pools:
            pool, holders = _pools[dsn]
            _pools[dsn] = (pool, holders + 1)
            return pool

        pool = await _open_pool(dsn)
        _pools[dsn] = (pool, 1)
        return pool


async def release_pool(dsn: str) -> None:
    """Drop one hold on a shared pool, closing it with the last holder"""
    async with _pool_lock:
        if dsn not in _pools:
            return
        pool, holders = _pools[dsn]
        if holders > 1:
            _pools[dsn] = (pool, holders - 1)
            return
        del _pools[dsn]
    await pool.close()
    logger.info("PostgreSQL pool closed")


class BaseStorage:
    """Query helpers over the shared pool"""

    def __init__(self, postgres_dsn: str = "postgresql://postgres@localhost/helpdesk"):
        self.pg_dsn = postgres_dsn
        self.pg_pool: Optional[asyncpg.Pool] = None

    async def init(self):
        """Attach to the pool for this storage's DSN"""
        if self.pg_pool is not None:
            return

        start_time = time.time()
        try:
            self.pg_pool = await acquire_pool(self.pg_dsn)
        except ConnectionError as e:
            logger.error(f"Failed to initialize {type(self).__name__}: {e}")
            raise

        duration_ms = round((time.time() - start_time) * 1000, 2)
        logger.info(f"{type(self).__name__} ready in {duration_ms}ms")

    async def close(self):
        if self.pg_pool is not None:
            self.pg_pool = None
            await release_pool(self.pg_dsn)

    def _pool(self) -> asyncpg.Pool:
        if self.pg_pool is None:
            raise RuntimeError(f"{type(self).__name__} used before init()")
        return self.pg_pool

    async def execute(self, query: str, *args) -> str:
        """Execute a query and return its command status"""
        async with self._pool().acquire() as conn:
            return await conn.execute(query, *args)

    async def fetch(self, query: str, *args) -> list:
        async with self._pool().acquire() as conn:
            return await conn.fetch(query, *args)

    async def fetchrow(self, query: str, *args) -> Optional[asyncpg.Record]:
        async with self._pool().acquire() as conn:
            return await conn.fetchrow(query, *args)

    async def fetchval(self, query: str, *args) -> Any:
        async with self._pool().acquire() as conn:
            return await conn.fetchval(query, *args)

    @staticmethod
    def _affected(status: str) -> int:
        """Row count from a command status such as 'UPDATE 3'"""
        try:
            return int(status.split()[-1])
        except (ValueError, IndexError, AttributeError):
            return 0
