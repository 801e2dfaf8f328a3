"""Database connection management"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
import psycopg
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool
from src.config import DATABASE_URL
from src.exceptions import wrap_external_exception

logger = logging.getLogger(__name__)


class Database:
    """Connection pool for the hosted Postgres backend"""

    def __init__(self, connection_string: str = DATABASE_URL):
        self.connection_string = connection_string
        self._pool: Optional[AsyncConnectionPool] = None

    @property
    def is_initialized(self) -> bool:
        return self._pool is not None

    async def init_pool(self) -> None:
        """Initialize connection pool"""
        logger.info("Initializing database connection pool")
        self._pool = AsyncConnectionPool(
            self.connection_string,
            min_size=2,
            max_size=10,
            open=False,
        )
        await self._pool.open()

    async def close_pool(self) -> None:
        """Close connection pool"""
        if self._pool:
            logger.info("Closing database connection pool")
            await self._pool.close()
            self._pool = None

    @asynccontextmanager
    async def connection(self) -> AsyncGenerator[psycopg.AsyncConnection, None]:
        """
        Get database connection from pool

        psycopg errors raised while acquiring or using the connection are
        re-raised as ConnectionError (503) or QueryError.
        """
        if not self._pool:
            raise RuntimeError("Database pool not initialized")

        try:
            async with self._pool.connection() as conn:
                conn.row_factory = dict_row
                yield conn
        except psycopg.Error as e:
            raise wrap_external_exception(e, operation="database") from e

    async def ping(self) -> bool:
        """Return True when a trivial query succeeds"""
        try:
            async with self.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute("SELECT 1")
                    await cur.fetchone()
            return True
        except Exception as e:
            logger.warning(f"Database ping failed: {e}")
            return False


# Global database instance
db = Database()
