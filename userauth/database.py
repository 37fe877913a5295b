"""Database connection pool and migration management."""

import asyncio
from pathlib import Path
from typing import Optional

import asyncpg
import structlog

from userauth.config import Settings, get_settings
from userauth.errors import StoreUnavailableError

logger = structlog.get_logger(__name__)

# Failures that mean the store itself is unreachable, as opposed to a
# statement being rejected.
STORE_CONNECTION_ERRORS = (
    OSError,
    asyncio.TimeoutError,
    asyncpg.exceptions.InterfaceError,
    asyncpg.exceptions.PostgresConnectionError,
)

MIGRATIONS_DIR = Path(__file__).parent.parent / "migrations"

# Global connection pool
_pool: Optional[asyncpg.Pool] = None


async def get_pool() -> asyncpg.Pool:
    """Get the process-wide connection pool.

    Raises:
        StoreUnavailableError: If the pool has not been initialized
    """
    if _pool is None:
        raise StoreUnavailableError(
            "Database pool not initialized. Call init_database() first."
        )
    return _pool


async def init_database(settings: Settings | None = None) -> asyncpg.Pool:
    """Create the bounded connection pool.

    Checkout has no timeout: when every connection is in use, callers wait
    until one is released.
    """
    global _pool

    if _pool is not None:
        return _pool

    settings = settings or get_settings()

    try:
        _pool = await asyncpg.create_pool(
            settings.database_url,
            min_size=min(settings.db_pool_min_size, settings.db_pool_max_size),
            max_size=settings.db_pool_max_size,
        )
    except Exception as e:
        logger.error("database_pool_creation_failed", error=str(e))
        raise

    logger.info(
        "database_pool_created",
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
    )
    return _pool


async def close_database() -> None:
    """Close the connection pool."""
    global _pool

    if _pool is not None:
        await _pool.close()
        _pool = None
        logger.info("database_pool_closed")


async def run_migrations(migrations_dir: Path = MIGRATIONS_DIR) -> None:
    """Apply every ``*.sql`` file in name order.

    Migrations are idempotent (IF NOT EXISTS) and can be re-run safely.
    """
    pool = await get_pool()

    if not migrations_dir.exists():
        logger.warning("migrations_directory_not_found", path=str(migrations_dir))
        return

    migration_files = sorted(migrations_dir.glob("*.sql"))
    if not migration_files:
        logger.info("no_migrations_found")
        return

    async with pool.acquire() as conn:
        for migration_file in migration_files:
            try:
                await conn.execute(migration_file.read_text())
            except Exception as e:
                logger.error(
                    "migration_failed",
                    file=migration_file.name,
                    error=str(e),
                )
                raise
            logger.info("migration_applied", file=migration_file.name)


async def health_check() -> bool:
    """Return True if the store answers ``SELECT 1``."""
    try:
        pool = await get_pool()
        async with pool.acquire() as conn:
            result = await conn.fetchval("SELECT 1")
            return result == 1
    except Exception as e:
        logger.error("database_health_check_failed", error=str(e))
        return False
