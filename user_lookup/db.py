import asyncio
from typing import Any, Sequence

import asyncpg
from fastapi import Request
from pydantic import ValidationError

from user_lookup.config import Settings
from user_lookup.errors import StoreError
from user_lookup.logging import get_logger
from user_lookup.schemas import User

logger = get_logger(__name__)

INDEX_STATEMENTS = (
    "CREATE INDEX IF NOT EXISTS idx_uid ON users (uid)",
    "CREATE INDEX IF NOT EXISTS idx_birthday ON users (birthday)",
    "CREATE EXTENSION IF NOT EXISTS pg_trgm",
    "CREATE INDEX IF NOT EXISTS idx_name_trgm ON users USING gin (name gin_trgm_ops)",
)


async def create_pool(settings: Settings) -> asyncpg.Pool:
    """Create the database connection pool."""
    return await asyncpg.create_pool(
        settings.dsn,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
        command_timeout=settings.db_command_timeout,
    )


async def close_pool(pool: asyncpg.Pool):
    """Close database connection pool."""
    await pool.close()


def get_pool(request: Request) -> asyncpg.Pool:
    """Dependency returning the pool created at startup."""
    return request.app.state.pool


async def create_indexes(pool: asyncpg.Pool) -> None:
    """Create lookup indexes and the trigram index used by name search."""
    logger.info("creating_indexes", statements=len(INDEX_STATEMENTS))
    async with pool.acquire() as conn:
        async with conn.transaction():
            for statement in INDEX_STATEMENTS:
                await conn.execute(statement)
    logger.info("indexes_created")


async def fetch_users(pool: asyncpg.Pool, query: str, args: Sequence[Any]) -> list[User]:
    """Run a built query and map the rows to users.

    Raises:
        StoreError: the pool or the database failed, or a row does not decode.
    """
    try:
        rows = await pool.fetch(query, *args)
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as exc:
        raise StoreError(str(exc)) from exc

    try:
        return [
            User(
                uid=row["uid"],
                birthday=row["birthday"],
                sex=row["sex"],
                name=row["name"],
            )
            for row in rows
        ]
    except ValidationError as exc:
        raise StoreError(f"undecodable user row: {exc}") from exc
