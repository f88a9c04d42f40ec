from contextlib import asynccontextmanager
from typing import Optional

import asyncpg
import logging

logger = logging.getLogger("shared.db")

# Database connection pool (asyncpg pool)
db_pool = None


async def init_db(database_url: Optional[str]):
    """
    Initialize asynchronous database connection pool.
    This function should be called once at application startup.
    """
    global db_pool
    try:
        if not database_url:
            logger.error("DATABASE_URL environment variable is not set.")
            raise RuntimeError("DATABASE_URL environment variable is not set.")

        logger.info("Initializing database connection pool...")
        db_pool = await asyncpg.create_pool(
            dsn=database_url,
            min_size=1,
            max_size=20,
            command_timeout=60,
        )
        logger.info("Database connection pool initialized successfully.")
    except Exception as e:
        logger.exception(f"Error initializing database: {str(e)}")
        raise


async def close_db():
    """
    Close the database connection pool.
    This function should be called once at application shutdown.
    """
    global db_pool
    if db_pool:
        logger.info("Closing database connection pool...")
        await db_pool.close()
        db_pool = None
        logger.info("Database connection pool closed.")


@asynccontextmanager
async def get_db_connection():
    """
    Asynchronous context manager for acquiring and releasing database connections from the pool.
    Use with 'async with get_db_connection() as conn:'
    """
    if db_pool is None:
        logger.error("Database connection pool is not initialized. Call init_db() first.")
        raise RuntimeError("Database connection pool is not initialized. Call init_db() first.")

    conn = None
    try:
        logger.debug("Acquiring database connection from pool...")
        conn = await db_pool.acquire()
        logger.debug("Database connection acquired.")
        yield conn
    finally:
        if conn:
            logger.debug("Releasing database connection back to pool...")
            await db_pool.release(conn)
            logger.debug("Database connection released.")


async def execute_query(sql, params=None, fetch_one=False):
    """
    Execute an asynchronous SQL query and return results.
    Note: Use $1, $2, ... as placeholders in your SQL queries for parameters (not %s or %(name)s).
    """
    try:
        logger.debug(f"Executing SQL query: {sql.strip().splitlines()[0][:100]}... | Params: {params}")
        async with get_db_connection() as conn:
            if fetch_one:
                result = await conn.fetchrow(sql, *(params or []))
            else:
                result = await conn.fetch(sql, *(params or []))
            logger.debug("SQL query executed successfully.")
            return result
    except Exception as e:
        logger.exception(f"Database query error: {str(e)}")
        raise
