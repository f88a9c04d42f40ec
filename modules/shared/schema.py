from .db import get_db_connection
import logging

logger = logging.getLogger("shared.schema")


async def create_tables():
    """Create the incidents table and its indexes"""
    schema_sql = """
        -- Incidents table: citizen reports with a photo and location text
        CREATE TABLE IF NOT EXISTS incidents (
            id UUID PRIMARY KEY,
            title TEXT NOT NULL CHECK (length(btrim(title)) > 0),
            details TEXT NOT NULL CHECK (length(details) > 0),
            address TEXT NOT NULL CHECK (length(address) > 0),
            landmark TEXT,
            image_url TEXT NOT NULL CHECK (length(image_url) > 0),
            status VARCHAR(20) NOT NULL CHECK (status IN ('Pending', 'In Progress', 'Resolved', 'Rejected')) DEFAULT 'Pending',
            admin_notes TEXT NOT NULL DEFAULT '',
            created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT clock_timestamp()
        );

        -- Listing is always newest first
        CREATE INDEX IF NOT EXISTS idx_incidents_created_at ON incidents (created_at DESC);
    """
    try:
        async with get_db_connection() as conn:
            async with conn.transaction():
                await conn.execute(schema_sql)
                logger.info("Database tables and indexes created successfully.")
    except Exception as e:
        logger.error(f"Error creating tables: {str(e)}")
        raise
