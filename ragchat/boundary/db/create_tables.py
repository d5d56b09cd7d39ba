"""
Database table creation script.

Creates (or drops) all tables defined in ORM models using SQLAlchemy metadata.

Dependencies: sqlalchemy, ragchat.configs
System role: Database schema initialization

Usage:
    python -m ragchat.boundary.db.create_tables          # create
    python -m ragchat.boundary.db.create_tables --reset  # drop and recreate
"""

import asyncio
import logging
import sys

from sqlalchemy.ext.asyncio import AsyncEngine

from ragchat.boundary.db.base import Base
from ragchat.boundary.db.connection import get_async_engine

# Import all models to register them with Base.metadata
from ragchat.boundary.db.models import (  # noqa: F401
    ChatMessageModel,
    ChatSessionModel,
    DocumentChunkModel,
    DocumentModel,
)

logger = logging.getLogger(__name__)


async def create_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Create all database tables from registered ORM models.

    Idempotent: existing tables remain unchanged.

    Args:
        engine: Optional engine (defaults to the configured engine)
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"{__name__}:create_all_tables - Tables created")


async def drop_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Drop all database tables and their data.

    WARNING: Irreversible data loss. Only use in development environments.

    Args:
        engine: Optional engine (defaults to the configured engine)
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info(f"{__name__}:drop_all_tables - Tables dropped")


async def _main(reset: bool) -> None:
    if reset:
        await drop_all_tables()
    await create_all_tables()
    await get_async_engine().dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(_main(reset="--reset" in sys.argv[1:]))
