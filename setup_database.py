"""
Setup database for the conference registration API - creates tables and seeds seats
"""

import asyncio
import logging

from app.config import settings
from app.core.database import async_session, close_db, init_db
from app.core.logging import setup_logging
from app.core.seeding import seed_seats

logger = logging.getLogger("app.setup_database")


async def setup_database():
    """Create every table and the seat map if missing"""
    logger.info(f"Setting up database for {settings.APP_NAME} ({settings.APP_ENV})")
    try:
        await init_db()
        created = await seed_seats(async_session)
        logger.info(f"Database ready, {created} seats created")
    finally:
        await close_db()


if __name__ == "__main__":
    setup_logging()
    asyncio.run(setup_database())
