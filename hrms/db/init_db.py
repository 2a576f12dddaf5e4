import logging
from hrms.core.database import engine, async_session_maker
from hrms.models import *  # noqa: F401,F403 register every table on Base.metadata
from hrms.models.base import Base

logger = logging.getLogger(__name__)

async def create_tables():
    """Create all database tables"""
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info("✅ Database tables created successfully")

    except Exception as e:
        logger.error(f"❌ Error creating tables: {str(e)}")
        raise

async def init_db(seed: bool = True):
    """Create tables and, optionally, the bootstrap accounts"""
    try:
        logger.info("🗄️  Initializing database...")
        await create_tables()

        if seed:
            from hrms.db.seeds.initial_data import create_initial_data
            async with async_session_maker() as session:
                await create_initial_data(session)

        logger.info("✅ Database initialized successfully")

    except Exception as e:
        logger.error(f"❌ Database initialization failed: {str(e)}")
        raise
