"""
HR background tasks run by Celery beat.
"""
import asyncio
import logging
from datetime import datetime
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import NullPool
from hrms.core.celery_app import celery_app
from hrms.core.config import settings

logger = logging.getLogger("hrms.workers")

# Each task runs on its own event loop, so connections are never pooled across loops
async_engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    future=True,
    poolclass=NullPool,
)

async_session_maker = async_sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

def run_async_task(coro):
    """Helper function to run async coroutines in Celery tasks"""
    loop = asyncio.new_event_loop()
    try:
        asyncio.set_event_loop(loop)
        return loop.run_until_complete(coro)
    except Exception as e:
        logger.error(f"Error in async task: {e}")
        raise
    finally:
        loop.close()

@celery_app.task
def auto_checkout_attendance(sweep_date: str = None):
    """Close every check-in still open at the end of the day"""
    async def _auto_checkout():
        async with async_session_maker() as db:
            # Import inside function to avoid circular imports
            from hrms.services.hr.attendance_service import AttendanceService

            service = AttendanceService(db)
            day = datetime.strptime(sweep_date, "%Y-%m-%d").date() if sweep_date else None
            result = await service.auto_checkout(day)
            logger.info(f"✅ Auto checkout finished: {result['message']}")
            return result

    return run_async_task(_auto_checkout())
