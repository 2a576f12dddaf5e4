import sys
from celery import Celery
from celery.schedules import crontab
from hrms.core.config import settings

# Create Celery app
celery_app = Celery(
    "hrms_backend",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=[
        "hrms.workers.celery_tasks.hr_tasks",
    ]
)

# Configure Celery
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone=settings.TIMEZONE,
    enable_utc=True,
    result_expires=3600,
)

# Windows-specific configuration
if sys.platform == 'win32':
    celery_app.conf.update(
        worker_pool='threads',
        worker_concurrency=4
    )

celery_app.conf.beat_schedule = {
    "auto-checkout-attendance": {
        "task": "hrms.workers.celery_tasks.hr_tasks.auto_checkout_attendance",
        "schedule": crontab(hour=settings.AUTO_CHECKOUT_HOUR, minute=0),
    },
}
