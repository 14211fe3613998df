"""
Celery application configuration for async tasks.
"""
from celery import Celery
from celery.signals import setup_logging as celery_setup_logging

from app.core.config import settings
from app.core.logging_config import setup_logging

# Create Celery app instance
celery_app = Celery(
    "readstash",
    include=[
        "app.tasks.export_tasks",
    ],
)

# Configure Celery from settings
celery_app.conf.update(
    broker_url=settings.celery_broker_url,
    result_backend=settings.celery_result_backend,
    task_serializer=settings.celery_task_serializer,
    result_serializer=settings.celery_result_serializer,
    accept_content=settings.celery_accept_content,
    timezone=settings.celery_timezone,
    enable_utc=settings.celery_enable_utc,
    task_track_started=True,
    task_time_limit=600,  # 10 minute hard limit; the dispatcher has no timeout of its own
    task_soft_time_limit=540,
    worker_prefetch_multiplier=1,  # One task at a time
    worker_max_tasks_per_child=1000,  # Restart worker after 1000 tasks
    task_acks_late=True,  # Acknowledge tasks after completion
    task_reject_on_worker_lost=True,  # Requeue tasks if worker dies
    broker_connection_retry_on_startup=True,  # Retry broker connection on startup
)


@celery_setup_logging.connect
def _configure_worker_logging(**kwargs):
    """Replace Celery's logging setup with the application's handlers."""
    setup_logging()
