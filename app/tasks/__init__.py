"""
Background tasks for the export worker.
"""

# Ensure Celery registers task modules on worker startup.
from app.tasks import export_tasks  # noqa: F401
