"""
Celery tasks for exporting library items to integrations.

The API enqueues "export-item" whenever items should be pushed to a user's
export integrations (e.g. after a highlight is created or an integration is
connected). The task validates the payload and hands it to ExportDispatcher.

The worker imposes the only time limit (see celery_app); a job abandoned by
the worker may have exported remotely without recording synced_at.
"""
import asyncio
from typing import Any, Awaitable, Callable, List, Optional, Sequence

from pydantic import ValidationError

from app.core.celery_app import celery_app
from app.core.database import async_session_factory
from app.core.http_client import close_http_client
from app.core.logging_config import log_error, log_info
from app.schemas.export import ExportJobRequest, ExportOutcome
from app.services.export_dispatcher import ExportDispatcher

EXPORT_ITEM_JOB_NAME = "export-item"


async def _run_and_close_clients(task_func: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
    try:
        return await task_func(*args, **kwargs)
    finally:
        await close_http_client()


def _run_async(task_func: Callable[..., Awaitable[Any]], *args, task_id: str = None, **kwargs) -> Any:
    log_info(f"Starting background task: {task_func.__name__}", task_id=task_id)
    try:
        result = asyncio.run(_run_and_close_clients(task_func, *args, **kwargs))
        log_info(f"Completed background task: {task_func.__name__}", task_id=task_id)
        return result
    except Exception as e:
        log_error(e, task_id=task_id, task_name=task_func.__name__)
        raise


async def _export_item(request: ExportJobRequest) -> List[ExportOutcome]:
    dispatcher = ExportDispatcher(async_session_factory)
    return await dispatcher.execute(request)


@celery_app.task(name=EXPORT_ITEM_JOB_NAME, bind=True)
def export_item(
    self,
    user_id: str,
    library_item_ids: Sequence[str],
    integration_id: Optional[str] = None,
) -> None:
    """
    Export library items to the user's enabled export integrations.

    Args:
        user_id: Owner of the items and integrations (UUID string)
        library_item_ids: Items to export (UUID strings)
        integration_id: Restrict the export to this integration (UUID string)
    """
    task_id = self.request.id
    try:
        request = ExportJobRequest(
            user_id=user_id,
            library_item_ids=list(library_item_ids or []),
            integration_id=integration_id,
        )
    except ValidationError as e:
        log_error(e, task_id=task_id, user_id=user_id, integration_id=integration_id)
        return

    _run_async(_export_item, request, task_id=task_id)


def enqueue_export_item(
    user_id: str,
    library_item_ids: Sequence[str],
    integration_id: Optional[str] = None,
) -> str:
    """
    Publish an export-item job and return its task id.
    """
    result = export_item.apply_async(
        kwargs={
            "user_id": str(user_id),
            "library_item_ids": [str(item_id) for item_id in library_item_ids],
            "integration_id": str(integration_id) if integration_id else None,
        }
    )
    log_info(
        "Enqueued export-item job",
        task_id=result.id,
        user_id=user_id,
        item_count=len(library_item_ids),
    )
    return result.id
