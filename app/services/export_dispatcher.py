"""
Export dispatcher: pushes library items to a user's export integrations.

Steps for one job:
1. Resolve the requested library items for the user
2. Resolve the user's enabled export integrations (optionally a single one)
3. Export to every integration concurrently, each attempt isolated from the
   others, and record synced_at for the ones that succeed
4. Join all attempts before returning

Only UnsupportedIntegrationError (an integration name with no registered
client) escapes; it is raised after every sibling attempt has finished.
"""
import asyncio
import uuid
from typing import Callable, List, Optional, Sequence

from app.core.encryption import decrypt_token
from app.core.exceptions import UnsupportedIntegrationError
from app.core.logging_config import log_error, log_info
from app.core.time_utils import utc_now
from app.integrations.base import IntegrationClient
from app.integrations.service import (
    find_integrations,
    get_integration_client,
    update_integration,
)
from app.models.enums import IntegrationType
from app.models.integration import Integration
from app.models.library_item import LibraryItem
from app.schemas.export import ExportJobRequest, ExportOutcome, ExportStatus
from app.services.library_item_service import find_library_items_by_ids


class ExportDispatcher:
    """Runs the export-item job for one request at a time."""

    def __init__(
        self,
        session_factory: Callable,
        client_resolver: Callable[[str], IntegrationClient] = get_integration_client,
    ):
        """
        Args:
            session_factory: Callable returning an async context manager that
                yields a session. Each concurrent attempt opens its own session.
            client_resolver: Maps an integration name to its export client.
        """
        self._session_factory = session_factory
        self._client_resolver = client_resolver

    async def execute(self, request: ExportJobRequest) -> List[ExportOutcome]:
        """
        Export the requested items to the matching integrations.

        Returns one outcome per integration attempted; an empty list when no
        items or no integrations matched.
        """
        user_id = request.user_id

        async with self._session_factory() as session:
            items = await find_library_items_by_ids(session, request.library_item_ids, user_id)
            if not items:
                log_error("library items not found", user_id=user_id)
                return []

            integrations = await find_integrations(
                session,
                user_id,
                id=request.integration_id,
                enabled=True,
                type=IntegrationType.EXPORT,
            )

        if not integrations:
            return []

        results = await asyncio.gather(
            *(self._export_to_integration(user_id, integration, items) for integration in integrations),
            return_exceptions=True,
        )

        outcomes: List[ExportOutcome] = []
        configuration_fault: Optional[UnsupportedIntegrationError] = None
        for integration, result in zip(integrations, results):
            if isinstance(result, UnsupportedIntegrationError):
                # The first one is logged by the task that receives it
                if configuration_fault is not None:
                    log_error(str(result), user_id=user_id, integration_id=integration.id)
                configuration_fault = configuration_fault or result
            elif isinstance(result, BaseException):
                outcomes.append(ExportOutcome(
                    integration_id=integration.id,
                    integration_name=integration.name,
                    status=ExportStatus.FAULT,
                    error=str(result),
                ))
            else:
                outcomes.append(result)

        if configuration_fault is not None:
            raise configuration_fault
        return outcomes

    async def _export_to_integration(
        self,
        user_id: uuid.UUID,
        integration: Integration,
        items: Sequence[LibraryItem],
    ) -> ExportOutcome:
        log_context = {"user_id": user_id, "integration_id": integration.id}
        log_info(f"Exporting {len(items)} items to {integration.name}", **log_context)

        # Outside the error boundary: an unknown name is a misconfiguration
        client = self._client_resolver(integration.name)

        try:
            token = decrypt_token(integration.token_encrypted)
            synced = await client.export(token, items)
            if not synced:
                log_error(f"Failed to export items to {integration.name}", **log_context)
                return ExportOutcome(
                    integration_id=integration.id,
                    integration_name=integration.name,
                    status=ExportStatus.REJECTED,
                )

            synced_at = utc_now()
            log_info("Updating integration", synced_at=synced_at, **log_context)
            async with self._session_factory() as session:
                updated = await update_integration(
                    session,
                    integration.id,
                    user_id,
                    synced_at=synced_at,
                )
            log_info(
                f"Integration {integration.name} updated",
                synced_at=updated.synced_at,
                **log_context,
            )
            return ExportOutcome(
                integration_id=integration.id,
                integration_name=integration.name,
                status=ExportStatus.SUCCESS,
                synced_at=synced_at,
            )
        except Exception as e:
            log_error(e, integration_name=integration.name, **log_context)
            return ExportOutcome(
                integration_id=integration.id,
                integration_name=integration.name,
                status=ExportStatus.FAULT,
                error=str(e),
            )
