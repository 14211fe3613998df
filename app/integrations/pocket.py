"""
Pocket export client.

Adds library items to the user's Pocket list through the batch "send"
endpoint, one "add" action per item.

API Documentation: https://getpocket.com/developer/docs/v3/modify
"""
from typing import Any, Dict, List, Optional, Sequence

import httpx

from app.core.config import settings
from app.core.exceptions import IntegrationExportError
from app.core.http_client import get_http_client
from app.core.logging_config import log_warning
from app.integrations.base import IntegrationClient
from app.models.enums import IntegrationName
from app.models.library_item import LibraryItem


def item_to_pocket_action(item: LibraryItem) -> Dict[str, Any]:
    action: Dict[str, Any] = {
        "action": "add",
        "url": item.original_url,
        "title": item.title,
    }
    if item.saved_at:
        action["time"] = int(item.saved_at.timestamp())
    return action


class PocketClient(IntegrationClient):
    name = IntegrationName.POCKET.value

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None):
        self._http_client = http_client

    async def _client(self) -> httpx.AsyncClient:
        if self._http_client is not None:
            return self._http_client
        return await get_http_client()

    async def export(self, token: str, items: Sequence[LibraryItem]) -> bool:
        consumer_key = settings.pocket_consumer_key
        if not consumer_key:
            log_warning("POCKET_CONSUMER_KEY not configured; cannot export to Pocket")
            return False

        actions: List[Dict[str, Any]] = [item_to_pocket_action(item) for item in items]

        client = await self._client()
        response = await client.post(
            f"{settings.pocket_api_url}/send",
            json={
                "consumer_key": consumer_key,
                "access_token": token,
                "actions": actions,
            },
            headers={"X-Accept": "application/json"},
        )

        if response.status_code in (401, 403):
            log_warning(
                "Pocket rejected the access token",
                status_code=response.status_code,
                error=response.headers.get("x-error"),
            )
            return False

        if response.status_code != 200:
            raise IntegrationExportError(
                f"Pocket send failed: {response.headers.get('x-error') or response.text}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise IntegrationExportError("Pocket returned a non-JSON response") from e

        results = payload.get("action_results") or []
        if payload.get("status") != 1 or len(results) != len(actions) or not all(results):
            log_warning(
                "Pocket did not accept every item",
                accepted=sum(1 for result in results if result),
                item_count=len(actions),
            )
            return False

        return True
