"""
Readwise export client.

Sends the highlights of library items to Readwise as "articles" (or "tweets"
for items saved from Twitter). Items without highlights are skipped.

API Documentation: https://readwise.io/api_deets
"""
import asyncio
from typing import Any, Dict, List, Optional, Sequence

import httpx

from app.core.config import settings
from app.core.http_client import get_http_client
from app.core.logging_config import log_info, log_warning
from app.core.time_utils import serialize_datetime
from app.integrations.base import IntegrationClient
from app.models.enums import HighlightType, IntegrationName
from app.models.library_item import LibraryItem

MAX_RATE_LIMIT_RETRIES = 3
DEFAULT_RETRY_AFTER_SECONDS = 10
SOURCE_TYPE = "readstash"


def get_highlight_url(slug: str, highlight_id: str) -> str:
    """Link back to a highlight inside the web client."""
    return f"{settings.client_url}/me/{slug}#{highlight_id}"


def item_to_readwise_highlights(item: LibraryItem) -> List[Dict[str, Any]]:
    """
    Map a library item's highlights to Readwise highlight payloads.

    Notes, redactions and highlights without a quote are dropped.
    """
    category = "tweets" if item.site_name == "Twitter" else "articles"
    highlights = []
    for highlight in item.highlights or []:
        if highlight.highlight_type != HighlightType.HIGHLIGHT or not highlight.quote:
            continue
        highlights.append({
            "text": highlight.quote,
            "title": item.title,
            "author": item.author or None,
            "highlight_url": get_highlight_url(item.slug, str(highlight.id)),
            "highlighted_at": serialize_datetime(highlight.created_at),
            "category": category,
            "image_url": item.thumbnail or None,
            "location_type": "order",
            "note": highlight.annotation or None,
            "source_type": SOURCE_TYPE,
            "source_url": item.original_url,
        })
    return highlights


def _parse_retry_after(response: httpx.Response) -> int:
    value = response.headers.get("retry-after")
    try:
        return int(value) if value else DEFAULT_RETRY_AFTER_SECONDS
    except ValueError:
        return DEFAULT_RETRY_AFTER_SECONDS


class ReadwiseClient(IntegrationClient):
    name = IntegrationName.READWISE.value

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None):
        self._http_client = http_client

    async def _client(self) -> httpx.AsyncClient:
        if self._http_client is not None:
            return self._http_client
        return await get_http_client()

    @staticmethod
    def _headers(token: str) -> Dict[str, str]:
        return {
            "Authorization": f"Token {token}",
            "Content-Type": "application/json",
        }

    async def validate_token(self, token: str) -> bool:
        """Check a Readwise access token; Readwise answers 204 for valid tokens."""
        client = await self._client()
        try:
            response = await client.get(
                f"{settings.readwise_api_url}/auth",
                headers=self._headers(token),
            )
        except httpx.HTTPError as e:
            log_warning(f"Readwise token check failed: {e}")
            return False
        return response.status_code == 204

    async def export(self, token: str, items: Sequence[LibraryItem]) -> bool:
        highlights = [
            highlight
            for item in items
            for highlight in item_to_readwise_highlights(item)
        ]
        if not highlights:
            log_info("No highlights to export to Readwise", item_count=len(items))
            return True

        return await self._sync_highlights(token, highlights)

    async def _sync_highlights(self, token: str, highlights: List[Dict[str, Any]]) -> bool:
        client = await self._client()
        url = f"{settings.readwise_api_url}/highlights"

        for attempt in range(MAX_RATE_LIMIT_RETRIES + 1):
            try:
                response = await client.post(
                    url,
                    json={"highlights": highlights},
                    headers=self._headers(token),
                )
            except httpx.HTTPError as e:
                log_warning(f"Readwise export request failed: {e}")
                return False

            if response.status_code == 429 and attempt < MAX_RATE_LIMIT_RETRIES:
                retry_after = _parse_retry_after(response)
                log_warning(
                    "Readwise API rate limit exceeded, retrying",
                    retry_after=retry_after,
                    attempt=attempt + 1,
                )
                await asyncio.sleep(retry_after)
                continue

            if response.status_code != 200:
                log_warning(
                    "Readwise rejected highlights",
                    status_code=response.status_code,
                    highlight_count=len(highlights),
                )
            return response.status_code == 200

        return False
