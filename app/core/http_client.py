"""
Shared HTTP client for export integrations.

Provides a singleton httpx.AsyncClient for connection pooling across the
concurrent per-integration export calls of a job. Celery tasks run each job in
a fresh event loop, so the task runner closes the client when the job ends.
"""
import asyncio
from typing import Optional

import httpx
from app.core.config import settings
from app.core.logging_config import log_info

_client: Optional[httpx.AsyncClient] = None
_client_lock: Optional[asyncio.Lock] = None

_limits = httpx.Limits(max_connections=20, max_keepalive_connections=10)


def _get_lock() -> asyncio.Lock:
    """Get or create the client lock."""
    global _client_lock
    if _client_lock is None:
        _client_lock = asyncio.Lock()
    return _client_lock


async def get_http_client() -> httpx.AsyncClient:
    """
    Get the shared AsyncClient instance.

    Creates a new instance if one doesn't exist or is closed.
    """
    global _client
    if _client is None or _client.is_closed:
        async with _get_lock():
            if _client is None or _client.is_closed:
                timeout = settings.integration_http_timeout
                _client = httpx.AsyncClient(
                    timeout=timeout,
                    limits=_limits,
                    transport=httpx.AsyncHTTPTransport(retries=2),
                )
                log_info("HTTP client created", timeout=timeout)
    return _client


async def close_http_client():
    """Close the shared client if it exists."""
    global _client, _client_lock
    async with _get_lock():
        if _client and not _client.is_closed:
            await _client.aclose()
            log_info("HTTP client closed")
        _client = None
    # The lock belongs to the loop that is about to finish
    _client_lock = None
