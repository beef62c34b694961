"""Async HTTP helpers shared by the probe stages."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from bragi_status.probe.errors import NotReadableError, UnreachableError

logger = logging.getLogger(__name__)


async def get(client: httpx.AsyncClient, url: str) -> httpx.Response:
    """GET *url*, turning transport failures and 4xx/5xx into UnreachableError.

    httpx only bounds each phase of a request, so the whole call, body included,
    is also capped at the client's read timeout.
    """
    try:
        async with asyncio.timeout(client.timeout.read):
            resp = await client.get(url)
    except (httpx.TimeoutException, TimeoutError) as exc:
        raise UnreachableError("Timeout", url=url) from exc
    except httpx.ConnectError as exc:
        raise UnreachableError(f"Connection refused: {exc}", url=url) from exc
    except httpx.HTTPError as exc:
        raise UnreachableError(f"Could not access url: {exc}", url=url) from exc

    logger.debug("GET %s -> %d", url, resp.status_code)
    if resp.is_client_error or resp.is_server_error:
        raise UnreachableError(f"Could not reach url (HTTP {resp.status_code})", url=url)
    return resp


async def get_json(client: httpx.AsyncClient, url: str) -> Any:
    """GET *url* and decode its JSON body."""
    resp = await get(client, url)
    try:
        return resp.json()
    except ValueError as exc:
        raise NotReadableError(f"Response is not valid JSON: {exc}", url=url) from exc
