"""Reachability and status checks against Bragi."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

import httpx
from pydantic import ValidationError

from bragi_status.probe.errors import NotReadableError
from bragi_status.probe.http import get, get_json
from bragi_status.probe.models import (
    Availability,
    BragiStatusBody,
    SearchEngineReport,
    ServiceReport,
    UpstreamState,
)
from bragi_status.probe.urls import DEFAULT_INDEX_PREFIX, derive_elasticsearch_url

logger = logging.getLogger(__name__)

BRAGI_LABEL = "bragi"
ELASTICSEARCH_LABEL = "elasticsearch"


async def check_reachable(client: httpx.AsyncClient, url: str) -> None:
    """Raise UnreachableError unless *url* answers with a non-error status."""
    await get(client, url)


async def fetch_status(
    client: httpx.AsyncClient,
    url: str,
    default_prefix: str = DEFAULT_INDEX_PREFIX,
) -> ServiceReport:
    """Fetch ``{url}/status`` and build a report with a pending Elasticsearch section.

    The Elasticsearch section is marked not available with no indices; the
    following stages fill it in.
    """
    status_url = f"{url}/status"
    logger.info("Checking bragi status at %s", status_url)
    payload = await get_json(client, status_url)
    try:
        body = BragiStatusBody.model_validate(payload)
    except ValidationError as exc:
        raise NotReadableError(f"JSON status not readable: {exc}", url=status_url) from exc

    es_url, prefix = derive_elasticsearch_url(body.es, default_prefix=default_prefix)
    now = datetime.now(UTC)
    return ServiceReport(
        label=BRAGI_LABEL,
        url=url,
        version=body.version,
        status=UpstreamState.AVAILABLE,
        updated_at=now,
        elastic=SearchEngineReport(
            label=ELASTICSEARCH_LABEL,
            url=es_url,
            name="",
            status=Availability.NOT_AVAILABLE,
            version="",
            index_prefix=prefix,
            updated_at=now,
        ),
    )
