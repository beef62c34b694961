"""Cluster info and index catalog checks against Elasticsearch."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import UTC, datetime
from typing import Literal

import httpx
from pydantic import TypeAdapter, ValidationError

from bragi_status.probe.errors import NotReadableError
from bragi_status.probe.http import get_json
from bragi_status.probe.indices import MalformedIndex, decode_index_name
from bragi_status.probe.models import (
    Availability,
    CatalogEntry,
    ClusterInfoBody,
    IndexReport,
    SearchEngineReport,
)

logger = logging.getLogger(__name__)

MalformedPolicy = Literal["skip", "fail"]

_CATALOG = TypeAdapter(list[CatalogEntry])


async def fetch_cluster_info(client: httpx.AsyncClient, engine: SearchEngineReport) -> SearchEngineReport:
    """Copy the cluster name and version into a new report."""
    logger.info("Checking elasticsearch info at %s", engine.url)
    payload = await get_json(client, engine.url)
    try:
        info = ClusterInfoBody.model_validate(payload)
    except ValidationError as exc:
        raise NotReadableError(f"Cluster info not readable: {exc}", url=engine.url) from exc
    return replace(engine, name=info.name, version=info.version.number)


def decode_catalog(
    entries: list[CatalogEntry],
    malformed: MalformedPolicy = "skip",
    now: datetime | None = None,
) -> tuple[IndexReport, ...]:
    """Decode catalog entries in order, applying the malformed-name policy."""
    now = now or datetime.now(UTC)
    reports: list[IndexReport] = []
    for entry in entries:
        decoded = decode_index_name(entry.index, entry.count, now=now)
        if isinstance(decoded, MalformedIndex):
            if malformed == "fail":
                raise NotReadableError(f"Malformed index name {decoded.label!r}: {decoded.reason}")
            logger.warning("Skipping index %r: %s", decoded.label, decoded.reason)
            continue
        if decoded.fallbacks:
            logger.debug("Index %r decoded with fallback %s", entry.index, ", ".join(decoded.fallbacks))
        reports.append(decoded.report)
    return tuple(reports)


async def fetch_indices(
    client: httpx.AsyncClient,
    engine: SearchEngineReport,
    malformed: MalformedPolicy = "skip",
) -> SearchEngineReport:
    """Fetch the index catalog and mark the cluster available."""
    indices_url = f"{engine.url}/_cat/indices?format=json"
    logger.info("Checking elasticsearch indices at %s", indices_url)
    payload = await get_json(client, indices_url)
    try:
        entries = _CATALOG.validate_python(payload)
    except ValidationError as exc:
        raise NotReadableError(f"Index catalog not readable: {exc}", url=indices_url) from exc

    now = datetime.now(UTC)
    return replace(
        engine,
        status=Availability.AVAILABLE,
        indices=decode_catalog(entries, malformed=malformed, now=now),
        updated_at=now,
    )
