"""Derive the Elasticsearch base URL and index prefix from Bragi's status."""

from __future__ import annotations

from urllib.parse import urlsplit

from bragi_status.probe.errors import URLParseError

DEFAULT_INDEX_PREFIX = "munin"


def derive_elasticsearch_url(raw: str, default_prefix: str = DEFAULT_INDEX_PREFIX) -> tuple[str, str]:
    """Return ``(base_url, index_prefix)`` for the URL Bragi reports.

    The base URL keeps the scheme, host and explicit port only; a missing
    port stays missing. The prefix is the first path segment, or
    *default_prefix* when the path is empty.
    """
    try:
        parts = urlsplit(raw.strip())
        port = parts.port
    except ValueError as exc:
        raise URLParseError(f"Elasticsearch URL not parsable: {exc}", url=raw) from exc

    host = parts.hostname
    if not parts.scheme or not host:
        raise URLParseError("Elasticsearch URL not parsable: missing scheme or host", url=raw)

    if ":" in host:
        host = f"[{host}]"
    base_url = f"{parts.scheme}://{host}" if port is None else f"{parts.scheme}://{host}:{port}"

    segments = [s for s in parts.path.split("/") if s]
    prefix = segments[0] if segments else default_prefix
    return base_url, prefix
