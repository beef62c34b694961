"""Shared fixtures for bragi-status tests."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, Union

import httpx
import pytest
import yaml

from bragi_status.config.models import StatusConfig

SAMPLE_CONFIG: Dict[str, Any] = {
    "mode": "testing",
    "log_level": "INFO",
    "service": {"host": "127.0.0.1", "port": 8080},
    "bragi": {"host": "bragi", "port": 4000},
    "probe": {
        "timeout": 2.0,
        "on_elasticsearch_failure": "degrade",
        "on_malformed_index": "skip",
        "default_index_prefix": "munin",
    },
}

# A route maps "netloc/path" to either an exception to raise or a
# (status_code, body) pair; str bodies are sent as text, anything else as JSON.
Route = Union[Exception, tuple[int, Any]]

BRAGI_STATUS = {"version": "1.2", "es": "http://es:9200/munin", "status": "ok"}
CLUSTER_INFO = {
    "name": "es-node-1",
    "cluster_name": "docker-cluster",
    "cluster_uuid": "6tKyCqfCQvC0nL6qUhZ3dg",
    "version": {
        "number": "7.10",
        "build_hash": "51e9d6f22758d0374a0f3f5c6e8f3a7997850f96",
        "lucene_version": "8.7.0",
    },
    "tagline": "You Know, for Search",
}
CATALOG = [
    {
        "health": "green",
        "status": "open",
        "index": "munin_addr_priv.fr_20200101_000000",
        "pri": "1",
        "rep": "0",
        "docs.count": "42",
        "docs.deleted": "0",
        "store.size": "12kb",
        "pri.store.size": "12kb",
    },
]


def make_transport(routes: Dict[str, Route]) -> httpx.MockTransport:
    """Build a mock transport answering from *routes*; unknown routes refuse connections."""

    def handler(request: httpx.Request) -> httpx.Response:
        key = f"{request.url.netloc.decode()}{request.url.path}"
        route = routes.get(key)
        if route is None:
            raise httpx.ConnectError(f"Connection refused: {key}", request=request)
        if isinstance(route, Exception):
            raise route
        status_code, body = route
        if isinstance(body, str):
            return httpx.Response(status_code, text=body)
        return httpx.Response(status_code, json=body)

    return httpx.MockTransport(handler)


class SlowTransport(httpx.AsyncBaseTransport):
    """Answers from *routes* like make_transport, but stalls on the *slow* keys."""

    def __init__(self, routes: Dict[str, Route], slow: set[str], delay: float = 60.0) -> None:
        self._inner = make_transport(routes)
        self._slow = slow
        self._delay = delay
        self.stalled = asyncio.Event()
        self.closed = False

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        if f"{request.url.netloc.decode()}{request.url.path}" in self._slow:
            self.stalled.set()
            await asyncio.sleep(self._delay)
        return await self._inner.handle_async_request(request)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture()
def sample_config() -> StatusConfig:
    """Return a parsed StatusConfig from sample data."""
    return StatusConfig(**SAMPLE_CONFIG)


@pytest.fixture()
def config_file(tmp_path: Path) -> Path:
    """Write sample config to a temp .bragi-status.yaml and return the path."""
    path = tmp_path / ".bragi-status.yaml"
    with path.open("w") as fh:
        yaml.dump(SAMPLE_CONFIG, fh)
    return path


@pytest.fixture()
def healthy_routes() -> Dict[str, Route]:
    """Bragi and Elasticsearch both up, one private address index."""
    return {
        "bragi:4000/": (200, "bragi"),
        "bragi:4000/status": (200, dict(BRAGI_STATUS)),
        "es:9200/": (200, dict(CLUSTER_INFO)),
        "es:9200/_cat/indices": (200, [dict(e) for e in CATALOG]),
    }


@pytest.fixture()
def client_for() -> Callable[[Dict[str, Route]], httpx.AsyncClient]:
    """Return a factory of AsyncClients backed by make_transport."""

    def _factory(routes: Dict[str, Route]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=make_transport(routes), timeout=2.0)

    return _factory
