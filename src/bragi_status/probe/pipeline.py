"""Status pipeline: Bragi reachability, Bragi status, cluster info, index catalog."""

from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum

import httpx

from bragi_status.config.models import StatusConfig
from bragi_status.probe.bragi import check_reachable, fetch_status
from bragi_status.probe.elasticsearch import fetch_cluster_info, fetch_indices
from bragi_status.probe.errors import InternalError, ProbeError
from bragi_status.probe.models import Availability, ServiceReport, UpstreamState

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    NOT_STARTED = "not_started"
    REACHABILITY_CHECKED = "reachability_checked"
    STATUS_FETCHED = "status_fetched"
    CLUSTER_INFO_FETCHED = "cluster_info_fetched"
    INDICES_FETCHED = "indices_fetched"
    DONE = "done"
    FAILED = "failed"


# Once Bragi has answered, any later failure comes from Elasticsearch.
_ELASTICSEARCH_STAGES = frozenset({Stage.STATUS_FETCHED, Stage.CLUSTER_INFO_FETCHED, Stage.INDICES_FETCHED})


class StatusPipeline:
    """A single status probe. Each instance runs at most once."""

    def __init__(
        self,
        config: StatusConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self.stage = Stage.NOT_STARTED
        self.failed_at: Stage | None = None
        self.elasticsearch_error: ProbeError | None = None

    def _advance(self, stage: Stage) -> None:
        logger.debug("Pipeline %s -> %s", self.stage.value, stage.value)
        self.stage = stage

    def _fail(self) -> None:
        self.failed_at = self.stage
        self._advance(Stage.FAILED)

    @property
    def failed_component(self) -> UpstreamState | None:
        """Which upstream a failed run is blamed on, or None if the run has not failed."""
        if self.failed_at is None:
            return None
        if self.failed_at in _ELASTICSEARCH_STAGES:
            return UpstreamState.ELASTICSEARCH_NOT_AVAILABLE
        return UpstreamState.BRAGI_NOT_AVAILABLE

    async def run(self) -> ServiceReport:
        """Run every stage in order, raising the first ProbeError encountered."""
        if self.stage is not Stage.NOT_STARTED:
            raise InternalError(f"Pipeline already run (stage {self.stage.value})")
        try:
            url = self._config.bragi.url
            async with httpx.AsyncClient(
                timeout=self._config.probe.timeout,
                transport=self._transport,
            ) as client:
                report = await self._run(client, url)
        except ProbeError as exc:
            self._fail()
            logger.warning("Status probe failed: %s", exc)
            raise
        except BaseException:
            self._fail()
            raise
        self._advance(Stage.DONE)
        return report

    async def _run(self, client: httpx.AsyncClient, url: str) -> ServiceReport:
        await check_reachable(client, url)
        self._advance(Stage.REACHABILITY_CHECKED)

        report = await fetch_status(client, url, default_prefix=self._config.probe.default_index_prefix)
        self._advance(Stage.STATUS_FETCHED)

        engine = report.elastic
        if engine is None:
            raise InternalError("Status report has no elasticsearch section", url=url)
        try:
            engine = await fetch_cluster_info(client, engine)
            self._advance(Stage.CLUSTER_INFO_FETCHED)
            engine = await fetch_indices(client, engine, malformed=self._config.probe.on_malformed_index)
            self._advance(Stage.INDICES_FETCHED)
        except ProbeError as exc:
            if self._config.probe.on_elasticsearch_failure == "propagate":
                raise
            logger.warning("Elasticsearch not available at %s: %s", engine.url, exc)
            self.elasticsearch_error = exc
            degraded = replace(engine, status=Availability.NOT_AVAILABLE, indices=())
            return replace(report, status=UpstreamState.ELASTICSEARCH_NOT_AVAILABLE, elastic=degraded)

        return replace(report, elastic=engine)


async def probe_status(
    config: StatusConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ServiceReport:
    """Run a fresh status pipeline."""
    return await StatusPipeline(config, transport=transport).run()
