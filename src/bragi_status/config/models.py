"""Pydantic models for bragi-status configuration."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from bragi_status.probe.errors import ConfigurationError


class ServiceConfig(BaseModel):
    """Address the API server listens on."""

    model_config = ConfigDict(frozen=True)

    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)


class BragiEndpoint(BaseModel):
    """The Bragi instance being probed."""

    model_config = ConfigDict(frozen=True)

    host: str = "localhost"
    port: int = Field(default=4000, ge=1, le=65535)

    @property
    def url(self) -> str:
        if not self.host.strip():
            raise ConfigurationError("Bragi host is not configured")
        return f"http://{self.host.strip()}:{self.port}"


class ProbeConfig(BaseModel):
    """Behaviour of a single status probe."""

    model_config = ConfigDict(frozen=True)

    timeout: float = Field(default=10.0, gt=0)
    on_elasticsearch_failure: Literal["degrade", "propagate"] = "degrade"
    on_malformed_index: Literal["skip", "fail"] = "skip"
    default_index_prefix: str = "munin"


class StatusConfig(BaseModel):
    """Root configuration model for .bragi-status.yaml."""

    model_config = ConfigDict(frozen=True)

    mode: str = "development"
    log_level: str = "INFO"
    service: ServiceConfig = Field(default_factory=ServiceConfig)
    bragi: BragiEndpoint = Field(default_factory=BragiEndpoint)
    probe: ProbeConfig = Field(default_factory=ProbeConfig)
