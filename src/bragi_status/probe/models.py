"""Data models for status reports and the raw payloads they are built from."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def _rfc3339(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


class Availability(str, Enum):
    """Availability of a single server."""

    AVAILABLE = "available"
    NOT_AVAILABLE = "notAvailable"


class UpstreamState(str, Enum):
    """Summary of a cascading failure, reported at the top of the report."""

    AVAILABLE = "available"
    BRAGI_NOT_AVAILABLE = "bragiNotAvailable"
    ELASTICSEARCH_NOT_AVAILABLE = "elasticsearchNotAvailable"


class Visibility(str, Enum):
    """Whether the data source behind an index is public or private."""

    PRIVATE = "private"
    PUBLIC = "public"


@dataclass(frozen=True)
class IndexReport:
    """Metadata decoded from one Elasticsearch index."""

    label: str
    place_type: str
    coverage: str
    visibility: Visibility
    date: datetime
    count: int
    updated_at: datetime = field(compare=False)

    @property
    def private(self) -> bool:
        return self.visibility is Visibility.PRIVATE

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "label": self.label,
            "placeType": self.place_type,
            "coverage": self.coverage,
        }
        if self.private:
            data["private"] = self.visibility.value
        data.update({
            "date": _rfc3339(self.date),
            "count": self.count,
            "updatedAt": _rfc3339(self.updated_at),
        })
        return data


@dataclass(frozen=True)
class SearchEngineReport:
    """Status of the Elasticsearch cluster used by Bragi."""

    label: str
    url: str
    name: str
    status: Availability
    version: str
    index_prefix: str
    updated_at: datetime = field(compare=False)
    indices: tuple[IndexReport, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "url": self.url,
            "name": self.name,
            "status": self.status.value,
            "version": self.version,
            "indexPrefix": self.index_prefix,
            "updatedAt": _rfc3339(self.updated_at),
            "indices": [i.to_dict() for i in self.indices],
        }


@dataclass(frozen=True)
class ServiceReport:
    """Consolidated status of Bragi and the cluster behind it."""

    label: str
    url: str
    version: str
    status: UpstreamState
    updated_at: datetime = field(compare=False)
    elastic: SearchEngineReport | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "url": self.url,
            "version": self.version,
            "status": self.status.value,
            "updatedAt": _rfc3339(self.updated_at),
            "elastic": self.elastic.to_dict() if self.elastic else None,
        }


# ─── Raw payloads ───


class BragiStatusBody(BaseModel):
    """Body of ``GET {bragi}/status``."""

    version: str
    es: str
    status: str


class ClusterVersion(BaseModel):
    number: str


class ClusterInfoBody(BaseModel):
    """Body of ``GET {elasticsearch}``."""

    name: str
    version: ClusterVersion


class CatalogEntry(BaseModel):
    """One row of ``GET {elasticsearch}/_cat/indices?format=json``."""

    model_config = ConfigDict(populate_by_name=True)

    index: str
    health: str | None = None
    status: str | None = None
    count: str | None = Field(default=None, alias="docs.count")
