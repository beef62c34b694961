"""Error taxonomy for status probes."""

from __future__ import annotations


class ProbeError(Exception):
    """Base class for every failure a probe can surface."""

    kind: str = "internal"
    title: str = "Internal Error"
    status_code: int = 500

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.url = url

    def __str__(self) -> str:
        if self.url:
            return f"{self.message} ({self.url})"
        return self.message


class UnreachableError(ProbeError):
    """Transport failure or non-2xx response."""

    kind = "unreachable"
    title = "Not Accessible Error"
    status_code = 502


class NotReadableError(ProbeError):
    """Response body does not have the expected shape."""

    kind = "not_readable"
    title = "Not Readable Error"
    status_code = 502


class URLParseError(ProbeError):
    """The Elasticsearch URL reported by Bragi cannot be parsed."""

    kind = "url_parse"
    title = "Elasticsearch URL Not Readable Error"
    status_code = 502


class ConfigurationError(ProbeError):
    kind = "configuration"
    title = "Configuration Error"


class InternalError(ProbeError):
    kind = "internal"
    title = "Internal Error"
