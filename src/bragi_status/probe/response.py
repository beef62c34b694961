"""Shape reports and probe errors for the query endpoint."""

from __future__ import annotations

from typing import Any

from bragi_status.probe.errors import ProbeError
from bragi_status.probe.models import ServiceReport


def assemble_response(report: ServiceReport) -> dict[str, Any]:
    return {"info": report.to_dict()}


def assemble_error(exc: ProbeError) -> dict[str, Any]:
    """Describe *exc* with its display title, kind and message only."""
    return {
        "message": exc.title,
        "kind": exc.kind,
        "internal_error": str(exc),
    }
