"""Status query endpoint."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request

from bragi_status.probe.pipeline import probe_status
from bragi_status.probe.response import assemble_response

router = APIRouter(tags=["status"])


@router.get("/status")
async def status(request: Request) -> dict[str, Any]:
    """Probe Bragi and Elasticsearch and return the consolidated report."""
    report = await probe_status(request.app.state.config)
    return assemble_response(report)
