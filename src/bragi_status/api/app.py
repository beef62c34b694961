"""FastAPI application factory for bragi-status."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bragi_status import __version__
from bragi_status.api.routes import status
from bragi_status.config.loader import load_config, load_env_config
from bragi_status.config.models import StatusConfig
from bragi_status.probe.errors import ProbeError
from bragi_status.probe.response import assemble_error

logger = logging.getLogger(__name__)


async def probe_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, ProbeError)
    return JSONResponse(status_code=exc.status_code, content={"error": assemble_error(exc)})


def create_app(config: StatusConfig | None = None) -> FastAPI:
    app = FastAPI(
        title="Bragi Status",
        version=__version__,
        description="Status of Bragi and its Elasticsearch cluster",
        docs_url="/playground",
        redoc_url=None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["content-type", "authorization"],
    )

    if config is None:
        try:
            config = load_config()
        except FileNotFoundError as exc:
            # No config file: deployments may configure through BRAGI_STATUS_* alone
            logger.warning("%s Using defaults and environment overrides.", exc)
            config = load_env_config()
        except ValueError as exc:
            logger.warning("Using default configuration: %s", exc)
            config = StatusConfig()

    app.state.config = config
    app.add_exception_handler(ProbeError, probe_error_handler)

    @app.get("/health", tags=["meta"])
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(status.router, prefix="/api")

    return app
