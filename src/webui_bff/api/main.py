"""FastAPI application for the web UI backend-for-frontend."""

import asyncio
import contextlib
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request

from webui_bff.clients.parameter_store import create_parameter_store
from webui_bff.config import get_settings
from webui_bff.forwarder import ResilientForwarder
from webui_bff.logging import (
    configure_logging,
    logging_context,
    refresh_log_level,
    trace_id_from_headers,
)
from webui_bff.runtime_config import RuntimeConfig

from .routes.config import router as config_router
from .routes.greetings import router as greetings_router
from .routes.health import router as health_router

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the shared clients at startup, stop background work at shutdown."""
    settings = get_settings()
    configure_logging()

    # Parameter store — constructed once, read-only for the process lifetime
    store = create_parameter_store(settings)
    runtime_config = RuntimeConfig(store, namespace=settings.SERVICE_NAME)

    logger.info(
        "lifespan.startup",
        parameter_store=repr(store),
        namespace=runtime_config.namespace,
    )

    # Store on app.state for request handlers
    app.state.runtime_config = runtime_config
    app.state.forwarder = ResilientForwarder(runtime_config)
    app.state.greetings_path = settings.UPSTREAM_GREETINGS_PATH

    # Log level from the parameter store; requests are served meanwhile
    app.state.log_level_task = asyncio.create_task(refresh_log_level(runtime_config))

    logger.info("lifespan.ready")
    yield

    # Shutdown
    logger.info("lifespan.shutdown")
    task = app.state.log_level_task
    if not task.done():
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task


app = FastAPI(
    title="webui-bff",
    description="Backend-for-frontend proxying the greeting API with parameter-store driven resilience",
    lifespan=lifespan,
)


@app.middleware("http")
async def bind_trace_id(request: Request, call_next):
    """Carry the inbound correlation ID on every log line for this request."""
    with logging_context(trace_id=trace_id_from_headers(request.headers)):
        return await call_next(request)


app.include_router(health_router)
app.include_router(config_router)
app.include_router(greetings_router)
