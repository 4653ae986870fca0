"""Relay an inbound request to the upstream API through the resilient forwarder."""

import structlog
from fastapi import Response
from fastapi.responses import JSONResponse

from webui_bff.forwarder import ResilientForwarder, describe_error
from webui_bff.runtime_config import RuntimeConfig

logger = structlog.get_logger(__name__)

UNAVAILABLE_STATUS = 502
UNAVAILABLE_BODY = {"message": "Service temporarily unavailable"}
JSON_MEDIA_TYPE = "application/json"


def service_unavailable() -> JSONResponse:
    """The fixed error returned whenever the upstream could not be reached."""
    return JSONResponse(status_code=UNAVAILABLE_STATUS, content=UNAVAILABLE_BODY)


async def relay(
    forwarder: ResilientForwarder,
    runtime_config: RuntimeConfig,
    path: str,
    method: str = "GET",
    body: str | bytes | None = None,
    resource_id: str | None = None,
) -> Response:
    """
    Forward to ``{api.backend.url}{path}`` and pass the upstream reply through.

    - Any upstream status (including 4xx/5xx) is returned as-is with its body.
    - A 204 reply to DELETE is returned with an empty body.
    - If forwarding fails for any reason, the cause is logged and the caller
      gets the fixed 502 response; nothing about the failure leaks out.
    """
    log = logger.bind(method=method, path=path)
    if resource_id is not None:
        log = log.bind(resource_id=resource_id)

    headers = {"Content-Type": JSON_MEDIA_TYPE} if body is not None else None

    try:
        backend_url = await runtime_config.api_backend_url()
        upstream = await forwarder.forward(
            f"{backend_url}{path}",
            method=method,
            headers=headers,
            content=body,
        )
    except Exception as e:
        log.error("proxy.upstream_unavailable", error=describe_error(e), error_type=type(e).__name__)
        return service_unavailable()

    if method == "DELETE" and upstream.status_code == 204:
        return Response(status_code=204, media_type=JSON_MEDIA_TYPE)

    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        media_type=JSON_MEDIA_TYPE,
    )
