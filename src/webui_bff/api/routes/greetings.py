"""Greeting endpoints, proxied to the upstream greeting API."""

from fastapi import APIRouter, Depends, Request, Response

from webui_bff.forwarder import ResilientForwarder
from webui_bff.runtime_config import RuntimeConfig

from ..dependencies import get_forwarder, get_greetings_path, get_runtime_config
from ..proxy import relay

router = APIRouter(prefix="/api/greetings")


@router.get("")
async def list_greetings(
    forwarder: ResilientForwarder = Depends(get_forwarder),
    runtime_config: RuntimeConfig = Depends(get_runtime_config),
    greetings_path: str = Depends(get_greetings_path),
) -> Response:
    return await relay(forwarder, runtime_config, greetings_path)


@router.post("")
async def create_greeting(
    request: Request,
    forwarder: ResilientForwarder = Depends(get_forwarder),
    runtime_config: RuntimeConfig = Depends(get_runtime_config),
    greetings_path: str = Depends(get_greetings_path),
) -> Response:
    """Forward the body bytes unchanged so nothing is re-encoded."""
    body = await request.body()
    return await relay(forwarder, runtime_config, greetings_path, method="POST", body=body)


@router.get("/{greeting_id}")
async def get_greeting(
    greeting_id: str,
    forwarder: ResilientForwarder = Depends(get_forwarder),
    runtime_config: RuntimeConfig = Depends(get_runtime_config),
    greetings_path: str = Depends(get_greetings_path),
) -> Response:
    return await relay(
        forwarder,
        runtime_config,
        f"{greetings_path}/{greeting_id}",
        resource_id=greeting_id,
    )


@router.delete("/{greeting_id}")
async def delete_greeting(
    greeting_id: str,
    forwarder: ResilientForwarder = Depends(get_forwarder),
    runtime_config: RuntimeConfig = Depends(get_runtime_config),
    greetings_path: str = Depends(get_greetings_path),
) -> Response:
    return await relay(
        forwarder,
        runtime_config,
        f"{greetings_path}/{greeting_id}",
        method="DELETE",
        resource_id=greeting_id,
    )
