"""GET /api/config — public view of the runtime configuration."""

import asyncio

from fastapi import APIRouter, Depends

from webui_bff.runtime_config import RuntimeConfig

from ..dependencies import get_runtime_config

router = APIRouter()


@router.get("/api/config")
async def read_config(runtime_config: RuntimeConfig = Depends(get_runtime_config)):
    """Description text and upstream base URL as currently resolved."""
    description, backend_url = await asyncio.gather(
        runtime_config.description(),
        runtime_config.api_backend_url(),
    )
    return {"description": description, "apiBackendUrl": backend_url}
