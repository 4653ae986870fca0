"""Health check endpoint."""

from fastapi import APIRouter

router = APIRouter()


@router.get("/api/health")
async def health():
    """Liveness only; upstream and parameter store are not probed."""
    return {"status": "UP"}
