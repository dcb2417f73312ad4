"""
Health check API routes.
"""

from fastapi import APIRouter, status

from veilleur import __version__

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/live", status_code=status.HTTP_200_OK)
async def liveness_probe():
    """
    Liveness probe endpoint.

    Tracking holds no state beyond in-flight streams, so a responding
    event loop is a live service.
    """
    return {"status": "healthy", "service": "veilleur", "version": __version__}
