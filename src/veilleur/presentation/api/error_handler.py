"""
Map domain exceptions onto HTTP responses.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from veilleur.domain.exceptions import (
    InvalidOperationRefError,
    UpstreamServiceError,
    VeilleurException,
)
from veilleur.infrastructure.monitoring import get_logger

logger = get_logger(__name__)


async def veilleur_exception_handler(
    request: Request, exc: VeilleurException
) -> JSONResponse:
    """
    Convert VeilleurException to a JSON error response.

    Args:
        request: FastAPI request
        exc: Domain exception

    Returns:
        JSONResponse with error details
    """
    if isinstance(exc, InvalidOperationRefError):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, UpstreamServiceError):
        status_code = status.HTTP_502_BAD_GATEWAY
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")

    return JSONResponse(
        status_code=status_code,
        content={
            "error": exc.__class__.__name__,
            "message": exc.message,
            "details": exc.details,
        },
    )
