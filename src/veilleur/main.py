"""
Main FastAPI application entry point.

Uses Application Factory Pattern; the DI container is attached to
``app.state`` so routes resolve the tracker per request.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from veilleur import __version__
from veilleur.di import DIContainer, get_container
from veilleur.domain.exceptions import VeilleurException
from veilleur.infrastructure.monitoring import get_logger, setup_logging
from veilleur.presentation.api.error_handler import veilleur_exception_handler
from veilleur.presentation.api.routes import health_router, transactions_router


def create_app(container: Optional[DIContainer] = None) -> FastAPI:
    """
    Application factory - creates and configures FastAPI app.

    Args:
        container: Optional DIContainer (for testing)

    Returns:
        Configured FastAPI application
    """
    if container is None:
        container = get_container()

    settings = container.settings
    setup_logging(level=settings.log_level, json_logs=settings.json_logs)
    logger = get_logger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info(
            f"Veilleur started (portal={settings.portal_url}, "
            f"thegraph={settings.thegraph_url})"
        )

        yield

        logger.info("Shutting down Veilleur...")
        await container.shutdown()
        logger.info("Veilleur shutdown complete")

    app = FastAPI(
        title="Veilleur API",
        description="Transaction lifecycle tracking (mined, then indexed)",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_exception_handler(VeilleurException, veilleur_exception_handler)

    app.include_router(health_router)
    app.include_router(transactions_router)

    if settings.metrics.enabled:

        @app.get(settings.metrics.path, include_in_schema=False)
        async def metrics():
            """Prometheus metrics endpoint."""
            return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app


def run() -> None:
    """Run the API with uvicorn using configured host and port."""
    import uvicorn

    settings = get_container().settings
    uvicorn.run(
        create_app(),
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
