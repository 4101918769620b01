"""FastAPI application factory for the project comparison service.

Creates and configures the app with CORS and the comparison routes, holding
one orchestrator (and therefore one result cache) on ``app.state``.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config.settings import settings
from app.orchestrator_compare import ComparisonOrchestrator

logger = logging.getLogger(__name__)


def create_app(orchestrator: ComparisonOrchestrator | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        orchestrator: ComparisonOrchestrator instance (optional; a default
            one with an in-memory cache is built when omitted)

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=settings.APP_NAME,
        description="AI-assisted comparison of two GitHub projects",
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.orchestrator = orchestrator or ComparisonOrchestrator()

    from .routes.compare import router as compare_router

    app.include_router(compare_router)

    logger.info(f"{settings.APP_NAME} {settings.APP_VERSION} configured")
    return app
