"""FastAPI application entrypoint."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bookdigest.api.dependencies import get_asset_dispatcher
from bookdigest.api.routers import assets, background, health, models, speech, summaries, text
from bookdigest.config.settings import api_settings

logging.basicConfig(level=logging.INFO)
APP_VERSION = "0.1.0"
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI app."""
    app = FastAPI(
        title=api_settings.title or "BookDigest API",
        version=api_settings.version or APP_VERSION,
        description=api_settings.description or None,
        debug=api_settings.reload,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(background.router)
    app.include_router(text.router, prefix="/api")
    app.include_router(models.router, prefix="/api")
    app.include_router(summaries.router, prefix="/api")
    app.include_router(speech.router, prefix="/api")
    app.include_router(assets.router, prefix="/api")

    @app.on_event("shutdown")
    async def drain_dispatcher():
        """Let in-flight job deliveries finish before the process exits."""
        dispatcher = get_asset_dispatcher()
        if dispatcher.pending:
            logger.info("Waiting for %d pending dispatch(es)", dispatcher.pending)
            await dispatcher.drain()

    return app


# Uvicorn entrypoint
app = create_app()
