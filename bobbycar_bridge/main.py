import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI

from . import __version__
from .config import Settings, settings as default_settings
from .routers import ingest_router
from .services import LineProtocolWriter

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: one writer and http client shared by every connection
    app.state.writer = LineProtocolWriter.from_settings(app.state.settings)
    logger.info(f"[STARTUP] policy={app.state.settings.policy.value} writing to {app.state.settings.url}")
    yield
    # Shutdown: let dispatched writes finish
    await app.state.writer.aclose()


def create_app(settings: Settings | None = None) -> FastAPI:
    app = FastAPI(
        title="Bobbycar Cloud Bridge",
        description="Receives bobbycar telemetry over WebSocket and forwards it as line protocol",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings or default_settings

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.get("/")
    async def root():
        """Root endpoint with service info."""
        return {
            "name": "Bobbycar Cloud Bridge",
            "version": __version__,
            "policy": app.state.settings.policy.value,
            "stream": "ws://<host>:<port>/<client_id>",
            "health": "/health",
        }

    # Catch-all websocket route, registered last
    app.include_router(ingest_router)
    return app


app = create_app()
