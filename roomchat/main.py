# roomchat/main.py

from __future__ import annotations

import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from roomchat.core.config import Settings, settings as default_settings
from roomchat.core.logging import setup_logging, get_logger
from roomchat.core.state import AppState
from roomchat.api.routes import root, health, metrics, rooms
from roomchat.api import websocket as websocket_module

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI app with a fresh, empty chat state.

    Args:
        settings: Explicit settings; defaults to the environment-derived ones
    """
    settings = settings or default_settings

    app = FastAPI(title="roomchat")
    app.state.chat = AppState(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # REST routes
    app.include_router(root.router)
    app.include_router(health.router)
    app.include_router(metrics.router)
    app.include_router(rooms.router)

    # WebSocket routes
    app.include_router(websocket_module.router)

    # Client assets go last so they never shadow the API
    if settings.STATIC_DIR:
        if os.path.isdir(settings.STATIC_DIR):
            app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")
        else:
            logger.warning("STATIC_DIR %s does not exist - not serving client assets", settings.STATIC_DIR)

    @app.on_event("startup")
    async def startup_event():
        logger.info(
            "🚀 Application starting - default room '%s', listening on %s:%s",
            settings.DEFAULT_ROOM, settings.HOST, settings.PORT,
        )

    return app


# Configure logging first
setup_logging(default_settings.LOG_LEVEL)

app = create_app()


def run() -> None:
    import uvicorn
    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT)


if __name__ == "__main__":
    run()
