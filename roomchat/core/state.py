# roomchat/core/state.py
from __future__ import annotations

from datetime import datetime, timezone

from fastapi import Request, WebSocket

from roomchat.core.config import Settings
from roomchat.services.chat_service import ChatCoordinator
from roomchat.services.connection_manager import ConnectionManager
from roomchat.services.room_manager import RoomManager


class AppState:
    """
    Everything one running app owns: the transport, the room directory, the
    chat coordinator on top of them, and a few counters for /metrics.

    One instance is built per app by ``create_app`` and stored on
    ``app.state.chat``; handlers reach it through ``get_state``.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.connection_manager = ConnectionManager()
        self.room_manager = RoomManager(default_room=settings.DEFAULT_ROOM)
        self.chat = ChatCoordinator(
            transport=self.connection_manager,
            room_manager=self.room_manager,
        )

        # Metrics
        self.message_counter: int = 0
        self.app_start_time: datetime = datetime.now(timezone.utc)


def get_state(request: Request) -> AppState:
    """FastAPI dependency returning the app's state for HTTP routes."""
    return request.app.state.chat


def get_ws_state(websocket: WebSocket) -> AppState:
    return websocket.app.state.chat
