"""Test configuration and fixtures for roomchat tests."""
import asyncio
from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient

from roomchat.core.config import Settings
from roomchat.main import create_app
from roomchat.services.chat_service import ChatCoordinator
from roomchat.services.connection_manager import ConnectionManager
from roomchat.services.room_manager import RoomManager


@pytest.fixture
def test_settings(monkeypatch):
    """Provide settings isolated from the developer's environment."""
    for name in ("HOST", "PORT", "LOG_LEVEL", "DEFAULT_ROOM", "STATIC_DIR", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    return Settings()


@pytest.fixture
def app(test_settings):
    """Provide a fresh app with its own empty chat state."""
    return create_app(test_settings)


@pytest.fixture
def client(app):
    """Provide a test client; entering it runs every socket on one event loop."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def transport():
    return ConnectionManager()


@pytest.fixture
def room_manager():
    return RoomManager(default_room="general")


@pytest.fixture
def chat(transport, room_manager):
    return ChatCoordinator(transport=transport, room_manager=room_manager)


@pytest.fixture
def drain():
    """Return a helper that empties an outbound queue into a list of frames."""
    def _drain(outbox: asyncio.Queue) -> List[Dict[str, Any]]:
        frames = []
        while not outbox.empty():
            frames.append(outbox.get_nowait())
        return frames
    return _drain
