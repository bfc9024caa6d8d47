# roomchat/api/websocket.py

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from typing import Any, Callable, Dict

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, ValidationError

from roomchat.core.errors import ChatError
from roomchat.core.state import AppState, get_ws_state
from roomchat.models.models import (
    ClientFrame,
    LoginRequest,
    RoomRequest,
    SendMessageRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# ACTION HANDLERS
# ============================================================================

def _login(app_state: AppState, connection_id: str, data: Dict[str, Any]) -> BaseModel:
    request = LoginRequest.model_validate(data)
    return app_state.chat.login(connection_id, request.name)


def _create_room(app_state: AppState, connection_id: str, data: Dict[str, Any]) -> BaseModel:
    request = RoomRequest.model_validate(data)
    return app_state.chat.create_room(connection_id, request.room)


def _join_room(app_state: AppState, connection_id: str, data: Dict[str, Any]) -> BaseModel:
    request = RoomRequest.model_validate(data)
    return app_state.chat.join_room(connection_id, request.room)


def _send_message(app_state: AppState, connection_id: str, data: Dict[str, Any]) -> BaseModel:
    request = SendMessageRequest.model_validate(data)
    response = app_state.chat.send_message(connection_id, request.text)
    app_state.message_counter += 1
    return response


def _list_rooms(app_state: AppState, connection_id: str, data: Dict[str, Any]) -> BaseModel:
    return app_state.chat.list_rooms()


ACTIONS: Dict[str, Callable[[AppState, str, Dict[str, Any]], BaseModel]] = {
    "login": _login,
    "createRoom": _create_room,
    "joinRoom": _join_room,
    "sendMessage": _send_message,
    "listRooms": _list_rooms,
}


def handle_frame(app_state: AppState, connection_id: str, raw: str) -> None:
    """
    Decode one client frame, run the matching action and queue the ack.

    Chat failures are acked as {"success": false, "code", "error"}; frames
    that cannot be understood at all get an "error" event instead.
    """
    manager = app_state.connection_manager

    try:
        frame = ClientFrame.model_validate(json.loads(raw))
    except json.JSONDecodeError:
        manager.send(connection_id, "error", {"message": "Invalid JSON"})
        return
    except ValidationError:
        manager.send(connection_id, "error", {"message": "Invalid frame"})
        return

    logger.info("Websocket input: Action: %s, Connection: %s", frame.action, connection_id)

    handler = ACTIONS.get(frame.action)
    if handler is None:
        manager.send(connection_id, "error", {"message": f"Unknown action: {frame.action}"})
        return

    try:
        response = handler(app_state, connection_id, frame.data).model_dump()
    except ChatError as e:
        logger.info("✗ %s rejected for %s: %s", frame.action, connection_id, e.code)
        response = e.to_response()

    manager.send_frame(
        connection_id,
        {
            "event": "ack",
            "action": frame.action,
            "request_id": frame.request_id,
            "data": response,
        },
    )


async def _write_frames(websocket: WebSocket, outbox: asyncio.Queue, connection_id: str) -> None:
    """Drain a connection's outbound queue onto its socket."""
    while True:
        frame = await outbox.get()
        try:
            await websocket.send_json(frame)
        except Exception as e:
            logger.error("Send error on %s: %s", connection_id, e)
            return


# ============================================================================
# WEBSOCKET ENDPOINT
# ============================================================================

@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, app_state: AppState = Depends(get_ws_state)):
    """
    WebSocket endpoint for the chat protocol.

    Protocol:
    =========

    Client -> Server Frames:
    ------------------------
        {"action": "<name>", "request_id": <optional, echoed>, "data": {...}}

        login        {"name": "alice"}
        createRoom   {"room": "Team1"}
        joinRoom     {"room": "general"}
        sendMessage  {"text": "hello"}
        listRooms    {}

    Server -> Client Frames:
    ------------------------
    Ack (one per request, in order):
        {"event": "ack", "action": "joinRoom", "request_id": 7,
         "data": {"success": true, "room": "general", "members": [...], "rooms": [...]}}

    Failed request:
        {"event": "ack", "action": "login", "request_id": 1,
         "data": {"success": false, "code": "NameTaken", "error": "..."}}

    Broadcasts:
        {"event": "message", "data": {"sender": "bob", "text": "hi", "timestamp": "..."}}
        {"event": "memberJoined", "data": {"name": "bob"}}
        {"event": "memberLeft", "data": {"name": "bob"}}
        {"event": "roomsUpdated", "data": {"rooms": [...]}}

    Error:
        {"event": "error", "data": {"message": "..."}}

    Lifecycle:
    ==========
    1. Connection accepted and given a random connection id
    2. Client logs in, then joins a room
    3. Requests are handled one at a time; replies and broadcasts are queued
       and written by a per-connection writer task
    4. On disconnect the session leaves its room and is discarded
    """
    await websocket.accept()
    connection_id = uuid.uuid4().hex
    outbox = app_state.connection_manager.connect(connection_id)
    writer = asyncio.create_task(_write_frames(websocket, outbox, connection_id))

    try:
        while True:
            data = await websocket.receive_text()
            handle_frame(app_state, connection_id, data)

    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.error("WebSocket error: %s", e)
    finally:
        app_state.chat.disconnect(connection_id)
        app_state.connection_manager.disconnect(connection_id)
        writer.cancel()
        try:
            await writer
        except asyncio.CancelledError:
            pass
