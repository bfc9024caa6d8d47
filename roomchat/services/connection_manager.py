# roomchat/services/connection_manager.py

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Iterable, Optional, Protocol, Set

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """The two delivery primitives the chat coordinator relies on."""

    def send(self, connection_id: str, event: str, payload: Dict[str, Any]) -> None:
        ...

    def broadcast_to_room(
        self,
        room: str,
        event: str,
        payload: Dict[str, Any],
        exclude: Optional[str] = None,
    ) -> None:
        ...

    def broadcast(self, event: str, payload: Dict[str, Any]) -> None:
        ...

    def enter_room(self, connection_id: str, room: str) -> None:
        ...

    def leave_room(self, connection_id: str, room: str) -> None:
        ...


# ============================================================================
# CONNECTION MANAGER
# ============================================================================

class ConnectionManager:
    """
    Tracks live connections, their transport-level rooms, and one outbound
    queue per connection.

    Nothing here awaits. Every delivery is a ``put_nowait`` onto the target
    connection's queue, and the WebSocket endpoint runs a writer task that
    drains the queue onto the socket. A request handler therefore mutates
    state and fans out events without ever yielding to the event loop, so
    handlers never interleave.

    Data Structures:
        outboxes: Maps connection_id -> asyncio.Queue of outbound frames
                  Example: {"3f2a...": <Queue>}

        rooms: Maps room name -> Set of connection_ids in that room
               Example: {"general": {"3f2a...", "9c1b..."}}

        connection_rooms: Maps connection_id -> Set of room names it's in

    Frames:
        Every frame is a dict of the form {"event": <name>, "data": <payload>}.
    """

    def __init__(self) -> None:
        self.outboxes: Dict[str, asyncio.Queue] = {}
        self.rooms: Dict[str, Set[str]] = {}
        self.connection_rooms: Dict[str, Set[str]] = {}

    def connect(self, connection_id: str) -> asyncio.Queue:
        """
        Register a new connection and return its outbound queue.

        Args:
            connection_id: Opaque id of the connection

        Returns:
            asyncio.Queue: frames waiting to be written to the client
        """
        outbox: asyncio.Queue = asyncio.Queue()
        self.outboxes[connection_id] = outbox
        self.connection_rooms[connection_id] = set()
        logger.info("✓ Connection %s opened. Total: %d", connection_id, len(self.outboxes))
        return outbox

    def disconnect(self, connection_id: str) -> None:
        """Drop a connection from every room and stop queueing frames for it."""
        if connection_id not in self.outboxes:
            return

        for room in self.connection_rooms.pop(connection_id, set()):
            self._discard(connection_id, room)
        del self.outboxes[connection_id]

        logger.info("✗ Connection %s closed. Total: %d", connection_id, len(self.outboxes))

    def is_connected(self, connection_id: str) -> bool:
        return connection_id in self.outboxes

    def enter_room(self, connection_id: str, room: str) -> None:
        if connection_id not in self.outboxes:
            return  # Connection already closed
        self.rooms.setdefault(room, set()).add(connection_id)
        self.connection_rooms[connection_id].add(room)

    def leave_room(self, connection_id: str, room: str) -> None:
        if connection_id not in self.connection_rooms:
            return
        self.connection_rooms[connection_id].discard(room)
        self._discard(connection_id, room)

    def _discard(self, connection_id: str, room: str) -> None:
        members = self.rooms.get(room)
        if members is None:
            return
        members.discard(connection_id)
        # Clean up empty rooms from memory
        if not members:
            del self.rooms[room]

    def send(self, connection_id: str, event: str, payload: Dict[str, Any]) -> None:
        """
        Queue a single frame for one connection.

        Sending to a connection that is already gone is silently dropped:
        delivery is best effort.
        """
        self.send_frame(connection_id, {"event": event, "data": payload})

    def send_frame(self, connection_id: str, frame: Dict[str, Any]) -> None:
        outbox = self.outboxes.get(connection_id)
        if outbox is None:
            logger.debug("Dropped '%s' for closed connection %s", frame.get("event"), connection_id)
            return
        outbox.put_nowait(frame)

    def broadcast_to_room(
        self,
        room: str,
        event: str,
        payload: Dict[str, Any],
        exclude: Optional[str] = None,
    ) -> None:
        """
        Queue a frame for every connection in a room.

        Args:
            room: Target room name
            event: Event name, e.g. "message" or "memberLeft"
            payload: JSON-serialisable event body
            exclude: Optional connection_id that should not receive it
        """
        if room not in self.rooms:
            # No one subscribed to this room currently
            logger.info("[routing] Skipped '%s': room=%s has 0 subscribers", event, room)
            return

        recipients = [cid for cid in self.rooms[room] if cid != exclude]
        logger.info("📨 Broadcasting '%s' to room %s: %d clients", event, room, len(recipients))
        self._fan_out(recipients, event, payload)

    def broadcast(self, event: str, payload: Dict[str, Any]) -> None:
        """Queue a frame for every open connection."""
        self._fan_out(list(self.outboxes), event, payload)

    def _fan_out(self, connection_ids: Iterable[str], event: str, payload: Dict[str, Any]) -> None:
        for connection_id in connection_ids:
            self.send(connection_id, event, payload)

    def get_rooms_info(self) -> Dict[str, int]:
        """Map each room with at least one connection to its connection count."""
        return {room: len(connections) for room, connections in self.rooms.items()}
