# roomchat/services/room_manager.py

from __future__ import annotations

import logging
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

# ============================================================================
# ROOM DIRECTORY
# ============================================================================
class RoomManager:
    """
    Keeps the directory of known rooms and who is present in each.

    Rooms live in memory only and are never deleted: once a name is known it
    stays in the room list even after the last member leaves. Membership sets
    on the other hand are dropped as soon as they become empty.

    Both collections are dicts used as insertion-ordered sets, so room lists
    and member lists come back in the order names were added.

    Attributes:
        rooms: room name -> None, every room ever created or joined
        members: room name -> {member name -> None}, only for occupied rooms

    Usage:
        room_manager = RoomManager(default_room="general")
        room_manager.add_room("Team1")
        room_manager.add_member("Team1", "alice")
        all_rooms = room_manager.list_rooms()
    """

    def __init__(self, default_room: Optional[str] = "general") -> None:
        self.rooms: Dict[str, None] = {}
        self.members: Dict[str, Dict[str, None]] = {}
        if default_room:
            self.add_room(default_room)

    def has_room(self, name: str) -> bool:
        return name in self.rooms

    def add_room(self, name: str) -> bool:
        """
        Add a room to the directory.

        Returns:
            True if the room was new, False if it already existed
        """
        if name in self.rooms:
            return False
        self.rooms[name] = None
        logger.info("✓ Created room: %s", name)
        return True

    def list_rooms(self) -> List[str]:
        """
        Get all room names.

        Returns:
            Room names in creation order
        """
        return list(self.rooms)

    def add_member(self, room: str, member: str) -> None:
        """Add a member to a room, registering the room if it is unknown."""
        self.add_room(room)
        self.members.setdefault(room, {})[member] = None

    def remove_member(self, room: str, member: str) -> bool:
        """
        Remove a member from a room.

        Returns:
            True if the member was present

        Note:
            The membership set is deleted when it empties; the room name
            itself stays in the directory.
        """
        current = self.members.get(room)
        if current is None or member not in current:
            return False
        del current[member]
        if not current:
            del self.members[room]
        return True

    def list_members(self, room: str) -> List[str]:
        return list(self.members.get(room, {}))

    def active_rooms(self) -> List[str]:
        """Rooms that currently have at least one member."""
        return list(self.members)
