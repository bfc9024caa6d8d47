# roomchat/core/errors.py

from __future__ import annotations

from typing import Any, Dict, Optional

# ============================================================================
# CHAT ERRORS
# ============================================================================


class ChatError(Exception):
    """
    Base class for every failure reported back to the requesting client.

    Each subclass carries a stable ``code`` (sent on the wire so clients can
    branch on it) and a default human-readable ``message``. None of these are
    fatal: the connection stays open and no state is mutated.
    """

    code: str = "ChatError"
    message: str = "Request failed"

    def __init__(self, message: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_response(self) -> Dict[str, Any]:
        return {"success": False, "code": self.code, "error": self.message}


class InvalidName(ChatError):
    code = "InvalidName"
    message = "Username must be 2-20 characters and contain only letters, numbers, and underscores"


class NameTaken(ChatError):
    code = "NameTaken"
    message = "Username is already taken"


class AlreadyLoggedIn(ChatError):
    code = "AlreadyLoggedIn"
    message = "This connection is already logged in"


class InvalidRoomName(ChatError):
    code = "InvalidRoomName"
    message = "Room name must be 1-30 characters"


class RoomExists(ChatError):
    code = "RoomExists"
    message = "Room already exists"


class NotLoggedIn(ChatError):
    code = "NotLoggedIn"
    message = "Please login first"


class NoRoom(ChatError):
    code = "NoRoom"
    message = "You must be in a room to send messages"


class EmptyMessage(ChatError):
    code = "EmptyMessage"
    message = "Message cannot be empty"
