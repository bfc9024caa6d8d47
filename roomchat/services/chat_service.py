# roomchat/services/chat_service.py

from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Any, Optional

from roomchat.core.errors import (
    AlreadyLoggedIn,
    EmptyMessage,
    InvalidName,
    InvalidRoomName,
    NameTaken,
    NoRoom,
    NotLoggedIn,
    RoomExists,
)
from roomchat.core.validation import (
    is_valid_identifier,
    is_valid_join_room_name,
    sanitize_input,
)
from roomchat.models.models import (
    ChatMessage,
    CreateRoomResponse,
    JoinRoomResponse,
    LoginResponse,
    MemberEvent,
    RoomInfo,
    RoomsResponse,
    SendMessageResponse,
    UserSession,
)
from roomchat.services.connection_manager import Transport
from roomchat.services.room_manager import RoomManager
from roomchat.services.session_registry import SessionRegistry

logger = logging.getLogger(__name__)

# Outbound event names
MESSAGE_EVENT = "message"
MEMBER_JOINED_EVENT = "memberJoined"
MEMBER_LEFT_EVENT = "memberLeft"
ROOMS_UPDATED_EVENT = "roomsUpdated"


# ============================================================================
# CHAT COORDINATOR
# ============================================================================

class ChatCoordinator:
    """
    Owns the session registry and room directory and implements every chat
    request on top of a Transport.

    Each public method either applies its whole effect (state change plus
    broadcasts) or raises a ChatError before touching anything. Methods are
    synchronous: broadcasts only queue frames, so one request is always
    finished before the next one starts.

    Usage:
        coordinator = ChatCoordinator(ConnectionManager(), RoomManager())
        coordinator.login(connection_id, "alice")
        coordinator.join_room(connection_id, "general")
        coordinator.send_message(connection_id, "hi")
    """

    def __init__(
        self,
        transport: Transport,
        room_manager: RoomManager,
        sessions: Optional[SessionRegistry] = None,
    ) -> None:
        self.transport = transport
        self.room_manager = room_manager
        self.sessions = sessions if sessions is not None else SessionRegistry()

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def login(self, connection_id: str, name: Any) -> LoginResponse:
        """
        Create a session for a connection.

        Raises:
            InvalidName: name does not match ^[A-Za-z0-9_]{2,20}$
            AlreadyLoggedIn: the connection already has a session
            NameTaken: another session uses the name, ignoring case
        """
        name = sanitize_input(name)
        if not is_valid_identifier(name):
            raise InvalidName()
        if self.sessions.get(connection_id) is not None:
            raise AlreadyLoggedIn()
        if self.sessions.is_name_taken(name):
            raise NameTaken()

        self.sessions.create(connection_id, name)
        return LoginResponse(name=name, rooms=self.room_manager.list_rooms())

    def create_room(self, connection_id: str, room: Any) -> CreateRoomResponse:
        """
        Register a new, empty room.

        Created rooms must be identifiers (same pattern as usernames); see
        join_room for the looser rule applied when joining.

        Raises:
            NotLoggedIn, InvalidRoomName, RoomExists
        """
        self._require_session(connection_id)
        room = sanitize_input(room)
        if not is_valid_identifier(room):
            raise InvalidRoomName(
                "Room name must be 2-20 characters and contain only letters, numbers, and underscores"
            )
        if self.room_manager.has_room(room):
            raise RoomExists()

        self.room_manager.add_room(room)
        self._announce_rooms()
        return CreateRoomResponse(room=room, rooms=self.room_manager.list_rooms())

    def join_room(self, connection_id: str, room: Any) -> JoinRoomResponse:
        """
        Move the caller into a room, creating the room if it is unknown.

        Process:
            1. Leave the current room (memberLeft to whoever stays behind)
            2. Add the caller to the target room's membership
            3. Notify the other members with memberJoined

        Joining the room the caller is already in changes nothing and sends
        no notifications.

        Raises:
            NotLoggedIn: the connection has no session
            InvalidRoomName: the name is not 1-30 characters after trimming
        """
        session = self._require_session(connection_id)
        room = sanitize_input(room)
        if not is_valid_join_room_name(room):
            raise InvalidRoomName()

        if session.room != room:
            if session.room is not None:
                self._leave_current_room(session)

            created = self.room_manager.add_room(room)
            self.room_manager.add_member(room, session.name)
            self.transport.enter_room(connection_id, room)
            session.room = room
            logger.info(
                "→ %s joined '%s' (%d members)",
                session.name, room, len(self.room_manager.list_members(room)),
            )

            if created:
                self._announce_rooms()
            self.transport.broadcast_to_room(
                room,
                MEMBER_JOINED_EVENT,
                MemberEvent(name=session.name).model_dump(),
                exclude=connection_id,
            )

        return JoinRoomResponse(
            room=room,
            members=self.room_manager.list_members(room),
            rooms=self.room_manager.list_rooms(),
        )

    def send_message(self, connection_id: str, text: Any) -> SendMessageResponse:
        """
        Broadcast a chat message to everyone in the caller's room, the
        caller included. Text is trimmed and capped at 200 characters.

        Raises:
            NotLoggedIn, NoRoom, EmptyMessage
        """
        session = self._require_session(connection_id)
        if session.room is None:
            raise NoRoom()
        text = sanitize_input(text)
        if not text:
            raise EmptyMessage()

        message = ChatMessage(
            sender=session.name,
            text=text,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
        self.transport.broadcast_to_room(session.room, MESSAGE_EVENT, message.model_dump())
        return SendMessageResponse()

    def list_rooms(self) -> RoomsResponse:
        return RoomsResponse(rooms=self.room_manager.list_rooms())

    def room_info(self, room: str) -> Optional[RoomInfo]:
        if not self.room_manager.has_room(room):
            return None
        return RoomInfo(room=room, members=self.room_manager.list_members(room))

    def disconnect(self, connection_id: str) -> None:
        """
        Tear down whatever state a connection left behind. Safe to call for
        connections that never logged in, and safe to call twice.
        """
        session = self.sessions.get(connection_id)
        if session is None:
            return
        if session.room is not None:
            self._leave_current_room(session)
        self.sessions.remove(connection_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_session(self, connection_id: str) -> UserSession:
        session = self.sessions.get(connection_id)
        if session is None:
            raise NotLoggedIn()
        return session

    def _leave_current_room(self, session: UserSession) -> None:
        room = session.room
        self.room_manager.remove_member(room, session.name)
        self.transport.leave_room(session.connection_id, room)
        session.room = None
        logger.info("← %s left '%s'", session.name, room)
        self.transport.broadcast_to_room(
            room,
            MEMBER_LEFT_EVENT,
            MemberEvent(name=session.name).model_dump(),
            exclude=session.connection_id,
        )

    def _announce_rooms(self) -> None:
        self.transport.broadcast(ROOMS_UPDATED_EVENT, {"rooms": self.room_manager.list_rooms()})
