# roomchat/models/models.py
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, field_validator

from roomchat.core.validation import sanitize_input


# ============================================================================
# INBOUND REQUESTS
# ============================================================================

class ClientFrame(BaseModel):
    """Envelope of every frame a client sends over /ws."""
    action: Optional[str] = None
    request_id: Any = None
    data: Dict[str, Any] = {}

    @field_validator("data", mode="before")
    @classmethod
    def _coerce_data(cls, value: Any) -> Dict[str, Any]:
        return value if isinstance(value, dict) else {}


class LoginRequest(BaseModel):
    name: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def _sanitize(cls, value: Any) -> str:
        return sanitize_input(value)


class RoomRequest(BaseModel):
    room: str = ""

    @field_validator("room", mode="before")
    @classmethod
    def _sanitize(cls, value: Any) -> str:
        return sanitize_input(value)


class SendMessageRequest(BaseModel):
    text: str = ""

    @field_validator("text", mode="before")
    @classmethod
    def _sanitize(cls, value: Any) -> str:
        return sanitize_input(value)


# ============================================================================
# SERVER-SIDE STATE
# ============================================================================

class UserSession(BaseModel):
    connection_id: str
    name: str
    room: Optional[str] = None


# ============================================================================
# RESPONSES
# ============================================================================

class LoginResponse(BaseModel):
    success: bool = True
    name: str
    rooms: List[str]


class CreateRoomResponse(BaseModel):
    success: bool = True
    room: str
    rooms: List[str]


class JoinRoomResponse(BaseModel):
    success: bool = True
    room: str
    members: List[str]
    rooms: List[str]


class SendMessageResponse(BaseModel):
    success: bool = True


class RoomsResponse(BaseModel):
    rooms: List[str]


class RoomInfo(BaseModel):
    room: str
    members: List[str]


# ============================================================================
# BROADCAST EVENTS
# ============================================================================

class ChatMessage(BaseModel):
    sender: str
    text: str
    timestamp: str


class MemberEvent(BaseModel):
    name: str
