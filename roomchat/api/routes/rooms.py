# roomchat/api/routes/rooms.py

from fastapi import APIRouter, Depends, HTTPException

from roomchat.core.state import AppState, get_state
from roomchat.models.models import RoomInfo, RoomsResponse

router = APIRouter()

# ============================================================================
# ROOM ENDPOINTS
# ============================================================================

@router.get("/rooms", response_model=RoomsResponse)
async def list_rooms(app_state: AppState = Depends(get_state)):
    """
    List all known rooms, including ones nobody is in right now.

    Rooms are created over the WebSocket (createRoom / joinRoom) because both
    require a logged-in session.
    """
    return app_state.chat.list_rooms()


@router.get("/rooms/{room_name}", response_model=RoomInfo)
async def get_room(room_name: str, app_state: AppState = Depends(get_state)):
    """
    Get the current members of a room.

    Raises:
        HTTPException: 404 if room not found
    """
    info = app_state.chat.room_info(room_name)
    if info is None:
        raise HTTPException(status_code=404, detail="Room not found")
    return info
