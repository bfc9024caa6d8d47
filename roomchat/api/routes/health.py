# roomchat/api/routes/health.py

from fastapi import APIRouter, Depends

from roomchat.core.state import AppState, get_state

router = APIRouter()

@router.get("/health")
async def health(app_state: AppState = Depends(get_state)):
    """
    Health check endpoint.

    Returns current system status, connection counts, and room counts.

    Returns:
        dict: Status, connection count, logged-in user count, room count,
        active room count
    """
    return {
        "status": "healthy",
        "connections": len(app_state.connection_manager.outboxes),
        "sessions": len(app_state.chat.sessions),
        "rooms": len(app_state.room_manager.rooms),
        "active_rooms_with_members": len(app_state.room_manager.active_rooms()),
    }
