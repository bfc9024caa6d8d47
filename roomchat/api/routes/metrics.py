# roomchat/api/routes/metrics.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from roomchat.core.state import AppState, get_state

router = APIRouter()

@router.get("/metrics")
async def get_metrics(app_state: AppState = Depends(get_state)):
    """
    Usage metrics endpoint.

    Everything is derived from in-memory counters, so numbers reset with the
    process.

    Example Response:
        {
            "total_messages": 42,
            "uptime_hours": 1.5,
            "messages_per_second": 0.01,
            "concurrent_connections": 3,
            "logged_in_users": 2,
            "total_rooms": 4,
            "active_rooms_with_members": 1
        }
    """
    uptime_seconds = (datetime.now(timezone.utc) - app_state.app_start_time).total_seconds()

    if uptime_seconds > 0:
        messages_per_second = app_state.message_counter / uptime_seconds
    else:
        messages_per_second = 0

    return {
        # Statistics
        "total_messages": app_state.message_counter,
        "uptime_hours": round(uptime_seconds / 3600, 2) if uptime_seconds > 0 else 0,
        "messages_per_second": round(messages_per_second, 2),

        # Capacity
        "concurrent_connections": len(app_state.connection_manager.outboxes),
        "logged_in_users": len(app_state.chat.sessions),
        "total_rooms": len(app_state.room_manager.rooms),
        "active_rooms_with_members": len(app_state.room_manager.active_rooms()),
    }
