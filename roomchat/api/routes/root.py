# roomchat/api/routes/root.py

from fastapi import APIRouter

from roomchat import __version__

router = APIRouter()


@router.get("/api")
async def root():
    """
    API information.

    Returns basic info about the service and where its endpoints live.
    Served under /api so the client assets can own "/".
    """
    return {
        "message": "roomchat - in-memory chat rooms",
        "version": __version__,
        "transport": "websocket",
        "actions": ["login", "createRoom", "joinRoom", "sendMessage", "listRooms"],
        "events": ["message", "memberJoined", "memberLeft", "roomsUpdated"],
        "endpoints": {
            "websocket": "/ws",
            "rooms": "/rooms",
            "health": "/health",
            "metrics": "/metrics",
        },
    }
