# roomchat/services/session_registry.py

from __future__ import annotations

import logging
from typing import Dict, Optional

from roomchat.models.models import UserSession

logger = logging.getLogger(__name__)


class SessionRegistry:
    """
    Maps live connections to logged-in users.

    A connection only gets a session once it logs in; until then it can list
    rooms and nothing else. Display names are unique case-insensitively
    across all sessions.
    """

    def __init__(self) -> None:
        self.sessions: Dict[str, UserSession] = {}

    def __len__(self) -> int:
        return len(self.sessions)

    def get(self, connection_id: str) -> Optional[UserSession]:
        return self.sessions.get(connection_id)

    def is_name_taken(self, name: str) -> bool:
        folded = name.casefold()
        return any(session.name.casefold() == folded for session in self.sessions.values())

    def create(self, connection_id: str, name: str) -> UserSession:
        session = UserSession(connection_id=connection_id, name=name)
        self.sessions[connection_id] = session
        logger.info("→ %s logged in on %s. Users: %d", name, connection_id, len(self.sessions))
        return session

    def remove(self, connection_id: str) -> Optional[UserSession]:
        session = self.sessions.pop(connection_id, None)
        if session is not None:
            logger.info("← %s logged out. Users: %d", session.name, len(self.sessions))
        return session
