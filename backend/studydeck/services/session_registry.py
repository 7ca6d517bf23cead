from __future__ import annotations

import logging
import uuid

from studydeck.errors import SessionNotFoundError
from studydeck.services.review_session import ReviewSession

logger = logging.getLogger(__name__)

# In-memory only; sessions are lost on restart, cards are not.
_sessions: dict[str, ReviewSession] = {}


def register_session(session: ReviewSession) -> str:
    """Store a session under a new ID and return the ID."""
    session_id = str(uuid.uuid4())
    _sessions[session_id] = session
    logger.info("Opened review session %s for material %s", session_id, session.material_id)
    return session_id


def get_session(session_id: str) -> ReviewSession:
    session = _sessions.get(session_id)
    if session is None:
        raise SessionNotFoundError(session_id)
    return session


def discard_session(session_id: str) -> None:
    if _sessions.pop(session_id, None) is None:
        raise SessionNotFoundError(session_id)
    logger.info("Closed review session %s", session_id)


def discard_material_sessions(material_id: str) -> int:
    """Drop every session reviewing a material, e.g. after it is deleted."""
    stale = [sid for sid, s in _sessions.items() if s.material_id == material_id]
    for sid in stale:
        del _sessions[sid]
    return len(stale)


def clear_sessions() -> None:
    """Drop all sessions (for testing)."""
    _sessions.clear()
