"""
Editor State Manager
====================

Keeps the live editor sessions: one Canvas Session and its Gesture
Controller per open page, keyed by session id.
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from .session import CanvasSession
from .gestures import GestureController

logger = logging.getLogger(__name__)


class EditorSession:
    """An open page in the editor."""

    def __init__(self, session_id: str, page_id: str, canvas: CanvasSession, title: Optional[str] = None):
        self.session_id = session_id
        self.page_id = page_id
        self.title = title
        self.canvas = canvas
        self.gestures = GestureController(canvas)
        self.created_at = datetime.now()
        self.updated_at: Optional[datetime] = None
        self.saved_at: Optional[datetime] = None

    def touch(self) -> None:
        self.updated_at = datetime.now()

    def summary(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "page_id": self.page_id,
            "title": self.title,
            "active_breakpoint": self.canvas.active_breakpoint.value,
            "zoom": self.canvas.zoom,
            "selected_id": self.canvas.selected_id,
            "gesture_state": self.gestures.state.value,
            "element_count": len(self.canvas.elements),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "saved_at": self.saved_at.isoformat() if self.saved_at else None,
        }


class StateManager:
    """Manages editor sessions in memory."""

    def __init__(self):
        self._sessions: Dict[str, EditorSession] = {}
        logger.info("[STATE-MANAGER] Initialized")

    def create_session(
        self,
        page_id: str,
        document: Optional[Dict[str, Any]] = None,
        title: Optional[str] = None,
        session_id: Optional[str] = None
    ) -> EditorSession:
        """Open a page document for editing."""
        session_id = session_id or str(uuid.uuid4())
        canvas = CanvasSession.deserialize(document, title=title)
        session = EditorSession(session_id, page_id, canvas, title=title)
        self._sessions[session_id] = session
        logger.info(f"[STATE-MANAGER] Opened session {session_id} for page {page_id}")
        return session

    def get_session(self, session_id: str) -> Optional[EditorSession]:
        return self._sessions.get(session_id)

    def list_sessions(self) -> List[Dict[str, Any]]:
        return [s.summary() for s in self._sessions.values()]

    def close_session(self, session_id: str) -> bool:
        """Drop a session. A gesture still in progress is committed first."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.gestures.cancel()
        logger.info(f"[STATE-MANAGER] Closed session {session_id}")
        return True

    async def save_session(self, session_id: str, store) -> bool:
        """
        Persist a session's elements to a document store.

        The document is snapshotted before the store call, so closing the
        session while the save is in flight does not affect it.

        Returns:
            True if the store accepted the document
        """
        session = self.get_session(session_id)
        if session is None:
            return False

        document = session.canvas.serialize()
        page_id = session.page_id
        saved = await store.save(page_id, document)
        if saved:
            session.saved_at = datetime.now()
        else:
            logger.error(f"[STATE-MANAGER] Save failed for page {page_id} (session {session_id})")
        return saved
