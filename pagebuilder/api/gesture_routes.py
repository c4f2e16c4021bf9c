"""
Gesture Routes
==============

Pointer event bindings for the editor's Gesture Controller. Pointer
coordinates are screen-space; the controller applies the session zoom.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from ..canvas.gestures import PointerTarget
from .canvas_routes import get_editor_session

router = APIRouter(prefix="/api/gesture", tags=["gestures"])


class PointerDownRequest(BaseModel):
    element_id: str
    x: float
    y: float
    target: PointerTarget = PointerTarget.BODY


class PointerMoveRequest(BaseModel):
    x: float
    y: float


def _state(session, element=None, preview=None):
    return {
        "state": session.gestures.state.value,
        "selected_id": session.canvas.selected_id,
        "preview": preview.model_dump() if preview is not None else None,
        "element": element.model_dump(mode="json") if element is not None else None,
    }


@router.post("/{session_id}/down")
async def pointer_down(session_id: str, request: PointerDownRequest):
    session = get_editor_session(session_id)
    # An unfinished gesture is committed when a new one starts
    session.gestures.pointer_down(request.element_id, request.x, request.y, request.target)
    return _state(session)


@router.post("/{session_id}/move")
async def pointer_move(session_id: str, request: PointerMoveRequest):
    session = get_editor_session(session_id)
    preview = session.gestures.pointer_move(request.x, request.y)
    return _state(session, preview=preview)


@router.post("/{session_id}/up")
async def pointer_up(session_id: str):
    session = get_editor_session(session_id)
    element = session.gestures.pointer_up()
    if element is not None:
        session.touch()
    return _state(session, element=element)


@router.post("/{session_id}/cancel")
async def cancel(session_id: str):
    """Pointer tracking was lost; the last preview is still committed."""
    session = get_editor_session(session_id)
    element = session.gestures.cancel()
    if element is not None:
        session.touch()
    return _state(session, element=element)
