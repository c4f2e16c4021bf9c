"""
Canvas Routes
==============

API routes for editor sessions: open, inspect, view state, render, save.
"""

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import HTMLResponse
from typing import Optional, Dict, Any, List
from pydantic import BaseModel

from ..canvas.state_manager import StateManager, EditorSession
from ..models.geometry_models import Breakpoint
from ..render.surface import RenderMode, render

router = APIRouter(prefix="/api/canvas", tags=["canvas"])

# Injected by server
state_manager: Optional[StateManager] = None
document_store = None


class OpenSessionRequest(BaseModel):
    """Request to open a page in the editor."""
    page_id: str


class CanvasStateResponse(BaseModel):
    """Response for canvas state."""
    session: Dict[str, Any]
    layers: List[Dict[str, Any]]
    document: Dict[str, Any]


class BreakpointRequest(BaseModel):
    breakpoint: Breakpoint


class ZoomRequest(BaseModel):
    zoom: Optional[float] = None
    step: Optional[str] = None      # "in" | "out"


def get_editor_session(session_id: str) -> EditorSession:
    if not state_manager:
        raise HTTPException(status_code=500, detail="State manager not initialized")
    session = state_manager.get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


@router.post("/session")
async def open_session(request: OpenSessionRequest):
    """Load a page document into a new editor session."""
    if not state_manager or document_store is None:
        raise HTTPException(status_code=500, detail="State manager not initialized")

    page = await document_store.get_page(request.page_id)
    if page is None:
        raise HTTPException(status_code=404, detail="Page not found")

    session = state_manager.create_session(request.page_id, page.page_config, title=page.title)
    return session.summary()


@router.get("/{session_id}")
async def get_state(session_id: str) -> CanvasStateResponse:
    """Get session state, layers and the current document."""
    session = get_editor_session(session_id)
    return CanvasStateResponse(
        session=session.summary(),
        layers=session.canvas.layers(),
        document=session.canvas.serialize()
    )


@router.delete("/{session_id}")
async def close_session(session_id: str):
    """Close an editor session without saving."""
    get_editor_session(session_id)
    state_manager.close_session(session_id)
    return {"message": "Session closed", "session_id": session_id}


@router.put("/{session_id}/breakpoint")
async def set_breakpoint(session_id: str, request: BreakpointRequest):
    session = get_editor_session(session_id)
    session.canvas.set_active_breakpoint(request.breakpoint)
    return {"active_breakpoint": session.canvas.active_breakpoint.value}


@router.put("/{session_id}/zoom")
async def set_zoom(session_id: str, request: ZoomRequest):
    """Set zoom directly, or step it in/out."""
    session = get_editor_session(session_id)
    if request.step == "in":
        zoom = session.canvas.zoom_in()
    elif request.step == "out":
        zoom = session.canvas.zoom_out()
    elif request.zoom is not None:
        zoom = session.canvas.set_zoom(request.zoom)
    else:
        raise HTTPException(status_code=422, detail="Provide zoom or step")
    return {"zoom": zoom}


@router.get("/{session_id}/layers")
async def get_layers(session_id: str):
    session = get_editor_session(session_id)
    return {"layers": session.canvas.layers()}


@router.get("/{session_id}/render")
async def render_canvas(session_id: str, format: str = Query("html", pattern="^(html|json)$")):
    """Render the editing surface at the active breakpoint, including any live gesture preview."""
    session = get_editor_session(session_id)
    canvas = session.canvas
    rendered = render(
        canvas.elements,
        canvas.active_breakpoint,
        RenderMode.EDITABLE,
        selected_id=canvas.selected_id,
        overrides=session.gestures.preview_overrides(canvas.active_breakpoint),
        zoom=canvas.zoom
    )
    if format == "json":
        return rendered.model_dump(mode="json")
    return HTMLResponse(rendered.html)


@router.post("/{session_id}/save")
async def save_session(session_id: str):
    """Persist the session's elements. Reports a single pass/fail."""
    session = get_editor_session(session_id)
    if document_store is None:
        raise HTTPException(status_code=500, detail="Document store not initialized")
    saved = await state_manager.save_session(session_id, document_store)
    return {"success": saved, "page_id": session.page_id}
