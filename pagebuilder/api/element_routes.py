"""
Element Routes
===============

API routes for element management inside an editor session.
"""

from fastapi import APIRouter, HTTPException
from typing import Optional, Dict, Any
from pydantic import BaseModel

from ..models.geometry_models import Breakpoint, Geometry
from ..models.layout_models import ElementType
from .canvas_routes import get_editor_session

router = APIRouter(prefix="/api/element", tags=["elements"])


class AddElementRequest(BaseModel):
    type: ElementType


class SelectRequest(BaseModel):
    element_id: Optional[str] = None


class UpdateElementRequest(BaseModel):
    """Whole-element edits: content, style keys, config keys."""
    content: Optional[str] = None
    style: Optional[Dict[str, Any]] = None
    config: Optional[Dict[str, Any]] = None


class GeometryRequest(BaseModel):
    """Geometry for one breakpoint; omitted fields keep their current value."""
    breakpoint: Optional[Breakpoint] = None
    x: Optional[float] = None
    y: Optional[float] = None
    w: Optional[float] = None
    h: Optional[float] = None


class LayoutFieldRequest(BaseModel):
    """Single x/y/w/h value as typed in the properties panel."""
    key: str
    value: Any


def _element_or_404(element):
    if element is None:
        raise HTTPException(status_code=404, detail="Element not found")
    return element.model_dump(mode="json")


@router.post("/{session_id}")
async def add_element(session_id: str, request: AddElementRequest):
    """Add element on top of the canvas and select it."""
    session = get_editor_session(session_id)
    element = session.canvas.add_element(request.type)
    session.touch()
    return {"element": element.model_dump(mode="json"), "selected_id": session.canvas.selected_id}


@router.put("/{session_id}/select")
async def select_element(session_id: str, request: SelectRequest):
    """Select an element; unknown ids clear the selection."""
    session = get_editor_session(session_id)
    return {"selected_id": session.canvas.select_element(request.element_id)}


@router.patch("/{session_id}/{element_id}")
async def update_element(session_id: str, element_id: str, request: UpdateElementRequest):
    """Update content, style or config of an element."""
    session = get_editor_session(session_id)
    canvas = session.canvas
    element = canvas.get_element(element_id)
    if element is None:
        raise HTTPException(status_code=404, detail="Element not found")

    if request.content is not None:
        element = canvas.update_content(element_id, request.content)
    for key, value in (request.style or {}).items():
        element = canvas.update_style(element_id, key, value)
    for key, value in (request.config or {}).items():
        element = canvas.update_config(element_id, key, value)

    session.touch()
    return {"element": element.model_dump(mode="json")}


@router.put("/{session_id}/{element_id}/geometry")
async def commit_geometry(session_id: str, element_id: str, request: GeometryRequest):
    """Replace one breakpoint's geometry (active breakpoint by default), clamped into range."""
    session = get_editor_session(session_id)
    canvas = session.canvas
    element = canvas.get_element(element_id)
    if element is None:
        raise HTTPException(status_code=404, detail="Element not found")

    breakpoint = request.breakpoint or canvas.active_breakpoint
    current = element.resolve_geometry(breakpoint)
    partial = request.model_dump(include={"x", "y", "w", "h"}, exclude_none=True)
    updated = canvas.commit_geometry(element_id, breakpoint, Geometry(**{**current.model_dump(), **partial}))
    session.touch()
    return {"element": _element_or_404(updated), "breakpoint": breakpoint.value}


@router.put("/{session_id}/{element_id}/layout")
async def update_layout_field(session_id: str, element_id: str, request: LayoutFieldRequest):
    """Edit x, y, w or h on the active breakpoint."""
    session = get_editor_session(session_id)
    if request.key not in ("x", "y", "w", "h"):
        raise HTTPException(status_code=422, detail="key must be one of x, y, w, h")
    updated = session.canvas.update_geometry_field(element_id, request.key, request.value)
    session.touch()
    return {"element": _element_or_404(updated)}


@router.delete("/{session_id}/{element_id}")
async def delete_element(session_id: str, element_id: str):
    """Remove element from canvas. Unknown ids are a no-op."""
    session = get_editor_session(session_id)
    deleted = session.canvas.delete_element(element_id)
    if deleted:
        session.touch()
    return {"deleted": deleted, "element_id": element_id, "selected_id": session.canvas.selected_id}
