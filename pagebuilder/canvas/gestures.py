"""
Gesture Controller
==================

Turns pointer event streams into geometry updates for drag and resize.

One gesture is active at a time:

    IDLE -> DRAGGING -> IDLE
    IDLE -> RESIZING -> IDLE

Pointer moves only update a preview held here. The preview is written to
the Canvas Session when the gesture ends, whether by pointer-up, by
cancellation, or by another gesture starting (commit on any termination).
Zoom scales how pointer deltas are read and is never stored.
"""

import logging
from enum import Enum
from typing import Dict, Optional
from pydantic import BaseModel

from .session import CanvasSession
from ..models.geometry_models import Breakpoint, Geometry
from ..models.layout_models import Element
from ..layout.geometry import clamp_drag_position, clamp_resize_width, clamp_resize_height

logger = logging.getLogger(__name__)


class GestureState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    RESIZING = "resizing"


class PointerTarget(str, Enum):
    """Part of an element the pointer went down on."""
    BODY = "body"
    HANDLE = "handle"


class ActiveGesture(BaseModel):
    """Transient state of the gesture in progress."""
    state: GestureState
    element_id: str
    breakpoint: Breakpoint
    start_x: float
    start_y: float
    original: Geometry
    canvas_height: float
    preview: Optional[Geometry] = None


class GestureController:
    """
    Finite state machine for drag and resize gestures on one Canvas Session.

    Usage:
        controller = GestureController(session)
        controller.pointer_down("sec-1", 100, 100, PointerTarget.BODY)
        controller.pointer_move(160, 130)
        controller.pointer_up()   # commits the preview
    """

    def __init__(self, session: CanvasSession):
        self.session = session
        self._gesture: Optional[ActiveGesture] = None
        self._tracking = False

    @property
    def state(self) -> GestureState:
        return self._gesture.state if self._gesture else GestureState.IDLE

    @property
    def is_tracking(self) -> bool:
        """True while pointer move/up events are being listened to."""
        return self._tracking

    @property
    def preview(self) -> Optional[Geometry]:
        return self._gesture.preview if self._gesture else None

    @property
    def active_element_id(self) -> Optional[str]:
        return self._gesture.element_id if self._gesture else None

    def preview_overrides(self, breakpoint: Breakpoint) -> Dict[str, Geometry]:
        """
        Live geometry to paint in place of the stored one, keyed by element id.

        Empty unless the canvas is painted at the breakpoint the gesture started on.
        """
        gesture = self._gesture
        if gesture and gesture.preview is not None and gesture.breakpoint == Breakpoint(breakpoint):
            return {gesture.element_id: gesture.preview}
        return {}

    def pointer_down(
        self,
        element_id: str,
        pointer_x: float,
        pointer_y: float,
        target: PointerTarget = PointerTarget.BODY
    ) -> GestureState:
        """
        Start a drag (element body) or resize (handle of the selected element).

        Any gesture already in progress is ended first. Pointer-down on an
        unknown element, or on the handle of an unselected element, leaves
        the controller idle.
        """
        if self._gesture is not None:
            logger.info(f"[GESTURE] New gesture started, ending {self._gesture.state.value} on {self._gesture.element_id}")
            self._finish()

        element = self.session.get_element(element_id)
        if element is None:
            return GestureState.IDLE

        target = PointerTarget(target)
        if target == PointerTarget.HANDLE:
            if self.session.selected_id != element_id:
                return GestureState.IDLE
            state = GestureState.RESIZING
        else:
            self.session.select_element(element_id)
            state = GestureState.DRAGGING

        breakpoint = self.session.active_breakpoint
        self._gesture = ActiveGesture(
            state=state,
            element_id=element_id,
            breakpoint=breakpoint,
            start_x=pointer_x,
            start_y=pointer_y,
            original=element.resolve_geometry(breakpoint),
            canvas_height=self.session.canvas_height(breakpoint),
        )
        self._tracking = True
        logger.debug(f"[GESTURE] {state.value} {element_id} on {breakpoint.value}")
        return state

    def pointer_move(self, pointer_x: float, pointer_y: float) -> Optional[Geometry]:
        """Update the live preview. Returns None when no gesture is active."""
        gesture = self._gesture
        if gesture is None:
            return None

        zoom = self.session.zoom
        dx = (pointer_x - gesture.start_x) / zoom
        dy = (pointer_y - gesture.start_y) / zoom
        original = gesture.original

        if gesture.state == GestureState.DRAGGING:
            x, y = clamp_drag_position(
                original.x + dx,
                original.y + dy,
                original.w,
                original.h,
                gesture.breakpoint,
                gesture.canvas_height,
            )
            gesture.preview = original.model_copy(update={"x": x, "y": y})
        else:
            w = clamp_resize_width(original.w + dx, original.x, gesture.breakpoint)
            h = clamp_resize_height(original.h + dy)
            gesture.preview = original.model_copy(update={"w": w, "h": h})

        return gesture.preview

    def pointer_up(self) -> Optional[Element]:
        """End the gesture and commit its preview."""
        return self._finish()

    def cancel(self) -> Optional[Element]:
        """
        End an interrupted gesture (pointer lost without an up event).

        The last preview is committed, same as pointer-up.
        """
        if self._gesture is not None:
            logger.info(f"[GESTURE] Cancelled {self._gesture.state.value} on {self._gesture.element_id}")
        return self._finish()

    def _finish(self) -> Optional[Element]:
        gesture = self._gesture
        committed = None
        try:
            if gesture is not None and gesture.preview is not None:
                committed = self.session.commit_geometry(gesture.element_id, gesture.breakpoint, gesture.preview)
        finally:
            self._gesture = None
            self._tracking = False
        return committed
