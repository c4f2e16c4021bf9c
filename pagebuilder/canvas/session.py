"""
Canvas Session
==============

Editing state for one open page: the ordered element list, the active
breakpoint, the zoom factor and the current selection.

Paint order is list order; the last element is topmost. Selection is a
plain id, resolved on every lookup. Only elements are serialized.
"""

import logging
from typing import Any, Dict, List, Optional

from ..models.geometry_models import Breakpoint, Geometry, MIN_ZOOM, MAX_ZOOM, ZOOM_STEP
from ..models.layout_models import Element, ElementType
from ..models.document_models import PageDocument, parse_document
from ..layout.geometry import clamp, normalize_geometry, canvas_height

logger = logging.getLogger(__name__)

GEOMETRY_FIELDS = ("x", "y", "w", "h")

# Style keys where a bare number means pixels
PX_STYLE_KEYS = {"fontSize", "padding", "margin", "borderRadius"}


def normalize_style_value(key: str, value: Any) -> Any:
    """Append "px" to bare digit strings for pixel-valued style keys."""
    if key in PX_STYLE_KEYS and isinstance(value, str) and value.isdigit():
        return f"{value}px"
    return value


class CanvasSession:
    """Single-writer editing state for one page."""

    def __init__(
        self,
        elements: Optional[List[Element]] = None,
        active_breakpoint: Breakpoint = Breakpoint.DESKTOP,
        zoom: float = 1.0
    ):
        self.elements: List[Element] = list(elements or [])
        self.active_breakpoint = Breakpoint(active_breakpoint)
        self.zoom = clamp(zoom, MIN_ZOOM, MAX_ZOOM)
        self.selected_id: Optional[str] = None

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def _index_of(self, element_id: Optional[str]) -> int:
        for index, element in enumerate(self.elements):
            if element.id == element_id:
                return index
        return -1

    def get_element(self, element_id: Optional[str]) -> Optional[Element]:
        index = self._index_of(element_id)
        return self.elements[index] if index >= 0 else None

    @property
    def selected_element(self) -> Optional[Element]:
        return self.get_element(self.selected_id)

    def _replace(self, element: Element) -> Element:
        self.elements[self._index_of(element.id)] = element
        return element

    # ------------------------------------------------------------------
    # Element lifecycle
    # ------------------------------------------------------------------

    def add_element(self, element_type: ElementType) -> Element:
        """Create an element at its type's default geometry, put it on top and select it."""
        element = Element.create(ElementType(element_type))
        self.elements.append(element)
        self.selected_id = element.id
        logger.info(f"[CANVAS-SESSION] Added {element.type.value} element {element.id}")
        return element

    def select_element(self, element_id: Optional[str]) -> Optional[str]:
        """Select by id. An unknown id clears the selection."""
        self.selected_id = element_id if self._index_of(element_id) >= 0 else None
        return self.selected_id

    def delete_element(self, element_id: str) -> bool:
        """Remove an element. Unknown ids are a no-op."""
        index = self._index_of(element_id)
        if index < 0:
            return False
        del self.elements[index]
        if self.selected_id == element_id:
            self.selected_id = None
        logger.info(f"[CANVAS-SESSION] Deleted element {element_id}")
        return True

    # ------------------------------------------------------------------
    # View state
    # ------------------------------------------------------------------

    def set_active_breakpoint(self, breakpoint: Breakpoint) -> None:
        # Stored geometries are authoritative; switching never re-derives.
        self.active_breakpoint = Breakpoint(breakpoint)

    def set_zoom(self, zoom: float) -> float:
        self.zoom = round(clamp(zoom, MIN_ZOOM, MAX_ZOOM), 2)
        return self.zoom

    def zoom_in(self) -> float:
        return self.set_zoom(self.zoom + ZOOM_STEP)

    def zoom_out(self) -> float:
        return self.set_zoom(self.zoom - ZOOM_STEP)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def commit_geometry(
        self,
        element_id: str,
        breakpoint: Breakpoint,
        geometry: Geometry
    ) -> Optional[Element]:
        """
        Replace one breakpoint's geometry for an element.

        The geometry is clamped into range for that breakpoint, never
        rejected. Other breakpoints are left untouched.

        Returns:
            The updated element, or None if the id is unknown
        """
        element = self.get_element(element_id)
        if element is None:
            return None
        breakpoint = Breakpoint(breakpoint)
        valid = normalize_geometry(geometry, breakpoint)
        if valid != geometry:
            logger.debug(f"[CANVAS-SESSION] Clamped {breakpoint.value} geometry for {element_id}: {geometry} -> {valid}")
        return self._replace(element.update_geometry(breakpoint, **valid.model_dump()))

    def update_geometry_field(self, element_id: str, key: str, value: Any) -> Optional[Element]:
        """Edit one of x/y/w/h on the active breakpoint, as typed into a number field."""
        element = self.get_element(element_id)
        if element is None or key not in GEOMETRY_FIELDS:
            return None
        try:
            number = int(float(value))
        except (TypeError, ValueError, OverflowError):
            number = 0
        current = element.resolve_geometry(self.active_breakpoint)
        return self.commit_geometry(element_id, self.active_breakpoint, current.model_copy(update={key: float(number)}))

    def update_content(self, element_id: str, content: str) -> Optional[Element]:
        element = self.get_element(element_id)
        if element is None:
            return None
        return self._replace(element.update_content(content))

    def update_style(self, element_id: str, key: str, value: Any) -> Optional[Element]:
        element = self.get_element(element_id)
        if element is None:
            return None
        return self._replace(element.update_style(key, normalize_style_value(key, value)))

    def update_config(self, element_id: str, key: str, value: Any) -> Optional[Element]:
        element = self.get_element(element_id)
        if element is None:
            return None
        return self._replace(element.update_config(key, value))

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def layers(self) -> List[Dict[str, Any]]:
        """Elements in paint order, bottom first."""
        return [
            {"id": e.id, "type": e.type.value, "selected": e.id == self.selected_id}
            for e in self.elements
        ]

    def canvas_height(self, breakpoint: Optional[Breakpoint] = None) -> float:
        breakpoint = breakpoint or self.active_breakpoint
        return canvas_height(e.geometry_for(breakpoint) for e in self.elements)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def serialize(self) -> Dict[str, Any]:
        """Page document for the store. View state is not included."""
        return PageDocument(sections=self.elements).to_dict()

    @classmethod
    def deserialize(cls, document: Optional[Dict[str, Any]], title: Optional[str] = None) -> "CanvasSession":
        page = parse_document(document, title=title)
        logger.info(f"[CANVAS-SESSION] Loaded {len(page.sections)} elements ({page.dropped_count} dropped)")
        return cls(elements=page.sections)
