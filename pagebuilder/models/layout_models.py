"""
Layout Models for Page Builder
==============================

Element types, per-type defaults, and the placed Element itself.
"""

import uuid
from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field

from .geometry_models import Breakpoint, Geometry
from ..layout.geometry import derive_geometries, derive_layout, normalize_geometry


class ElementType(str, Enum):
    """
    Element types that can be placed on the canvas (7 types).

    - HEADER / TEXT / BUTTON: text-bearing elements
    - IMAGE / VIDEO: content is a URL
    - SHAPE: flat-colored box, no content
    - CHATBOT: placeholder in the editor, live prediction widget on the public page
    """
    HEADER = "header"
    TEXT = "text"
    BUTTON = "button"
    IMAGE = "image"
    SHAPE = "shape"
    VIDEO = "video"
    CHATBOT = "chatbot"


BASE_STYLE: Dict[str, Any] = {
    "padding": "1rem",
    "margin": "0px",
    "backgroundColor": "transparent",
}

DEFAULT_GEOMETRY = Geometry(x=50, y=100, w=300, h=150)

# Per-type defaults applied at creation time.
# "requires_content" marks types whose persisted form must carry content.
ELEMENT_DEFAULTS: Dict[ElementType, Dict[str, Any]] = {
    ElementType.HEADER: {
        "content": "New Headline",
        "style": {"fontSize": "2rem", "fontWeight": "bold", "textAlign": "center", "color": "#111827"},
        "geometry": Geometry(x=50, y=50, w=600, h=100),
        "requires_content": True,
    },
    ElementType.TEXT: {
        "content": "Add text...",
        "style": {},
        "geometry": DEFAULT_GEOMETRY,
        "requires_content": True,
    },
    ElementType.BUTTON: {
        "content": "Button",
        "style": {
            "backgroundColor": "#3b82f6", "color": "white", "borderRadius": "6px", "border": "none",
            "display": "flex", "alignItems": "center", "justifyContent": "center"
        },
        "geometry": Geometry(x=50, y=50, w=120, h=40),
        "requires_content": True,
    },
    ElementType.IMAGE: {
        "content": "https://via.placeholder.com/400x300",
        "style": {"objectFit": "cover", "borderRadius": "8px"},
        "geometry": Geometry(x=50, y=50, w=400, h=300),
        "requires_content": True,
    },
    ElementType.SHAPE: {
        "content": "",
        "style": {"backgroundColor": "#e5e7eb"},
        "geometry": Geometry(x=50, y=50, w=200, h=200),
        "requires_content": False,
    },
    ElementType.VIDEO: {
        "content": "",
        "style": {},
        "geometry": DEFAULT_GEOMETRY,
        "requires_content": True,
    },
    ElementType.CHATBOT: {
        "content": "",
        "style": {"border": "1px solid #e5e7eb", "borderRadius": "12px", "background": "white"},
        "config": {"title": "AI Assistant"},
        "geometry": Geometry(x=50, y=50, w=400, h=500),
        "requires_content": False,
    },
}


def new_element_id() -> str:
    return f"sec-{uuid.uuid4().hex[:12]}"


class Element(BaseModel):
    """
    An element placed on the canvas.

    Geometry is stored per breakpoint. Content, style and config apply to the
    element as a whole. Update methods return a new Element; the geometry map
    is always replaced as a unit, never edited in place.
    """
    id: str = Field(default_factory=new_element_id)
    type: ElementType
    content: str = ""
    style: Dict[str, Any] = Field(default_factory=dict)
    config: Dict[str, Any] = Field(default_factory=dict)
    geometries: Dict[Breakpoint, Geometry] = Field(default_factory=dict)

    @classmethod
    def create(
        cls,
        element_type: ElementType,
        desktop_geometry: Optional[Geometry] = None,
        element_id: Optional[str] = None
    ) -> "Element":
        """
        Build a new element with type defaults and all breakpoint geometries.

        Args:
            element_type: Type of element
            desktop_geometry: Initial desktop geometry (type default if omitted)
            element_id: Explicit id (generated if omitted)

        Returns:
            Element with desktop, tablet and mobile geometries populated
        """
        element_type = ElementType(element_type)
        defaults = ELEMENT_DEFAULTS[element_type]
        desktop = desktop_geometry or defaults["geometry"]
        return cls(
            id=element_id or new_element_id(),
            type=element_type,
            content=defaults["content"],
            style={**BASE_STYLE, **defaults["style"]},
            config=dict(defaults.get("config", {})),
            geometries=derive_geometries(normalize_geometry(desktop, Breakpoint.DESKTOP)),
        )

    def geometry_for(self, breakpoint: Breakpoint) -> Optional[Geometry]:
        return self.geometries.get(breakpoint)

    def resolve_geometry(self, breakpoint: Breakpoint) -> Geometry:
        """
        Geometry to paint at a breakpoint.

        Falls back to deriving from desktop when the entry is missing (or,
        without desktop either, from any stored entry or a default box).
        """
        geometry = self.geometries.get(breakpoint)
        if geometry is not None:
            return geometry
        base = self.geometries.get(Breakpoint.DESKTOP)
        if base is None:
            base = next(iter(self.geometries.values()), Geometry())
        return derive_layout(normalize_geometry(base, Breakpoint.DESKTOP), breakpoint)

    def update_content(self, content: str) -> "Element":
        return self.model_copy(update={"content": content})

    def update_style(self, key: str, value: Any) -> "Element":
        return self.model_copy(update={"style": {**self.style, key: value}})

    def update_config(self, key: str, value: Any) -> "Element":
        return self.model_copy(update={"config": {**self.config, key: value}})

    def update_geometry(self, breakpoint: Breakpoint, **partial: float) -> "Element":
        """Merge x/y/w/h overrides into one breakpoint's geometry."""
        current = self.geometries.get(breakpoint) or Geometry()
        updated = current.model_copy(update={k: float(v) for k, v in partial.items() if k in ("x", "y", "w", "h")})
        return self.model_copy(update={"geometries": {**self.geometries, breakpoint: updated}})

    def has_all_geometries(self) -> bool:
        return all(bp in self.geometries for bp in Breakpoint)
