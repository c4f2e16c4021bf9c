"""
Document Models for Page Builder
================================

The persisted page document: {"sections": [Element, ...]}.

Loading is tolerant: legacy sections carrying a single flat "layout" are
upgraded to the per-breakpoint map, and structurally malformed sections are
dropped without failing the rest of the page.
"""

import logging
from typing import Any, Dict, List, Optional, Set, Tuple
from pydantic import BaseModel, Field, ValidationError

from .geometry_models import Breakpoint, Geometry
from .layout_models import Element, ElementType, ELEMENT_DEFAULTS, new_element_id
from ..layout.geometry import derive_layout, normalize_geometry

logger = logging.getLogger(__name__)

# Keys accepted for the per-breakpoint geometry map ("layouts" is the older name)
GEOMETRY_MAP_KEYS = ("geometries", "layouts")
LEGACY_GEOMETRY_KEY = "layout"


class MalformedSection(ValueError):
    """Raised internally when a stored section cannot become an Element."""


class PageDocument(BaseModel):
    """A page document as exchanged with the document store."""
    sections: List[Element] = Field(default_factory=list)
    dropped_count: int = Field(default=0, exclude=True)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the persisted JSON shape."""
        return {"sections": [element.model_dump(mode="json") for element in self.sections]}


def default_sections(title: Optional[str] = None) -> List[Element]:
    """Starter page for a document that has never been saved: a heading and a chat widget."""
    header = Element.create(ElementType.HEADER, Geometry(x=50, y=50, w=700, h=100), element_id="head-1")
    header = header.update_content(title or "Welcome")
    header = header.model_copy(update={"style": {"fontSize": "2.5rem", "textAlign": "center", "color": "#111827"}})
    chat = Element.create(ElementType.CHATBOT, Geometry(x=50, y=200, w=700, h=500), element_id="chat-1")
    return [header, chat]


def _coerce_geometry(value: Any) -> Optional[Geometry]:
    if not isinstance(value, dict):
        return None
    try:
        return Geometry.model_validate(value)
    except ValidationError:
        return None


def _parse_geometries(raw: Dict[str, Any], section_id: str) -> Dict[Breakpoint, Geometry]:
    """
    Resolve the full geometry map for a stored section.

    Stored entries are kept (clamped into range); any missing breakpoint is
    derived from the desktop geometry. Desktop itself falls back to the
    legacy flat "layout", then to a default box.
    """
    stored: Dict[Breakpoint, Geometry] = {}
    for key in GEOMETRY_MAP_KEYS:
        raw_map = raw.get(key)
        if isinstance(raw_map, dict):
            for name, value in raw_map.items():
                try:
                    breakpoint = Breakpoint(name)
                except ValueError:
                    continue
                geometry = _coerce_geometry(value)
                if geometry is None:
                    logger.warning(f"[DOCUMENT] Section {section_id}: ignoring invalid {name} geometry")
                    continue
                stored.setdefault(breakpoint, geometry)
            break

    desktop = stored.get(Breakpoint.DESKTOP) or _coerce_geometry(raw.get(LEGACY_GEOMETRY_KEY)) or Geometry()
    desktop = normalize_geometry(desktop, Breakpoint.DESKTOP)

    geometries = {Breakpoint.DESKTOP: desktop}
    upgraded = []
    for breakpoint in (Breakpoint.TABLET, Breakpoint.MOBILE):
        if breakpoint in stored:
            geometries[breakpoint] = normalize_geometry(stored[breakpoint], breakpoint)
        else:
            geometries[breakpoint] = derive_layout(desktop, breakpoint)
            upgraded.append(breakpoint.value)

    if upgraded:
        logger.info(f"[DOCUMENT] Section {section_id}: derived {', '.join(upgraded)} from desktop")
    return geometries


def parse_section(raw: Any, seen_ids: Set[str]) -> Element:
    """
    Build an Element from one stored section.

    Raises:
        MalformedSection: when the section cannot be rendered meaningfully
    """
    if not isinstance(raw, dict):
        raise MalformedSection("section is not an object")

    try:
        element_type = ElementType(raw.get("type"))
    except ValueError:
        raise MalformedSection(f"unknown or missing type {raw.get('type')!r}") from None

    content = raw.get("content")
    if content is None:
        if ELEMENT_DEFAULTS[element_type]["requires_content"]:
            raise MalformedSection(f"{element_type.value} section has no content")
        content = ""
    elif not isinstance(content, str):
        raise MalformedSection(f"content must be a string, got {type(content).__name__}")

    section_id = raw.get("id")
    if not isinstance(section_id, str) or not section_id:
        section_id = new_element_id()
    elif section_id in seen_ids:
        raise MalformedSection(f"duplicate id {section_id}")

    style = raw.get("style")
    config = raw.get("config")
    return Element(
        id=section_id,
        type=element_type,
        content=content,
        style=style if isinstance(style, dict) else {},
        config=config if isinstance(config, dict) else {},
        geometries=_parse_geometries(raw, section_id),
    )


def parse_sections(raw_sections: Any) -> Tuple[List[Element], int]:
    """
    Parse stored sections, dropping the malformed ones.

    Returns:
        (elements, dropped_count)
    """
    if not isinstance(raw_sections, list):
        logger.warning("[DOCUMENT] sections is not a list, loading an empty page")
        return [], 0

    elements: List[Element] = []
    seen_ids: Set[str] = set()
    dropped = 0
    for index, raw in enumerate(raw_sections):
        try:
            element = parse_section(raw, seen_ids)
        except MalformedSection as e:
            dropped += 1
            logger.warning(f"[DOCUMENT] Dropping section #{index}: {e}")
            continue
        seen_ids.add(element.id)
        elements.append(element)
    return elements, dropped


def parse_document(raw: Optional[Dict[str, Any]], title: Optional[str] = None) -> PageDocument:
    """
    Load a page document, upgrading legacy sections.

    A document without a "sections" key has never been built; it starts
    from the default sections.
    """
    if not isinstance(raw, dict) or "sections" not in raw:
        return PageDocument(sections=default_sections(title))

    elements, dropped = parse_sections(raw["sections"])
    if dropped:
        logger.warning(f"[DOCUMENT] Loaded {len(elements)} sections, dropped {dropped}")
    return PageDocument(sections=elements, dropped_count=dropped)
