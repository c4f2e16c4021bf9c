"""
Render Surface
==============

Paints an ordered element list at one breakpoint as absolutely positioned
HTML. Used by the editor (EDITABLE: selection border, type label, resize
handle, delete control) and by the public page (STATIC: no chrome).

Pixel geometry is resolved the same way in both modes; only decoration
differs.
"""

import html
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
from pydantic import BaseModel

from ..models.geometry_models import Breakpoint, Geometry, REFERENCE_WIDTHS
from ..models.layout_models import Element, ElementType
from ..layout.geometry import canvas_height

logger = logging.getLogger(__name__)

BLOCKED_URL_SCHEMES = ("javascript:", "vbscript:")


class RenderMode(str, Enum):
    EDITABLE = "editable"
    STATIC = "static"


class RenderedElement(BaseModel):
    """One painted element: where it went and what was drawn."""
    id: str
    type: ElementType
    geometry: Geometry
    z_index: int
    derived_fallback: bool = False
    html: str


class RenderedPage(BaseModel):
    """Result of painting a whole canvas."""
    breakpoint: Breakpoint
    mode: RenderMode
    width: int
    height: float
    elements: List[RenderedElement]
    html: str


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------

def _px(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text}px"


def _kebab(key: str) -> str:
    return "".join(f"-{c.lower()}" if c.isupper() else c for c in key)


def style_to_css(style: Dict[str, Any]) -> str:
    """Convert a camelCase style map to an inline CSS declaration list."""
    parts = []
    for key, value in style.items():
        if value is None or value == "":
            continue
        parts.append(f"{_kebab(str(key))}: {value}")
    return "; ".join(parts)


def _attr(value: Any) -> str:
    return html.escape(str(value), quote=True)


def _text(value: Any) -> str:
    return html.escape(str(value), quote=False)


def _safe_url(url: str) -> str:
    if url.strip().lower().startswith(BLOCKED_URL_SCHEMES):
        return "#"
    return url


def _content_style(element: Element, **extra: str) -> str:
    """Element style filling its box, with per-type additions last."""
    style = dict(element.style)
    style.update({"width": "100%", "height": "100%", "boxSizing": "border-box"})
    style.update(extra)
    return _attr(style_to_css(style))


def _classes(element: Element) -> str:
    return f"canvas-element {element.type.value}"


# ----------------------------------------------------------------------
# Per-type renderers
# ----------------------------------------------------------------------

def render_header(element: Element, mode: RenderMode) -> str:
    style = _content_style(
        element,
        display="flex",
        alignItems="center",
        justifyContent=str(element.style.get("textAlign") or "center"),
        margin="0",
    )
    return f'<h2 class="{_classes(element)}" style="{style}">{_text(element.content)}</h2>'


def render_text(element: Element, mode: RenderMode) -> str:
    style = _content_style(element, whiteSpace="pre-wrap", margin="0")
    return f'<p class="{_classes(element)}" style="{style}">{_text(element.content)}</p>'


def render_button(element: Element, mode: RenderMode) -> str:
    style = _content_style(element, display="flex", alignItems="center", justifyContent="center")
    label = _text(element.content)
    if mode == RenderMode.STATIC:
        link = _attr(_safe_url(str(element.config.get("link") or "#")))
        label = (
            f'<a href="{link}" style="color: inherit; text-decoration: none; width: 100%; height: 100%; '
            f'display: flex; align-items: center; justify-content: center">{label}</a>'
        )
    return f'<button class="{_classes(element)}" style="{style}">{label}</button>'


def render_image(element: Element, mode: RenderMode) -> str:
    style = _content_style(element, objectFit=str(element.style.get("objectFit") or "cover"))
    draggable = ' draggable="false"' if mode == RenderMode.EDITABLE else ""
    src = _attr(_safe_url(element.content))
    return f'<img class="{_classes(element)}" src="{src}" alt="Content" style="{style}"{draggable} />'


def render_video(element: Element, mode: RenderMode) -> str:
    if mode == RenderMode.EDITABLE:
        # Clicks must reach the canvas, not the embedded player
        style = _content_style(element, pointerEvents="none", border="none")
    else:
        style = _content_style(element, border="none")
    src = _attr(_safe_url(element.content))
    return f'<iframe class="{_classes(element)}" src="{src}" title="Video" style="{style}" allowfullscreen></iframe>'


def render_shape(element: Element, mode: RenderMode) -> str:
    return f'<div class="{_classes(element)}" style="{_content_style(element)}">{_text(element.content)}</div>'


def render_chatbot(element: Element, mode: RenderMode) -> str:
    title = _text(element.config.get("title") or "AI Assistant")
    if mode == RenderMode.EDITABLE:
        style = _content_style(
            element,
            display="flex",
            alignItems="center",
            justifyContent="center",
            background="#f9fafb",
            color="#6b7280",
        )
        return (
            f'<div class="{_classes(element)}" style="{style}">'
            f'<div style="text-align: center"><h3>{title}</h3><p>(Interactive on public page)</p></div>'
            f'</div>'
        )
    # The prediction widget mounts itself into this container
    style = _content_style(element, padding="1rem")
    return (
        f'<div class="{_classes(element)}" style="{style}" data-widget="chatbot" '
        f'data-element-id="{_attr(element.id)}" data-title="{_attr(title)}"></div>'
    )


RENDERERS: Dict[ElementType, Callable[[Element, RenderMode], str]] = {
    ElementType.HEADER: render_header,
    ElementType.TEXT: render_text,
    ElementType.BUTTON: render_button,
    ElementType.IMAGE: render_image,
    ElementType.VIDEO: render_video,
    ElementType.SHAPE: render_shape,
    ElementType.CHATBOT: render_chatbot,
}

_unhandled = set(ElementType) - set(RENDERERS)
if _unhandled:
    raise RuntimeError(f"No renderer for element types: {sorted(t.value for t in _unhandled)}")


# ----------------------------------------------------------------------
# Surface
# ----------------------------------------------------------------------

def _editor_chrome(element: Element, selected: bool) -> str:
    chrome = f'<div class="section-label">{_text(element.type.value)}</div>'
    if selected:
        chrome += (
            '<div class="resize-handle rh-se" data-gesture-target="handle"></div>'
            f'<button class="control-btn" data-action="delete" data-element-id="{_attr(element.id)}" '
            'style="position: absolute; top: -10px; right: -10px; background: #ef4444; border-radius: 50%; '
            'padding: 4px; border: none; cursor: pointer; color: white; z-index: 50">&times;</button>'
        )
    return chrome


def render_element(
    element: Element,
    geometry: Geometry,
    mode: RenderMode,
    z_index: int,
    selected: bool = False
) -> str:
    """Wrap one element's content in its positioned box."""
    position = (
        f"position: absolute; left: {_px(geometry.x)}; top: {_px(geometry.y)}; "
        f"width: {_px(geometry.w)}; height: {_px(geometry.h)}; z-index: {z_index}"
    )
    content = RENDERERS[element.type](element, mode)
    if mode == RenderMode.EDITABLE:
        classes = "canvas-section selected" if selected else "canvas-section"
        return (
            f'<div class="{classes}" data-element-id="{_attr(element.id)}" '
            f'data-gesture-target="body" style="{position}">{_editor_chrome(element, selected)}{content}</div>'
        )
    return f'<div class="public-section" data-element-id="{_attr(element.id)}" style="{position}">{content}</div>'


def render(
    elements: List[Element],
    breakpoint: Breakpoint,
    mode: RenderMode = RenderMode.STATIC,
    selected_id: Optional[str] = None,
    overrides: Optional[Dict[str, Geometry]] = None,
    zoom: float = 1.0
) -> RenderedPage:
    """
    Paint elements at a breakpoint.

    Args:
        elements: Elements in paint order (last is topmost)
        breakpoint: Which stored geometry to use
        mode: EDITABLE adds selection chrome, STATIC renders none
        selected_id: Element that gets the selection chrome (EDITABLE only)
        overrides: Live gesture previews keyed by element id (EDITABLE only)
        zoom: Editor zoom, applied as a transform on the frame (EDITABLE only)

    Returns:
        RenderedPage with per-element geometry and the canvas HTML
    """
    breakpoint = Breakpoint(breakpoint)
    mode = RenderMode(mode)
    editable = mode == RenderMode.EDITABLE
    overrides = overrides if editable else None

    rendered: List[RenderedElement] = []
    for index, element in enumerate(elements):
        fallback = breakpoint not in element.geometries
        if fallback:
            logger.warning(f"[RENDER] Element {element.id} has no {breakpoint.value} geometry, deriving from desktop")
        geometry = (overrides or {}).get(element.id) or element.resolve_geometry(breakpoint)
        z_index = 10 + index
        rendered.append(RenderedElement(
            id=element.id,
            type=element.type,
            geometry=geometry,
            z_index=z_index,
            derived_fallback=fallback,
            html=render_element(element, geometry, mode, z_index, selected=editable and element.id == selected_id),
        ))

    height = canvas_height(r.geometry for r in rendered)
    width = REFERENCE_WIDTHS[breakpoint]
    frame_width = "100%" if breakpoint == Breakpoint.DESKTOP else _px(width)
    frame_style = f"position: relative; width: {frame_width}; min-height: {_px(height)}; box-sizing: border-box"
    if editable and zoom != 1.0:
        frame_style += f"; transform: scale({zoom}); transform-origin: top center"
    frame_class = "canvas-frame" if editable else "public-content-wrapper"
    body = "".join(r.html for r in rendered)
    page_html = (
        f'<div class="{frame_class}" data-breakpoint="{breakpoint.value}" style="{frame_style}">{body}</div>'
    )
    return RenderedPage(
        breakpoint=breakpoint,
        mode=mode,
        width=width,
        height=height,
        elements=rendered,
        html=page_html,
    )
