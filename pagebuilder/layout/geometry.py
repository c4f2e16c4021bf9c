"""
Geometry Math
=============

Pure, breakpoint-aware layout functions shared by the editor and the
public renderer. Every geometry constraint in the package is computed here.

- derive_layout: narrower breakpoint geometry from a desktop geometry
- clamp_resize_width / clamp_resize_height: resize gesture limits
- clamp_drag_position: drag gesture limits
- normalize_geometry: bring any proposed geometry into a valid one
"""

from typing import Dict, Iterable, Optional, Tuple

from ..models.geometry_models import (
    Breakpoint, Geometry, REFERENCE_WIDTHS, DERIVED_BREAKPOINTS,
    MIN_WIDTH, MIN_HEIGHT, DERIVE_WIDTH_MARGIN, DERIVE_EDGE_MARGIN,
    CANVAS_BOTTOM_PADDING, CANVAS_MIN_HEIGHT, is_constrained
)


def clamp(value: float, lower: float, upper: float) -> float:
    """
    Clamp value into [lower, upper].

    An inverted range (upper < lower) resolves to lower.
    """
    return max(lower, min(value, upper))


def reference_width(breakpoint: Breakpoint) -> int:
    return REFERENCE_WIDTHS[breakpoint]


def derive_layout(base: Geometry, target: Breakpoint) -> Geometry:
    """
    Derive the geometry for a narrower breakpoint from a desktop geometry.

    Width shrinks to fit the target with a 20px margin on each side, x is
    pulled left so the element fits, and never closer than 20px to the left
    edge. Vertical position and height are kept as-is.

    Args:
        base: Desktop geometry
        target: Breakpoint to derive for

    Returns:
        Derived geometry (base itself for desktop)
    """
    if target == Breakpoint.DESKTOP:
        return base

    ref_w = reference_width(target)
    w = min(base.w, ref_w - DERIVE_WIDTH_MARGIN)
    x = min(base.x, ref_w - w - DERIVE_EDGE_MARGIN)
    x = max(DERIVE_EDGE_MARGIN, x)
    return Geometry(x=x, y=base.y, w=w, h=base.h)


def derive_geometries(desktop: Geometry) -> Dict[Breakpoint, Geometry]:
    """Build the full per-breakpoint map from a desktop geometry in one step."""
    geometries = {Breakpoint.DESKTOP: desktop}
    for breakpoint in DERIVED_BREAKPOINTS:
        geometries[breakpoint] = derive_layout(desktop, breakpoint)
    return geometries


def clamp_resize_width(proposed_w: float, x: float, breakpoint: Breakpoint) -> float:
    """
    Limit a proposed width for the given breakpoint.

    Desktop only enforces the minimum width. Tablet and mobile also keep the
    right edge inside the reference width.
    """
    w = max(MIN_WIDTH, proposed_w)
    if is_constrained(breakpoint):
        w = min(w, reference_width(breakpoint) - x)
    return w


def clamp_resize_height(proposed_h: float) -> float:
    return max(MIN_HEIGHT, proposed_h)


def clamp_drag_position(
    x: float,
    y: float,
    w: float,
    h: float,
    breakpoint: Breakpoint,
    canvas_h: float
) -> Tuple[float, float]:
    """
    Keep a dragged element inside the canvas.

    Position never goes negative. On tablet and mobile the right edge stays
    inside the reference width; desktop has no horizontal upper bound. The
    vertical bound is the current canvas height. An element larger than the
    canvas pins to the origin on that axis.

    Returns:
        (x, y) tuple
    """
    max_y = max(0, canvas_h - h)
    if is_constrained(breakpoint):
        x = clamp(x, 0, max(0, reference_width(breakpoint) - w))
    else:
        x = max(0, x)
    return x, clamp(y, 0, max_y)


def normalize_geometry(geometry: Geometry, breakpoint: Breakpoint) -> Geometry:
    """
    Clamp any proposed geometry into a valid one for the breakpoint.

    Position is made non-negative (and, on tablet/mobile, leaves room for the
    minimum width), then width and height go through the resize clamps.
    """
    x = max(0, geometry.x)
    y = max(0, geometry.y)
    if is_constrained(breakpoint):
        x = min(x, reference_width(breakpoint) - MIN_WIDTH)
    w = clamp_resize_width(geometry.w, x, breakpoint)
    h = clamp_resize_height(geometry.h)
    return Geometry(x=x, y=y, w=w, h=h)


def classify_viewport(viewport_width: float) -> Breakpoint:
    """Map a visitor's viewport width to a breakpoint."""
    if viewport_width < REFERENCE_WIDTHS[Breakpoint.TABLET]:
        return Breakpoint.MOBILE
    if viewport_width < REFERENCE_WIDTHS[Breakpoint.DESKTOP]:
        return Breakpoint.TABLET
    return Breakpoint.DESKTOP


def canvas_height(geometries: Iterable[Optional[Geometry]]) -> float:
    """Canvas height: lowest element bottom plus padding, never below the minimum."""
    max_bottom = 0.0
    for geometry in geometries:
        if geometry is not None:
            max_bottom = max(max_bottom, geometry.bottom)
    return max(max_bottom + CANVAS_BOTTOM_PADDING, CANVAS_MIN_HEIGHT)
