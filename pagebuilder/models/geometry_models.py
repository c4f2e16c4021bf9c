"""
Geometry Models for Page Builder
================================

Breakpoints and the per-breakpoint pixel rectangle an element occupies.
"""

from enum import Enum
from typing import Dict
from pydantic import BaseModel


class Breakpoint(str, Enum):
    """Device width class used to pick which stored geometry applies."""
    DESKTOP = "desktop"
    TABLET = "tablet"
    MOBILE = "mobile"


# Reference canvas width per breakpoint (px)
REFERENCE_WIDTHS: Dict[Breakpoint, int] = {
    Breakpoint.DESKTOP: 1200,
    Breakpoint.TABLET: 768,
    Breakpoint.MOBILE: 375,
}

# Narrower breakpoints, in the order they are derived from desktop
DERIVED_BREAKPOINTS = (Breakpoint.TABLET, Breakpoint.MOBILE)

MIN_WIDTH = 50
MIN_HEIGHT = 20

# Derivation margins (px)
DERIVE_WIDTH_MARGIN = 40   # derived width leaves 20px on both sides
DERIVE_EDGE_MARGIN = 20    # derived x keeps this far from either edge

# Canvas sizing
CANVAS_BOTTOM_PADDING = 300
CANVAS_MIN_HEIGHT = 800

# Zoom limits for the editing surface
MIN_ZOOM = 0.5
MAX_ZOOM = 2.0
ZOOM_STEP = 0.1


class Geometry(BaseModel):
    """Pixel rectangle relative to the canvas origin (top-left)."""
    x: float = 0
    y: float = 0
    w: float = 200
    h: float = 100

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h


def is_constrained(breakpoint: Breakpoint) -> bool:
    """Tablet and mobile clamp geometry to their reference width; desktop does not."""
    return breakpoint != Breakpoint.DESKTOP
