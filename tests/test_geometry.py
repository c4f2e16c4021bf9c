"""
Tests for the pure geometry functions: derivation, resize/drag clamps,
viewport classification and canvas sizing.
"""

import pytest

from pagebuilder.models.geometry_models import Breakpoint, Geometry, REFERENCE_WIDTHS
from pagebuilder.layout.geometry import (
    clamp, derive_layout, derive_geometries, clamp_resize_width, clamp_resize_height,
    clamp_drag_position, normalize_geometry, classify_viewport, canvas_height
)

NARROW = [Breakpoint.TABLET, Breakpoint.MOBILE]


class TestDeriveLayout:
    """Tests for derive_layout()."""

    def test_scenario_element_near_right_edge(self):
        """x=1100, w=300 on desktop pulls into both narrower canvases."""
        base = Geometry(x=1100, y=50, w=300, h=80)

        tablet = derive_layout(base, Breakpoint.TABLET)
        mobile = derive_layout(base, Breakpoint.MOBILE)

        assert tablet == Geometry(x=448, y=50, w=300, h=80)
        assert mobile == Geometry(x=55, y=50, w=300, h=80)

    def test_desktop_is_identity(self):
        base = Geometry(x=1100, y=50, w=2000, h=80)
        assert derive_layout(base, Breakpoint.DESKTOP) is base

    @pytest.mark.parametrize("breakpoint", NARROW)
    @pytest.mark.parametrize("x", [0, 5, 20, 300, 1100, 5000])
    @pytest.mark.parametrize("w", [50, 300, 335, 400, 728, 900, 2000])
    def test_width_and_x_bounds(self, breakpoint, x, w):
        """Derived width shrinks to refW-40, x stays in [20, refW-w'-20] or pins at 20."""
        ref_w = REFERENCE_WIDTHS[breakpoint]
        derived = derive_layout(Geometry(x=x, y=10, w=w, h=60), breakpoint)

        assert derived.w == min(w, ref_w - 40)
        upper = ref_w - derived.w - 20
        if upper >= 20:
            assert 20 <= derived.x <= upper
        else:
            assert derived.x == 20

    @pytest.mark.parametrize("breakpoint", NARROW)
    def test_vertical_axis_untouched(self, breakpoint):
        derived = derive_layout(Geometry(x=10, y=777, w=100, h=333), breakpoint)
        assert derived.y == 777
        assert derived.h == 333

    def test_derivation_is_idempotent(self):
        base = Geometry(x=900, y=40, w=500, h=120)
        first = derive_geometries(base)
        second = derive_geometries(base)
        assert first == second
        assert base == Geometry(x=900, y=40, w=500, h=120)

    def test_derive_geometries_covers_every_breakpoint(self):
        geometries = derive_geometries(Geometry(x=50, y=100, w=300, h=150))
        assert set(geometries) == set(Breakpoint)


class TestResizeClamps:
    """Tests for clamp_resize_width() and clamp_resize_height()."""

    def test_desktop_has_no_upper_bound(self):
        assert clamp_resize_width(2000, 1100, Breakpoint.DESKTOP) == 2000

    def test_desktop_enforces_min_width(self):
        assert clamp_resize_width(10, 0, Breakpoint.DESKTOP) == 50

    def test_tablet_clamps_to_right_edge(self):
        assert clamp_resize_width(2000, 448, Breakpoint.TABLET) == 320

    @pytest.mark.parametrize("breakpoint", NARROW)
    def test_monotonic_and_bounded(self, breakpoint):
        x = 100
        ref_w = REFERENCE_WIDTHS[breakpoint]
        widths = [clamp_resize_width(p, x, breakpoint) for p in range(-100, 3000, 7)]

        assert widths == sorted(widths)
        assert all(w <= ref_w - x for w in widths)
        assert widths[-1] == ref_w - x

    def test_height_minimum(self):
        assert clamp_resize_height(5) == 20
        assert clamp_resize_height(20) == 20
        assert clamp_resize_height(400) == 400


class TestDragClamp:
    """Tests for clamp_drag_position()."""

    def test_negative_positions_pin_to_origin(self):
        assert clamp_drag_position(-40, -10, 100, 50, Breakpoint.TABLET, 800) == (0, 0)

    def test_right_and_bottom_bounds(self):
        x, y = clamp_drag_position(5000, 5000, 300, 150, Breakpoint.MOBILE, 800)
        assert x == 75
        assert y == 650

    def test_element_wider_than_narrow_canvas_pins_left(self):
        x, _ = clamp_drag_position(300, 0, 2000, 100, Breakpoint.TABLET, 800)
        assert x == 0

    def test_desktop_has_no_horizontal_upper_bound(self):
        assert clamp_drag_position(1150, 0, 2000, 100, Breakpoint.DESKTOP, 800) == (1150, 0)
        assert clamp_drag_position(1100, 60, 300, 80, Breakpoint.DESKTOP, 800) == (1100, 60)

    def test_desktop_still_keeps_x_non_negative(self):
        x, _ = clamp_drag_position(-30, 0, 2000, 100, Breakpoint.DESKTOP, 800)
        assert x == 0

    def test_inside_bounds_unchanged(self):
        assert clamp_drag_position(100, 200, 300, 150, Breakpoint.DESKTOP, 900) == (100, 200)


class TestNormalizeGeometry:
    """Tests for normalize_geometry()."""

    def test_valid_geometry_unchanged(self):
        g = Geometry(x=448, y=50, w=300, h=80)
        assert normalize_geometry(g, Breakpoint.TABLET) == g

    def test_negative_and_undersized_values_clamped(self):
        g = normalize_geometry(Geometry(x=-5, y=-9, w=3, h=1), Breakpoint.DESKTOP)
        assert g == Geometry(x=0, y=0, w=50, h=20)

    @pytest.mark.parametrize("breakpoint", NARROW)
    def test_constrained_breakpoints_keep_invariants(self, breakpoint):
        ref_w = REFERENCE_WIDTHS[breakpoint]
        g = normalize_geometry(Geometry(x=5000, y=0, w=5000, h=100), breakpoint)
        assert g.w >= 50
        assert g.x + g.w <= ref_w

    def test_is_idempotent(self):
        once = normalize_geometry(Geometry(x=740, y=-1, w=90, h=3), Breakpoint.TABLET)
        assert normalize_geometry(once, Breakpoint.TABLET) == once


class TestViewportAndCanvas:

    @pytest.mark.parametrize("width,expected", [
        (320, Breakpoint.MOBILE),
        (767, Breakpoint.MOBILE),
        (768, Breakpoint.TABLET),
        (1199, Breakpoint.TABLET),
        (1200, Breakpoint.DESKTOP),
        (1920, Breakpoint.DESKTOP),
    ])
    def test_classify_viewport(self, width, expected):
        assert classify_viewport(width) == expected

    def test_canvas_height_minimum(self):
        assert canvas_height([Geometry(x=0, y=0, w=100, h=100)]) == 800
        assert canvas_height([]) == 800

    def test_canvas_height_grows_with_content(self):
        assert canvas_height([Geometry(x=0, y=900, w=100, h=100), None]) == 1300

    def test_clamp_inverted_range_resolves_to_lower(self):
        assert clamp(50, 20, 10) == 20
