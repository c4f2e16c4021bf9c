"""
Tests for the GestureController drag/resize state machine.
"""

import pytest

from pagebuilder.models.geometry_models import Breakpoint, Geometry
from pagebuilder.models.layout_models import ElementType
from pagebuilder.canvas.session import CanvasSession
from pagebuilder.canvas.gestures import GestureController, GestureState, PointerTarget
from pagebuilder.render.surface import RenderMode, render


@pytest.fixture
def text_session():
    """Session with one text element at the default geometry (50, 100, 300x150)."""
    session = CanvasSession()
    session.add_element(ElementType.TEXT)
    return session


def _only(session):
    return session.elements[0]


class TestDrag:

    def test_drag_divides_pointer_delta_by_zoom(self, text_session):
        text_session.set_zoom(2.0)
        element = _only(text_session)
        controller = GestureController(text_session)

        assert controller.pointer_down(element.id, 100, 100) == GestureState.DRAGGING
        controller.pointer_move(200, 160)
        controller.pointer_up()

        committed = _only(text_session)
        assert committed.geometries[Breakpoint.DESKTOP] == Geometry(x=100, y=130, w=300, h=150)
        assert committed.geometries[Breakpoint.TABLET] == element.geometries[Breakpoint.TABLET]

    def test_moves_only_update_preview(self, text_session):
        element = _only(text_session)
        controller = GestureController(text_session)
        controller.pointer_down(element.id, 0, 0)

        preview = controller.pointer_move(30, 40)

        assert preview == Geometry(x=80, y=140, w=300, h=150)
        assert controller.preview_overrides(Breakpoint.DESKTOP) == {element.id: preview}
        assert _only(text_session) == element

    def test_drag_clamped_to_canvas(self, text_session):
        element = _only(text_session)
        controller = GestureController(text_session)
        controller.pointer_down(element.id, 0, 0)

        assert controller.pointer_move(-5000, -5000) == Geometry(x=0, y=0, w=300, h=150)
        far = controller.pointer_move(5000, 5000)
        assert far.x == 5050
        assert far.y == 650

    def test_vertical_drag_keeps_overhanging_desktop_x(self, canvas):
        """An element hanging past 1200px on desktop only moves along the drag."""
        controller = GestureController(canvas)
        controller.pointer_down("sec-edge", 0, 0)
        controller.pointer_move(0, 10)
        controller.pointer_up()

        assert canvas.get_element("sec-edge").geometries[Breakpoint.DESKTOP] == Geometry(x=1100, y=60, w=300, h=80)

    def test_wide_desktop_element_drags_sideways(self):
        session = CanvasSession()
        element = session.add_element(ElementType.SHAPE)
        session.commit_geometry(element.id, Breakpoint.DESKTOP, Geometry(x=1100, y=50, w=2000, h=80))
        controller = GestureController(session)

        controller.pointer_down(element.id, 0, 0)
        controller.pointer_move(50, 0)
        controller.pointer_up()

        assert session.get_element(element.id).geometries[Breakpoint.DESKTOP].x == 1150

    def test_body_press_selects_element(self, text_session):
        element = _only(text_session)
        text_session.select_element(None)
        GestureController(text_session).pointer_down(element.id, 0, 0, PointerTarget.BODY)
        assert text_session.selected_id == element.id


class TestResize:

    def test_desktop_resize_is_unbounded(self, canvas):
        canvas.select_element("sec-edge")
        controller = GestureController(canvas)

        assert controller.pointer_down("sec-edge", 0, 0, PointerTarget.HANDLE) == GestureState.RESIZING
        controller.pointer_move(1700, 0)
        controller.pointer_up()

        assert canvas.get_element("sec-edge").geometries[Breakpoint.DESKTOP] == Geometry(x=1100, y=50, w=2000, h=80)

    def test_tablet_resize_stops_at_right_edge(self, canvas):
        canvas.select_element("sec-edge")
        canvas.set_active_breakpoint(Breakpoint.TABLET)
        controller = GestureController(canvas)

        controller.pointer_down("sec-edge", 0, 0, PointerTarget.HANDLE)
        controller.pointer_move(1700, 0)
        controller.pointer_up()

        element = canvas.get_element("sec-edge")
        assert element.geometries[Breakpoint.TABLET].w == 320
        assert element.geometries[Breakpoint.DESKTOP].w == 300

    def test_resize_with_zoom(self, text_session):
        text_session.set_zoom(0.5)
        element = _only(text_session)
        controller = GestureController(text_session)

        controller.pointer_down(element.id, 10, 10, PointerTarget.HANDLE)
        preview = controller.pointer_move(110, 60)

        assert (preview.w, preview.h) == (500, 250)
        assert (preview.x, preview.y) == (50, 100)

    def test_resize_respects_minimums(self, text_session):
        element = _only(text_session)
        controller = GestureController(text_session)
        controller.pointer_down(element.id, 0, 0, PointerTarget.HANDLE)

        preview = controller.pointer_move(-1000, -1000)
        assert (preview.w, preview.h) == (50, 20)

    def test_handle_on_unselected_element_is_ignored(self, text_session):
        element = _only(text_session)
        text_session.select_element(None)
        controller = GestureController(text_session)

        assert controller.pointer_down(element.id, 0, 0, PointerTarget.HANDLE) == GestureState.IDLE
        assert controller.is_tracking is False
        assert controller.pointer_move(100, 100) is None


class TestTermination:

    def test_pointer_up_detaches_tracking(self, text_session):
        controller = GestureController(text_session)
        controller.pointer_down(_only(text_session).id, 0, 0)
        assert controller.is_tracking is True

        controller.pointer_up()

        assert controller.state == GestureState.IDLE
        assert controller.is_tracking is False
        assert controller.preview_overrides(Breakpoint.DESKTOP) == {}

    def test_cancel_commits_last_preview(self, text_session):
        element = _only(text_session)
        controller = GestureController(text_session)
        controller.pointer_down(element.id, 0, 0)
        controller.pointer_move(25, 0)

        committed = controller.cancel()

        assert committed.geometries[Breakpoint.DESKTOP].x == 75
        assert controller.state == GestureState.IDLE

    def test_cancel_without_move_changes_nothing(self, text_session):
        element = _only(text_session)
        controller = GestureController(text_session)
        controller.pointer_down(element.id, 0, 0)

        assert controller.cancel() is None
        assert _only(text_session) == element

    def test_new_gesture_commits_previous(self):
        session = CanvasSession()
        a = session.add_element(ElementType.TEXT)
        b = session.add_element(ElementType.SHAPE)
        controller = GestureController(session)

        controller.pointer_down(a.id, 0, 0)
        controller.pointer_move(40, 0)
        controller.pointer_down(b.id, 0, 0)

        assert session.get_element(a.id).geometries[Breakpoint.DESKTOP].x == 90
        assert controller.active_element_id == b.id
        assert session.selected_id == b.id

    def test_commit_targets_breakpoint_at_gesture_start(self, text_session):
        element = _only(text_session)
        controller = GestureController(text_session)
        controller.pointer_down(element.id, 0, 0)
        text_session.set_active_breakpoint(Breakpoint.MOBILE)
        controller.pointer_move(10, 10)
        controller.pointer_up()

        committed = _only(text_session)
        assert committed.geometries[Breakpoint.DESKTOP] == Geometry(x=60, y=110, w=300, h=150)
        assert committed.geometries[Breakpoint.MOBILE] == element.geometries[Breakpoint.MOBILE]

    def test_unknown_element_stays_idle(self, text_session):
        controller = GestureController(text_session)
        assert controller.pointer_down("missing", 0, 0) == GestureState.IDLE
        assert controller.pointer_up() is None

    def test_element_deleted_mid_gesture(self, text_session):
        element = _only(text_session)
        controller = GestureController(text_session)
        controller.pointer_down(element.id, 0, 0)
        controller.pointer_move(10, 10)
        text_session.delete_element(element.id)

        assert controller.pointer_up() is None
        assert controller.state == GestureState.IDLE


class TestPreviewOverrides:

    def test_preview_only_painted_at_gesture_breakpoint(self, text_session):
        element = _only(text_session)
        controller = GestureController(text_session)
        controller.pointer_down(element.id, 0, 0)
        controller.pointer_move(800, 0)
        text_session.set_active_breakpoint(Breakpoint.MOBILE)

        assert controller.preview_overrides(Breakpoint.MOBILE) == {}
        assert controller.preview_overrides(Breakpoint.DESKTOP)[element.id].x == 850

    def test_editor_render_after_breakpoint_switch_uses_stored_geometry(self, text_session):
        element = _only(text_session)
        controller = GestureController(text_session)
        controller.pointer_down(element.id, 0, 0)
        controller.pointer_move(800, 0)
        text_session.set_active_breakpoint(Breakpoint.MOBILE)

        page = render(
            text_session.elements,
            text_session.active_breakpoint,
            RenderMode.EDITABLE,
            overrides=controller.preview_overrides(text_session.active_breakpoint),
        )

        painted = page.elements[0].geometry
        assert painted == element.geometries[Breakpoint.MOBILE]
        assert painted.x + painted.w <= 375
