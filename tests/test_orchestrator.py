import logging

import pytest

from draftboard.config import EditorSettings
from draftboard.interaction import DraggingShape, Idle
from draftboard.orchestrator import CanvasOrchestrator, KeyEvent, PointerEvent, WheelEvent
from draftboard.shapes import Rectangle


class RecordingCapture:
    def __init__(self):
        self.events = []

    def capture(self, pointer_id):
        self.events.append(("capture", pointer_id))

    def release(self, pointer_id):
        self.events.append(("release", pointer_id))


class Fragile(Rectangle):
    def contains(self, point):
        raise RuntimeError("broken hit test")


@pytest.fixture
def capture():
    return RecordingCapture()


@pytest.fixture
def other(make_rect):
    return make_rect(300, 100, 50, 50)


@pytest.fixture
def canvas(rect_a, other, capture):
    orch = CanvasOrchestrator([rect_a, other], capture=capture)
    orch.resize(400, 300)
    return orch


def click(canvas, x, y, shift=False, pointer_id=1):
    canvas.on_pointer_down(PointerEvent(x, y, 0, shift, pointer_id))
    canvas.on_pointer_up(PointerEvent(x, y, 0, shift, pointer_id))
    canvas.on_click(PointerEvent(x, y, 0, shift, pointer_id))


def drag(canvas, start, end, shift=False, button=0, pointer_id=1):
    canvas.on_pointer_down(PointerEvent(*start, button, shift, pointer_id))
    canvas.on_pointer_move(PointerEvent(*end, button, shift, pointer_id))
    canvas.on_pointer_up(PointerEvent(*end, button, shift, pointer_id))
    canvas.on_click(PointerEvent(*end, button, shift, pointer_id))


class TestClickSelection:
    def test_click_selects_topmost(self, canvas, rect_a):
        click(canvas, 150, 150)
        assert canvas.selection.selected_shapes == [rect_a]
        assert canvas.selection.selected_indices == [0]

    def test_click_on_empty_clears(self, canvas):
        click(canvas, 150, 150)
        click(canvas, 10, 10)
        assert canvas.selection.selected_shapes == []

    def test_shift_click_on_empty_keeps_selection(self, canvas, rect_a):
        click(canvas, 150, 150)
        click(canvas, 10, 10, shift=True)
        assert canvas.selection.selected_shapes == [rect_a]

    def test_shift_click_toggles(self, canvas, rect_a, other):
        click(canvas, 150, 150)
        click(canvas, 320, 120, shift=True)
        assert canvas.selection.selected_shapes == [rect_a, other]
        click(canvas, 150, 150, shift=True)
        assert canvas.selection.selected_shapes == [other]
        assert not canvas.interaction.is_active

    def test_plain_click_inside_group_reselects_single(self, canvas, rect_a, other):
        canvas.selection.replace([rect_a, other])
        click(canvas, 150, 150)
        assert canvas.selection.selected_shapes == [rect_a]


class TestDragging:
    def test_drag_moves_only_the_dragged_shape(self, canvas, rect_a, other):
        click(canvas, 150, 150)
        drag(canvas, (150, 150), (170, 160))
        moved, untouched = canvas.shapes
        assert untouched is other
        assert moved.bounds_px()[:2] == pytest.approx((120, 110))
        assert canvas.selection.selected_shapes == [moved]
        assert canvas.preview_shapes is None
        assert isinstance(canvas.interaction.state, Idle)

    def test_drag_on_unselected_shape_selects_and_moves_it(self, canvas, other):
        drag(canvas, (320, 120), (340, 120))
        (moved,) = canvas.selection.selected_shapes
        assert canvas.shapes[1] is moved
        assert moved.bounds_px()[0] == pytest.approx(320)

    def test_group_drag(self, canvas, rect_a, other):
        click(canvas, 150, 150)
        click(canvas, 320, 120, shift=True)
        drag(canvas, (150, 150), (150, 200))
        assert len(canvas.selection.selected_shapes) == 2
        assert [s.bounds_px()[1] for s in canvas.shapes] == pytest.approx([150, 150])

    def test_preview_does_not_commit(self, canvas, rect_a):
        canvas.on_pointer_down(PointerEvent(150, 150, 0, False, 1))
        canvas.on_pointer_move(PointerEvent(190, 150, 0, False, 1))
        assert canvas.shapes[0] is rect_a
        assert canvas.display_shapes[0] is not rect_a
        assert isinstance(canvas.interaction.state, DraggingShape)
        canvas.cancel_gesture()
        assert canvas.shapes[0] is rect_a
        assert canvas.preview_shapes is None

    def test_small_move_is_a_click(self, canvas, rect_a):
        drag(canvas, (150, 150), (151, 151))
        assert canvas.shapes[0] is rect_a

    def test_capture_acquired_and_released(self, canvas, capture):
        drag(canvas, (150, 150), (170, 160), pointer_id=9)
        assert capture.events == [("capture", 9), ("release", 9)]

    def test_secondary_button_press_keeps_live_drag(self, canvas, rect_a):
        canvas.on_pointer_down(PointerEvent(150, 150, 0, False, 1))
        canvas.on_pointer_move(PointerEvent(190, 150, 0, False, 1))
        canvas.on_pointer_down(PointerEvent(190, 150, 2, False, 1))
        assert canvas.preview_shapes is not None
        canvas.on_pointer_up(PointerEvent(190, 150, 0, False, 1))
        moved = canvas.shapes[0]
        assert moved is not rect_a
        assert moved.bounds_px()[0] == pytest.approx(140)

    def test_foreign_pointer_up_is_ignored(self, canvas):
        canvas.on_pointer_down(PointerEvent(150, 150, 0, False, 1))
        canvas.on_pointer_up(PointerEvent(150, 150, 0, False, 2))
        assert canvas.interaction.is_active


class TestMarqueeAndView:
    def test_marquee_selects_shapes(self, canvas, rect_a, other):
        drag(canvas, (5, 5), (390, 290))
        assert canvas.selection.selected_shapes == [rect_a, other]

    def test_shift_marquee_adds(self, canvas, rect_a, other):
        click(canvas, 320, 120)
        drag(canvas, (5, 5), (200, 200), shift=True)
        assert canvas.selection.selected_shapes == [other, rect_a]

    def test_marquee_preview_reported_to_overlay(self, canvas):
        canvas.on_pointer_down(PointerEvent(5, 5, 0, False, 1))
        canvas.on_pointer_move(PointerEvent(200, 200, 0, False, 1))
        state = canvas.overlay_state()
        assert state.selected_indices == [0]
        assert state.drag_select_rect == pytest.approx((5, 5, 200, 200))
        assert canvas.selection.selected_shapes == []

    def test_middle_button_pans(self, canvas):
        drag(canvas, (10, 10), (40, 25), button=1)
        assert (canvas.viewport.offset_x, canvas.viewport.offset_y) == (30, 15)

    def test_wheel_zoom(self, canvas):
        canvas.on_wheel(WheelEvent(100, 50, 120))
        assert canvas.viewport.scale == pytest.approx(0.9)
        canvas.on_wheel(WheelEvent(100, 50, -120))
        assert canvas.viewport.scale == pytest.approx(0.99)
        canvas.on_wheel(WheelEvent(100, 50, 0))
        assert canvas.viewport.scale == pytest.approx(0.99)

    def test_wheel_zoom_keeps_pointer_anchor(self, canvas):
        before = canvas.viewport.screen_to_world(120, 80)
        canvas.on_wheel(WheelEvent(120, 80, -1))
        assert canvas.viewport.screen_to_world(120, 80) == pytest.approx(before)

    def test_hover_tracks_pointer(self, canvas, rect_a):
        canvas.on_pointer_move(PointerEvent(150, 150))
        assert canvas.hovered_shape is rect_a
        canvas.on_pointer_move(PointerEvent(5, 5))
        assert canvas.hovered_shape is None


class TestKeys:
    def test_escape_cancels_and_clears(self, canvas):
        click(canvas, 150, 150)
        canvas.on_pointer_down(PointerEvent(5, 5, 0, False, 1))
        assert canvas.on_key(KeyEvent("Escape"))
        assert not canvas.interaction.is_active
        assert canvas.selection.selected_shapes == []

    def test_delete_removes_selection(self, canvas, other):
        click(canvas, 150, 150)
        assert canvas.on_key(KeyEvent("Delete"))
        assert canvas.shapes == [other]
        assert canvas.selection.selected_shapes == []

    def test_keyboard_zoom_about_centre(self, canvas):
        centre = canvas.viewport.screen_to_world(200, 150)
        assert canvas.on_key(KeyEvent("=", ctrl=True))
        assert canvas.viewport.scale == pytest.approx(1.2)
        assert canvas.viewport.screen_to_world(200, 150) == pytest.approx(centre)
        canvas.on_key(KeyEvent("0", ctrl=True))
        assert canvas.viewport.scale == 1.0

    def test_rotate_selection(self, canvas, rect_a):
        click(canvas, 150, 150)
        assert canvas.on_key(KeyEvent("r"))
        (rotated,) = canvas.selection.selected_shapes
        assert canvas.shapes[0] is rotated
        assert rotated.width.value_mm > rect_a.width.value_mm

    def test_rotate_without_selection_is_noop(self, canvas, rect_a):
        assert not canvas.rotate_selection(15)
        assert canvas.shapes[0] is rect_a

    def test_scale_selection(self, canvas, rect_a):
        canvas.selection.replace([rect_a])
        assert canvas.scale_selection(2)
        assert canvas.shapes[0].width.value_mm == pytest.approx(2 * rect_a.width.value_mm)

    def test_unhandled_key(self, canvas):
        assert not canvas.on_key(KeyEvent("q"))


class TestRobustness:
    def test_handler_failure_resets_to_idle(self, make_rect, capture, caplog):
        base = make_rect(0, 0, 10, 10)
        fragile = Fragile(base.top_left, base.width, base.height)
        canvas = CanvasOrchestrator([fragile], capture=capture)
        with caplog.at_level(logging.ERROR, logger="draftboard.orchestrator"):
            canvas.on_pointer_down(PointerEvent(5, 5, 0, False, 3))
        assert isinstance(canvas.interaction.state, Idle)
        assert "on_pointer_down failed" in caplog.text

    def test_set_shapes_drops_missing_selection(self, canvas, rect_a, other):
        canvas.selection.replace([rect_a, other])
        canvas.set_shapes([other])
        assert canvas.selection.selected_shapes == [other]
        assert canvas.selection.selected_indices == [0]

    def test_render_requests_are_delivered(self, rect_a):
        frames = []
        canvas = CanvasOrchestrator([rect_a], on_render=lambda: frames.append(1))
        canvas.on_pointer_move(PointerEvent(10, 10))
        assert frames == [1]

    def test_paint(self, canvas, painter):
        click(canvas, 150, 150)
        painted = canvas.paint(painter, 400, 300)
        assert painted == 2
        assert painter.calls[0] == ("clear", 0, (EditorSettings().background,))
        assert painter.depth == 0
        assert painter.named("circle")
