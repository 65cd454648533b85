import pytest

from draftboard.interaction import (
    DraggingSelect,
    DraggingShape,
    Idle,
    InteractionStateMachine,
    Panning,
)


@pytest.fixture
def sm():
    return InteractionStateMachine(drag_threshold_px=4)


def test_primary_down_on_shape_starts_shape_drag(sm, rect_a):
    state = sm.pointer_down(10, 20, 10, 20, 0, hit=rect_a, pointer_id=1)
    assert isinstance(state, DraggingShape)
    assert state.anchor is rect_a
    assert (state.start_world_x, state.start_world_y) == (10, 20)
    assert not sm.did_drag


def test_primary_down_on_empty_starts_marquee(sm):
    state = sm.pointer_down(10, 20, 5, 6, 0, hit=None, shift=True)
    assert isinstance(state, DraggingSelect)
    assert (state.x0, state.y0, state.x1, state.y1) == (5, 6, 5, 6)
    assert state.additive


def test_middle_button_pans_without_hit_test(sm, rect_a):
    assert isinstance(sm.pointer_down(0, 0, 0, 0, 1, hit=rect_a), Panning)
    update = sm.pointer_move(5, -3)
    assert (update.kind, update.dx, update.dy) == ("pan", 5, -3)
    update = sm.pointer_move(7, -3)
    assert (update.dx, update.dy) == (2, 0)


def test_other_buttons_are_ignored(sm):
    sm.pointer_down(0, 0, 0, 0, 2)
    assert isinstance(sm.state, Idle)


def test_threshold_is_inclusive_and_sticky(sm, rect_a):
    sm.pointer_down(0, 0, 0, 0, 0, hit=rect_a)
    assert not sm.pointer_move(3, 0).live
    assert not sm.did_drag
    assert sm.pointer_move(4, 0).live
    assert sm.did_drag
    # back inside the threshold radius the gesture stays live
    assert sm.pointer_move(1, 0).live


def test_drag_suppresses_next_click(sm, rect_a):
    sm.pointer_down(0, 0, 0, 0, 0, hit=rect_a)
    sm.pointer_move(10, 10)
    ended = sm.pointer_up()
    assert isinstance(ended, DraggingShape)
    assert sm.state == Idle(suppress_click=True)
    assert sm.consume_click()
    assert not sm.consume_click()


def test_click_without_drag_is_not_suppressed(sm, rect_a):
    sm.pointer_down(0, 0, 0, 0, 0, hit=rect_a)
    sm.pointer_move(1, 1)
    sm.pointer_up()
    assert not sm.consume_click()


def test_requested_suppression_survives_pointer_up(sm, rect_a):
    sm.pointer_down(0, 0, 0, 0, 0, hit=rect_a)
    sm.suppress_next_click()
    sm.pointer_up()
    assert sm.consume_click()


def test_cancel_drag_keeps_suppression(sm, rect_a):
    sm.pointer_down(0, 0, 0, 0, 0, hit=rect_a)
    sm.suppress_next_click()
    sm.cancel_drag()
    assert not sm.is_active
    assert sm.pointer_up() is None
    assert sm.consume_click()


def test_pointer_up_with_foreign_id_is_ignored(sm):
    sm.pointer_down(0, 0, 0, 0, 0, pointer_id=7)
    assert sm.pointer_up(pointer_id=8) is None
    assert sm.is_active
    assert sm.pointer_up(pointer_id=7) is not None
    assert not sm.is_active


def test_pointer_up_without_id_ends_gesture(sm):
    sm.pointer_down(0, 0, 0, 0, 0, pointer_id=7)
    assert sm.pointer_up() is not None


def test_pointer_up_when_idle_is_noop(sm):
    assert sm.pointer_up(3) is None


def test_update_marquee_only_while_selecting(sm, rect_a):
    assert sm.update_marquee(1, 1) is None
    sm.pointer_down(0, 0, 2, 2, 0)
    state = sm.update_marquee(9, 8)
    assert (state.x1, state.y1) == (9, 8)


def test_cancel_returns_to_plain_idle(sm):
    sm.pointer_down(0, 0, 0, 0, 0)
    sm.pointer_move(50, 50)
    sm.cancel()
    assert sm.state == Idle()
    assert not sm.consume_click()
