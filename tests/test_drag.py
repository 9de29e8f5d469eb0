from __future__ import annotations

from termdeck.drag import DRAG_THRESHOLD, TabDragController, TabSlot

SLOTS = [TabSlot("a", 10), TabSlot("b", 10), TabSlot("c", 10)]


def test_small_motion_is_a_click() -> None:
    drag = TabDragController()
    assert drag.press(SLOTS, 5)

    assert not drag.motion(DRAG_THRESHOLD - 0.5)
    assert not drag.motion(-(DRAG_THRESHOLD - 0.5))
    assert not drag.claimed

    assert drag.release() is None
    assert not drag.dragging


def test_press_on_close_button_or_empty_space_is_declined() -> None:
    drag = TabDragController()

    assert not drag.press(SLOTS, 9, on_close=True)
    assert not drag.press(SLOTS, 45)
    assert not drag.dragging
    assert not drag.motion(20)


def test_crossing_threshold_claims_without_moving_yet() -> None:
    drag = TabDragController()
    drag.press(SLOTS, 5)

    assert not drag.motion(DRAG_THRESHOLD)

    assert drag.claimed
    assert drag.order == ["a", "b", "c"]
    assert drag.release() == ["a", "b", "c"]


def test_dragging_right_past_a_midpoint_moves_after_it() -> None:
    drag = TabDragController()
    drag.press(SLOTS, 5)

    assert drag.motion(11)

    assert drag.order == ["b", "a", "c"]
    assert drag.release() == ["b", "a", "c"]


def test_dragging_left_past_a_midpoint_moves_before_it() -> None:
    drag = TabDragController()
    drag.press(SLOTS, 25)

    assert drag.motion(-11)

    assert drag.order == ["a", "c", "b"]


def test_one_step_per_motion_event() -> None:
    drag = TabDragController()
    drag.press(SLOTS, 5)

    assert drag.motion(30)
    assert drag.order == ["b", "a", "c"]

    assert drag.motion(30)
    assert drag.order == ["b", "c", "a"]

    assert not drag.motion(30)


def test_uneven_widths_use_real_midpoints() -> None:
    slots = [TabSlot("wide", 30), TabSlot("narrow", 6)]
    drag = TabDragController()
    drag.press(slots, 2)

    # narrow's midpoint sits at 33
    assert not drag.motion(30)
    assert drag.motion(32)
    assert drag.order == ["narrow", "wide"]
