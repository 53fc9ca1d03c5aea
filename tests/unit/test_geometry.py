"""Test drag/resize arithmetic and the gesture state machine."""

import pytest

from slide_editor.commands import move_and_resize
from slide_editor.geometry import (
    Box,
    GestureError,
    GestureState,
    GestureTracker,
    ResizeDirection,
    drag,
    fit_within,
    resize,
)
from slide_editor.history import HistoryManager
from slide_editor.commands import AddElement, AddSlide
from slide_editor.models import Position, Size, Slide, TextElement


@pytest.fixture
def box():
    return Box(Position(100, 100), Size(200, 100))


def test_drag_moves_position_only(box):
    moved = drag(box, 15, -5)
    assert moved.position == Position(115, 95)
    assert moved.size == box.size


@pytest.mark.parametrize(
    "direction,dx,dy,position,size",
    [
        ("top", 0, 20, (100, 120), (200, 80)),
        ("bottom", 0, 20, (100, 100), (200, 120)),
        ("left", 30, 0, (130, 100), (170, 100)),
        ("right", 30, 0, (100, 100), (230, 100)),
        ("top-left", -10, -10, (90, 90), (210, 110)),
        ("top-right", 10, -10, (100, 90), (210, 110)),
        ("bottom-left", -10, 10, (90, 100), (210, 110)),
        ("bottom-right", 10, 10, (100, 100), (210, 110)),
    ],
)
def test_resize_directions(box, direction, dx, dy, position, size):
    result = resize(box, direction, dx, dy)
    assert result.position == Position(*position)
    assert result.size == Size(*size)


def test_resize_floor_pins_opposite_edge_when_clamped(box):
    result = resize(box, ResizeDirection.TOP, 0, 500)
    assert result.size.height == 10
    assert result.bottom == box.bottom

    result = resize(box, ResizeDirection.LEFT, 999, 0)
    assert result.size.width == 10
    assert result.right == box.right


def test_resize_floor_on_non_anchored_edges(box):
    result = resize(box, ResizeDirection.BOTTOM_RIGHT, -1000, -1000)
    assert result.size == Size(10, 10)
    assert result.position == box.position


def test_resize_top_left_clamp_keeps_bottom_right_corner(box):
    result = resize(box, "top-left", 400, 400)
    assert result.size == Size(10, 10)
    assert (result.right, result.bottom) == (box.right, box.bottom)


def test_unknown_direction_rejected(box):
    with pytest.raises(ValueError):
        resize(box, "diagonal", 1, 1)


def test_fit_within():
    assert fit_within(Size(1000, 500), Size(500, 500)) == Size(500, 250)
    assert fit_within(Size(100, 50), Size(500, 500)) == Size(100, 50)


def test_tracker_commits_once_per_gesture():
    commits = []
    tracker = GestureTracker(Position(0, 0), Size(100, 50), lambda p, s: commits.append((p, s)))
    tracker.begin_drag()
    for _ in range(5):
        tracker.move(2, 3)
    assert commits == []
    assert tracker.end() is True
    assert commits == [(Position(10, 15), Size(100, 50))]
    assert tracker.state is GestureState.IDLE


def test_tracker_resize_gesture():
    commits = []
    tracker = GestureTracker(Position(0, 0), Size(100, 50), lambda p, s: commits.append((p, s)))
    tracker.begin_resize("top")
    tracker.move(0, 30)
    tracker.move(0, 30)
    tracker.end()
    assert commits == [(Position(0, 40), Size(100, 10))]


def test_tracker_ignores_idle_moves_and_empty_gestures():
    commits = []
    tracker = GestureTracker(Position(0, 0), Size(100, 50), lambda p, s: commits.append((p, s)))
    tracker.move(5, 5)
    assert tracker.position == Position(0, 0)
    tracker.begin_drag()
    tracker.move(5, 5)
    tracker.move(-5, -5)
    assert tracker.end() is False
    assert commits == []


def test_tracker_rejects_overlapping_gestures():
    tracker = GestureTracker(Position(0, 0), Size(100, 50), lambda p, s: None)
    tracker.begin_drag()
    with pytest.raises(GestureError):
        tracker.begin_resize("left")


def test_gesture_produces_single_history_entry():
    manager = HistoryManager()
    manager.dispatch(AddSlide(Slide(id="s1")))
    element = TextElement(id="t1", position=Position(0, 0), size=Size(100, 50), content="Hi")
    manager.dispatch(AddElement("s1", element))
    depth = len(manager.history.past)

    tracker = GestureTracker(
        element.position,
        element.size,
        lambda p, s: manager.dispatch(move_and_resize("s1", "t1", p, s)),
    )
    tracker.begin_drag()
    for _ in range(10):
        tracker.move(1, 1)
    tracker.end()

    assert len(manager.history.past) == depth + 1
    assert manager.present.presentation.slides[0].elements[0].position == Position(10, 10)
