"""
Geometry helpers for interactive drag and resize.

All functions are pure: they take a :class:`Box` and return a new one.  The
:class:`GestureTracker` keeps the working box for a gesture in progress and
commits once, when the pointer is released, so a whole drag produces a single
history entry.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .models import MIN_ELEMENT_SIZE, Position, Size

logger = logging.getLogger(__name__)


class GestureError(RuntimeError):
    """Raised when gesture events arrive in an impossible order."""


class ResizeDirection(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"
    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"


# direction -> (width sign, height sign, moves left edge, moves top edge)
_RESIZE_RULES = {
    ResizeDirection.TOP: (0, -1, False, True),
    ResizeDirection.BOTTOM: (0, 1, False, False),
    ResizeDirection.LEFT: (-1, 0, True, False),
    ResizeDirection.RIGHT: (1, 0, False, False),
    ResizeDirection.TOP_LEFT: (-1, -1, True, True),
    ResizeDirection.TOP_RIGHT: (1, -1, False, True),
    ResizeDirection.BOTTOM_LEFT: (-1, 1, True, False),
    ResizeDirection.BOTTOM_RIGHT: (1, 1, False, False),
}


@dataclass(frozen=True)
class Box:
    """Working position + size pair of an element."""
    position: Position
    size: Size

    @property
    def right(self) -> float:
        return self.position.x + self.size.width

    @property
    def bottom(self) -> float:
        return self.position.y + self.size.height


def drag(box: Box, dx: float, dy: float) -> Box:
    """Translate *box* by the pointer delta."""
    return Box(Position(box.position.x + dx, box.position.y + dy), box.size)


def resize(
    box: Box,
    direction: ResizeDirection | str,
    dx: float,
    dy: float,
    min_size: float = MIN_ELEMENT_SIZE,
) -> Box:
    """Resize *box* by dragging the handle at *direction*.

    Width and height never go below *min_size*.  When the handle moves the
    left or top edge, the position shifts by the size change actually applied
    (after clamping), so the opposite edge stays where it was.
    """
    direction = ResizeDirection(direction)
    width_sign, height_sign, moves_left, moves_top = _RESIZE_RULES[direction]

    width = max(box.size.width + width_sign * dx, min_size)
    height = max(box.size.height + height_sign * dy, min_size)

    x, y = box.position.x, box.position.y
    if moves_left:
        x -= width - box.size.width
    if moves_top:
        y -= height - box.size.height

    return Box(Position(x, y), Size(width, height))


def fit_within(size: Size, max_size: Size) -> Size:
    """Scale *size* down (never up) to fit inside *max_size*, keeping aspect ratio."""
    if size.width <= max_size.width and size.height <= max_size.height:
        return size
    ratio = min(max_size.width / size.width, max_size.height / size.height)
    return Size(size.width * ratio, size.height * ratio)


class GestureState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    RESIZING = "resizing"


CommitCallback = Callable[[Position, Size], None]


class GestureTracker:
    """State machine for one element's drag/resize gestures.

    ``idle`` -> ``dragging`` | ``resizing(direction)`` on pointer-down,
    pointer moves update the working box only, pointer-up commits the final
    box through *on_commit* and returns to ``idle``.
    """

    def __init__(self, position: Position, size: Size, on_commit: CommitCallback,
                 min_size: float = MIN_ELEMENT_SIZE):
        self.box = Box(position, size)
        self.on_commit = on_commit
        self.min_size = min_size
        self.state = GestureState.IDLE
        self.direction: Optional[ResizeDirection] = None
        self._start: Optional[Box] = None

    @property
    def position(self) -> Position:
        return self.box.position

    @property
    def size(self) -> Size:
        return self.box.size

    def sync(self, position: Position, size: Size) -> None:
        """Reset the working box to the document's values (only while idle)."""
        if self.state is GestureState.IDLE:
            self.box = Box(position, size)

    def begin_drag(self) -> None:
        self._begin(GestureState.DRAGGING, None)

    def begin_resize(self, direction: ResizeDirection | str) -> None:
        self._begin(GestureState.RESIZING, ResizeDirection(direction))

    def _begin(self, state: GestureState, direction: Optional[ResizeDirection]) -> None:
        if self.state is not GestureState.IDLE:
            raise GestureError(f"Cannot start {state.value}: a {self.state.value} gesture is in progress")
        self.state = state
        self.direction = direction
        self._start = self.box

    def move(self, dx: float, dy: float) -> Box:
        """Apply one pointer delta to the working box."""
        if self.state is GestureState.DRAGGING:
            self.box = drag(self.box, dx, dy)
        elif self.state is GestureState.RESIZING:
            self.box = resize(self.box, self.direction, dx, dy, self.min_size)
        return self.box

    def end(self) -> bool:
        """Finish the gesture.  Returns True if a commit was issued."""
        if self.state is GestureState.IDLE:
            return False
        start = self._start
        self.state = GestureState.IDLE
        self.direction = None
        self._start = None
        if self.box == start:
            return False
        logger.debug("Committing gesture: position=%s size=%s", self.box.position, self.box.size)
        self.on_commit(self.box.position, self.box.size)
        return True
