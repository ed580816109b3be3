"""Translate pointer and touch events into capture transitions."""

from dataclasses import dataclass
from typing import Optional, Sequence

from .capture import RegionCapture
from .geometry import Point, RectAnnotation


@dataclass(frozen=True)
class Touch:
    """A touch contact, in view pixels relative to the page view's origin."""
    offset_x: float
    offset_y: float


def to_page_fraction(offset_x: float, offset_y: float, view_width: float, view_height: float) -> Point:
    """Convert a device offset inside the page view to page-fraction coordinates."""
    return Point(offset_x / view_width, offset_y / view_height)


class GestureInput:
    """
    Feeds one page's ``RegionCapture`` from a view of ``view_width`` x ``view_height`` pixels.

    Pointer and touch handlers share the same three transitions; multi-touch
    plays the role of the held modifier key.
    """

    def __init__(self, capture: RegionCapture, view_width: float, view_height: float) -> None:
        self.capture = capture
        self.view_width = view_width
        self.view_height = view_height
        self.touch_mode = False

    def resize(self, view_width: float, view_height: float) -> None:
        self.view_width = view_width
        self.view_height = view_height

    def _point(self, offset_x: float, offset_y: float) -> Point:
        return to_page_fraction(offset_x, offset_y, self.view_width, self.view_height)

    # Pointer -------------------------------------------------------------

    def pointer_down(self, offset_x: float, offset_y: float) -> None:
        self.capture.start(self._point(offset_x, offset_y))

    def pointer_move(self, offset_x: float, offset_y: float, modifier: bool = False) -> None:
        self.capture.update(self._point(offset_x, offset_y), symmetric=modifier)

    def pointer_up(self) -> Optional[RectAnnotation]:
        return self.capture.commit()

    def secondary_click(self) -> None:
        self.capture.clear()

    # Touch ---------------------------------------------------------------

    def touch_start(self, touches: Sequence[Touch]) -> None:
        self.touch_mode = True
        if self.capture.candidate is not None or not touches:
            return
        first = touches[0]
        self.capture.start(self._point(first.offset_x, first.offset_y))

    def touch_move(self, touches: Sequence[Touch]) -> None:
        self.touch_mode = True
        if not touches:
            return
        first = touches[0]
        self.capture.update(
            self._point(first.offset_x, first.offset_y),
            symmetric=len(touches) > 1,
        )

    def touch_end(self, remaining: Sequence[Touch]) -> Optional[RectAnnotation]:
        if remaining:
            return None
        return self.capture.commit()
