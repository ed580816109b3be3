"""
Gesture state machine for drawing regions on one page.

Pointer and touch input both end up in ``start`` / ``update`` / ``commit``;
see ``cropbook.regions.input`` for the device translation.
"""

from enum import Enum
from typing import List, Optional

from .geometry import Point, RectAnnotation
from .region_set import RegionSet
from ..logging import get_logger

logger = get_logger(__name__)

DEFAULT_MIN_DIAGONAL = 0.005


class CaptureState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class RegionCapture:
    """Turns a drag gesture into a committed rectangle on a page's region set."""

    def __init__(self, page_number: int, min_diagonal: float = DEFAULT_MIN_DIAGONAL) -> None:
        self._regions = RegionSet(page_number)
        self._min_diagonal = min_diagonal
        self._candidate: Optional[RectAnnotation] = None

    @property
    def page_number(self) -> int:
        return self._regions.page_number

    @property
    def regions(self) -> RegionSet:
        return self._regions

    @property
    def candidate(self) -> Optional[RectAnnotation]:
        return self._candidate

    @property
    def state(self) -> CaptureState:
        if self._candidate is None:
            return CaptureState.IDLE
        return CaptureState.DRAGGING

    def start(self, point: Point) -> None:
        """Begin a candidate with both corners at ``point``."""
        self._candidate = RectAnnotation.from_points(point, point)

    def update(self, point: Point, symmetric: bool = False) -> None:
        """
        Move the candidate's free corner to ``point``.

        With ``symmetric`` the candidate keeps its width and height and is
        dragged along with ``point`` instead of being resized.
        """
        current = self._candidate
        if current is None:
            return

        if symmetric:
            width = current.x2 - current.x1
            height = current.y2 - current.y1
            self._candidate = RectAnnotation(
                x1=point.x - width,
                y1=point.y - height,
                x2=point.x,
                y2=point.y,
            )
        else:
            self._candidate = RectAnnotation(current.x1, current.y1, point.x, point.y)

    def commit(self) -> Optional[RectAnnotation]:
        """
        Finish the gesture.

        Returns the normalized rectangle appended to the region set, or None
        when there was no candidate or it was too small to keep.
        """
        current = self._candidate
        self._candidate = None
        if current is None:
            return None

        fixed = current.normalized()
        if fixed.diagonal() <= self._min_diagonal:
            logger.debug(
                f"Page {self.page_number}: discarded region with diagonal {fixed.diagonal():.5f}"
            )
            return None

        self._regions.append(fixed)
        logger.debug(f"Page {self.page_number}: committed region {fixed}")
        return fixed

    def clear(self) -> None:
        """Drop every committed region and any active candidate."""
        self._candidate = None
        self._regions.clear()

    def drain(self) -> List[RectAnnotation]:
        return self._regions.drain()
