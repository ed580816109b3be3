"""
Geometry of user-drawn regions.

Annotations are stored in page-fraction coordinates with the origin at the
top-left corner of the rendered page. Locations use the PDF convention of a
bottom-left origin and are what the stamp and gallery code consume.
"""

import math
from dataclasses import dataclass
from typing import Tuple


def clamp01(value: float) -> float:
    return max(0.0, min(value, 1.0))


@dataclass(frozen=True)
class Point:
    """A point in page-fraction coordinates (top-left origin)."""
    x: float
    y: float


@dataclass(frozen=True)
class RectLocation:
    """Placement (x, y, w, h) in page fractions, bottom-left origin; y is the top edge."""
    x: float
    y: float
    w: float
    h: float

    def scaled(self, page_width: float, page_height: float) -> Tuple[float, float, float, float]:
        """Scale to absolute page units."""
        return (
            self.x * page_width,
            self.y * page_height,
            self.w * page_width,
            self.h * page_height,
        )


@dataclass(frozen=True)
class RectAnnotation:
    """Two corner points in page fractions; corners may come in any order."""
    x1: float
    y1: float
    x2: float
    y2: float

    @classmethod
    def from_points(cls, a: Point, b: Point) -> "RectAnnotation":
        return cls(a.x, a.y, b.x, b.y)

    def normalized(self) -> "RectAnnotation":
        """
        Order the corners and clamp them to the unit square.

        The result satisfies x1 <= x2 and y1 <= y2; applying it twice
        yields the same rectangle.
        """
        return RectAnnotation(
            x1=clamp01(min(self.x1, self.x2)),
            y1=clamp01(min(self.y1, self.y2)),
            x2=clamp01(max(self.x1, self.x2)),
            y2=clamp01(max(self.y1, self.y2)),
        )

    def diagonal(self) -> float:
        """Euclidean distance between the two corners."""
        return math.hypot(self.x1 - self.x2, self.y1 - self.y2)

    def width(self) -> float:
        return abs(self.x2 - self.x1)

    def height(self) -> float:
        return abs(self.y2 - self.y1)

    def to_location(self) -> RectLocation:
        """Convert to a bottom-left origin placement."""
        fixed = self.normalized()
        return RectLocation(
            x=fixed.x1,
            y=1 - fixed.y1,
            w=fixed.width(),
            h=fixed.height(),
        )

    def pixel_box(self, raster_width: int, raster_height: int) -> Tuple[int, int, int, int]:
        """
        Bounding box in raster pixels as (left, top, right, bottom).

        The box is at least one pixel wide and tall and never leaves the raster.
        """
        fixed = self.normalized()
        left = min(int(round(fixed.x1 * raster_width)), raster_width - 1)
        top = min(int(round(fixed.y1 * raster_height)), raster_height - 1)
        right = max(int(round(fixed.x2 * raster_width)), left + 1)
        bottom = max(int(round(fixed.y2 * raster_height)), top + 1)
        return left, top, min(right, raster_width), min(bottom, raster_height)
