"""
Numbered overlay boxes painted over marked regions of the original pages.
"""

import math
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import fitz  # type: ignore[import]

from .text import draw_text, flip_rect, measure_text
from ..config import Settings
from ..logging import get_logger
from ..regions.geometry import RectLocation

logger = get_logger(__name__)

Measure = Callable[[str, float], Tuple[float, float]]


@dataclass(frozen=True)
class StampGeometry:
    """Absolute placement of one stamp, bottom-left origin."""
    label: str
    x: float
    y: float          # top edge of the box
    width: float
    height: float
    font_size: float
    text_x: float
    text_y: float     # baseline


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def stamp_font_size(
    box_height: float,
    page_width: float,
    page_height: float,
    height_cap: float = 0.04,
    width_cap: Optional[float] = 0.04,
) -> float:
    """
    Font size for a stamp label: 80% of the box height, capped by page size.

    ``width_cap=None`` leaves only the page-height cap.
    """
    size = min(round_half_up(box_height * 0.8), height_cap * page_height)
    if width_cap is not None:
        size = min(size, width_cap * page_width)
    return size


def stamp_geometry(
    location: RectLocation,
    label: str,
    page_width: float,
    page_height: float,
    settings: Optional[Settings] = None,
    measure: Optional[Measure] = None,
) -> StampGeometry:
    """Compute box and centred label placement for ``location`` on a page."""
    settings = settings or Settings()
    if measure is None:
        def measure(text: str, size: float) -> Tuple[float, float]:
            return measure_text(text, size, settings.font_name)

    x, y, w, h = location.scaled(page_width, page_height)
    font_size = stamp_font_size(
        h,
        page_width,
        page_height,
        height_cap=settings.stamp_height_cap,
        width_cap=settings.stamp_width_cap,
    )
    text_width, text_height = measure(label, font_size)

    return StampGeometry(
        label=label,
        x=x,
        y=y,
        width=w,
        height=h,
        font_size=font_size,
        text_x=x + (w - text_width) / 2,
        text_y=y - (h + text_height) / 2,
    )


def stamp_region(
    page: fitz.Page,
    location: RectLocation,
    label: str,
    settings: Optional[Settings] = None,
) -> StampGeometry:
    """
    Paint an opaque box over ``location`` and centre ``label`` inside it.

    Returns the geometry that was drawn.
    """
    settings = settings or Settings()
    page_width = float(page.rect.width)
    page_height = float(page.rect.height)
    geometry = stamp_geometry(location, label, page_width, page_height, settings)

    rect = flip_rect(
        geometry.x,
        geometry.y - geometry.height,
        geometry.width,
        geometry.height,
        page_height,
    )
    page.draw_rect(rect, color=None, fill=settings.stamp_fill, width=0)

    if geometry.font_size > 0:
        draw_text(
            page,
            label,
            geometry.text_x,
            geometry.text_y,
            geometry.font_size,
            settings.stamp_text_color,
            settings.font_name,
        )
    else:
        logger.debug(f"Stamp '{label}' too small for a label")

    return geometry