"""
Text measurement and drawing helpers.

Layout code works with a bottom-left origin (PDF user space); PyMuPDF draws
with a top-left origin. The helpers here do the flip.
"""

from functools import lru_cache
from typing import Tuple

import fitz  # type: ignore[import]

RGB = Tuple[float, float, float]


@lru_cache(maxsize=None)
def _font(font_name: str) -> fitz.Font:
    return fitz.Font(fontname=font_name)


def measure_text(text: str, font_size: float, font_name: str = "hebo") -> Tuple[float, float]:
    """Width and height of ``text`` at ``font_size``, in points."""
    font = _font(font_name)
    width = font.text_length(text, fontsize=font_size)
    height = (font.ascender - font.descender) * font_size
    return width, height


def flip_rect(x: float, y: float, width: float, height: float, page_height: float) -> fitz.Rect:
    """Rect whose bottom-left corner is (x, y) in bottom-left coordinates."""
    top = page_height - (y + height)
    return fitz.Rect(x, top, x + width, top + height)


def draw_text(
    page: fitz.Page,
    text: str,
    x: float,
    y: float,
    font_size: float,
    color: RGB,
    font_name: str = "hebo",
) -> None:
    """Draw ``text`` with its baseline starting at (x, y), bottom-left origin."""
    page.insert_text(
        fitz.Point(x, page.rect.height - y),
        text,
        fontsize=font_size,
        fontname=font_name,
        color=color,
    )
