"""Drawing on document pages: stamp overlays and text helpers."""

from .stamp import StampGeometry, stamp_font_size, stamp_geometry, stamp_region
from .text import draw_text, flip_rect, measure_text

__all__ = [
    'StampGeometry',
    'stamp_font_size',
    'stamp_geometry',
    'stamp_region',
    'draw_text',
    'flip_rect',
    'measure_text',
]
