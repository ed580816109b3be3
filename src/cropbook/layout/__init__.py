"""
Appendix gallery layout.

``pack_gallery`` is the pure shelf packer; ``add_appendix_pages`` draws its
result into a document.
"""

from .packing import (
    GalleryItem,
    GalleryLayout,
    LayoutCursor,
    PackingParams,
    Placement,
    pack_gallery,
    render_size,
)
from .appendix import add_appendix_pages, stamp_watermark

__all__ = [
    'GalleryItem',
    'GalleryLayout',
    'LayoutCursor',
    'PackingParams',
    'Placement',
    'pack_gallery',
    'render_size',
    'add_appendix_pages',
    'stamp_watermark',
]
