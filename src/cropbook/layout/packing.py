"""
Shelf packing for the appendix gallery.

Crops are placed left to right in rows, rows top to bottom, pages one after
another, in a single forward pass with no backtracking. Coordinates use a
bottom-left origin, as in PDF user space.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from ..config import Settings
from ..logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class GalleryItem:
    """What the packer needs to know about one crop."""
    label: str
    width_fraction: float   # location.w, relative to the source page width
    pixel_width: int
    pixel_height: int


@dataclass(frozen=True)
class PackingParams:
    page_width: float
    page_height: float
    margin: float = 20.0
    gap: float = 15.0
    font_size: float = 16.0
    vertical_reserve: float = 1.5

    @classmethod
    def from_settings(cls, settings: Settings) -> "PackingParams":
        width, height = settings.appendix_page_size
        return cls(
            page_width=width,
            page_height=height,
            margin=settings.margin,
            gap=settings.gap,
            font_size=settings.label_font_size,
            vertical_reserve=settings.vertical_reserve,
        )

    def required_height(self, render_height: float) -> float:
        """Vertical room an item needs below its row top: label, gaps and image."""
        return self.vertical_reserve * self.gap + self.font_size + render_height


@dataclass(frozen=True)
class Placement:
    """Where one crop goes: label baseline and image box, bottom-left origin."""
    item_index: int
    label: str
    page_index: int
    row_index: int
    label_x: float
    label_y: float
    image_x: float
    image_y: float
    image_width: float
    image_height: float


@dataclass
class LayoutCursor:
    page_index: int
    x: float
    y: float
    row_top: float
    row_min: float
    row_index: int = 0


@dataclass
class GalleryLayout:
    page_count: int = 0
    placements: List[Placement] = field(default_factory=list)

    def page_placements(self, page_index: int) -> List[Placement]:
        return [p for p in self.placements if p.page_index == page_index]


def render_size(item: GalleryItem, params: PackingParams) -> tuple[float, float]:
    """Width clamped to the printable area; height keeps the crop's aspect ratio."""
    width = min(
        item.width_fraction * params.page_width,
        params.page_width - 3 * params.margin,
    )
    height = width * (item.pixel_height / item.pixel_width)
    return width, height


def pack_gallery(items: Sequence[GalleryItem], params: PackingParams) -> GalleryLayout:
    """
    Lay out ``items`` in order over as many appendix pages as needed.

    An empty input produces no pages. The first item always opens a row
    because the cursor starts at the right page edge.
    """
    layout = GalleryLayout()
    if not items:
        return layout

    W = params.page_width
    H = params.page_height
    M = params.margin
    G = params.gap
    F = params.font_size

    top = H - M
    cursor = LayoutCursor(page_index=0, x=W, y=top, row_top=top, row_min=top, row_index=-1)
    layout.page_count = 1

    for index, item in enumerate(items):
        render_width, render_height = render_size(item, params)
        needed = params.required_height(render_height)

        cursor.row_min = min(cursor.row_min, cursor.y)

        # continue the row only if there is room to the right and this item fits below the row top
        fits_row = (
            W - (M + cursor.x + G) > render_width
            and cursor.row_top > needed
        )
        if fits_row:
            cursor.y = cursor.row_top
            cursor.x = cursor.x + G
        else:
            cursor.y = cursor.row_top = cursor.row_min
            cursor.x = M
            cursor.row_index += 1

        if cursor.y < needed:
            cursor.y = cursor.row_top = cursor.row_min = top
            cursor.x = M
            cursor.page_index += 1
            cursor.row_index = 0
            layout.page_count += 1
            logger.debug(f"Item {index} ('{item.label}') opens appendix page {cursor.page_index}")

        label_y = cursor.y - F - G
        image_y = label_y - render_height - G / 2
        layout.placements.append(
            Placement(
                item_index=index,
                label=item.label,
                page_index=cursor.page_index,
                row_index=cursor.row_index,
                label_x=cursor.x,
                label_y=label_y,
                image_x=cursor.x,
                image_y=image_y,
                image_width=render_width,
                image_height=render_height,
            )
        )

        cursor.y = image_y
        cursor.x = cursor.x + render_width

    logger.info(f"Packed {len(items)} crops onto {layout.page_count} appendix page(s)")
    return layout


def items_from_artifacts(artifacts: Sequence) -> List[GalleryItem]:
    """Build packer items from crop artifacts (anything with label, location and pixel size)."""
    return [
        GalleryItem(
            label=artifact.label,
            width_fraction=artifact.location.w,
            pixel_width=artifact.pixel_width,
            pixel_height=artifact.pixel_height,
        )
        for artifact in artifacts
    ]
