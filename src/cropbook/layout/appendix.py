"""
Appendix gallery pages: applies a packed layout to a document.
"""

from typing import Optional, Sequence

import fitz  # type: ignore[import]

from .packing import GalleryLayout, PackingParams, Placement, items_from_artifacts, pack_gallery
from ..config import Settings
from ..crops.extractor import CropArtifact, sniff_format
from ..logging import get_logger
from ..pdf.ingestion import PdfDocument
from ..render.text import draw_text, flip_rect, measure_text

logger = get_logger(__name__)


def stamp_watermark(page: fitz.Page, settings: Settings) -> None:
    """Small centred caption near the bottom edge of an appendix page."""
    text = settings.watermark_text
    text_width, _ = measure_text(text, settings.watermark_font_size, settings.font_name)
    draw_text(
        page,
        text,
        (page.rect.width - text_width) / 2,
        settings.watermark_baseline,
        settings.watermark_font_size,
        settings.watermark_color,
        settings.font_name,
    )


def add_appendix_pages(
    doc: PdfDocument,
    artifacts: Sequence[CropArtifact],
    settings: Optional[Settings] = None,
    watermark: bool = False,
) -> GalleryLayout:
    """
    Append gallery pages holding every crop in ``artifacts``, in order.

    Nothing is added for an empty list. Each new page gets the watermark
    caption once, when enabled.

    Raises:
        UnsupportedImageFormatError: If a crop is not JPEG or PNG
    """
    settings = settings or Settings()
    params = PackingParams.from_settings(settings)
    layout = pack_gallery(items_from_artifacts(artifacts), params)
    if layout.page_count == 0:
        return layout

    for artifact in artifacts:
        sniff_format(artifact.image.data)

    # Adding a page invalidates earlier fitz.Page handles, so each page is
    # finished before the next one is created.
    for page_index in range(layout.page_count):
        page = doc.add_page(params.page_width, params.page_height).as_pymupdf_page()
        if watermark:
            stamp_watermark(page, settings)
        for placement in layout.page_placements(page_index):
            _draw_placement(page, placement, artifacts[placement.item_index], params, settings)

    logger.info(
        f"Added {layout.page_count} appendix page(s) with {len(layout.placements)} crops"
    )
    return layout


def _draw_placement(
    page: fitz.Page,
    placement: Placement,
    artifact: CropArtifact,
    params: PackingParams,
    settings: Settings,
) -> None:
    draw_text(
        page,
        placement.label,
        placement.label_x,
        placement.label_y,
        params.font_size,
        settings.label_color,
        settings.font_name,
    )

    image_rect = flip_rect(
        placement.image_x,
        placement.image_y,
        placement.image_width,
        placement.image_height,
        params.page_height,
    )
    if image_rect.is_empty:
        # zero-width regions (a straight vertical drag, or one clamped at the page edge)
        logger.debug(f"Crop '{placement.label}' has no area on the gallery page; label only")
        return

    page.insert_image(image_rect, stream=artifact.image.data, keep_proportion=False)
    page.draw_rect(image_rect, color=settings.border_color, width=settings.border_width)
