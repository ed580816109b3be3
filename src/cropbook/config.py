from dataclasses import dataclass
from typing import Optional, Tuple

RGB = Tuple[float, float, float]

# pdf default page size (A4 in points)
A4_SIZE: Tuple[float, float] = (595.28, 841.89)


@dataclass
class Settings:
    # Region capture
    min_diagonal: float = 0.005

    # Crop extraction
    raster_scale: float = 3.0
    image_format: str = "jpeg"
    jpeg_quality: int = 92

    # Stamp overlay
    stamp_height_cap: float = 0.04
    stamp_width_cap: Optional[float] = 0.04
    stamp_fill: RGB = (0.3, 0.3, 0.3)
    stamp_text_color: RGB = (0.9, 0.9, 0.9)

    # Appendix gallery
    appendix_page_size: Tuple[float, float] = A4_SIZE
    margin: float = 20.0
    gap: float = 15.0
    label_font_size: float = 16.0
    vertical_reserve: float = 1.5
    label_color: RGB = (0.0, 0.0, 0.0)
    border_color: RGB = (0.3, 0.3, 0.3)
    border_width: float = 1.0

    # Watermark footer
    watermark_text: str = "Created with cropbook"
    watermark_font_size: float = 6.0
    watermark_color: RGB = (0.5, 0.5, 0.5)
    watermark_baseline: float = 5.0

    # Font used for stamps, labels and watermark (PyMuPDF base-14 code)
    font_name: str = "hebo"
