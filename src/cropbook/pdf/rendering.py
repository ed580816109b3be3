"""
Page rasterization.

Converts PDF pages to numpy images for region cropping.
"""

import numpy as np
import fitz  # PyMuPDF

from ..logging import get_logger

logger = get_logger(__name__)


def render_page_to_image(
    page: fitz.Page,
    scale: float = 3.0,
    colorspace: str = "rgb"
) -> np.ndarray:
    """
    Render a PDF page to a numpy array image.

    Args:
        page: PyMuPDF page object
        scale: Zoom factor relative to 72 DPI (3.0 = 216 DPI)
        colorspace: Color space for output ("rgb" or "gray")

    Returns:
        numpy array of shape (height, width, channels), or (height, width)
        for gray output
    """
    mat = fitz.Matrix(scale, scale)

    if colorspace == "gray":
        pix = page.get_pixmap(matrix=mat, colorspace=fitz.csGRAY, alpha=False)
    else:
        pix = page.get_pixmap(matrix=mat, colorspace=fitz.csRGB, alpha=False)

    img = np.frombuffer(pix.samples, dtype=np.uint8)

    # Rows may be padded; reshape by stride before trimming.
    img = img.reshape(pix.height, pix.stride)[:, :pix.width * pix.n]
    if colorspace == "gray":
        img = img.reshape(pix.height, pix.width)
    else:
        img = img.reshape(pix.height, pix.width, pix.n)

    logger.debug(f"Rendered page to {img.shape} at scale {scale}")

    return img
