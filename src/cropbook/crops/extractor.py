"""
Crop extraction: cut a region out of a rendered page and encode it.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from PIL import Image

from ..errors import UnsupportedImageFormatError
from ..logging import get_logger
from ..regions.geometry import RectAnnotation, RectLocation

logger = get_logger(__name__)

SUPPORTED_FORMATS = ("jpeg", "png")

_PIL_FORMATS = {"jpeg": "JPEG", "png": "PNG"}

_JPEG_SIGNATURE = b"\xff\xd8\xff"
_PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@dataclass(frozen=True)
class EncodedImage:
    data: bytes
    image_format: str
    width: int
    height: int


@dataclass(frozen=True)
class CropArtifact:
    """A cropped region ready for the appendix, with its overlay label."""
    page_number: int
    label: str
    location: RectLocation
    image: EncodedImage

    @property
    def pixel_width(self) -> int:
        return self.image.width

    @property
    def pixel_height(self) -> int:
        return self.image.height


def normalize_format(fmt: str) -> str:
    """Map a user-facing format name onto 'jpeg' or 'png'."""
    name = fmt.lower().strip()
    if name in ("jpg", "image/jpeg", "image/jpg"):
        name = "jpeg"
    elif name == "image/png":
        name = "png"
    if name not in SUPPORTED_FORMATS:
        raise UnsupportedImageFormatError(f"Unsupported image type: {fmt}")
    return name


def sniff_format(data: bytes) -> str:
    """
    Identify encoded image bytes by their signature.

    Raises:
        UnsupportedImageFormatError: If the bytes are neither JPEG nor PNG
    """
    if data.startswith(_JPEG_SIGNATURE):
        return "jpeg"
    if data.startswith(_PNG_SIGNATURE):
        return "png"
    raise UnsupportedImageFormatError("Unsupported image type: unrecognised signature")


def encode_region(
    raster: np.ndarray,
    pixel_box: Tuple[int, int, int, int],
    fmt: str = "jpeg",
    quality: int = 92,
) -> EncodedImage:
    """
    Encode a (left, top, right, bottom) pixel box of ``raster``.

    Alpha channels are dropped; the output is always RGB.
    """
    name = normalize_format(fmt)
    left, top, right, bottom = pixel_box

    region = np.ascontiguousarray(raster[top:bottom, left:right])
    img = Image.fromarray(region)
    if img.mode != "RGB":
        img = img.convert("RGB")

    buffer = io.BytesIO()
    save_kwargs = {"quality": quality} if name == "jpeg" else {}
    img.save(buffer, format=_PIL_FORMATS[name], **save_kwargs)

    return EncodedImage(
        data=buffer.getvalue(),
        image_format=name,
        width=img.width,
        height=img.height,
    )


def extract_crop(
    annotation: RectAnnotation,
    raster: np.ndarray,
    image_format: str = "jpeg",
    quality: int = 92,
) -> EncodedImage:
    """
    Crop ``annotation`` out of a full-page raster.

    Args:
        annotation: Region in page fractions (normalized here)
        raster: Page image of shape (height, width[, channels])
        image_format: "jpeg" or "png"
        quality: JPEG quality, ignored for PNG

    Returns:
        EncodedImage whose pixel size is the annotation scaled by the raster size
    """
    raster_height, raster_width = raster.shape[:2]
    box = annotation.pixel_box(raster_width, raster_height)
    encoded = encode_region(raster, box, image_format, quality)
    logger.debug(
        f"Cropped {box} from {raster_width}x{raster_height} raster "
        f"as {encoded.image_format} ({len(encoded.data)} bytes)"
    )
    return encoded


def make_label(page_number: int, index: int, count: int) -> str:
    """Overlay label for the ``index``-th (0-based) of ``count`` crops on a page."""
    if count == 1:
        return f"{page_number}"
    return f"{page_number}.{index + 1}"


def build_artifacts(
    page_number: int,
    annotations: list[RectAnnotation],
    images: list[EncodedImage],
) -> list[CropArtifact]:
    """Pair drained annotations with their extracted images, in drain order."""
    count = len(annotations)
    artifacts = []
    for i, (annotation, image) in enumerate(zip(annotations, images)):
        artifacts.append(
            CropArtifact(
                page_number=page_number,
                label=make_label(page_number, i, count),
                location=annotation.to_location(),
                image=image,
            )
        )
    return artifacts
