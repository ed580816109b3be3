import io

import numpy as np
import pytest
from PIL import Image

from cropbook.crops.extractor import (
    build_artifacts,
    encode_region,
    extract_crop,
    make_label,
    normalize_format,
    sniff_format,
)
from cropbook.errors import UnsupportedImageFormatError
from cropbook.regions.geometry import RectAnnotation


def quadrant_raster(width: int = 200, height: int = 100) -> np.ndarray:
    """Red top-left, green top-right, blue bottom-left, white bottom-right."""
    raster = np.full((height, width, 3), 255, dtype=np.uint8)
    raster[: height // 2, : width // 2] = (255, 0, 0)
    raster[: height // 2, width // 2:] = (0, 255, 0)
    raster[height // 2:, : width // 2] = (0, 0, 255)
    return raster


def decode(data: bytes) -> Image.Image:
    return Image.open(io.BytesIO(data))


class TestExtractCrop:
    def test_pixel_size_matches_scaled_annotation(self):
        raster = quadrant_raster(200, 100)
        encoded = extract_crop(RectAnnotation(0.1, 0.2, 0.6, 0.7), raster, "png")
        assert (encoded.width, encoded.height) == (100, 50)
        assert decode(encoded.data).size == (100, 50)

    def test_crop_content_comes_from_the_marked_area(self):
        raster = quadrant_raster(200, 100)
        encoded = extract_crop(RectAnnotation(0.5, 0.5, 1.0, 1.0), raster, "png")
        img = decode(encoded.data).convert("RGB")
        assert img.getpixel((0, 0)) == (255, 255, 255)

        encoded = extract_crop(RectAnnotation(0.0, 0.5, 0.5, 1.0), raster, "png")
        assert decode(encoded.data).convert("RGB").getpixel((10, 10)) == (0, 0, 255)

    def test_corner_order_is_irrelevant(self):
        raster = quadrant_raster()
        a = extract_crop(RectAnnotation(0.1, 0.1, 0.4, 0.3), raster, "png")
        b = extract_crop(RectAnnotation(0.4, 0.3, 0.1, 0.1), raster, "png")
        assert a == b

    def test_alpha_channel_is_dropped(self):
        raster = np.zeros((20, 20, 4), dtype=np.uint8)
        raster[..., 3] = 128
        encoded = extract_crop(RectAnnotation(0, 0, 1, 1), raster, "png")
        assert decode(encoded.data).mode == "RGB"

    def test_gray_raster_becomes_rgb(self):
        raster = np.full((20, 30), 200, dtype=np.uint8)
        encoded = extract_crop(RectAnnotation(0, 0, 1, 1), raster, "jpeg")
        img = decode(encoded.data)
        assert img.mode == "RGB"
        assert img.format == "JPEG"

    def test_jpeg_is_default(self):
        encoded = extract_crop(RectAnnotation(0, 0, 0.5, 0.5), quadrant_raster())
        assert encoded.image_format == "jpeg"
        assert sniff_format(encoded.data) == "jpeg"

    def test_unsupported_format_raises(self):
        with pytest.raises(UnsupportedImageFormatError, match="Unsupported image type"):
            extract_crop(RectAnnotation(0, 0, 0.5, 0.5), quadrant_raster(), "gif")


class TestFormats:
    @pytest.mark.parametrize("name,expected", [
        ("jpeg", "jpeg"), ("JPG", "jpeg"), ("image/jpeg", "jpeg"), ("png", "png"), ("image/png", "png"),
    ])
    def test_normalize_format(self, name, expected):
        assert normalize_format(name) == expected

    def test_sniff_png(self):
        encoded = encode_region(quadrant_raster(), (0, 0, 10, 10), "png")
        assert sniff_format(encoded.data) == "png"

    def test_sniff_rejects_other_bytes(self):
        with pytest.raises(UnsupportedImageFormatError):
            sniff_format(b"GIF89a\x00\x00")


class TestLabels:
    def test_single_crop_uses_page_number(self):
        assert make_label(4, 0, 1) == "4"

    def test_multiple_crops_are_numbered_from_one(self):
        assert [make_label(7, i, 3) for i in range(3)] == ["7.1", "7.2", "7.3"]

    def test_build_artifacts_pairs_in_drain_order(self):
        raster = quadrant_raster()
        annotations = [
            RectAnnotation(0, 0, 0.5, 0.5),
            RectAnnotation(0.5, 0, 1, 0.5),
            RectAnnotation(0, 0.5, 0.5, 1),
        ]
        images = [extract_crop(a, raster, "png") for a in annotations]
        artifacts = build_artifacts(2, annotations, images)

        assert [a.label for a in artifacts] == ["2.1", "2.2", "2.3"]
        assert [a.location for a in artifacts] == [a.to_location() for a in annotations]
        assert [a.image for a in artifacts] == images
        assert all(a.page_number == 2 for a in artifacts)
