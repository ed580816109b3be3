import numpy as np
import pytest

from cropbook.config import Settings
from cropbook.crops.extractor import CropArtifact, EncodedImage, encode_region
from cropbook.errors import UnsupportedImageFormatError
from cropbook.layout.appendix import add_appendix_pages
from cropbook.pdf.ingestion import PdfDocument
from cropbook.regions.geometry import RectLocation
from tests.helpers.pdf_factory import make_pdf_bytes, open_pdf


def make_artifact(label: str, width_fraction: float = 0.25, size=(60, 40), fmt: str = "png") -> CropArtifact:
    raster = np.full((size[1], size[0], 3), 90, dtype=np.uint8)
    image = encode_region(raster, (0, 0, size[0], size[1]), fmt)
    return CropArtifact(
        page_number=1,
        label=label,
        location=RectLocation(0.1, 0.9, width_fraction, 0.1),
        image=image,
    )


def render_with_appendix(artifacts, settings=None, watermark=False):
    doc = PdfDocument(make_pdf_bytes(1))
    try:
        layout = add_appendix_pages(doc, artifacts, settings, watermark)
        return layout, doc.to_bytes()
    finally:
        doc.close()


class TestAddAppendixPages:
    def test_no_artifacts_adds_no_pages(self):
        layout, data = render_with_appendix([])
        assert layout.page_count == 0
        out = open_pdf(data)
        try:
            assert out.page_count == 1
        finally:
            out.close()

    def test_labels_and_images_are_drawn(self):
        artifacts = [make_artifact(label) for label in ("1", "2.1", "2.2")]
        layout, data = render_with_appendix(artifacts)
        assert layout.page_count == 1

        out = open_pdf(data)
        try:
            assert out.page_count == 2
            gallery = out[1]
            text = gallery.get_text()
            for label in ("1", "2.1", "2.2"):
                assert label in text
            assert len(gallery.get_image_info()) == 3
        finally:
            out.close()

    def test_appendix_uses_configured_page_size(self):
        settings = Settings(appendix_page_size=(400, 500))
        _, data = render_with_appendix([make_artifact("1")], settings)
        out = open_pdf(data)
        try:
            assert out[1].rect.width == pytest.approx(400)
            assert out[1].rect.height == pytest.approx(500)
        finally:
            out.close()

    def test_jpeg_crops_are_accepted(self):
        layout, _ = render_with_appendix([make_artifact("1", fmt="jpeg")])
        assert layout.page_count == 1

    def test_zero_width_crop_draws_label_only(self):
        layout, data = render_with_appendix([make_artifact("5"), make_artifact("4", width_fraction=0.0)])
        assert layout.placements[1].image_width == 0

        out = open_pdf(data)
        try:
            gallery = out[1]
            assert [w[4] for w in gallery.get_text("words")] == ["5", "4"]
            assert len(gallery.get_image_info()) == 1
        finally:
            out.close()

    def test_every_gallery_page_gets_its_crops(self):
        artifacts = [make_artifact(str(i), width_fraction=1.0, size=(200, 100)) for i in range(5)]
        layout, data = render_with_appendix(artifacts)
        assert layout.page_count == 3

        out = open_pdf(data)
        try:
            counts = [len(out[i].get_image_info()) for i in range(1, out.page_count)]
            assert counts == [2, 2, 1]
        finally:
            out.close()

    def test_unsupported_bytes_abort_before_adding_pages(self):
        bogus = CropArtifact(
            page_number=1,
            label="1",
            location=RectLocation(0, 1, 0.5, 0.5),
            image=EncodedImage(data=b"GIF89a....", image_format="gif", width=10, height=10),
        )
        doc = PdfDocument(make_pdf_bytes(1))
        try:
            with pytest.raises(UnsupportedImageFormatError):
                add_appendix_pages(doc, [bogus])
            assert doc.page_count == 1
        finally:
            doc.close()


class TestWatermark:
    """
    **Property: the watermark appears exactly once per appendix page, or nowhere**
    """

    def _many(self):
        # full-width crops, two per A4 gallery page
        return [make_artifact(str(i), width_fraction=1.0, size=(200, 100)) for i in range(8)]

    def test_enabled_once_per_page(self):
        settings = Settings()
        layout, data = render_with_appendix(self._many(), settings, watermark=True)
        assert layout.page_count > 1

        out = open_pdf(data)
        try:
            assert settings.watermark_text not in out[0].get_text()
            for page_number in range(1, out.page_count):
                assert out[page_number].get_text().count(settings.watermark_text) == 1
        finally:
            out.close()

    def test_disabled_is_absent(self):
        settings = Settings()
        _, data = render_with_appendix(self._many(), settings, watermark=False)
        out = open_pdf(data)
        try:
            for page in out:
                assert settings.watermark_text not in page.get_text()
        finally:
            out.close()

    def test_watermark_is_centred_near_bottom(self):
        settings = Settings()
        _, data = render_with_appendix([make_artifact("1")], settings, watermark=True)
        out = open_pdf(data)
        try:
            page = out[1]
            hits = page.search_for(settings.watermark_text)
            assert len(hits) == 1
            centre = (hits[0].x0 + hits[0].x1) / 2
            assert centre == pytest.approx(page.rect.width / 2, abs=2)
            assert hits[0].y1 > page.rect.height - 10
        finally:
            out.close()
