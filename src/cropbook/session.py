"""
Export session: owns the loaded document and the page registry, and runs
the drain -> crop -> stamp -> gallery -> serialize pipeline.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from .config import Settings
from .crops.extractor import CropArtifact, EncodedImage, build_artifacts, extract_crop
from .errors import DocumentNotLoadedError, MissingPageError
from .layout.appendix import add_appendix_pages
from .logging import get_logger
from .pdf.ingestion import PdfDocument, PdfSource
from .pdf.rendering import render_page_to_image
from .regions.capture import RegionCapture
from .regions.geometry import RectAnnotation
from .render.stamp import stamp_region

logger = get_logger(__name__)


@dataclass
class _Registration:
    generation: int
    capture: RegionCapture


class ExportSession:
    """
    One loaded document plus the region captures registered for its pages.

    Loading or unloading a document bumps the registry generation, wipes
    every region set and forgets all registrations.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or Settings()
        self._source: Optional[PdfDocument] = None
        self._generation = 0
        self._pages: Dict[int, _Registration] = {}
        self._rendering = False
        self.last_output: Optional[bytes] = None

    # Document ------------------------------------------------------------

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_loaded(self) -> bool:
        return self._source is not None

    @property
    def is_rendering(self) -> bool:
        return self._rendering

    @property
    def page_count(self) -> int:
        return self._require_source().page_count

    def load(self, source: PdfSource) -> None:
        """
        Open a new source document.

        Raises:
            PdfOpenError: If the document cannot be opened
            EncryptedPdfError: If the document is password protected
        """
        document = PdfDocument(source)
        self._invalidate()
        if self._source is not None:
            self._source.close()
        self._source = document
        logger.info(f"Loaded document with {document.page_count} pages (generation {self._generation})")

    def unload(self) -> None:
        self._invalidate()
        if self._source is not None:
            self._source.close()
        self._source = None

    def page_dimensions(self, page_number: int) -> tuple[float, float]:
        return self._require_source().page_dimensions(page_number)

    # Registry ------------------------------------------------------------

    def register_page(self, page_number: int, capture: Optional[RegionCapture] = None) -> RegionCapture:
        """Register (or replace) the capture for ``page_number`` and return it."""
        if capture is None:
            capture = RegionCapture(page_number, min_diagonal=self.settings.min_diagonal)
        self._pages[page_number] = _Registration(self._generation, capture)
        return capture

    def capture(self, page_number: int) -> RegionCapture:
        """Return the registered capture for ``page_number``, registering one if needed."""
        registration = self._pages.get(page_number)
        if registration is None or registration.generation != self._generation:
            return self.register_page(page_number)
        return registration.capture

    def registered_pages(self) -> List[int]:
        return sorted(
            number for number, registration in self._pages.items()
            if registration.generation == self._generation
        )

    def clear_page(self, page_number: int) -> None:
        registration = self._pages.get(page_number)
        if registration is not None:
            registration.capture.clear()

    def _invalidate(self) -> None:
        for registration in self._pages.values():
            registration.capture.clear()
        self._pages = {}
        self._generation += 1

    def _require_source(self) -> PdfDocument:
        if self._source is None:
            raise DocumentNotLoadedError("No document loaded")
        return self._source

    # Export --------------------------------------------------------------

    async def render(self, watermark: bool = False) -> Optional[bytes]:
        """
        Stamp every registered page, append the crop gallery and serialize.

        Returns the new document bytes, or None when another render is
        already in progress (the call is dropped, not queued). Any error
        aborts the attempt; pages drained before the error stay drained.

        Raises:
            DocumentNotLoadedError: If no document is loaded
            MissingPageError: If a page with regions is not in the document
            UnsupportedImageFormatError: If a crop is not JPEG or PNG
        """
        if self._rendering:
            logger.debug("Render already in progress; request dropped")
            return None
        source = self._require_source()

        self._rendering = True
        try:
            data = await self._render(source, watermark)
        finally:
            self._rendering = False

        self.last_output = data
        return data

    def render_sync(self, watermark: bool = False) -> Optional[bytes]:
        return asyncio.run(self.render(watermark))

    async def _render(self, source: PdfDocument, watermark: bool) -> bytes:
        generation = self._generation
        output = PdfDocument(source.data)
        try:
            artifacts: List[CropArtifact] = []
            for page_number in self.registered_pages():
                registration = self._pages.get(page_number)
                if registration is None or registration.generation != generation:
                    continue
                artifacts.extend(await self._process_page(source, output, page_number, registration.capture))

            add_appendix_pages(output, artifacts, self.settings, watermark)
            data = await asyncio.to_thread(output.to_bytes)
        finally:
            output.close()

        logger.info(f"Rendered {len(artifacts)} crops into {len(data)} bytes")
        return data

    async def _process_page(
        self,
        source: PdfDocument,
        output: PdfDocument,
        page_number: int,
        capture: RegionCapture,
    ) -> List[CropArtifact]:
        if not capture.regions:
            return []
        if not 1 <= page_number <= output.page_count:
            raise MissingPageError(page_number, output.page_count)

        annotations = capture.drain()
        raster = render_page_to_image(
            source.page(page_number).as_pymupdf_page(),
            scale=self.settings.raster_scale,
        )
        images = await asyncio.to_thread(self._extract_all, annotations, raster)
        artifacts = build_artifacts(page_number, annotations, images)

        target = output.page(page_number).as_pymupdf_page()
        for artifact in artifacts:
            stamp_region(target, artifact.location, artifact.label, self.settings)

        logger.debug(f"Page {page_number}: stamped {len(artifacts)} region(s)")
        return artifacts

    def _extract_all(self, annotations: List[RectAnnotation], raster: np.ndarray) -> List[EncodedImage]:
        return [
            extract_crop(
                annotation,
                raster,
                image_format=self.settings.image_format,
                quality=self.settings.jpeg_quality,
            )
            for annotation in annotations
        ]
