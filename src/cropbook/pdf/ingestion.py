from __future__ import annotations

from pathlib import Path
from typing import Iterator, Tuple, Union

import fitz  # type: ignore[import]

from ..errors import CropbookError, MissingPageError


class PdfOpenError(CropbookError):
    """Raised when a PDF cannot be opened."""


class EncryptedPdfError(PdfOpenError):
    """Raised when a PDF is encrypted and cannot be read."""


PdfSource = Union[Path, str, bytes]


class PdfPage:
    def __init__(self, page: fitz.Page, number: int) -> None:
        self._page = page
        self._number = number

    @property
    def number(self) -> int:
        """1-based page number."""
        return self._number

    @property
    def width(self) -> float:
        return float(self._page.rect.width)

    @property
    def height(self) -> float:
        return float(self._page.rect.height)

    def as_pymupdf_page(self) -> fitz.Page:
        """Return the underlying PyMuPDF page object."""
        return self._page


class PdfDocument:
    """
    Thin wrapper around a PyMuPDF document.

    Accepts a path or the raw PDF bytes. Page numbers are 1-based throughout.
    """

    def __init__(self, source: PdfSource) -> None:
        if isinstance(source, (bytes, bytearray)):
            self._path = None
            self._data = bytes(source)
            label = "<bytes>"
        else:
            self._path = Path(source)
            if not self._path.exists():
                raise PdfOpenError(f"PDF file does not exist: {self._path}")
            self._data = self._path.read_bytes()
            label = str(self._path)
        self._doc = self._open_document(self._data, label)

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def data(self) -> bytes:
        """The bytes this document was opened from."""
        return self._data

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    def page(self, page_number: int) -> PdfPage:
        """Load a page by 1-based number."""
        if not 1 <= page_number <= self.page_count:
            raise MissingPageError(page_number, self.page_count)
        return PdfPage(self._doc.load_page(page_number - 1), page_number)

    def pages(self) -> Iterator[PdfPage]:
        """Iterate over all pages in the document."""
        for i in range(self.page_count):
            yield PdfPage(self._doc.load_page(i), i + 1)

    def page_dimensions(self, page_number: int) -> Tuple[float, float]:
        page = self.page(page_number)
        return page.width, page.height

    def add_page(self, width: float, height: float) -> PdfPage:
        """Append a blank page and return it."""
        raw = self._doc.new_page(width=width, height=height)
        return PdfPage(raw, self.page_count)

    def to_bytes(self) -> bytes:
        """Serialize the (possibly modified) document."""
        return self._doc.tobytes(garbage=3, deflate=True)

    def as_pymupdf_document(self) -> fitz.Document:
        return self._doc

    def close(self) -> None:
        """Close the PDF document and release its resources."""
        if hasattr(self, '_doc') and self._doc is not None:
            self._doc.close()
            self._doc = None

    def __enter__(self) -> PdfDocument:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __del__(self) -> None:
        try:
            self.close()
        except Exception:
            # Best effort cleanup - don't raise in __del__
            pass

    def _open_document(self, data: bytes, label: str) -> fitz.Document:
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as exc:
            raise PdfOpenError(f"Failed to open PDF: {label}") from exc

        if doc.needs_pass:
            doc.close()
            raise EncryptedPdfError(f"PDF is encrypted: {label}")

        return doc
