from .ingestion import EncryptedPdfError, PdfDocument, PdfOpenError, PdfPage
from .rendering import render_page_to_image

__all__ = [
    'EncryptedPdfError',
    'PdfDocument',
    'PdfOpenError',
    'PdfPage',
    'render_page_to_image',
]
