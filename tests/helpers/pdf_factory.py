"""Helper functions for creating test PDFs with proper file handle management."""

from pathlib import Path
from typing import List, Optional, Tuple

import fitz  # type: ignore[import]

A4 = (595, 842)


def make_pdf_bytes(page_count: int = 1,
                   page_size: Tuple[float, float] = A4,
                   texts: Optional[List[str]] = None) -> bytes:
    """Create a PDF with ``page_count`` pages, optionally with one line of text each."""
    doc = fitz.open()
    try:
        for i in range(page_count):
            page = doc.new_page(width=page_size[0], height=page_size[1])
            if texts and i < len(texts):
                page.insert_text((50, 50), texts[i])
        return doc.tobytes()
    finally:
        doc.close()


def make_multi_page_pdf(tmp_path: Path, page_count: int = 1,
                        texts: Optional[List[str]] = None) -> Path:
    """Write a multi-page PDF into ``tmp_path`` and return its path."""
    pdf_path = tmp_path / "test.pdf"
    pdf_path.write_bytes(make_pdf_bytes(page_count, texts=texts))
    return pdf_path


def make_quadrant_pdf_bytes(page_size: Tuple[float, float] = (200, 200)) -> bytes:
    """
    One page split into four solid quadrants:
    top-left red, top-right green, bottom-left blue, bottom-right white.
    """
    width, height = page_size
    doc = fitz.open()
    try:
        page = doc.new_page(width=width, height=height)
        half_w, half_h = width / 2, height / 2
        page.draw_rect(fitz.Rect(0, 0, half_w, half_h), color=None, fill=(1, 0, 0), width=0)
        page.draw_rect(fitz.Rect(half_w, 0, width, half_h), color=None, fill=(0, 1, 0), width=0)
        page.draw_rect(fitz.Rect(0, half_h, half_w, height), color=None, fill=(0, 0, 1), width=0)
        return doc.tobytes()
    finally:
        doc.close()


def make_encrypted_pdf(tmp_path: Path) -> Path:
    """Create an encrypted PDF with proper file handle management."""
    pdf_path = tmp_path / "encrypted.pdf"

    doc = fitz.open()
    try:
        page = doc.new_page()
        page.insert_text((50, 50), "Encrypted content")

        pdf_bytes = doc.tobytes(encryption=fitz.PDF_ENCRYPT_AES_256, user_pw="test", owner_pw="test")
        pdf_path.write_bytes(pdf_bytes)

    finally:
        doc.close()

    return pdf_path


def open_pdf(data: bytes) -> fitz.Document:
    """Open rendered output for inspection."""
    return fitz.open(stream=data, filetype="pdf")
