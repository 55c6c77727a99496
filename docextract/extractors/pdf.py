"""PDF handling.

Text extraction for PDF is not offered: scanned and image-heavy PDFs
extract poorly, so callers are directed to upload page images instead.
Only a cheap structural probe (PyMuPDF) is provided for validation.
"""

from __future__ import annotations

import logging

from docextract.errors import UnsupportedFormat
from docextract.runtime import ExtractionConfig

from .base import ExtractedDocument

logger = logging.getLogger(__name__)

PDF_SIGNATURE = b"%PDF-"


def extract_pdf(data: bytes, config: ExtractionConfig) -> ExtractedDocument:
    """
    Always fails.

    Raises:
        UnsupportedFormat: PDF text extraction is not available
    """
    raise UnsupportedFormat(
        "PDF text extraction is not supported; upload the pages as images instead"
    )


def probe_pdf(data: bytes) -> bool:
    """Open the PDF with PyMuPDF and check that it has at least one page."""
    if not data.startswith(PDF_SIGNATURE):
        return False
    try:
        import fitz  # pymupdf

        with fitz.open(stream=data, filetype="pdf") as doc:
            return not doc.needs_pass and doc.page_count > 0
    except Exception as e:
        logger.debug("PDF probe failed: %s", e)
        return False
