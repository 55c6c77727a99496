"""Document extraction for PPTX and DOCX files (PDF and images are rejected)."""

from __future__ import annotations

import logging
from functools import partial
from typing import Callable

from docextract.errors import UnsupportedFormat
from docextract.runtime import ExtractionConfig

from .base import DocumentSection, DocumentType, ExtractedDocument, ExtractedImage
from .docx import extract_docx
from .formats import resolve_document_type
from .guard import check_size, run_with_deadline, run_with_deadline_async
from .pdf import extract_pdf
from .pptx import extract_pptx

logger = logging.getLogger(__name__)

Processor = Callable[[bytes, ExtractionConfig], ExtractedDocument]

PROCESSORS: dict[DocumentType, Processor] = {
    DocumentType.PPTX: extract_pptx,
    DocumentType.DOCX: extract_docx,
    DocumentType.PDF: extract_pdf,
}


def get_processor(mime_type: str | None, filename: str | None = None) -> Processor:
    """
    Resolve the processor for a declared MIME type / filename.

    Raises:
        UnsupportedFormat: For images and anything unrecognized
    """
    document_type = resolve_document_type(mime_type, filename)
    if document_type is DocumentType.IMAGE:
        raise UnsupportedFormat("Images are not documents; upload them through image analysis")
    processor = PROCESSORS.get(document_type)
    if processor is None:
        raise UnsupportedFormat(
            f"Unsupported document format: {mime_type or 'unknown'} ({filename or 'no filename'})"
        )
    return processor


def _log_result(document: ExtractedDocument, filename: str | None) -> ExtractedDocument:
    logger.info(
        "Processed %s document %r: %d sections, %d images",
        document.type.value,
        filename or document.title,
        len(document.sections),
        len(document.images),
    )
    return document


def extract_document(
    data: bytes,
    mime_type: str | None,
    filename: str | None = None,
    config: ExtractionConfig | None = None,
) -> ExtractedDocument:
    """
    Extract structured text and images from a document.

    The size cap is enforced before any parsing; the pipeline then runs
    under the configured deadline.

    Args:
        data: Raw file bytes
        mime_type: Declared MIME type (may be generic or missing)
        filename: Original filename, for extension fallback
        config: Limits; defaults to ExtractionConfig()

    Returns:
        ExtractedDocument with sections, metadata and embedded images

    Raises:
        UnsupportedFormat, OversizedInput, CorruptArchive, PasswordProtected,
        EmptyContent, TimedOut
    """
    config = config or ExtractionConfig()
    processor = get_processor(mime_type, filename)
    check_size(data, config.max_input_bytes)

    document = run_with_deadline(partial(processor, data, config), config.timeout_seconds)
    return _log_result(document, filename)


async def extract_document_async(
    data: bytes,
    mime_type: str | None,
    filename: str | None = None,
    config: ExtractionConfig | None = None,
) -> ExtractedDocument:
    """Async variant of extract_document; parsing runs on a worker thread."""
    config = config or ExtractionConfig()
    processor = get_processor(mime_type, filename)
    check_size(data, config.max_input_bytes)

    document = await run_with_deadline_async(
        partial(processor, data, config), config.timeout_seconds
    )
    return _log_result(document, filename)


__all__ = [
    "DocumentSection",
    "DocumentType",
    "ExtractedDocument",
    "ExtractedImage",
    "PROCESSORS",
    "extract_document",
    "extract_document_async",
    "get_processor",
    "resolve_document_type",
]
