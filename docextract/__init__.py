"""
docextract - structured text from uploaded office documents.

Converts PPTX and DOCX uploads into an ExtractedDocument: ordered
``## title`` sections, document metadata and embedded images.

Usage:
    from docextract import extract

    document = extract(data, upload.content_type, upload.filename)
    for section in document.sections:
        print(section.page_number, section.title)
"""

from __future__ import annotations

from .errors import (
    CorruptArchive,
    EmptyContent,
    ExtractionError,
    OversizedInput,
    PasswordProtected,
    TimedOut,
    UnsupportedFormat,
)
from .extractors import extract_document, extract_document_async, resolve_document_type
from .extractors.base import (
    SECTION_DELIMITER,
    DocumentMetadata,
    DocumentSection,
    DocumentType,
    ExtractedDocument,
    ExtractedImage,
)
from .extractors.preview import DocumentPreview, preview_document
from .extractors.validate import (
    ValidationCache,
    is_ole_container,
    is_pdf,
    is_processable,
    is_valid_docx,
    is_valid_pdf,
    is_valid_pptx,
    is_zip_archive,
)
from .runtime import ExtractionConfig, get_extraction_config

# Public entry points
extract = extract_document
extract_async = extract_document_async
preview = preview_document

__all__ = [
    "SECTION_DELIMITER",
    "CorruptArchive",
    "DocumentMetadata",
    "DocumentPreview",
    "DocumentSection",
    "DocumentType",
    "EmptyContent",
    "ExtractedDocument",
    "ExtractedImage",
    "ExtractionConfig",
    "ExtractionError",
    "OversizedInput",
    "PasswordProtected",
    "TimedOut",
    "UnsupportedFormat",
    "ValidationCache",
    "extract",
    "extract_async",
    "get_extraction_config",
    "is_ole_container",
    "is_pdf",
    "is_processable",
    "is_valid_docx",
    "is_valid_pdf",
    "is_valid_pptx",
    "is_zip_archive",
    "preview",
    "resolve_document_type",
]
