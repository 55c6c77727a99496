"""
Cheap pre-checks for uploads.

These answer "is this even processable?" without running the full
extraction: magic bytes first, then the cheapest open the format allows.
"""

from __future__ import annotations

import io
import logging
from collections import OrderedDict

from docextract.errors import ExtractionError

from .archive import OLE_SIGNATURE, ArchiveReader, has_zip_signature
from .base import DocumentType
from .docx import REQUIRED_ENTRIES as DOCX_REQUIRED_ENTRIES
from .formats import resolve_document_type
from .pdf import PDF_SIGNATURE, probe_pdf
from .pptx import REQUIRED_ENTRIES as PPTX_REQUIRED_ENTRIES

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Magic bytes
# -----------------------------------------------------------------------------


def is_zip_archive(data: bytes) -> bool:
    """Check for a ZIP signature (PPTX and DOCX are ZIP archives)."""
    return has_zip_signature(data)


def is_pdf(data: bytes) -> bool:
    """Check for the %PDF- signature."""
    return data.startswith(PDF_SIGNATURE)


def is_ole_container(data: bytes) -> bool:
    """Check for an OLE compound file (legacy Office or encrypted OOXML)."""
    return data.startswith(OLE_SIGNATURE)


# -----------------------------------------------------------------------------
# Minimal-open probes
# -----------------------------------------------------------------------------


def _has_entries(data: bytes, names: tuple[str, ...]) -> bool:
    try:
        with ArchiveReader.open(data) as archive:
            archive.require_entries(*names)
    except ExtractionError as e:
        logger.debug("Archive probe rejected buffer: %s", e)
        return False
    return True


def is_valid_pptx(data: bytes) -> bool:
    """Check that the buffer opens as a presentation package."""
    if not is_zip_archive(data) or not _has_entries(data, PPTX_REQUIRED_ENTRIES):
        return False
    try:
        from pptx import Presentation

        Presentation(io.BytesIO(data))
    except Exception as e:
        logger.debug("python-pptx could not open buffer: %s", e)
        return False
    return True


def is_valid_docx(data: bytes) -> bool:
    """Check that the buffer opens as a word-processor package."""
    if not is_zip_archive(data) or not _has_entries(data, DOCX_REQUIRED_ENTRIES):
        return False
    try:
        from docx import Document

        Document(io.BytesIO(data))
    except Exception as e:
        logger.debug("python-docx could not open buffer: %s", e)
        return False
    return True


def is_valid_pdf(data: bytes) -> bool:
    """Check that the buffer opens as an unencrypted PDF with pages."""
    return probe_pdf(data)


# PDF is only structurally probed (is_valid_pdf); extraction rejects it
_PROBES = {
    DocumentType.PPTX: is_valid_pptx,
    DocumentType.DOCX: is_valid_docx,
}


class ValidationCache:
    """
    Bounded LRU of validation results keyed by a caller-supplied content hash.

    Create one per process/worker and pass it in explicitly.
    """

    def __init__(self, max_entries: int = 256) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._entries: OrderedDict[str, bool] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> bool | None:
        if key not in self._entries:
            return None
        self._entries.move_to_end(key)
        return self._entries[key]

    def put(self, key: str, value: bool) -> None:
        self._entries[key] = value
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)


def is_processable(
    data: bytes,
    mime_type: str | None,
    filename: str | None = None,
    *,
    cache: ValidationCache | None = None,
    content_hash: str | None = None,
) -> bool:
    """
    Decide whether a buffer is worth sending through extraction.

    Args:
        data: Raw file bytes
        mime_type: Declared MIME type
        filename: Original filename, for extension fallback
        cache: Optional result cache
        content_hash: Cache key; the cache is only used when both are given

    Returns:
        True if the resolved type is extractable and its probe passes
    """
    use_cache = cache is not None and content_hash is not None
    if use_cache:
        cached = cache.get(content_hash)
        if cached is not None:
            return cached

    probe = _PROBES.get(resolve_document_type(mime_type, filename))
    result = probe(data) if probe else False

    if use_cache:
        cache.put(content_hash, result)
    return result
