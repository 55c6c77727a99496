"""MIME type and extension resolution."""

from __future__ import annotations

import posixpath

from .base import DocumentType
from .image import is_image_extension

PPTX_MIME = "application/vnd.openxmlformats-officedocument.presentationml.presentation"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PDF_MIME = "application/pdf"

MIME_TYPES: dict[str, DocumentType] = {
    PPTX_MIME: DocumentType.PPTX,
    DOCX_MIME: DocumentType.DOCX,
    PDF_MIME: DocumentType.PDF,
}

EXTENSIONS: dict[str, DocumentType] = {
    ".pptx": DocumentType.PPTX,
    ".docx": DocumentType.DOCX,
    ".pdf": DocumentType.PDF,
}

# Declared types that say nothing about the content
GENERIC_MIME_TYPES: frozenset[str] = frozenset({
    "",
    "application/octet-stream",
    "binary/octet-stream",
    "application/zip",
    "application/x-zip-compressed",
})


def document_type_from_mime(mime_type: str | None) -> DocumentType:
    """Resolve a declared MIME type; parameters like ``; charset=`` are ignored."""
    if not mime_type:
        return DocumentType.UNKNOWN
    essence = mime_type.split(";", 1)[0].strip().lower()
    if essence.startswith("image/"):
        return DocumentType.IMAGE
    return MIME_TYPES.get(essence, DocumentType.UNKNOWN)


def document_type_from_filename(filename: str | None) -> DocumentType:
    """Resolve from the filename extension."""
    if not filename:
        return DocumentType.UNKNOWN
    extension = posixpath.splitext(filename.replace("\\", "/"))[1].lower()
    if is_image_extension(extension):
        return DocumentType.IMAGE
    return EXTENSIONS.get(extension, DocumentType.UNKNOWN)


def resolve_document_type(mime_type: str | None, filename: str | None = None) -> DocumentType:
    """
    Resolve the input kind, MIME type first.

    The filename extension is consulted when the MIME type is missing,
    generic, or unrecognized.
    """
    resolved = document_type_from_mime(mime_type)
    if resolved is not DocumentType.UNKNOWN:
        return resolved
    return document_type_from_filename(filename)
