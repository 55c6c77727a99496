"""DOCX document extraction using python-docx."""

from __future__ import annotations

import io
import logging
import math

from docextract.errors import CorruptArchive, EmptyContent
from docextract.runtime import ExtractionConfig

from .archive import ArchiveReader
from .base import (
    DocumentMetadata,
    DocumentSection,
    DocumentType,
    ExtractedDocument,
    ExtractedImage,
    number_sections,
    render_content,
)
from .markup import FALLBACK_TITLE, INTRODUCTION_TITLE, render_markup, segment_markup
from .media import ImagePlacement, extract_images
from .metadata import read_core_properties
from .ooxml import MAX_HEURISTIC_TITLE_LENGTH, find_picture_refs

logger = logging.getLogger(__name__)

DOCUMENT_ENTRY = "word/document.xml"
REQUIRED_ENTRIES = ("[Content_Types].xml", DOCUMENT_ENTRY)
MEDIA_PREFIX = "word/media/"

UNTITLED = "Untitled Document"


def guess_title(raw_text: str) -> str:
    """First of the first five lines that looks like a title (4-149 chars)."""
    for line in raw_text.split("\n")[:5]:
        stripped = line.strip()
        if 3 < len(stripped) < MAX_HEURISTIC_TITLE_LENGTH:
            return stripped
    return ""


def _first_heading(sections: tuple[DocumentSection, ...]) -> str:
    for section in sections:
        if section.title not in (FALLBACK_TITLE, INTRODUCTION_TITLE):
            return section.title
    return ""


def open_word_document(data: bytes):
    """
    Load the package with python-docx.

    Raises:
        CorruptArchive: If python-docx cannot make sense of the package
    """
    from docx import Document

    try:
        return Document(io.BytesIO(data))
    except Exception as e:
        raise CorruptArchive(f"Not a readable word-processor document: {e}") from e


def estimate_page_count(text: str, chars_per_page: int) -> int:
    return max(1, math.ceil(len(text) / chars_per_page))


def _image_placements(archive: ArchiveReader, document_xml: str) -> dict[str, ImagePlacement]:
    # Word documents have no fixed pages; only alt text is known
    try:
        rels = archive.relationships(DOCUMENT_ENTRY)
    except CorruptArchive as e:
        logger.warning("Ignoring unreadable document relationships: %s", e)
        return {}
    placements: dict[str, ImagePlacement] = {}
    for ref in find_picture_refs(document_xml):
        rel = rels.get(ref.rel_id)
        if rel and not rel.external:
            placements.setdefault(rel.target, ImagePlacement(alt=ref.alt))
    return placements


def extract_docx(data: bytes, config: ExtractionConfig) -> ExtractedDocument:
    """
    Extract sections, metadata and images from DOCX bytes.

    Args:
        data: Raw DOCX file bytes
        config: Extraction limits

    Returns:
        ExtractedDocument with one section per heading

    Raises:
        CorruptArchive: If the archive is unreadable or lacks word/document.xml
        PasswordProtected: If the file is encrypted
        EmptyContent: If the document has too little text
    """
    with ArchiveReader.open(data) as archive:
        archive.require_entries(*REQUIRED_ENTRIES)
        properties = read_core_properties(archive)

        try:
            document_xml = archive.read_text(DOCUMENT_ENTRY)
        except UnicodeDecodeError as e:
            raise CorruptArchive(f"Cannot decode {DOCUMENT_ENTRY}: {e}") from e

        markup, raw_text = render_markup(open_word_document(data))
        raw_text = raw_text.strip()
        if len(raw_text) < config.min_text_length:
            raise EmptyContent("Document appears to be empty or contains no readable text")

        pairs = segment_markup(markup) or [(FALLBACK_TITLE, raw_text)]
        sections = number_sections(pairs)

        images: tuple[ExtractedImage, ...] = ()
        if config.extract_images:
            images = extract_images(
                archive,
                MEDIA_PREFIX,
                max_images=config.max_images,
                placements=_image_placements(archive, document_xml),
            )

    title = properties.title or _first_heading(sections) or guess_title(raw_text) or UNTITLED

    return ExtractedDocument(
        type=DocumentType.DOCX,
        title=title,
        content=render_content(sections),
        sections=sections,
        metadata=DocumentMetadata(
            page_count=max(len(sections), estimate_page_count(raw_text, config.chars_per_page)),
            author=properties.author,
            created_date=properties.created,
            modified_date=properties.modified,
        ),
        images=images,
    )
