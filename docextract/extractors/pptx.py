"""
PPTX presentation extraction.

A PPTX file is a ZIP archive of XML parts:
- ppt/presentation.xml - presentation-level data
- ppt/slides/slideN.xml - one part per slide
- ppt/notesSlides/notesSlideN.xml - speaker notes
- ppt/media/ - embedded images
- docProps/core.xml - title, author, dates
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from docextract.errors import CorruptArchive, EmptyContent
from docextract.runtime import ExtractionConfig

from .archive import ArchiveReader, Relationship
from .base import (
    DocumentMetadata,
    DocumentType,
    ExtractedDocument,
    ExtractedImage,
    number_sections,
    render_content,
)
from .media import ImagePlacement, extract_images
from .metadata import read_core_properties
from .ooxml import collapse_whitespace, find_picture_refs, find_slide_title, scan_text, strip_shapes

logger = logging.getLogger(__name__)

REQUIRED_ENTRIES = ("[Content_Types].xml", "ppt/presentation.xml")
SLIDE_PATTERN = r"ppt/slides/slide(\d+)\.xml"
MEDIA_PREFIX = "ppt/media/"
NOTES_REL_TYPE = "/notesSlide"
IMAGE_REL_TYPE = "/image"

UNTITLED = "Untitled Presentation"

# Placeholders on notes pages that aren't note text
_NOTES_NOISE = frozenset({"sldNum", "sldImg", "hdr", "ftr", "dt"})


@dataclass
class SlideContent:
    """Text pulled from one slide."""

    number: int
    title: str
    body: str
    raw_text: str
    notes: str | None = None
    image_targets: tuple[tuple[str, str | None], ...] = ()

    @property
    def section_content(self) -> str:
        if self.notes:
            return f"{self.body}\n\nNotes: {self.notes}" if self.body else f"Notes: {self.notes}"
        return self.body


def parse_slide(xml: str, number: int) -> SlideContent:
    """Split a slide's XML into title and body text."""
    title = find_slide_title(xml)
    raw_text = scan_text(xml)

    body = raw_text
    if title and body.startswith(title):
        body = body[len(title):]

    return SlideContent(
        number=number,
        title=title or f"Slide {number}",
        body=collapse_whitespace(body),
        raw_text=raw_text,
    )


def parse_notes(xml: str) -> str:
    """Speaker-notes text, without slide number/image placeholders."""
    return collapse_whitespace(scan_text(strip_shapes(xml, _NOTES_NOISE)))


def _read_notes(archive: ArchiveReader, number: int, rels: dict[str, Relationship]) -> str | None:
    notes_name = next(
        (rel.target for rel in rels.values() if rel.type.endswith(NOTES_REL_TYPE) and not rel.external),
        f"ppt/notesSlides/notesSlide{number}.xml",
    )
    if not archive.has_entry(notes_name):
        return None
    try:
        notes = parse_notes(archive.read_text(notes_name))
    except (CorruptArchive, UnicodeDecodeError) as e:
        logger.warning("Ignoring notes for slide %d: %s", number, e)
        return None
    return notes or None


def read_slide(archive: ArchiveReader, name: str, number: int) -> SlideContent:
    """Read and parse one slide with its notes and picture targets."""
    xml = archive.read_text(name)
    slide = parse_slide(xml, number)

    rels = archive.relationships(name)
    slide.notes = _read_notes(archive, number, rels)
    targets: list[tuple[str, str | None]] = []
    for ref in find_picture_refs(xml):
        rel = rels.get(ref.rel_id)
        if rel and not rel.external and rel.type.endswith(IMAGE_REL_TYPE):
            targets.append((rel.target, ref.alt))
    slide.image_targets = tuple(targets)
    return slide


def extract_pptx(data: bytes, config: ExtractionConfig) -> ExtractedDocument:
    """
    Extract sections, metadata and images from PPTX bytes.

    One section per slide in slide-number order. A slide that fails to
    read or decode is skipped and logged.

    Args:
        data: Raw PPTX file bytes
        config: Extraction limits

    Returns:
        ExtractedDocument with one section per readable slide

    Raises:
        CorruptArchive: If the archive is unreadable, lacks required parts,
            or no slide could be parsed
        PasswordProtected: If the file is encrypted
        EmptyContent: If there are no slides or too little text
    """
    with ArchiveReader.open(data) as archive:
        archive.require_entries(*REQUIRED_ENTRIES)
        properties = read_core_properties(archive)

        slide_entries = archive.list_numbered_entries(SLIDE_PATTERN)
        if not slide_entries:
            raise EmptyContent("Presentation has no slides")

        slides: list[SlideContent] = []
        for number, name in slide_entries:
            try:
                slides.append(read_slide(archive, name, number))
            except (CorruptArchive, UnicodeDecodeError) as e:
                logger.warning("Skipping slide %d: %s", number, e)

        if not slides:
            raise CorruptArchive("No slide in the presentation could be read")

        raw_text = " ".join(slide.raw_text for slide in slides if slide.raw_text).strip()
        if len(raw_text) < config.min_text_length:
            raise EmptyContent("Presentation contains no readable text")

        sections = number_sections([(slide.title, slide.section_content) for slide in slides])

        images: tuple[ExtractedImage, ...] = ()
        if config.extract_images:
            placements: dict[str, ImagePlacement] = {}
            for section, slide in zip(sections, slides):
                for target, alt in slide.image_targets:
                    placements.setdefault(target, ImagePlacement(section.page_number, alt))
            images = extract_images(
                archive, MEDIA_PREFIX, max_images=config.max_images, placements=placements
            )

    return ExtractedDocument(
        type=DocumentType.PPTX,
        title=properties.title or slides[0].title or UNTITLED,
        content=render_content(sections),
        sections=sections,
        metadata=DocumentMetadata(
            page_count=len(sections),
            author=properties.author,
            created_date=properties.created,
            modified_date=properties.modified,
        ),
        images=images,
    )
