"""Short previews of extracted documents."""

from __future__ import annotations

from dataclasses import dataclass

from docextract.runtime import ExtractionConfig

from . import extract_document
from .base import DocumentType

PREVIEW_CHARS = 200


@dataclass(frozen=True)
class DocumentPreview:
    """Title, section count and the opening of the first few sections."""

    title: str
    section_count: int
    text: str


def preview_document(
    data: bytes,
    mime_type: str | None,
    filename: str | None = None,
    max_sections: int = 3,
    config: ExtractionConfig | None = None,
) -> DocumentPreview:
    """
    Extract a document and summarize its first ``max_sections`` sections.

    Each previewed section shows its title (prefixed with the slide number
    for presentations) and the first 200 characters of its content.
    """
    document = extract_document(data, mime_type, filename, config)

    blocks: list[str] = []
    for section in document.sections[:max_sections]:
        heading = section.title
        if document.type is DocumentType.PPTX:
            heading = f"Slide {section.page_number}: {section.title}"
        blocks.append(f"{heading}\n{section.content[:PREVIEW_CHARS]}...")

    return DocumentPreview(
        title=document.title,
        section_count=len(document.sections),
        text="\n\n".join(blocks),
    )
