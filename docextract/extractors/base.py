"""Base types for document extraction."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

# Separator between rendered sections in ExtractedDocument.content
SECTION_DELIMITER = "\n\n---\n\n"


class DocumentType(str, Enum):
    """Kinds of input the dispatcher can resolve to."""

    PPTX = "pptx"
    DOCX = "docx"
    PDF = "pdf"
    IMAGE = "image"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class DocumentSection:
    """A titled block of plain text with its 1-based page/slide number."""

    title: str
    content: str
    page_number: int

    def render(self) -> str:
        return f"## {self.title}\n\n{self.content}"


@dataclass(frozen=True)
class ExtractedImage:
    """An image extracted from a document."""

    data: str  # base64-encoded raw bytes
    mime_type: str
    filename: str | None = None
    page_number: int | None = None
    alt: str | None = None
    width: int | None = None
    height: int | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"data": self.data, "mimeType": self.mime_type}
        if self.filename is not None:
            result["filename"] = self.filename
        if self.page_number is not None:
            result["pageNumber"] = self.page_number
        if self.alt is not None:
            result["alt"] = self.alt
        if self.width is not None and self.height is not None:
            result["width"] = self.width
            result["height"] = self.height
        return result


@dataclass(frozen=True)
class DocumentMetadata:
    """Document-level properties."""

    page_count: int
    author: str | None = None
    created_date: str | None = None
    modified_date: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"pageCount": self.page_count}
        if self.author is not None:
            result["author"] = self.author
        if self.created_date is not None:
            result["createdDate"] = self.created_date
        if self.modified_date is not None:
            result["modifiedDate"] = self.modified_date
        return result


@dataclass(frozen=True)
class ExtractedDocument:
    """Result of document extraction."""

    type: DocumentType
    title: str
    content: str
    sections: tuple[DocumentSection, ...]
    metadata: DocumentMetadata
    images: tuple[ExtractedImage, ...] = ()

    def __post_init__(self):
        # Sections and images are read-only once the document is built
        object.__setattr__(self, "sections", tuple(self.sections))
        object.__setattr__(self, "images", tuple(self.images))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase mapping consumed downstream."""
        result: dict[str, Any] = {
            "type": self.type.value,
            "title": self.title,
            "content": self.content,
            "sections": [
                {"title": s.title, "content": s.content, "pageNumber": s.page_number}
                for s in self.sections
            ],
            "metadata": self.metadata.to_dict(),
        }
        if self.images:
            result["images"] = [image.to_dict() for image in self.images]
        return result


def render_content(sections: tuple[DocumentSection, ...]) -> str:
    """Join sections as ``## title`` blocks separated by the section delimiter."""
    return SECTION_DELIMITER.join(section.render() for section in sections)


def number_sections(sections: list[tuple[str, str]]) -> tuple[DocumentSection, ...]:
    """Build DocumentSections numbered 1..N from (title, content) pairs."""
    return tuple(
        DocumentSection(title=title, content=content, page_number=index)
        for index, (title, content) in enumerate(sections, start=1)
    )
