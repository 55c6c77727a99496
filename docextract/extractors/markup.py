"""
Word-processor structure: markup rendering, heading detection, segmentation.

The body of a python-docx ``Document`` is rendered to a small HTML-like
markup (``<hN>``, ``<p>``, ``<li>``, ``<br />``). Headings are resolved
through the styles part, so localized and custom heading styles count.
Sections are then cut at heading tags and the markup between them is
stripped back to plain text.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from typing import Iterator

from docx.oxml.ns import qn
from docx.table import Table
from docx.text.paragraph import Paragraph

from .ooxml import collapse_whitespace

INTRODUCTION_TITLE = "Introduction"
FALLBACK_TITLE = "Document Content"

_W_P = qn("w:p")
_W_TBL = qn("w:tbl")
_W_SDT = qn("w:sdt")
_W_SDT_CONTENT = qn("w:sdtContent")
_W_TXBX_CONTENT = qn("w:txbxContent")
# Text boxes are stored twice: DrawingML in mc:Choice and VML in mc:Fallback
_MC_FALLBACK = "{http://schemas.openxmlformats.org/markup-compatibility/2006}Fallback"

_HEADING_NAME_RE = re.compile(r"^heading\s?([1-6])$", re.IGNORECASE)
_MAX_STYLE_DEPTH = 10

_HEADING_TAG_RE = re.compile(r"<h([1-6])[^>]*>(.*?)</h\1>", re.IGNORECASE | re.DOTALL)

_ENTITIES = {
    "&nbsp;": " ",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&apos;": "'",
    "&amp;": "&",
}
_ENTITY_RE = re.compile("|".join(re.escape(e) for e in _ENTITIES), re.IGNORECASE)


@dataclass(frozen=True)
class Heading:
    """A heading tag found in rendered markup."""

    level: int
    title: str
    start: int  # index of the opening tag
    end: int  # index just past the closing tag


# -----------------------------------------------------------------------------
# Styles
# -----------------------------------------------------------------------------


def _style_chain(style) -> Iterator:
    """The style followed by its ``basedOn`` ancestors."""
    seen: set[str] = set()
    while style is not None and style.style_id not in seen and len(seen) < _MAX_STYLE_DEPTH:
        seen.add(style.style_id)
        yield style
        style = style.base_style


def _outline_level(element) -> int | None:
    # w:outlineLvl 0-5 map to heading levels; 9 is body text
    values = element.xpath("./w:pPr/w:outlineLvl/@w:val")
    if values and values[0].isdigit() and int(values[0]) < 6:
        return int(values[0]) + 1
    return None


def paragraph_heading_level(paragraph: Paragraph) -> int | None:
    """
    Heading level (1-6) of a paragraph, or None for body text.

    Checks the paragraph's own outline level, then each style in its
    ``basedOn`` chain for a "Heading N"/"Title" name or an outline level.
    """
    level = _outline_level(paragraph._p)
    if level is not None:
        return level
    for style in _style_chain(paragraph.style):
        name = (style.name or "").strip()
        if name.lower() == "title":
            return 1
        match = _HEADING_NAME_RE.match(name)
        if match:
            return int(match.group(1))
        level = _outline_level(style.element)
        if level is not None:
            return level
    return None


def _is_list_item(paragraph: Paragraph) -> bool:
    if paragraph._p.xpath("./w:pPr/w:numPr"):
        return True
    for style in _style_chain(paragraph.style):
        if (style.name or "").lower().startswith("list") or style.element.xpath("./w:pPr/w:numPr"):
            return True
    return False


# -----------------------------------------------------------------------------
# Rendering
# -----------------------------------------------------------------------------


def _text_box_paragraphs(paragraph: Paragraph) -> Iterator[Paragraph]:
    for content in paragraph._p.iter(_W_TXBX_CONTENT):
        if any(ancestor.tag == _MC_FALLBACK for ancestor in content.iterancestors()):
            continue
        for child in content.iterchildren(_W_P):
            yield Paragraph(child, paragraph._parent)


def iter_blocks(element, parent) -> Iterator[Paragraph | Table]:
    """
    Paragraphs and tables of a body-like element, in document order.

    Content controls are unwrapped. Paragraphs inside text boxes follow
    the paragraph that anchors them.
    """
    for child in element.iterchildren():
        if child.tag == _W_P:
            paragraph = Paragraph(child, parent)
            yield paragraph
            yield from _text_box_paragraphs(paragraph)
        elif child.tag == _W_TBL:
            yield Table(child, parent)
        elif child.tag == _W_SDT:
            content = child.find(_W_SDT_CONTENT)
            if content is not None:
                yield from iter_blocks(content, parent)


def _escape(text: str) -> str:
    return html.escape(text, quote=False).replace("\n", "<br />")


def render_markup(document) -> tuple[str, str]:
    """
    Render a python-docx ``Document`` body to markup.

    Table rows become paragraphs with cells joined by `` | ``.

    Returns:
        ``(markup, raw_text)`` where raw_text is the block text joined
        with newlines, used for emptiness checks and title guessing
    """
    body = document.element.body
    if body is None:
        return "", ""

    markup: list[str] = []
    raw_lines: list[str] = []

    for block in iter_blocks(body, document):
        if isinstance(block, Table):
            for row in block.rows:
                cells = [cell.text.strip() for cell in row.cells]
                if any(cells):
                    text = " | ".join(cells)
                    raw_lines.append(text)
                    markup.append(f"<p>{_escape(text)}</p>")
            continue

        text = block.text.replace("\t", " ").strip()
        if not text:
            continue
        raw_lines.append(text)

        level = paragraph_heading_level(block)
        if level is not None:
            markup.append(f"<h{level}>{_escape(text)}</h{level}>")
        elif _is_list_item(block):
            markup.append(f"<li>{_escape(text)}</li>")
        else:
            markup.append(f"<p>{_escape(text)}</p>")

    return "".join(markup), "\n".join(raw_lines)


# -----------------------------------------------------------------------------
# Stripping and segmentation
# -----------------------------------------------------------------------------


def strip_markup(markup: str) -> str:
    """Convert markup to plain text: breaks to newlines, list items to bullets."""
    text = re.sub(r"<br\s*/?>", "\n", markup, flags=re.IGNORECASE)
    text = re.sub(r"</p>", "\n\n", text, flags=re.IGNORECASE)
    text = re.sub(r"</li>", "\n", text, flags=re.IGNORECASE)
    text = re.sub(r"<li[^>]*>", "• ", text, flags=re.IGNORECASE)
    text = re.sub(r"<[^>]+>", "", text)
    text = _ENTITY_RE.sub(lambda m: _ENTITIES[m.group(0).lower()], text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def find_headings(markup: str) -> list[Heading]:
    """All h1-h6 headings in the markup, in order. Titles are single-line."""
    return [
        Heading(
            level=int(match.group(1)),
            title=collapse_whitespace(strip_markup(match.group(2))),
            start=match.start(),
            end=match.end(),
        )
        for match in _HEADING_TAG_RE.finditer(markup)
    ]


def segment_markup(markup: str) -> list[tuple[str, str]]:
    """
    Split markup into ``(title, content)`` pairs at heading boundaries.

    Content before the first heading becomes an "Introduction" section.
    Without any headings, the whole text is one "Document Content" section.
    An empty document yields no sections.
    """
    headings = find_headings(markup)

    if not headings:
        content = strip_markup(markup)
        return [(FALLBACK_TITLE, content)] if content else []

    sections: list[tuple[str, str]] = []

    preamble = strip_markup(markup[: headings[0].start])
    if preamble:
        sections.append((INTRODUCTION_TITLE, preamble))

    for index, heading in enumerate(headings):
        next_start = headings[index + 1].start if index + 1 < len(headings) else len(markup)
        content = strip_markup(markup[heading.end : next_start])
        if heading.title or content:
            sections.append((heading.title or f"Section {index + 1}", content))

    return sections
