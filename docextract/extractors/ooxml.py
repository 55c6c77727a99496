"""
Lightweight OOXML text scanning.

This is a non-validating token scan, not an XML parse. All user-visible
text in presentation and word-processor parts lives in a handful of tag
shapes (``<a:t>``, ``<w:t>``, CDATA), so a regex scan over those is enough.
Anything that doesn't match one of the known shapes is ignored.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from typing import Iterator

# Text runs (DrawingML and WordprocessingML) and CDATA, in document order
_RUN_RE = re.compile(
    r"<(?P<ns>[aw]):t(?:\s[^>]*)?(?<!/)>(?P<text>[^<]*)</(?P=ns):t>"
    r"|<!\[CDATA\[(?P<cdata>.*?)\]\]>",
    re.DOTALL,
)

# <p:sp> shapes; \b keeps <p:spPr>/<p:spTree> out
_SHAPE_RE = re.compile(r"<p:sp\b(?:\s[^>]*)?>(.*?)</p:sp>", re.DOTALL)
_PLACEHOLDER_RE = re.compile(r'<p:ph\b[^>]*\btype="(?P<type>\w+)"')
_TITLE_TYPES = frozenset({"title", "ctrTitle"})

# Picture elements in slides (<p:pic>) and word-processor drawings (<w:drawing>)
_PICTURE_RE = re.compile(r"<(p:pic|w:drawing)\b[^>]*>(.*?)</\1>", re.DOTALL)
_EMBED_RE = re.compile(r'r:embed="([^"]+)"')
_DESCR_RE = re.compile(r'<(?:p:cNvPr|wp:docPr|pic:cNvPr)\b[^>]*\bdescr="([^"]*)"')

_WHITESPACE_RE = re.compile(r"\s+")

# Heuristic titles must be shorter than this
MAX_HEURISTIC_TITLE_LENGTH = 150


def iter_text_runs(xml: str) -> Iterator[str]:
    """Yield the unescaped, stripped, non-empty text of each run and CDATA block."""
    for match in _RUN_RE.finditer(xml):
        raw = match.group("text")
        if raw is None:
            text = match.group("cdata").strip()
        else:
            text = html.unescape(raw).strip()
        if text:
            yield text


def scan_text(xml: str) -> str:
    """Extract all run text from an XML fragment, joined with single spaces."""
    return " ".join(iter_text_runs(xml))


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def iter_shapes(xml: str) -> Iterator[tuple[str | None, str]]:
    """Yield ``(placeholder_type, shape_xml)`` for each ``<p:sp>`` shape."""
    for match in _SHAPE_RE.finditer(xml):
        body = match.group(1)
        placeholder = _PLACEHOLDER_RE.search(body)
        yield (placeholder.group("type") if placeholder else None), body


def find_slide_title(xml: str) -> str:
    """
    Find a slide's title.

    Prefers the text of a title/ctrTitle placeholder shape. Falls back to
    the first text run shorter than 150 characters. Returns "" if neither
    is found.
    """
    for placeholder_type, body in iter_shapes(xml):
        if placeholder_type in _TITLE_TYPES:
            title = collapse_whitespace(scan_text(body))
            if title:
                return title

    for text in iter_text_runs(xml):
        if len(text) < MAX_HEURISTIC_TITLE_LENGTH:
            return text
    return ""


def strip_shapes(xml: str, placeholder_types: frozenset[str]) -> str:
    """Remove placeholder shapes of the given types from a slide fragment."""

    def _drop(match: re.Match[str]) -> str:
        placeholder = _PLACEHOLDER_RE.search(match.group(1))
        if placeholder and placeholder.group("type") in placeholder_types:
            return ""
        return match.group(0)

    return _SHAPE_RE.sub(_drop, xml)


@dataclass(frozen=True)
class PictureRef:
    """An embedded picture reference: relationship id plus optional alt text."""

    rel_id: str
    alt: str | None = None


def find_picture_refs(xml: str) -> list[PictureRef]:
    """Relationship ids (``r:embed``) of pictures in a part, in document order."""
    refs: list[PictureRef] = []
    for match in _PICTURE_RE.finditer(xml):
        body = match.group(2)
        descr = _DESCR_RE.search(body)
        alt = html.unescape(descr.group(1)).strip() if descr else ""
        for rel_id in _EMBED_RE.findall(body):
            refs.append(PictureRef(rel_id=rel_id, alt=alt or None))
    return refs
