"""Document properties from ``docProps/core.xml``."""

from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass

from docextract.errors import CorruptArchive

from .archive import ArchiveReader

logger = logging.getLogger(__name__)

CORE_PROPERTIES_ENTRY = "docProps/core.xml"

_FIELDS = {
    "title": re.compile(r"<dc:title(?:\s[^>]*)?>([^<]*)</dc:title>"),
    "author": re.compile(r"<dc:creator(?:\s[^>]*)?>([^<]*)</dc:creator>"),
    "created": re.compile(r"<dcterms:created(?:\s[^>]*)?>([^<]*)</dcterms:created>"),
    "modified": re.compile(r"<dcterms:modified(?:\s[^>]*)?>([^<]*)</dcterms:modified>"),
}


@dataclass(frozen=True)
class CoreProperties:
    """Optional document properties; empty values are normalized to None."""

    title: str | None = None
    author: str | None = None
    created: str | None = None
    modified: str | None = None


def parse_core_properties(xml: str) -> CoreProperties:
    """Scan core-properties XML for title, author and dates."""
    values: dict[str, str | None] = {}
    for name, pattern in _FIELDS.items():
        match = pattern.search(xml)
        value = html.unescape(match.group(1)).strip() if match else ""
        values[name] = value or None
    return CoreProperties(**values)


def read_core_properties(archive: ArchiveReader) -> CoreProperties:
    """
    Read the metadata entry of an archive.

    A missing or undecodable entry yields empty properties instead of an
    error; metadata never aborts extraction.
    """
    if not archive.has_entry(CORE_PROPERTIES_ENTRY):
        return CoreProperties()
    try:
        xml = archive.read_text(CORE_PROPERTIES_ENTRY)
    except (CorruptArchive, UnicodeDecodeError) as e:
        logger.warning("Ignoring unreadable %s: %s", CORE_PROPERTIES_ENTRY, e)
        return CoreProperties()
    return parse_core_properties(xml)
