"""Embedded image extraction from an OOXML media folder."""

from __future__ import annotations

import base64
import logging
import posixpath
import re
from dataclasses import dataclass

from docextract.errors import CorruptArchive
from docextract.runtime import MAX_IMAGES

from .archive import ArchiveReader
from .base import ExtractedImage
from .image import image_dimensions, image_mime_type, is_image_extension

logger = logging.getLogger(__name__)

_DIGITS_RE = re.compile(r"(\d+)")


@dataclass(frozen=True)
class ImagePlacement:
    """Where an embedded image is used: page/slide number and alt text."""

    page_number: int | None = None
    alt: str | None = None


def _natural_key(name: str) -> list[int | str]:
    # image2.png sorts before image10.png
    return [int(part) if part.isdigit() else part.lower() for part in _DIGITS_RE.split(name)]


def list_media(archive: ArchiveReader, media_prefix: str) -> list[str]:
    """Allowlisted image entries under the media folder, in natural order."""
    names = [
        name
        for name in archive.list_entries(media_prefix)
        if is_image_extension(posixpath.splitext(name)[1])
    ]
    return sorted(names, key=_natural_key)


def extract_images(
    archive: ArchiveReader,
    media_prefix: str,
    *,
    max_images: int = MAX_IMAGES,
    placements: dict[str, ImagePlacement] | None = None,
) -> tuple[ExtractedImage, ...]:
    """
    Extract embedded images as base64.

    At most ``max_images`` matching entries are read (never more than 20);
    further matches are ignored. An entry that fails to read is skipped.

    Args:
        archive: Open archive
        media_prefix: Media folder, e.g. ``ppt/media/``
        max_images: Cap on entries to extract
        placements: Entry path -> page number/alt text, where known

    Returns:
        Extracted images in media-folder order
    """
    placements = placements or {}
    limit = min(max_images, MAX_IMAGES)
    images: list[ExtractedImage] = []

    for name in list_media(archive, media_prefix)[:limit]:
        filename = posixpath.basename(name)
        try:
            data = archive.read_bytes(name)
        except CorruptArchive as e:
            logger.warning("Skipping image %s: %s", filename, e)
            continue

        placement = placements.get(name, ImagePlacement())
        size = image_dimensions(data)
        images.append(
            ExtractedImage(
                data=base64.b64encode(data).decode("ascii"),
                mime_type=image_mime_type(posixpath.splitext(filename)[1]),
                filename=filename,
                page_number=placement.page_number,
                alt=placement.alt,
                width=size[0] if size else None,
                height=size[1] if size else None,
            )
        )

    return tuple(images)
