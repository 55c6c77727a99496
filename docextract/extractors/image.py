"""Raster image formats.

Standalone images are not documents here; the dispatcher recognizes them
only to reject them. The same tables drive embedded-media filtering.
"""

from __future__ import annotations

import io
import logging

logger = logging.getLogger(__name__)

# Image extensions we recognize
IMAGE_EXTENSIONS: frozenset[str] = frozenset({
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".webp",
    ".bmp",
    ".tiff",
    ".tif",
})

# Extension -> MIME type; anything missing falls back to DEFAULT_IMAGE_MIME
IMAGE_MIME_TYPES: dict[str, str] = {
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
    ".tif": "image/tiff",
    ".tiff": "image/tiff",
}

DEFAULT_IMAGE_MIME = "image/jpeg"


def is_image_extension(extension: str) -> bool:
    """Check if the extension is a recognized raster image format."""
    return extension.lower() in IMAGE_EXTENSIONS


def image_mime_type(extension: str) -> str:
    """MIME type for an image extension, defaulting to image/jpeg."""
    return IMAGE_MIME_TYPES.get(extension.lower(), DEFAULT_IMAGE_MIME)


def image_dimensions(data: bytes) -> tuple[int, int] | None:
    """Pixel size of an encoded image, or None if Pillow can't read it."""
    try:
        from PIL import Image

        with Image.open(io.BytesIO(data)) as img:
            return img.size
    except Exception as e:
        logger.debug("Could not read image dimensions: %s", e)
        return None
