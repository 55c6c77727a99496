"""
Runtime configuration for docextract.

Bounds (size cap, deadline, image cap) and thresholds used by the
extraction pipeline. A config is passed explicitly into every call.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

MAX_INPUT_BYTES = 50 * 1024 * 1024
DEFAULT_TIMEOUT_SECONDS = 30.0
MAX_IMAGES = 20
MIN_TEXT_LENGTH = 10
CHARS_PER_PAGE = 3000


@dataclass
class ExtractionConfig:
    """
    Limits and thresholds for one extraction call.

    Attributes:
        max_input_bytes: Inputs larger than this are rejected before parsing
        timeout_seconds: Wall-clock deadline for the whole pipeline
        max_images: Maximum number of embedded images returned (never above 20)
        min_text_length: Raw text shorter than this is treated as empty
        extract_images: Skip asset extraction entirely when False
        chars_per_page: Characters per page for word-processor page estimates
    """

    max_input_bytes: int = MAX_INPUT_BYTES
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_images: int = MAX_IMAGES
    min_text_length: int = MIN_TEXT_LENGTH
    extract_images: bool = True
    chars_per_page: int = CHARS_PER_PAGE

    def __post_init__(self):
        """Validate limits and clamp the image cap."""
        if self.max_input_bytes <= 0:
            raise ValueError("max_input_bytes must be positive")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        if self.max_images < 0:
            raise ValueError("max_images must not be negative")
        if self.chars_per_page <= 0:
            raise ValueError("chars_per_page must be positive")
        self.max_images = min(self.max_images, MAX_IMAGES)

    @classmethod
    def from_env(cls) -> ExtractionConfig:
        """Build a config from DOCEXTRACT_* environment variables."""
        return cls(
            max_input_bytes=int(os.environ.get("DOCEXTRACT_MAX_INPUT_BYTES", MAX_INPUT_BYTES)),
            timeout_seconds=float(
                os.environ.get("DOCEXTRACT_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)
            ),
            max_images=int(os.environ.get("DOCEXTRACT_MAX_IMAGES", MAX_IMAGES)),
            min_text_length=int(os.environ.get("DOCEXTRACT_MIN_TEXT_LENGTH", MIN_TEXT_LENGTH)),
        )


def get_extraction_config(
    max_input_bytes: int | None = None,
    timeout_seconds: float | None = None,
    max_images: int | None = None,
    min_text_length: int | None = None,
    extract_images: bool = True,
) -> ExtractionConfig:
    """
    Create an extraction configuration with sensible defaults.

    Args:
        max_input_bytes: Override the input size cap
        timeout_seconds: Override the deadline
        max_images: Override the image cap (clamped to 20)
        min_text_length: Override the empty-content threshold
        extract_images: Whether to extract embedded images

    Returns:
        Configured ExtractionConfig instance
    """
    config = ExtractionConfig(extract_images=extract_images)

    if max_input_bytes is not None:
        config.max_input_bytes = max_input_bytes
    if timeout_seconds is not None:
        config.timeout_seconds = timeout_seconds
    if max_images is not None:
        config.max_images = max_images
    if min_text_length is not None:
        config.min_text_length = min_text_length

    # Re-run validation after overrides
    config.__post_init__()
    return config
