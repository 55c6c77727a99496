"""Exceptions raised by docextract."""

from __future__ import annotations


# -----------------------------------------------------------------------------
# Exceptions
# -----------------------------------------------------------------------------


class ExtractionError(Exception):
    """Base exception for document extraction.

    Every subclass carries a stable ``code`` the caller can map to a
    user-facing message or an HTTP status.
    """

    code: str = "extraction_failed"


class UnsupportedFormat(ExtractionError):
    """Raised when the MIME type/extension is unknown or deliberately not handled."""

    code = "unsupported_format"


class CorruptArchive(ExtractionError):
    """Raised when the container can't be opened or lacks required entries."""

    code = "corrupt_archive"


class PasswordProtected(ExtractionError):
    """Raised when the container is encrypted."""

    code = "password_protected"


class EmptyContent(ExtractionError):
    """Raised when a valid document yields too little text to be useful."""

    code = "empty_content"


class TimedOut(ExtractionError):
    """Raised when extraction doesn't finish before the deadline."""

    code = "timed_out"


class OversizedInput(ExtractionError):
    """Raised when the input exceeds the size cap, before any parsing."""

    code = "oversized_input"

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"Input is {size} bytes, limit is {limit} bytes")
        self.size = size
        self.limit = limit
