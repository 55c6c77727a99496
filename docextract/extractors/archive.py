"""
In-memory ZIP access for OOXML containers.

Reads archive contents entirely in memory - no extraction to disk.
Library failures are translated to CorruptArchive/PasswordProtected at
this boundary so processors only ever see docextract errors.
"""

from __future__ import annotations

import io
import posixpath
import re
import zipfile
import zlib
from dataclasses import dataclass

from docextract.errors import CorruptArchive, PasswordProtected


# -----------------------------------------------------------------------------
# Signatures
# -----------------------------------------------------------------------------

ZIP_SIGNATURES: tuple[bytes, ...] = (
    b"PK\x03\x04",  # local file header
    b"PK\x05\x06",  # empty archive
    b"PK\x07\x08",  # spanned archive
)

# OLE compound file; password-protected OOXML is wrapped in one of these
OLE_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"
ENCRYPTED_PACKAGE_STREAM = "EncryptedPackage".encode("utf-16-le")

# Bit 0 of the general purpose flags marks an encrypted entry
_FLAG_ENCRYPTED = 0x1

_RELATIONSHIP_RE = re.compile(r"<Relationship\b([^>]*?)/?>")
_ATTRIBUTE_RE = re.compile(r'([\w:]+)="([^"]*)"')

# Errors zipfile/zlib raise for damaged archives and entries
_ARCHIVE_ERRORS = (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError, ValueError)


def has_zip_signature(data: bytes) -> bool:
    """Check the leading magic bytes for a ZIP archive."""
    return data[:4] in ZIP_SIGNATURES


def is_encrypted_ole_package(data: bytes) -> bool:
    """Check for an OLE envelope holding an encrypted OOXML package."""
    return data.startswith(OLE_SIGNATURE) and ENCRYPTED_PACKAGE_STREAM in data


@dataclass(frozen=True)
class Relationship:
    """One entry of an OOXML ``.rels`` part, with the target resolved to an entry path."""

    id: str
    type: str
    target: str
    external: bool = False


class ArchiveReader:
    """
    Read-only view of a ZIP archive held in memory.

    Usage:
        with ArchiveReader.open(data) as archive:
            for name in archive.list_entries("ppt/slides/"):
                xml = archive.read_text(name)
    """

    def __init__(self, zip_file: zipfile.ZipFile) -> None:
        self._zip_file = zip_file
        self._names = {info.filename: info for info in zip_file.infolist() if not info.is_dir()}

    @classmethod
    def open(cls, data: bytes) -> ArchiveReader:
        """
        Open a byte buffer as a ZIP archive.

        Raises:
            PasswordProtected: If the buffer is an encrypted OOXML package,
                or any archive entry is encrypted
            CorruptArchive: If the signature doesn't match or the central
                directory can't be parsed
        """
        if not has_zip_signature(data):
            if is_encrypted_ole_package(data):
                raise PasswordProtected("Document is encrypted with a password")
            raise CorruptArchive("Not a ZIP archive: signature mismatch")

        try:
            zip_file = zipfile.ZipFile(io.BytesIO(data), "r")
        except _ARCHIVE_ERRORS as e:
            raise CorruptArchive(f"Cannot read archive: {e}") from e

        reader = cls(zip_file)
        if any(info.flag_bits & _FLAG_ENCRYPTED for info in reader._names.values()):
            reader.close()
            raise PasswordProtected("Document is encrypted with a password")
        return reader

    def __enter__(self) -> ArchiveReader:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        self._zip_file.close()

    def has_entry(self, name: str) -> bool:
        return name in self._names

    def require_entries(self, *names: str) -> None:
        """Raise CorruptArchive naming the first required entry that is missing."""
        for name in names:
            if name not in self._names:
                raise CorruptArchive(f"Missing required entry: {name}")

    def list_entries(self, prefix: str = "") -> list[str]:
        """Entry paths under ``prefix``, in archive order."""
        return [name for name in self._names if name.startswith(prefix)]

    def list_numbered_entries(self, pattern: str) -> list[tuple[int, str]]:
        """
        Entries whose full path matches ``pattern``, sorted by embedded number.

        The pattern must capture the numeric index as its first group.
        Archive iteration order is not guaranteed to be numeric.
        """
        regex = re.compile(pattern)
        numbered: list[tuple[int, str]] = []
        for name in self._names:
            match = regex.fullmatch(name)
            if match:
                numbered.append((int(match.group(1)), name))
        numbered.sort()
        return numbered

    def read_bytes(self, name: str) -> bytes:
        """
        Decompress one entry.

        Raises:
            KeyError: If the entry doesn't exist
            CorruptArchive: If the entry data is damaged
        """
        info = self._names[name]
        try:
            return self._zip_file.read(info)
        except _ARCHIVE_ERRORS as e:
            raise CorruptArchive(f"Cannot read entry {name}: {e}") from e

    def read_text(self, name: str) -> str:
        """Decompress one entry and decode it as UTF-8 (strict)."""
        return self.read_bytes(name).decode("utf-8")

    def relationships(self, part_name: str) -> dict[str, Relationship]:
        """
        Parse the ``.rels`` part belonging to ``part_name``.

        Returns an empty mapping if the part has no relationships.
        Targets are resolved to archive entry paths.
        """
        directory, filename = posixpath.split(part_name)
        rels_name = posixpath.join(directory, "_rels", f"{filename}.rels")
        if rels_name not in self._names:
            return {}

        xml = self.read_bytes(rels_name).decode("utf-8", errors="replace")
        relationships: dict[str, Relationship] = {}
        for match in _RELATIONSHIP_RE.finditer(xml):
            attrs = dict(_ATTRIBUTE_RE.findall(match.group(1)))
            rel_id = attrs.get("Id")
            target = attrs.get("Target")
            if not rel_id or not target:
                continue
            external = attrs.get("TargetMode") == "External"
            relationships[rel_id] = Relationship(
                id=rel_id,
                type=attrs.get("Type", ""),
                target=target if external else resolve_target(directory, target),
                external=external,
            )
        return relationships


def resolve_target(base_dir: str, target: str) -> str:
    """Resolve a relationship target against the directory of its source part."""
    if target.startswith("/"):
        return posixpath.normpath(target[1:])
    return posixpath.normpath(posixpath.join(base_dir, target))
