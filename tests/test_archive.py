"""
Archive reader tests.
"""

import pytest

from docextract.errors import CorruptArchive, PasswordProtected
from docextract.extractors.archive import ArchiveReader, resolve_target

from conftest import build_zip, encrypted_ole_package, set_encrypted_flag


class TestOpen:
    """Tests for ArchiveReader.open"""

    def test_rejects_non_zip_signature(self):
        """Should raise CorruptArchive for anything without a ZIP signature"""
        with pytest.raises(CorruptArchive):
            ArchiveReader.open(b"%PDF-1.7 not a zip")
        with pytest.raises(CorruptArchive):
            ArchiveReader.open(b"")

    def test_rejects_truncated_central_directory(self):
        """Should raise CorruptArchive when the directory is cut off"""
        data = build_zip({"a.txt": "hello", "b.txt": "world"})
        with pytest.raises(CorruptArchive):
            ArchiveReader.open(data[:-40])

    def test_encrypted_ole_package(self):
        """Should raise PasswordProtected for an encrypted OOXML envelope"""
        with pytest.raises(PasswordProtected):
            ArchiveReader.open(encrypted_ole_package())

    def test_plain_ole_file_is_corrupt(self):
        """Should raise CorruptArchive for legacy OLE files without encryption"""
        with pytest.raises(CorruptArchive):
            ArchiveReader.open(b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 600)

    def test_encrypted_entries(self):
        """Should raise PasswordProtected when entries carry the encryption flag"""
        data = set_encrypted_flag(build_zip({"word/document.xml": "<w:document/>"}))
        with pytest.raises(PasswordProtected):
            ArchiveReader.open(data)


class TestEntries:
    """Tests for entry listing and reading"""

    def test_numbered_entries_sorted_numerically(self):
        """Should order by embedded number, not archive order"""
        data = build_zip({
            "ppt/slides/slide10.xml": "ten",
            "ppt/slides/slide2.xml": "two",
            "ppt/slides/slide1.xml": "one",
            "ppt/slides/_rels/slide1.xml.rels": "rels",
        })
        with ArchiveReader.open(data) as archive:
            entries = archive.list_numbered_entries(r"ppt/slides/slide(\d+)\.xml")
        assert entries == [
            (1, "ppt/slides/slide1.xml"),
            (2, "ppt/slides/slide2.xml"),
            (10, "ppt/slides/slide10.xml"),
        ]

    def test_prefix_listing_and_reads(self):
        """Should list by prefix and decode entries"""
        data = build_zip({"ppt/media/image1.png": b"\x89PNG", "docProps/core.xml": "<x>ü</x>"})
        with ArchiveReader.open(data) as archive:
            assert archive.list_entries("ppt/media/") == ["ppt/media/image1.png"]
            assert archive.read_bytes("ppt/media/image1.png") == b"\x89PNG"
            assert archive.read_text("docProps/core.xml") == "<x>ü</x>"
            with pytest.raises(KeyError):
                archive.read_bytes("missing.xml")

    def test_require_entries(self):
        """Should raise CorruptArchive naming the missing entry"""
        with ArchiveReader.open(build_zip({"[Content_Types].xml": "<Types/>"})) as archive:
            archive.require_entries("[Content_Types].xml")
            with pytest.raises(CorruptArchive, match="ppt/presentation.xml"):
                archive.require_entries("[Content_Types].xml", "ppt/presentation.xml")


class TestRelationships:
    """Tests for .rels parsing"""

    def test_resolves_targets(self):
        """Should resolve relative, absolute and external targets"""
        rels = (
            '<?xml version="1.0"?><Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
            '<Relationship Id="rId2" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/image" Target="../media/image1.png"/>'
            '<Relationship Target="/ppt/notesSlides/notesSlide1.xml" Id="rId3" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/notesSlide"/>'
            '<Relationship Id="rId4" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/hyperlink" Target="https://example.com" TargetMode="External"/>'
            "</Relationships>"
        )
        data = build_zip({"ppt/slides/slide1.xml": "<p:sld/>", "ppt/slides/_rels/slide1.xml.rels": rels})
        with ArchiveReader.open(data) as archive:
            parsed = archive.relationships("ppt/slides/slide1.xml")

        assert parsed["rId2"].target == "ppt/media/image1.png"
        assert parsed["rId2"].type.endswith("/image")
        assert parsed["rId3"].target == "ppt/notesSlides/notesSlide1.xml"
        assert parsed["rId4"].external
        assert parsed["rId4"].target == "https://example.com"

    def test_missing_rels_part(self):
        """Should return an empty mapping"""
        with ArchiveReader.open(build_zip({"word/document.xml": "<w:document/>"})) as archive:
            assert archive.relationships("word/document.xml") == {}

    def test_resolve_target(self):
        assert resolve_target("word", "media/image1.png") == "word/media/image1.png"
        assert resolve_target("ppt/slides", "../media/a.png") == "ppt/media/a.png"
